"""AccuWeather client: location search followed by the 5-day daily forecast."""

import logging
import time
from typing import Any

import httpx

from weatherlookup.cache.forecast_cache import ForecastCache
from weatherlookup.config.schema import UpstreamConfig
from weatherlookup.errors import UpstreamUnavailable
from weatherlookup.ingest.parsing import parse_coordinates, parse_forecast, parse_location_key
from weatherlookup.models.common import Clock, utc_now
from weatherlookup.models.forecast import Coordinates, ParsedForecast

logger = logging.getLogger(__name__)

LOCATION_SEARCH_PATH = "/locations/v1/search"
DAILY_FORECAST_PATH = "/forecasts/v1/daily/5day/{location_key}"
RETRYABLE_STATUSES = (429, 503)


class UpstreamWeatherClient:
    def __init__(
        self,
        config: UpstreamConfig,
        cache: ForecastCache,
        clock: Clock = utc_now,
    ):
        self.config = config
        self.cache = cache
        self._clock = clock

    def fetch_forecast(self, address: str) -> ParsedForecast | None:
        """Resolve an address to a parsed forecast, consulting the cache first.

        The forecast endpoint is only called once a location key is found.
        Only results with at least one day are cached; an empty forecast
        is returned as None. Raises UpstreamUnavailable.
        """
        cached = self.cache.get(address)
        if cached is not None:
            logger.debug("Forecast cache hit for %r", address)
            return cached

        location_key = self.locate(address)
        if location_key is None:
            return None

        parsed = self.forecast(location_key, address)
        if parsed is None or not parsed.daily_forecasts:
            logger.info("No daily forecasts for %r", address)
            return None
        self.cache.put(address, parsed)
        return parsed

    def locate(self, address: str) -> str | None:
        """Look up the provider location key for a free-text address."""
        data = self._get(
            "location",
            address,
            LOCATION_SEARCH_PATH,
            {"q": address, "details": "false"},
        )
        key = parse_location_key(data)
        if key is None:
            logger.info("No location found for %r", address)
        return key

    def geocode(self, address: str) -> Coordinates | None:
        data = self._get(
            "geocode",
            address,
            LOCATION_SEARCH_PATH,
            {"q": address, "details": "true"},
        )
        coords = parse_coordinates(data)
        if coords is None:
            logger.info("No coordinates found for %r", address)
        return coords

    def forecast(self, location_key: str, address: str) -> ParsedForecast | None:
        data = self._get(
            "forecast",
            address,
            DAILY_FORECAST_PATH.format(location_key=location_key),
            {"details": "true", "metric": "true" if self.config.metric else "false"},
        )
        parsed = parse_forecast(data, address, self._clock())
        if parsed is None:
            logger.info(
                "Forecast response for %r (key %s) had no daily forecasts",
                address, location_key,
            )
        return parsed

    def _get(self, step: str, address: str, path: str, params: dict[str, str]) -> Any:
        """GET a provider endpoint and decode JSON.

        Retries on 503/429 with exponential backoff; any other failure is
        raised as UpstreamUnavailable.
        """
        url = f"{self.config.base_url.rstrip('/')}{path}"
        query = {"apikey": self.config.api_key, **params}
        headers = {"User-Agent": self.config.user_agent, "Accept": "application/json"}

        for attempt in range(self.config.max_retries + 1):
            try:
                resp = httpx.get(
                    url, params=query, headers=headers, timeout=self.config.timeout_seconds
                )
                if resp.status_code in RETRYABLE_STATUSES and attempt < self.config.max_retries:
                    delay = self.config.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Upstream %s returned %d, retrying in %.1fs (attempt %d/%d)",
                        step, resp.status_code, delay, attempt + 1, self.config.max_retries,
                    )
                    time.sleep(delay)
                    continue
                resp.raise_for_status()
                data = resp.json()
            except httpx.HTTPStatusError as e:
                logger.error(
                    "Upstream %s failed for %r: HTTP %d",
                    step, address, e.response.status_code,
                )
                raise UpstreamUnavailable(step, address, f"HTTP {e.response.status_code}") from e
            except httpx.TimeoutException as e:
                logger.error("Upstream %s timed out for %r", step, address)
                raise UpstreamUnavailable(step, address, "timeout") from e
            except httpx.RequestError as e:
                logger.error("Upstream %s request error for %r: %s", step, address, e)
                raise UpstreamUnavailable(step, address, type(e).__name__) from e
            except ValueError as e:
                logger.error("Upstream %s returned non-JSON body for %r", step, address)
                raise UpstreamUnavailable(step, address, "malformed body") from e

            logger.info("Upstream %s succeeded for %r", step, address)
            return data

        raise AssertionError("unreachable")
