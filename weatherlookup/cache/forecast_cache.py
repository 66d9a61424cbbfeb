"""Short-TTL cache of parsed upstream forecasts keyed by normalized address."""

import hashlib
import json
import logging
from datetime import timedelta

from weatherlookup.cache.backends import CacheBackend
from weatherlookup.models.forecast import ParsedForecast

logger = logging.getLogger(__name__)

KEY_PREFIX = "weather_forecast"
DEFAULT_TTL = timedelta(minutes=30)


def normalize_address(address: str) -> str:
    return address.strip().lower()


def cache_key(address: str) -> str:
    """Stable key: addresses equal after trim and case-fold share an entry."""
    digest = hashlib.md5(normalize_address(address).encode()).hexdigest()
    return f"{KEY_PREFIX}:{digest}"


class ForecastCache:
    def __init__(self, backend: CacheBackend, ttl: timedelta = DEFAULT_TTL):
        self.backend = backend
        self.ttl = ttl

    def get(self, address: str) -> ParsedForecast | None:
        key = cache_key(address)
        raw = self.backend.get(key)
        if raw is None:
            return None
        try:
            return ParsedForecast.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Dropping undecodable cache entry %s: %s", key, e)
            self.backend.delete(key)
            return None

    def put(
        self, address: str, payload: ParsedForecast, ttl: timedelta | None = None
    ) -> None:
        if ttl is None:
            ttl = self.ttl
        self.backend.set(
            cache_key(address),
            json.dumps(payload.to_dict()),
            ttl.total_seconds(),
        )
