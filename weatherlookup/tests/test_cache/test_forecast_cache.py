"""Tests for the normalized-address forecast cache."""

from datetime import timedelta

from weatherlookup.cache.backends import MemoryCacheBackend
from weatherlookup.cache.forecast_cache import ForecastCache, cache_key, normalize_address
from weatherlookup.models.forecast import DayForecast, Headline, ParsedForecast


def _payload(clock) -> ParsedForecast:
    return ParsedForecast(
        location="New York, NY",
        updated_at=clock(),
        headline=Headline(text="Pleasant", category="mild", severity=4),
        daily_forecasts=(
            DayForecast(date="2026-10-18T07:00:00-04:00", high=78.0, low=65.0,
                        day_condition="Sunny", day_has_precipitation=False),
            DayForecast(date="2026-10-19T07:00:00-04:00", high=71.0, low=58.0,
                        day_condition="Showers", day_has_precipitation=True,
                        day_precipitation_type="Rain"),
        ),
    )


class TestCacheKey:
    def test_trim_and_case_fold(self):
        assert cache_key("New York, NY") == cache_key("  NEW YORK, NY  ")

    def test_different_addresses_differ(self):
        assert cache_key("New York, NY") != cache_key("Boston, MA")

    def test_prefixed_hash(self):
        key = cache_key("New York, NY")
        assert key.startswith("weather_forecast:")
        assert len(key.split(":", 1)[1]) == 32

    def test_normalize(self):
        assert normalize_address("  Paris ") == "paris"


class TestForecastCache:
    def test_miss(self, forecast_cache: ForecastCache):
        assert forecast_cache.get("New York, NY") is None

    def test_put_then_get(self, forecast_cache: ForecastCache, clock):
        payload = _payload(clock)
        forecast_cache.put("New York, NY", payload)
        assert forecast_cache.get("new york, ny ") == payload

    def test_default_ttl_is_thirty_minutes(self, forecast_cache: ForecastCache, clock):
        forecast_cache.put("New York, NY", _payload(clock))
        clock.advance(minutes=29, seconds=59)
        assert forecast_cache.get("New York, NY") is not None
        clock.advance(seconds=1)
        assert forecast_cache.get("New York, NY") is None

    def test_explicit_ttl(self, forecast_cache: ForecastCache, clock):
        forecast_cache.put("New York, NY", _payload(clock), ttl=timedelta(minutes=1))
        clock.advance(minutes=2)
        assert forecast_cache.get("New York, NY") is None

    def test_zero_ttl_is_not_replaced_by_default(self, forecast_cache: ForecastCache, clock):
        forecast_cache.put("New York, NY", _payload(clock), ttl=timedelta(0))
        assert forecast_cache.get("New York, NY") is None

    def test_undecodable_entry_is_miss(self, clock):
        backend = MemoryCacheBackend(clock)
        cache = ForecastCache(backend)
        backend.set(cache_key("New York, NY"), "{not json", 60)
        assert cache.get("New York, NY") is None
        assert backend.get(cache_key("New York, NY")) is None
