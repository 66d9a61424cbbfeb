"""Shared test fixtures."""

import json
import sqlite3
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import yaml

from weatherlookup.cache.backends import MemoryCacheBackend
from weatherlookup.cache.forecast_cache import ForecastCache
from weatherlookup.config.schema import UpstreamConfig
from weatherlookup.ingest.weather_client import UpstreamWeatherClient
from weatherlookup.models.forecast import DayForecast, ForecastRecord, Headline
from weatherlookup.storage.database import connect, run_migrations
from weatherlookup.storage.record_store import ForecastRecordStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"
UPSTREAM_BASE = "https://test-accuweather.example.com"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(db: sqlite3.Connection, clock: FakeClock) -> ForecastRecordStore:
    return ForecastRecordStore(db, clock)


@pytest.fixture
def memory_backend(clock: FakeClock) -> MemoryCacheBackend:
    return MemoryCacheBackend(clock)


@pytest.fixture
def forecast_cache(memory_backend: MemoryCacheBackend) -> ForecastCache:
    return ForecastCache(memory_backend)


@pytest.fixture
def upstream_config() -> UpstreamConfig:
    return UpstreamConfig(
        base_url=UPSTREAM_BASE,
        api_key="test-key",
        max_retries=1,
        retry_base_delay=0.01,
    )


@pytest.fixture
def client(
    upstream_config: UpstreamConfig, forecast_cache: ForecastCache, clock: FakeClock
) -> UpstreamWeatherClient:
    return UpstreamWeatherClient(upstream_config, forecast_cache, clock)


@pytest.fixture
def location_json() -> list:
    with open(FIXTURE_DIR / "accuweather_location_new_york.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_json() -> dict:
    with open(FIXTURE_DIR / "accuweather_forecast_new_york.json") as f:
        return json.load(f)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "upstream": {"base_url": UPSTREAM_BASE, "api_key": "file-key"},
        "cache": {"ttl_minutes": 15},
        "store": {"db_path": str(tmp_path / "lookup.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def _build_record(
    now: datetime,
    address: str = "New York, NY",
    latitude: float | None = 40.5,
    longitude: float | None = -74.0,
    valid_for: timedelta = timedelta(minutes=30),
    **overrides,
) -> ForecastRecord:
    fields = dict(
        address=address,
        latitude=latitude,
        longitude=longitude,
        current_temperature=78.0,
        high_temperature=78.0,
        low_temperature=65.0,
        condition="Sunny",
        extended_forecast=(
            DayForecast(date="2026-10-18T07:00:00-04:00", high=78.0, low=65.0,
                        temperature_unit="F", day_condition="Sunny"),
        ),
        headline=Headline(text="Pleasant this weekend", severity=4),
        retrieved_at=now,
        valid_until=now + valid_for,
    )
    fields.update(overrides)
    return ForecastRecord(**fields)


@pytest.fixture
def make_record(clock: FakeClock):
    """Build a ForecastRecord retrieved at the current fake time."""

    def factory(**kwargs) -> ForecastRecord:
        return _build_record(clock(), **kwargs)

    return factory
