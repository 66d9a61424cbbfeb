"""Fetch-or-cache orchestration for address forecast lookups.

resolve() walks: validate input -> fresh persisted record -> upstream fetch
(itself backed by the short-TTL lookup cache) -> materialize -> persist.
refresh() re-fetches an expired record and falls back to the expired copy
when anything in that chain fails.
"""

import logging
import sqlite3
from datetime import timedelta

from weatherlookup.cache.backends import CacheBackend, MemoryCacheBackend, SqliteCacheBackend
from weatherlookup.cache.forecast_cache import ForecastCache, normalize_address
from weatherlookup.config.schema import AppConfig, CacheBackendKind
from weatherlookup.errors import PersistenceFailure, UpstreamUnavailable, ValidationError
from weatherlookup.ingest.weather_client import UpstreamWeatherClient
from weatherlookup.models.common import Clock, utc_now
from weatherlookup.models.forecast import Coordinates, ForecastRecord, ParsedForecast
from weatherlookup.models.outcome import FailureReason, ForecastOutcome
from weatherlookup.service.single_flight import KeyedLocks
from weatherlookup.service.staleness import is_record_stale, valid_until_for
from weatherlookup.storage.record_store import ForecastRecordStore

logger = logging.getLogger(__name__)


class ForecastOrchestrator:
    def __init__(
        self,
        store: ForecastRecordStore,
        client: UpstreamWeatherClient,
        record_ttl_minutes: int = 30,
        single_flight: bool = True,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.client = client
        self.record_ttl_minutes = record_ttl_minutes
        self._clock = clock
        self._locks = KeyedLocks() if single_flight else None

    def resolve(self, address: str | None) -> ForecastOutcome:
        if address is None or not address.strip():
            logger.info("Rejected blank address")
            return ForecastOutcome.invalid_input()
        address = address.strip()

        record = self.store.find_fresh(address)
        if record is not None:
            logger.info("Serving stored forecast %s for %r", record.id, address)
            return ForecastOutcome.served(record, from_cache=True)

        return self._fetch_once(address)

    def refresh(self, record: ForecastRecord) -> ForecastOutcome:
        """Serve a known record, re-fetching it first if it has expired.

        Any failure while refreshing is logged and the expired record is
        served instead.
        """
        if not is_record_stale(record, self._clock()):
            return ForecastOutcome.served(record, from_cache=True)

        try:
            outcome = self._fetch_once(record.address)
        except Exception:
            logger.exception("Refresh of forecast %s for %r raised", record.id, record.address)
        else:
            if outcome.ok:
                return outcome
            logger.warning(
                "Refresh of forecast %s for %r ended as %s",
                record.id, record.address, outcome.failure or outcome.kind,
            )

        logger.warning("Serving stale forecast %s for %r", record.id, record.address)
        return ForecastOutcome.served(record, from_cache=True, stale=True)

    def show(self, record_id: int) -> ForecastOutcome:
        record = self.store.get(record_id)
        if record is None:
            return ForecastOutcome.not_found()
        return self.refresh(record)

    def _fetch_once(self, address: str) -> ForecastOutcome:
        if self._locks is None:
            return self._fetch_and_store(address)

        with self._locks.hold(normalize_address(address)):
            # another caller may have stored it while we waited
            record = self.store.find_fresh(address)
            if record is not None:
                return ForecastOutcome.served(record, from_cache=True)
            return self._fetch_and_store(address)

    def _fetch_and_store(self, address: str) -> ForecastOutcome:
        try:
            payload = self.client.fetch_forecast(address)
        except UpstreamUnavailable as e:
            logger.error("Forecast fetch for %r failed at %s step", address, e.step)
            return ForecastOutcome.failed(FailureReason.SERVICE_UNAVAILABLE)

        if payload is None or not payload.daily_forecasts:
            logger.info("No forecast available for %r", address)
            return ForecastOutcome.not_found()

        record = self._materialize(address, payload, self._geocode(address))

        try:
            created = self.store.create(record)
        except ValidationError as e:
            logger.error("Forecast for %r failed validation: %s", address, ", ".join(e.fields))
            return ForecastOutcome.failed(FailureReason.INVALID)
        except PersistenceFailure:
            logger.error("Forecast for %r could not be persisted", address)
            return ForecastOutcome.failed(FailureReason.INVALID)

        return ForecastOutcome.served(created, from_cache=False)

    def _geocode(self, address: str) -> Coordinates | None:
        try:
            return self.client.geocode(address)
        except UpstreamUnavailable:
            logger.warning("Geocoding %r failed; storing forecast without coordinates", address)
            return None

    def _materialize(
        self, address: str, payload: ParsedForecast, coords: Coordinates | None
    ) -> ForecastRecord:
        today = payload.daily_forecasts[0]
        return ForecastRecord(
            address=address,
            latitude=coords.lat if coords else None,
            longitude=coords.lng if coords else None,
            # the daily endpoint has no current reading; use today's high
            current_temperature=today.high,
            high_temperature=today.high,
            low_temperature=today.low,
            condition=today.day_condition,
            extended_forecast=payload.daily_forecasts,
            headline=payload.headline,
            retrieved_at=payload.updated_at,
            valid_until=valid_until_for(self._clock(), self.record_ttl_minutes),
        )


def build_cache_backend(
    config: AppConfig, conn: sqlite3.Connection, clock: Clock = utc_now
) -> CacheBackend:
    if config.cache.backend == CacheBackendKind.SQLITE:
        return SqliteCacheBackend(conn, clock)
    return MemoryCacheBackend(clock)


def build_orchestrator(
    config: AppConfig, conn: sqlite3.Connection, clock: Clock = utc_now
) -> ForecastOrchestrator:
    """Wire store, cache and client from config around an open connection."""
    cache = ForecastCache(
        build_cache_backend(config, conn, clock),
        ttl=timedelta(minutes=config.cache.ttl_minutes),
    )
    client = UpstreamWeatherClient(config.upstream, cache, clock)
    store = ForecastRecordStore(
        conn, clock, require_coordinates=config.store.require_coordinates
    )
    return ForecastOrchestrator(
        store,
        client,
        record_ttl_minutes=config.store.record_ttl_minutes,
        single_flight=config.service.single_flight,
        clock=clock,
    )
