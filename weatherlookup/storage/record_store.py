"""Persisted store of materialized forecast records with independent expiry."""

import json
import logging
import sqlite3
import threading
from dataclasses import asdict

from weatherlookup.errors import PersistenceFailure
from weatherlookup.models.common import Clock, parse_timestamp, to_db_timestamp, utc_now
from weatherlookup.models.forecast import DayForecast, ForecastRecord, Headline
from weatherlookup.models.validation import validate_record
from weatherlookup.storage import forecast_repo

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01


class ForecastRecordStore:
    def __init__(
        self,
        conn: sqlite3.Connection,
        clock: Clock = utc_now,
        require_coordinates: bool = False,
    ):
        self.conn = conn
        self.require_coordinates = require_coordinates
        self._clock = clock
        self._lock = threading.Lock()

    def find_fresh(self, address: str) -> ForecastRecord | None:
        """Newest record for the exact address whose valid_until is still ahead."""
        with self._lock:
            row = forecast_repo.get_fresh_for_address(self.conn, address, self._clock())
        return _row_to_record(row) if row else None

    def find_fresh_near(
        self, latitude: float, longitude: float, tolerance: float = DEFAULT_TOLERANCE
    ) -> ForecastRecord | None:
        """Newest fresh record inside the inclusive box lat±tolerance × lng±tolerance.

        This is a box match on raw degrees, not a geodesic distance.
        """
        with self._lock:
            row = forecast_repo.get_fresh_near(
                self.conn, latitude, longitude, tolerance, self._clock()
            )
        return _row_to_record(row) if row else None

    def get(self, record_id: int) -> ForecastRecord | None:
        with self._lock:
            row = forecast_repo.get_record(self.conn, record_id)
        return _row_to_record(row) if row else None

    def recent(self, limit: int = 20) -> list[ForecastRecord]:
        with self._lock:
            rows = forecast_repo.get_recent_records(self.conn, limit)
        return [_row_to_record(r) for r in rows]

    def create(self, record: ForecastRecord) -> ForecastRecord:
        """Validate and insert a record. Returns it with id and created_at set.

        Raises ValidationError before anything is written, or
        PersistenceFailure when SQLite rejects the insert.
        """
        validate_record(record, require_coordinates=self.require_coordinates)
        created_at = self._clock()
        row = _record_to_row(record)
        row["created_at"] = to_db_timestamp(created_at)
        try:
            with self._lock:
                record_id = forecast_repo.save_record(self.conn, row)
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.error("Failed to persist forecast for %r: %s", record.address, e)
            raise PersistenceFailure(str(e)) from e
        logger.info("Stored forecast record %d for %r", record_id, record.address)
        return record.with_identity(record_id, created_at)


def _record_to_row(record: ForecastRecord) -> dict:
    return {
        "address": record.address,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "current_temperature": record.current_temperature,
        "high_temperature": record.high_temperature,
        "low_temperature": record.low_temperature,
        "condition": record.condition,
        "humidity": record.humidity,
        "wind_speed": record.wind_speed,
        "extended_forecast_json": json.dumps([asdict(d) for d in record.extended_forecast]),
        "headline_json": json.dumps(asdict(record.headline)) if record.headline else None,
        "retrieved_at": to_db_timestamp(record.retrieved_at),
        "valid_until": to_db_timestamp(record.valid_until),
    }


def _row_to_record(row: dict) -> ForecastRecord:
    headline = json.loads(row["headline_json"]) if row["headline_json"] else None
    return ForecastRecord(
        id=row["id"],
        address=row["address"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        current_temperature=row["current_temperature"],
        high_temperature=row["high_temperature"],
        low_temperature=row["low_temperature"],
        condition=row["condition"],
        humidity=row["humidity"],
        wind_speed=row["wind_speed"],
        extended_forecast=tuple(
            DayForecast(**d) for d in json.loads(row["extended_forecast_json"])
        ),
        headline=Headline(**headline) if headline else None,
        retrieved_at=parse_timestamp(row["retrieved_at"]),
        valid_until=parse_timestamp(row["valid_until"]),
        created_at=parse_timestamp(row["created_at"]),
    )
