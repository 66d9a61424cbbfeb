"""Freshness checks for forecast records."""

from datetime import datetime, timedelta

from weatherlookup.models.common import utc_now
from weatherlookup.models.forecast import ForecastRecord


def is_record_stale(record: ForecastRecord, now: datetime | None = None) -> bool:
    """A record is stale once now has reached its valid_until."""
    if now is None:
        now = utc_now()
    return not record.is_fresh(now)


def valid_until_for(retrieved: datetime, ttl_minutes: int) -> datetime:
    return retrieved + timedelta(minutes=ttl_minutes)


def record_age_minutes(record: ForecastRecord, now: datetime | None = None) -> float:
    """Minutes since the upstream data behind a record was produced."""
    if now is None:
        now = utc_now()
    return (now - record.retrieved_at).total_seconds() / 60
