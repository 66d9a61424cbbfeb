"""Common types and helpers shared across models."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeAlias

Clock: TypeAlias = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp, assuming UTC when no offset is present."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def to_db_timestamp(dt: datetime) -> str:
    """Fixed-width UTC ISO string, so stored timestamps sort lexically."""
    return dt.astimezone(UTC).isoformat(timespec="microseconds")
