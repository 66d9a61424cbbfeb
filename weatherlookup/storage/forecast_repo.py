"""Repository for persisted forecast records."""

import sqlite3
from datetime import datetime

from weatherlookup.models.common import to_db_timestamp

_NEWEST_FIRST = "ORDER BY created_at DESC, id DESC"

# Absorbs float error in lat ± tolerance so points on the box edge match.
_BOX_EPSILON = 1e-9


def save_record(conn: sqlite3.Connection, row: dict) -> int:
    """Persist a forecast record row. Returns the row id."""
    columns = ", ".join(row)
    placeholders = ", ".join("?" for _ in row)
    cursor = conn.execute(
        f"INSERT INTO forecast_records ({columns}) VALUES ({placeholders})",
        tuple(row.values()),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_record(conn: sqlite3.Connection, record_id: int) -> dict | None:
    row = conn.execute(
        "SELECT * FROM forecast_records WHERE id = ?", (record_id,)
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_fresh_for_address(
    conn: sqlite3.Connection, address: str, now: datetime
) -> dict | None:
    """Get the newest unexpired record for an exact address."""
    row = conn.execute(
        "SELECT * FROM forecast_records WHERE address = ? AND valid_until > ? "
        + _NEWEST_FIRST + " LIMIT 1",
        (address, to_db_timestamp(now)),
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_fresh_near(
    conn: sqlite3.Connection,
    latitude: float,
    longitude: float,
    tolerance: float,
    now: datetime,
) -> dict | None:
    """Get the newest unexpired record inside an inclusive lat/lng box."""
    row = conn.execute(
        "SELECT * FROM forecast_records "
        "WHERE latitude BETWEEN ? AND ? AND longitude BETWEEN ? AND ? "
        "AND valid_until > ? " + _NEWEST_FIRST + " LIMIT 1",
        (
            latitude - tolerance - _BOX_EPSILON,
            latitude + tolerance + _BOX_EPSILON,
            longitude - tolerance - _BOX_EPSILON,
            longitude + tolerance + _BOX_EPSILON,
            to_db_timestamp(now),
        ),
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_recent_records(conn: sqlite3.Connection, limit: int = 20) -> list[dict]:
    rows = conn.execute(
        "SELECT * FROM forecast_records " + _NEWEST_FIRST + " LIMIT ?",
        (limit,),
    ).fetchall()
    return [dict(r) for r in rows]
