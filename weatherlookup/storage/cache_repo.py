"""Repository for short-lived cache entries."""

import sqlite3
from datetime import datetime

from weatherlookup.models.common import to_db_timestamp


def get_entry(conn: sqlite3.Connection, key: str, now: datetime) -> str | None:
    """Get an unexpired cache value. Expired rows read as missing."""
    row = conn.execute(
        "SELECT value FROM cache_entries WHERE key = ? AND expires_at > ?",
        (key, to_db_timestamp(now)),
    ).fetchone()
    if row is None:
        return None
    return row[0]


def put_entry(
    conn: sqlite3.Connection, key: str, value: str, expires_at: datetime
) -> None:
    """Insert or replace a cache value; the last write wins."""
    conn.execute(
        "INSERT INTO cache_entries (key, value, expires_at) VALUES (?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
        "expires_at = excluded.expires_at",
        (key, value, to_db_timestamp(expires_at)),
    )
    conn.commit()


def delete_entry(conn: sqlite3.Connection, key: str) -> None:
    conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
    conn.commit()
