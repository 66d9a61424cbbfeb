"""Key-value cache backends with per-entry TTL and lazy expiry."""

import sqlite3
import threading
from datetime import datetime, timedelta
from typing import Protocol

from weatherlookup.models.common import Clock, utc_now
from weatherlookup.storage import cache_repo


class CacheBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: float) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryCacheBackend:
    """Process-local cache. Expired entries are dropped when read."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._entries: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SqliteCacheBackend:
    """Cache entries kept in the cache_entries table, one upsert per write."""

    def __init__(self, conn: sqlite3.Connection, clock: Clock = utc_now):
        self.conn = conn
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return cache_repo.get_entry(self.conn, key, self._clock())

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._lock:
            cache_repo.put_entry(self.conn, key, value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            cache_repo.delete_entry(self.conn, key)
