"""Per-key locks so concurrent lookups for one address share a single fetch."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._waiters: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
