"""Keyed request cache for table reads.

Entries are keyed by table plus the query parameters and expire after a TTL.
A write to a table drops every cached read of that table, so the next
navigation re-fetches only what actually changed.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable


def query_key(table: str, **params: Any) -> tuple[str, str]:
    """Stable, hashable key for a read of ``table`` with ``params``."""
    return table, json.dumps(params, sort_keys=True, default=str)


class QueryCache:
    """Thread-safe TTL cache with per-table invalidation.

    Usage::

        cache = QueryCache(ttl_seconds=60)
        rows = cache.get_or_load(query_key("services", order="name"), load_services)
        cache.invalidate("services")  # after insert/update/delete
    """

    def __init__(self, maxsize: int = 256, ttl_seconds: float = 60.0) -> None:
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        # key -> (value, expires_at)
        self._store: dict[tuple[str, str], tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: tuple[str, str]) -> tuple[bool, Any]:
        """Return ``(found, value)``; ``None`` is a legitimate cached value."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return False, None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                self._misses += 1
                return False, None
            self._hits += 1
            return True, value

    def set(self, key: tuple[str, str], value: Any) -> None:
        expires_at = time.monotonic() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                oldest = min(self._store, key=lambda k: self._store[k][1])
                del self._store[oldest]
            self._store[key] = (value, expires_at)

    def get_or_load(self, key: tuple[str, str], loader: Callable[[], Any]) -> Any:
        found, value = self.get(key)
        if found:
            return value
        # failures propagate and are not cached
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, *tables: str) -> int:
        """Drop cached reads of ``tables``; returns how many entries went."""
        with self._lock:
            doomed = [k for k in self._store if k[0] in tables]
            for k in doomed:
                del self._store[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._store)}
