"""
In-memory cache with a single time-to-live for all entries.

Entries are evicted lazily: a stale entry is removed the moment someone
asks for it. clear_expired() sweeps the whole map for callers that want to
bound memory proactively. There is no size limit.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict

from rtuschedule.model import CacheEntry

# Returned by get() when the caller asks for it, so that cached falsy values
# (False, [], 0) can be told apart from a miss.
MISSING: Any = object()


def cache_key(operation: str, *params: Any) -> str:
    """
    Build a cache key from an operation name and its effective parameters.

    cache_key("events", 42, 2024, 5) -> "events:42:2024:5"
    """
    return ":".join([operation, *(str(p) for p in params)])


class ExpiringCache:
    """
    Key -> value store where every entry expires ttl seconds after it was set.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl!r}")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if not self._is_fresh(entry, self._clock()):
                del self._entries[key]
                return default
            return entry.payload

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(payload=value, created_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def clear_expired(self) -> int:
        """
        Drop every stale entry. Returns how many were removed.
        """
        with self._lock:
            now = self._clock()
            stale = [k for k, e in self._entries.items() if not self._is_fresh(e, now)]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
