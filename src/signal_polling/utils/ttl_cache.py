"""
In-memory TTL cache

Bounded key/value cache with per-entry age expiry. The clock is injected so
callers (and tests) control what "now" means.
"""

import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, NamedTuple, Optional


class CacheEntry(NamedTuple):
    """Cached value with the time it was written"""
    value: Any
    timestamp: float


class TTLCache:
    """Bounded map whose entries expire ttl_seconds after they were written"""

    def __init__(
        self,
        ttl_seconds: float,
        max_size: int = 1000,
        clock: Optional[Callable[[], float]] = None
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return (now - entry.timestamp) < self.ttl_seconds

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the cached value, or default if missing or expired"""
        entry = self._entries.get(key)
        if entry is None:
            return default

        if self._is_fresh(entry, self._clock()):
            return entry.value

        # Remove stale entry
        del self._entries[key]
        return default

    def get_entry(self, key: Hashable) -> Optional[CacheEntry]:
        """Return the raw entry without checking its age"""
        return self._entries.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        """Store value, replacing any previous entry for key"""
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value, self._clock())

        # Keep the newest max_size entries
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def delete(self, key: Hashable) -> bool:
        """Remove key; returns True if it was present"""
        return self._entries.pop(key, None) is not None

    def evict_expired(self) -> int:
        """Drop every expired entry and return how many were removed"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING


_MISSING = object()
