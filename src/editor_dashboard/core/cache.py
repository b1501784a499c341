"""In-process key/value cache with a fixed time-to-live.

Each repository owns one :class:`TTLCache` instance, created alongside it
and cleared when the owning service shuts down.  Staleness is decided at
read time by comparing the entry's timestamp with the clock; an expired
entry is evicted by the read that finds it.

Usage::

    cache: TTLCache[WikiUser] = TTLCache(ttl_seconds=300)
    cache.set("Example", user)
    cache.get("Example")        # -> user until 300 s have passed, then None
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    stored_at: float


class TTLCache(Generic[T]):
    """Map string keys to values that expire *ttl_seconds* after being set.

    Args:
        ttl_seconds: Maximum age of an entry.  An entry exactly
            *ttl_seconds* old is still fresh.
        clock: Monotonic time source in seconds.  Injected in tests.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        """Return the fresh value for *key*, or ``None`` when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, value: T) -> None:
        """Store *value* under *key*, replacing any previous entry."""
        self._entries[key] = CacheEntry(data=value, stored_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TTLCache(ttl_seconds={self.ttl_seconds}, entries={len(self._entries)})"
