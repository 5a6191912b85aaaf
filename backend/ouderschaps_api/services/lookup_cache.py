"""
Ouderschaps API: Lookup Cache
===============================

What:  Time-boxed cache for the small reference tables (rollen, dagen,
       categorieën, ...).
How:   A cache maps a key to `(value, stored_at)`. Freshness is decided by
       the caller (services/lookup_service.py), which knows the TTL per
       lookup kind. The cache itself never expires anything.
Who:   Injected into the lookup routes through `dependencies.get_lookup_cache`;
       tests swap in their own instance or call `clear()`.

Concurrency:
    No lock. Values are replaced by reference; a concurrent reader sees the
    old or the new value, never a mix.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

CacheEntry = Tuple[Any, float]


class LookupCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]:
        """Cached `(value, stored_at)` for key, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, stamped with the current time."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every entry."""

    @abstractmethod
    def now(self) -> float:
        """The clock used for stamping entries."""


class InMemoryLookupCache(LookupCache):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def clear(self) -> None:
        self._entries = {}

    def now(self) -> float:
        return self._clock()

    def __len__(self) -> int:
        return len(self._entries)


# Process-wide instance
lookup_cache = InMemoryLookupCache()
