"""
Weather cache — in-process, bounded, one store per data type.

Key format:  normalised query key, lower-cased   e.g. "paris-current"
TTL:         600 seconds by default (weather_cache_ttl_s)
Capacity:    100 entries per store by default (weather_cache_max_entries)

Expired entries are purged lazily, on the next lookup of the same key.
When a store already holds `capacity` entries, a write first evicts the single
oldest entry. Entries live in an OrderedDict kept in write order (an overwrite
moves the key to the end), so the oldest entry is always the first one.

Stores are plain process state: there is no locking, and two concurrent misses
for the same key may both write (last write wins).
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from services.weather_api.weather.query import DataType

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    payload: Any
    stored_at: float


class CacheStore:
    """
    Bounded TTL store for raw upstream payloads.

    Usage:
        store = CacheStore("forecast", ttl_seconds=600, capacity=100)
        data = store.lookup("paris-forecast")
        if data is None:
            data = await fetch_from_api(...)
            store.store("paris-forecast", data)
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        capacity: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.capacity = capacity
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, key: str) -> Any | None:
        """Return the cached payload for key, or None on miss / expiry."""
        cache_key = key.lower()
        entry = self._entries.get(cache_key)
        if entry is not None:
            age = self._clock() - entry.stored_at
            if age < self.ttl_seconds:
                self._hits += 1
                logger.debug("%s cache hit: key=%s age=%.0fs", self.name, cache_key, age)
                return entry.payload
            del self._entries[cache_key]
            self._expired += 1
            logger.debug("%s cache expired: key=%s", self.name, cache_key)

        self._misses += 1
        logger.debug("%s cache miss: key=%s", self.name, cache_key)
        return None

    def store(self, key: str, payload: Any) -> None:
        """Write payload under key, evicting the oldest entry when full."""
        if len(self._entries) >= self.capacity:
            oldest_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.info(
                "%s cache limit reached (%d); evicted oldest key=%s",
                self.name,
                self.capacity,
                oldest_key,
            )

        cache_key = key.lower()
        self._entries[cache_key] = CacheEntry(payload=payload, stored_at=self._clock())
        self._entries.move_to_end(cache_key)
        logger.debug("%s cached: key=%s entries=%d", self.name, cache_key, len(self._entries))

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        return {
            "entries": len(self._entries),
            "capacity": self.capacity,
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "expired": self._expired,
            "evictions": self._evictions,
        }


class WeatherCaches:
    """The three per-type stores; categories never share a key space."""

    def __init__(
        self,
        ttl_seconds: float,
        capacity: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stores = {
            data_type: CacheStore(data_type.value, ttl_seconds, capacity, clock=clock)
            for data_type in DataType
        }

    def for_type(self, data_type: DataType) -> CacheStore:
        return self._stores[data_type]

    def stats(self) -> dict[str, dict[str, Any]]:
        return {data_type.value: store.stats() for data_type, store in self._stores.items()}
