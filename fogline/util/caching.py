# fogline/util/caching.py

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

# Define generic types for keys and values
KeyType = TypeVar("KeyType")
ValueType = TypeVar("ValueType")


@dataclass
class CacheStats:
    """Statistics for a ResourceCache instance."""

    hits: int = 0
    misses: int = 0

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if self.total_lookups == 0:
            return 0.0
        return (self.hits / self.total_lookups) * 100.0

    def __repr__(self) -> str:
        return f"{self.hits} hits, {self.misses} misses ({self.hit_rate:.1f}% hit rate)"


class ResourceCache(Generic[KeyType, ValueType]):
    """
    A generic, size-limited, Least Recently Used (LRU) cache.

    Holds results that are expensive to rebuild every frame, such as a wall
    set after intersection splitting, keyed by a signature of their inputs.
    An optional `on_evict` callback runs for each evicted value.
    """

    def __init__(
        self,
        name: str,
        max_size: int = 16,
        on_evict: Callable[[ValueType], None] | None = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("Cache max_size must be a positive integer.")
        self.name = name
        self.max_size = max_size
        self._cache: OrderedDict[KeyType, ValueType] = OrderedDict()
        self.stats = CacheStats()
        self.on_evict = on_evict

    def get(self, key: KeyType) -> ValueType | None:
        """Return the cached value, marking it recently used, or None."""
        if key not in self._cache:
            self.stats.misses += 1
            return None

        self._cache.move_to_end(key)
        self.stats.hits += 1
        return self._cache[key]

    def get_or_build(self, key: KeyType, build: Callable[[], ValueType]) -> ValueType:
        """Return the cached value for ``key``, building and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = build()
        self.store(key, value)
        return value

    def store(self, key: KeyType, value: ValueType) -> None:
        """Store an item, evicting the least recently used one when full."""
        self._cache[key] = value
        self._cache.move_to_end(key)

        while len(self._cache) > self.max_size:
            _evicted_key, evicted_value = self._cache.popitem(last=False)
            if self.on_evict:
                self.on_evict(evicted_value)

    def clear(self) -> None:
        """Clear all items from the cache and reset stats."""
        if self.on_evict:
            for value in self._cache.values():
                self.on_evict(value)

        self._cache.clear()
        self.stats = CacheStats()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} '{self.name}' "
            f"size={len(self)}/{self.max_size}, stats={self.stats!r}>"
        )
