"""Bounded in-memory key/value store with per-entry expiry."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from enum import Enum
from typing import Generic, TypeVar, overload

from rrcache.duration import parse_duration
from rrcache.types import CacheEntry, Duration

T = TypeVar("T")
D = TypeVar("D")

Clock = Callable[[], int]  # current time in ms


def wall_clock() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class EvictionPolicy(str, Enum):
    """Which entry makes room when a full cache receives a new key."""

    FIFO = "fifo"  # oldest insertion; reads do not reorder
    LRU = "lru"  # least recently read or written


class BoundedTTLCache(Generic[T]):
    """Key/value store where every entry carries an expiry instant.

    Expiry is checked lazily on read; there is no background sweep, and
    reads never extend an entry's TTL. ``len(cache) <= max_capacity`` holds
    after every insertion.
    """

    def __init__(
        self,
        max_capacity: int,
        *,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
        clock: Clock | None = None,
    ) -> None:
        if max_capacity < 1:
            raise ValueError("max_capacity must be >= 1")
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._max_capacity = max_capacity
        self._eviction = eviction
        self._clock = clock or wall_clock

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def eviction(self) -> EvictionPolicy:
        return self._eviction

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Fresh-entry membership test. Does not evict stale entries."""
        if not isinstance(key, str):
            return False
        entry = self._entries.get(key)
        return entry is not None and entry.is_fresh(self._clock())

    def keys(self) -> Iterator[str]:
        """Stored keys, oldest position first. May include stale entries."""
        return iter(list(self._entries))

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """Return the fresh entry for ``key``; drop it and return None if stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            del self._entries[key]
            return None
        if self._eviction is EvictionPolicy.LRU:
            self._entries.move_to_end(key)
        return entry

    @overload
    def get(self, key: str) -> T | None: ...

    @overload
    def get(self, key: str, default: D) -> T | D: ...

    def get(self, key: str, default: object = None) -> object:
        """Return the fresh value for ``key`` or ``default`` on a miss."""
        entry = self.get_entry(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: T, ttl: Duration | None = None) -> CacheEntry[T]:
        """Store ``value`` for ``ttl`` (None never expires).

        An existing key is replaced wholesale and moves to the newest
        position. A new key arriving at capacity evicts one victim first.
        """
        now = self._clock()
        entry: CacheEntry[T] = CacheEntry(
            value=value,
            stored_at=now,
            expires_at=None if ttl is None else now + parse_duration(ttl),
        )
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_capacity:
            self._entries.popitem(last=False)
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns whether an entry was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
