"""Resilient resource cache - the composition root.

Wires the leaves together into one operation:
- cache lookup (BoundedTTLCache)
- one in-flight load per key (InFlightDeduplicator)
- bounded retry with backoff (run_with_retry)
- one level of fallback substitution, cached under its own key
"""

from __future__ import annotations

import dataclasses
import logging
import random
import time
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from rrcache.dedupe import InFlightDeduplicator
from rrcache.duration import parse_duration
from rrcache.retry import DEFAULT_RETRY_POLICY, SleepFunc, run_with_retry
from rrcache.ttl_cache import BoundedTTLCache, Clock, EvictionPolicy
from rrcache.types import CacheEntry, Duration, FetchResult, FetchSuccess, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResilientResourceCache(Generic[T]):
    """Cache-then-dedupe-then-retry-then-fallback fetcher for one resource category."""

    def __init__(
        self,
        name: str,
        *,
        max_capacity: int = 100,
        default_ttl: Duration | None = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        sleep_func: SleepFunc | None = None,
    ) -> None:
        self._name = name
        self._default_ttl = (
            parse_duration(default_ttl) if default_ttl is not None else None
        )
        self._retry_policy = retry_policy
        self._store: BoundedTTLCache[T] = BoundedTTLCache(
            max_capacity, eviction=eviction, clock=clock
        )
        self._in_flight = InFlightDeduplicator()
        self._rng = rng
        self._sleep_func = sleep_func

    @property
    def name(self) -> str:
        return self._name

    async def fetch(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        *,
        ttl: Duration | None = None,
        retry_policy: RetryPolicy | None = None,
        fallback_key: str | None = None,
        fallback_loader: Callable[[], Awaitable[T]] | None = None,
        force_refresh: bool = False,
    ) -> FetchResult[T]:
        """Fetch a resource by key.

        Args:
            key: Cache key
            loader: Async function producing the resource; failures are
                classified and retried according to ``retry_policy``
            ttl: Freshness of a successful load (default: instance default;
                None on both means the entry never expires)
            retry_policy: Per-call override of the instance policy
            fallback_key: Key the substitute resource is cached under
            fallback_loader: Substitute used once the primary exhausts retries
            force_refresh: Skip the cache lookup; dedupe and retry still apply

        Returns:
            FetchSuccess on a hit, load or fallback; otherwise the primary's
            terminal FetchFailure

        Raises:
            ValueError: If ``ttl`` is not a valid duration. Checked before any
                lookup or load.
        """
        started = time.perf_counter()
        entry_ttl = parse_duration(ttl) if ttl is not None else self._default_ttl

        if not force_refresh:
            hit = self._lookup(key, started)
            if hit is not None:
                return hit

        result = await self._load(key, loader, entry_ttl, retry_policy)
        if result.ok:
            return self._stamp(result, started)

        if fallback_loader is None or fallback_key is None or fallback_key == key:
            return self._stamp(result, started)

        logger.warning(
            f"[{self._name}] {key} failed ({result.message}); "
            f"substituting fallback {fallback_key}"
        )
        substitute = self._lookup(fallback_key, started)
        if substitute is not None:
            return substitute

        # One level of substitution only; the fallback never chains further.
        fallback = await self._load(
            fallback_key, fallback_loader, entry_ttl, retry_policy
        )
        if fallback.ok:
            return self._stamp(fallback, started)

        logger.info(f"[{self._name}] fallback {fallback_key} for {key} also failed")
        return self._stamp(result, started)

    def get_cached(self, key: str) -> T | None:
        """Return the fresh cached value for ``key`` without loading."""
        return self._store.get(key)

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """Return the fresh cache entry for ``key`` with its expiry metadata."""
        return self._store.get_entry(key)

    def is_cached(self, key: str) -> bool:
        return key in self._store

    def is_loading(self, key: str) -> bool:
        return key in self._in_flight

    def invalidate(self, key: str) -> bool:
        """Drop the cached entry for ``key``."""
        return self._store.delete(key)

    def clear(self) -> None:
        """Drop every cached entry and forget in-flight operations."""
        self._store.clear()
        self._in_flight.clear()

    def stats(self) -> dict[str, Any]:
        """Cache statistics for debugging."""
        return {
            "name": self._name,
            "entries": len(self._store),
            "max_capacity": self._store.max_capacity,
            "eviction": self._store.eviction.value,
            "in_flight": len(self._in_flight),
        }

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _lookup(self, key: str, started: float) -> FetchSuccess[T] | None:
        entry = self._store.get_entry(key)
        if entry is None:
            logger.debug(f"[{self._name}] cache miss for {key}")
            return None
        logger.debug(f"[{self._name}] cache hit for {key}")
        return FetchSuccess(
            value=entry.value,
            key=key,
            served_from_cache=True,
            elapsed_ms=(time.perf_counter() - started) * 1000,
        )

    async def _load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        entry_ttl: int | None,
        retry_policy: RetryPolicy | None,
    ) -> FetchResult[T]:
        policy = retry_policy or self._retry_policy

        async def produce() -> FetchResult[T]:
            result = await run_with_retry(
                loader,
                policy,
                key=key,
                rng=self._rng,
                sleep_func=self._sleep_func,
            )
            if result.ok:
                # No suspension between the load completing and the write.
                self._store.set(key, result.value, entry_ttl)
            return result

        return await self._in_flight.dedupe(key, produce)

    @staticmethod
    def _stamp(result: FetchResult[T], started: float) -> FetchResult[T]:
        """Per-caller copy with this caller's elapsed time."""
        return dataclasses.replace(
            result, elapsed_ms=(time.perf_counter() - started) * 1000
        )
