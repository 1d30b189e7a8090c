"""Project record cache - list and detail call site."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable
from typing import Any

from rrcache.adapters.base import RecordStore
from rrcache.models import ProjectDetail, ProjectList
from rrcache.resource_cache import ResilientResourceCache
from rrcache.retry import DEFAULT_RETRY_POLICY, SleepFunc
from rrcache.ttl_cache import Clock, EvictionPolicy
from rrcache.types import Duration, FetchResult, RetryPolicy

logger = logging.getLogger(__name__)

LIST_KEY = "projects"
FALLBACK_LIST_KEY = "projects:fallback"


def detail_key(project_id: str) -> str:
    return f"project:{project_id}"


class ProjectRecordCache:
    """Cached, deduplicated, retried access to project records.

    The list and its fallback list each get their own slot; details live in
    a bounded map with first-in-first-out eviction and no fallback. When
    ``fallback_store`` is given, a list load that exhausts its retries is
    served from it instead, cached under its own key so a cached primary
    list is never displaced and the primary is retried on the next miss.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        fallback_store: RecordStore | None = None,
        list_ttl: Duration = "5m",
        detail_ttl: Duration = "10m",
        max_details: int = 100,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        sleep_func: SleepFunc | None = None,
    ) -> None:
        self._store = store
        self._fallback_store = fallback_store
        self._lists: ResilientResourceCache[ProjectList] = ResilientResourceCache(
            "project-list",
            max_capacity=2,
            default_ttl=list_ttl,
            retry_policy=retry_policy,
            clock=clock,
            rng=rng,
            sleep_func=sleep_func,
        )
        self._details: ResilientResourceCache[ProjectDetail] = ResilientResourceCache(
            "project-detail",
            max_capacity=max_details,
            default_ttl=detail_ttl,
            retry_policy=retry_policy,
            eviction=EvictionPolicy.FIFO,
            clock=clock,
            rng=rng,
            sleep_func=sleep_func,
        )

    async def fetch_list(self, force_refresh: bool = False) -> FetchResult[ProjectList]:
        """Fetch the project list, from cache when fresh."""
        if self._fallback_store is None:
            return await self._lists.fetch(
                LIST_KEY, self._store.load_list, force_refresh=force_refresh
            )
        return await self._lists.fetch(
            LIST_KEY,
            self._store.load_list,
            fallback_key=FALLBACK_LIST_KEY,
            fallback_loader=self._fallback_store.load_list,
            force_refresh=force_refresh,
        )

    async def fetch_detail(
        self, project_id: str, force_refresh: bool = False
    ) -> FetchResult[ProjectDetail]:
        """Fetch one project's steps and materials, from cache when fresh."""
        return await self._details.fetch(
            detail_key(project_id),
            lambda: self._store.load_detail(project_id),
            force_refresh=force_refresh,
        )

    async def prefetch_details(
        self, project_ids: Iterable[str], *, batch_size: int = 3
    ) -> None:
        """Warm the detail cache, ``batch_size`` concurrent loads at a time.

        Ids already fresh in the cache are skipped. Failures are logged,
        never raised.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        pending = [
            pid for pid in project_ids if not self._details.is_cached(detail_key(pid))
        ]
        for start in range(0, len(pending), batch_size):
            batch = pending[start : start + batch_size]
            results = await asyncio.gather(*(self.fetch_detail(pid) for pid in batch))
            for pid, result in zip(batch, results):
                if not result.ok:
                    logger.warning(f"Failed to prefetch project {pid}: {result.message}")

    def clear_all(self) -> None:
        """Drop every cached list and detail."""
        self._lists.clear()
        self._details.clear()

    def stats(self) -> dict[str, Any]:
        """Cache statistics for debugging."""
        entry = self._lists.get_entry(LIST_KEY)
        return {
            "list_cached": entry is not None,
            "list_expires_at": entry.expires_at if entry is not None else None,
            "fallback_list_cached": self._lists.is_cached(FALLBACK_LIST_KEY),
            "list": self._lists.stats(),
            "details": self._details.stats(),
        }
