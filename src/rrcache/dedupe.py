"""In-flight request deduplication."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, cast

logger = logging.getLogger(__name__)

R = TypeVar("R")


class InFlightDeduplicator:
    """Share one running operation between concurrent callers of a key.

    Assumes a single event loop: the check-then-insert in ``dedupe`` runs
    without suspension, so no lock is needed. Preemptive threads would
    need a mutex around it.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[Any]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def pending_keys(self) -> list[str]:
        """Keys with an operation currently in flight."""
        return list(self._pending)

    async def dedupe(self, key: str, producer: Callable[[], Awaitable[R]]) -> R:
        """Run ``producer`` once per key; concurrent callers join the same run.

        The registry entry is removed by a done-callback registered before any
        caller awaits the task, so it is gone by the time any caller resumes,
        whether the operation succeeded or failed. Each caller awaits a
        shielded view: cancelling one caller never cancels the shared run.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(producer())
            self._pending[key] = task
            task.add_done_callback(lambda done: self._release(key, done))
        else:
            logger.debug(f"Joining in-flight operation for {key}")
        return cast(R, await asyncio.shield(task))

    def _release(self, key: str, task: asyncio.Future[Any]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    def clear(self) -> None:
        """Forget in-flight operations; they still run to completion."""
        self._pending.clear()
