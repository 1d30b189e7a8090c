"""Async retry with exponential backoff and additive jitter."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

from rrcache.errors import classify
from rrcache.types import FetchFailure, FetchResult, FetchSuccess, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_POLICY = RetryPolicy()


class SleepFunc(Protocol):
    """Injectable async sleep, in seconds."""

    async def __call__(self, seconds: float) -> None: ...


def backoff_delay(
    policy: RetryPolicy, attempt: int, rng: random.Random | None = None
) -> float:
    """Delay in ms to wait after failed ``attempt`` (1-based).

    ``min(base * multiplier**(attempt-1), max_delay)`` plus a uniform
    jitter in ``[0, policy.jitter]`` drawn independently per call.
    """
    _rng = rng or random
    delay = min(
        policy.base_delay * policy.backoff_multiplier ** (attempt - 1),
        policy.max_delay,
    )
    return delay + _rng.uniform(0, policy.jitter)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    key: str = "",
    rng: random.Random | None = None,
    sleep_func: SleepFunc | None = None,
) -> FetchResult[T]:
    """Run ``operation``, retrying retryable failures with backoff.

    Makes at most ``policy.total_attempts`` calls. Non-retryable failures
    return after the first call. The returned failure always describes the
    last attempt. Exceptions never escape; ``asyncio.CancelledError`` is
    not intercepted.

    Args:
        operation: Zero-argument async callable to run.
        policy: Retry configuration.
        key: Resource key, carried into the result and log messages.
        rng: Injectable Random instance for deterministic jitter.
        sleep_func: Injectable sleep function for time control in tests.
    """
    _rng = rng or random.Random()
    _sleep = sleep_func or asyncio.sleep
    started = time.perf_counter()
    attempt = 1

    while True:
        try:
            value = await operation()
        except Exception as exc:
            failure = classify(exc)
            if not failure.retryable or attempt >= policy.total_attempts:
                logger.info(
                    f"Giving up on {key or 'operation'} after {attempt} "
                    f"attempt(s): [{failure.kind.value}] {failure.message}"
                )
                return FetchFailure(
                    kind=failure.kind,
                    message=failure.message,
                    key=key,
                    attempts=attempt,
                    elapsed_ms=_elapsed_ms(started),
                )

            delay = backoff_delay(policy, attempt, _rng)
            logger.warning(
                f"Attempt {attempt}/{policy.total_attempts} for "
                f"{key or 'operation'} failed ({failure.kind.value}: "
                f"{failure.message}); retrying in {delay:.0f}ms"
            )
            await _sleep(delay / 1000)
            attempt += 1
            continue

        return FetchSuccess(
            value=value,
            key=key,
            served_from_cache=False,
            elapsed_ms=_elapsed_ms(started),
        )
