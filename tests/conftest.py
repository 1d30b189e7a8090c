"""Shared pytest fixtures."""

import asyncio
import random

import pytest

from rrcache import DemoRecordStore


class FakeClock:
    """Manually advanced clock in Unix milliseconds."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingSleep:
    """Async sleep stand-in that records requested delays and only yields."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.calls: list[float] = []
        self._clock = clock

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._clock is not None:
            self._clock.advance(int(seconds * 1000))
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    """Create a fresh FakeClock for each test."""
    return FakeClock()


@pytest.fixture
def fake_sleep(clock: FakeClock) -> RecordingSleep:
    """Create a RecordingSleep that advances the test clock."""
    return RecordingSleep(clock)


@pytest.fixture
def rng() -> random.Random:
    """Seeded Random for deterministic jitter."""
    return random.Random(42)


@pytest.fixture
def demo_store() -> DemoRecordStore:
    """Create a DemoRecordStore without simulated latency."""
    return DemoRecordStore()
