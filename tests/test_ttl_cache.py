"""Tests for the bounded TTL cache."""

import pytest

from rrcache import BoundedTTLCache, EvictionPolicy

from .conftest import FakeClock


@pytest.fixture
def cache(clock: FakeClock) -> BoundedTTLCache[str]:
    return BoundedTTLCache(3, clock=clock)


class TestFreshness:
    """Tests for lazy expiry on read."""

    def test_get_before_ttl(self, cache: BoundedTTLCache[str], clock: FakeClock) -> None:
        """A value read before its TTL elapses is returned."""
        cache.set("k", "v", 1000)
        clock.advance(999)
        assert cache.get("k") == "v"

    def test_get_after_ttl_is_miss_and_removes(
        self, cache: BoundedTTLCache[str], clock: FakeClock
    ) -> None:
        """An expired entry is a miss and is removed on that read."""
        cache.set("k", "v", 1000)
        cache.set("other", "x", "1h")
        assert len(cache) == 2
        clock.advance(1000)
        assert cache.get("k") is None
        assert len(cache) == 1

    def test_reads_do_not_extend_ttl(
        self, cache: BoundedTTLCache[str], clock: FakeClock
    ) -> None:
        cache.set("k", "v", "10s")
        for _ in range(9):
            clock.advance(1000)
            assert cache.get("k") == "v"
        clock.advance(1000)
        assert cache.get("k") is None

    def test_none_ttl_never_expires(
        self, cache: BoundedTTLCache[str], clock: FakeClock
    ) -> None:
        entry = cache.set("k", "v", None)
        assert entry.expires_at is None
        clock.advance(365 * 86_400_000)
        assert cache.get("k") == "v"

    def test_entry_metadata(self, cache: BoundedTTLCache[str], clock: FakeClock) -> None:
        entry = cache.set("k", "v", "5m")
        assert entry.stored_at == clock.now
        assert entry.expires_at == clock.now + 300_000
        assert cache.get_entry("k") is entry

    def test_set_replaces_entry_wholesale(
        self, cache: BoundedTTLCache[str], clock: FakeClock
    ) -> None:
        first = cache.set("k", "v1", 1000)
        clock.advance(500)
        second = cache.set("k", "v2", 1000)
        assert second is not first
        assert first.value == "v1"
        clock.advance(700)
        assert cache.get("k") == "v2"

    def test_get_default(self, cache: BoundedTTLCache[str]) -> None:
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_contains_does_not_evict(
        self, cache: BoundedTTLCache[str], clock: FakeClock
    ) -> None:
        cache.set("k", "v", 1000)
        assert "k" in cache
        clock.advance(1000)
        assert "k" not in cache
        assert len(cache) == 1


class TestCapacity:
    """Tests for the capacity bound and eviction order."""

    def test_never_exceeds_capacity(self, cache: BoundedTTLCache[str]) -> None:
        for i in range(10):
            cache.set(f"k{i}", "v", "1h")
            assert len(cache) <= 3

    def test_first_inserted_evicted(self, cache: BoundedTTLCache[str]) -> None:
        """Inserting capacity + 1 keys evicts the first inserted key."""
        for key in ("a", "b", "c", "d"):
            cache.set(key, key.upper(), "1h")
        assert len(cache) == 3
        assert cache.get("a") is None
        assert list(cache.keys()) == ["b", "c", "d"]

    def test_fifo_reads_do_not_protect(self, cache: BoundedTTLCache[str]) -> None:
        for key in ("a", "b", "c"):
            cache.set(key, key, "1h")
        assert cache.get("a") == "a"
        cache.set("d", "d", "1h")
        assert cache.get("a") is None
        assert cache.get("b") == "b"

    def test_reinsert_moves_to_newest(self, cache: BoundedTTLCache[str]) -> None:
        for key in ("a", "b", "c"):
            cache.set(key, key, "1h")
        cache.set("a", "a2", "1h")
        cache.set("d", "d", "1h")
        assert cache.get("a") == "a2"
        assert cache.get("b") is None

    def test_replace_at_capacity_does_not_evict(
        self, cache: BoundedTTLCache[str]
    ) -> None:
        for key in ("a", "b", "c"):
            cache.set(key, key, "1h")
        cache.set("b", "b2", "1h")
        assert len(cache) == 3
        assert cache.get("a") == "a"

    def test_lru_reads_protect(self, clock: FakeClock) -> None:
        cache: BoundedTTLCache[str] = BoundedTTLCache(
            3, eviction=EvictionPolicy.LRU, clock=clock
        )
        for key in ("a", "b", "c"):
            cache.set(key, key, "1h")
        assert cache.get("a") == "a"
        cache.set("d", "d", "1h")
        assert cache.get("a") == "a"
        assert cache.get("b") is None

    def test_single_slot(self, clock: FakeClock) -> None:
        cache: BoundedTTLCache[int] = BoundedTTLCache(1, clock=clock)
        cache.set("primary", 1, "5m")
        cache.set("fallback", 2, "5m")
        assert len(cache) == 1
        assert cache.get("primary") is None
        assert cache.get("fallback") == 2

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_invalid_capacity(self, capacity: int) -> None:
        with pytest.raises(ValueError):
            BoundedTTLCache(capacity)


class TestMaintenance:
    """Tests for delete and clear."""

    def test_delete(self, cache: BoundedTTLCache[str]) -> None:
        cache.set("k", "v", "1h")
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_clear(self, cache: BoundedTTLCache[str]) -> None:
        cache.set("a", "a", "1h")
        cache.set("b", "b", None)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_wall_clock_default(self) -> None:
        cache: BoundedTTLCache[str] = BoundedTTLCache(2)
        cache.set("k", "v", "1m")
        assert cache.get("k") == "v"
