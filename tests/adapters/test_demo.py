"""Tests for the demo record store."""

import pytest

from rrcache import DemoRecordStore, StorageError, ValidationError


class TestDemoRecordStore:
    """Tests for DemoRecordStore."""

    async def test_load_list(self, demo_store: DemoRecordStore) -> None:
        result = await demo_store.load_list()
        assert [p.id for p in result.projects] == ["keyboard", "lamp", "logo"]
        assert result.has_more is False

    @pytest.mark.parametrize("project_id", ["keyboard", "lamp", "logo"])
    async def test_detail_price_matches_summary(
        self, demo_store: DemoRecordStore, project_id: str
    ) -> None:
        """Each project's listed price equals its materials bill."""
        detail = await demo_store.load_detail(project_id)
        assert detail.project.id == project_id
        assert detail.total_price == detail.project.total_price
        assert len(detail.steps) == detail.project.step_count

    async def test_steps_in_order(self, demo_store: DemoRecordStore) -> None:
        detail = await demo_store.load_detail("logo")
        assert [s.step_number for s in detail.steps] == [1, 2, 3]

    async def test_unknown_project(self, demo_store: DemoRecordStore) -> None:
        with pytest.raises(StorageError, match="Project not found: spaceship"):
            await demo_store.load_detail("spaceship")

    async def test_empty_id(self, demo_store: DemoRecordStore) -> None:
        with pytest.raises(ValidationError):
            await demo_store.load_detail("")

    async def test_latency(self) -> None:
        store = DemoRecordStore(latency=0.001)
        result = await store.load_list()
        assert result.total == 3
