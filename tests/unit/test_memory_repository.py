"""
Unit tests for the in-memory workflow repository.
"""

from uuid import uuid4

import pytest

from flowgraph.core.errors import InvalidWorkflowError, WorkflowNotFoundError
from flowgraph.storage import InMemoryWorkflowRepository
from flowgraph.storage.repository import parse_workflow_id


class TestParseWorkflowId:
    def test_valid(self, weather_workflow_id):
        assert str(parse_workflow_id(weather_workflow_id)) == weather_workflow_id

    @pytest.mark.parametrize("value", ["", "abc", "550e8400-e29b-41d4-a716"])
    def test_invalid(self, value):
        assert parse_workflow_id(value) is None


class TestInMemoryWorkflowRepository:
    """Tests for InMemoryWorkflowRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, weather_workflow):
        repo = InMemoryWorkflowRepository()
        weather_workflow.version = 7

        created = await repo.create(weather_workflow)
        loaded = await repo.get(weather_workflow.id)

        assert created.version == 1
        assert created.created_at is not None
        assert loaded.name == weather_workflow.name
        assert [n.id for n in loaded.nodes] == [n.id for n in weather_workflow.nodes]

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, weather_workflow):
        repo = InMemoryWorkflowRepository()
        weather_workflow.id = ""

        created = await repo.create(weather_workflow)

        assert parse_workflow_id(created.id) is not None

    @pytest.mark.asyncio
    async def test_create_rejects_non_uuid(self, weather_workflow):
        weather_workflow.id = "weather"
        with pytest.raises(InvalidWorkflowError):
            await InMemoryWorkflowRepository().create(weather_workflow)

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, repository, weather_workflow_id):
        """Test that mutating a loaded workflow does not change storage."""
        loaded = await repository.get(weather_workflow_id)
        loaded.nodes.clear()

        assert len((await repository.get(weather_workflow_id)).nodes) == 6

    @pytest.mark.asyncio
    async def test_get_unknown(self, repository):
        assert await repository.get(str(uuid4())) is None
        assert await repository.get("not-a-uuid") is None

    @pytest.mark.asyncio
    async def test_get_is_case_insensitive(self, repository, weather_workflow_id):
        assert await repository.get(weather_workflow_id.upper()) is not None

    @pytest.mark.asyncio
    async def test_update_bumps_version(self, repository, weather_workflow_id):
        workflow = await repository.get(weather_workflow_id)
        created_at = workflow.created_at
        workflow.name = "Renamed"

        updated = await repository.update(workflow)

        assert updated.version == 2
        assert updated.created_at == created_at
        assert (await repository.get(weather_workflow_id)).name == "Renamed"

    @pytest.mark.asyncio
    async def test_update_unknown(self, repository, weather_workflow):
        weather_workflow.id = str(uuid4())
        with pytest.raises(WorkflowNotFoundError):
            await repository.update(weather_workflow)

    @pytest.mark.asyncio
    async def test_delete(self, repository, weather_workflow_id):
        assert await repository.delete(weather_workflow_id) is True
        assert await repository.delete(weather_workflow_id) is False
        assert await repository.get(weather_workflow_id) is None
