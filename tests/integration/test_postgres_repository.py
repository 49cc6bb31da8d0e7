"""
PostgreSQL repository integration tests.

Requires PostgreSQL running (configured through POSTGRES_* variables);
skipped otherwise.
"""

from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio

from flowgraph.config.settings import PostgresSettings
from flowgraph.core.errors import InvalidWorkflowError, WorkflowNotFoundError
from flowgraph.orchestrator import workflows_equal
from flowgraph.storage.postgres import Database, PostgresWorkflowRepository


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database(PostgresSettings(pool_timeout=2.0))
    await db.init()

    if not await db.ping():
        await db.close()
        pytest.skip("PostgreSQL not available")

    await db.create_schema()

    yield db

    await db.close()


@pytest_asyncio.fixture
async def repository(database) -> PostgresWorkflowRepository:
    return PostgresWorkflowRepository(database)


@pytest_asyncio.fixture
async def stored_workflow(repository, weather_workflow):
    """Weather workflow stored under a fresh id, removed afterwards."""
    weather_workflow.id = str(uuid4())
    created = await repository.create(weather_workflow)
    yield created
    await repository.delete(created.id)


class TestPostgresWorkflowRepository:
    """Tests for PostgresWorkflowRepository."""

    @pytest.mark.asyncio
    async def test_create_round_trip(self, stored_workflow, weather_workflow):
        assert stored_workflow.version == 1
        assert stored_workflow.created_at is not None
        assert workflows_equal(stored_workflow, weather_workflow)

    @pytest.mark.asyncio
    async def test_preserves_order_and_metadata(self, repository, stored_workflow, weather_workflow):
        loaded = await repository.get(stored_workflow.id)

        assert [n.id for n in loaded.nodes] == [n.id for n in weather_workflow.nodes]
        assert [e.id for e in loaded.edges] == [e.id for e in weather_workflow.edges]
        assert loaded.get_node("weather-api").metadata == weather_workflow.get_node("weather-api").metadata
        assert loaded.edges[3].route_key == "true"
        assert loaded.edges[3].label_style.fill == "#10b981"
        assert loaded.edges[0].label_style is None

    @pytest.mark.asyncio
    async def test_get_unknown(self, repository):
        assert await repository.get(str(uuid4())) is None
        assert await repository.get("not-a-uuid") is None

    @pytest.mark.asyncio
    async def test_create_rejects_non_uuid(self, repository, weather_workflow):
        weather_workflow.id = "weather"
        with pytest.raises(InvalidWorkflowError):
            await repository.create(weather_workflow)

    @pytest.mark.asyncio
    async def test_update_replaces_graph(self, repository, stored_workflow):
        stored_workflow.name = "Edited"
        stored_workflow.edges = [e for e in stored_workflow.edges if e.id != "e6"]
        stored_workflow.nodes[1].position.x = 999

        updated = await repository.update(stored_workflow)

        assert updated.version == 2
        assert updated.name == "Edited"
        assert [e.id for e in updated.edges] == ["e1", "e2", "e3", "e4", "e5"]
        assert updated.nodes[1].position.x == 999

    @pytest.mark.asyncio
    async def test_update_unknown(self, repository, weather_workflow):
        weather_workflow.id = str(uuid4())
        with pytest.raises(WorkflowNotFoundError):
            await repository.update(weather_workflow)

    @pytest.mark.asyncio
    async def test_delete(self, repository, weather_workflow):
        weather_workflow.id = str(uuid4())
        await repository.create(weather_workflow)

        assert await repository.delete(weather_workflow.id) is True
        assert await repository.delete(weather_workflow.id) is False
        assert await repository.get(weather_workflow.id) is None
