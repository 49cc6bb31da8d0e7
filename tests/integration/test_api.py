"""
HTTP API integration tests.

Run the FastAPI app in-process against an in-memory repository and a faked
weather endpoint; no database or network access is needed.
"""

from typing import AsyncGenerator
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from flowgraph.api import create_app
from flowgraph.api.routes import get_workflow_service

EXECUTE_BODY = {
    "name": "Alice",
    "email": "alice@example.com",
    "city": "Sydney",
    "threshold": 20,
    "operator": "greater_than",
}


@pytest.fixture
def app(test_settings, service):
    app = create_app(test_settings)
    app.dependency_overrides[get_workflow_service] = lambda: service
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1") as client:
        yield client


class TestGetWorkflow:
    """Tests for GET /workflows/{id}."""

    @pytest.mark.asyncio
    async def test_returns_definition(self, client, weather_workflow_id):
        response = await client.get(f"/workflows/{weather_workflow_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == weather_workflow_id
        assert body["name"] == "Weather Alert Workflow"
        assert len(body["nodes"]) == 6
        assert body["nodes"][2]["data"]["metadata"]["apiEndpoint"].startswith("https://")
        assert body["edges"][3]["sourceHandle"] == "true"
        assert body["edges"][3]["labelStyle"]["fontWeight"] == "bold"

    @pytest.mark.asyncio
    async def test_unknown_workflow(self, client):
        response = await client.get(f"/workflows/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Workflow not found"

    @pytest.mark.asyncio
    async def test_malformed_id(self, client):
        response = await client.get("/workflows/not-a-uuid")
        assert response.status_code == 404


class TestExecuteWorkflow:
    """Tests for POST /workflows/{id}/execute."""

    @pytest.mark.asyncio
    async def test_completed_run(self, client, weather_workflow_id):
        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=EXECUTE_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["workflowId"] == weather_workflow_id
        assert [s["nodeId"] for s in body["steps"]] == [
            "start", "form", "weather-api", "condition", "email", "end",
        ]
        assert body["steps"][4]["output"]["emailContent"]["body"] == (
            "Weather alert for Sydney! Temperature is 25.5°C!"
        )
        assert body["metadata"] == {"workflowVersion": 1, "triggeredBy": "Alice"}
        assert body["totalDuration"] >= 0

    @pytest.mark.asyncio
    async def test_failed_run_is_200(self, client, weather_workflow_id, weather_stub):
        """Test that node failures are reported in the record, not as HTTP errors."""
        weather_stub.status_code = 500

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=EXECUTE_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "failed"
        assert body["steps"][-1]["error"] == "Weather API error: weather API returned status 500"

    @pytest.mark.asyncio
    async def test_invalid_input(self, client, weather_workflow_id):
        body = dict(EXECUTE_BODY, threshold=150)

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "temperature must be below 100°C"

    @pytest.mark.asyncio
    async def test_malformed_body(self, client, weather_workflow_id):
        response = await client.post(
            f"/workflows/{weather_workflow_id}/execute",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request body"

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, client, weather_workflow_id):
        body = dict(EXECUTE_BODY, threshold="warm")

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=body)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_workflow(self, client):
        response = await client.post(f"/workflows/{uuid4()}/execute", json=EXECUTE_BODY)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_inline_workflow_is_persisted(self, client, weather_workflow_id, weather_workflow_dict):
        weather_workflow_dict["name"] = "Edited Weather Alert"
        body = dict(EXECUTE_BODY, workflow=weather_workflow_dict)

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=body)

        assert response.status_code == 200
        assert response.json()["metadata"]["workflowVersion"] == 2
        stored = await client.get(f"/workflows/{weather_workflow_id}")
        assert stored.json()["name"] == "Edited Weather Alert"

    @pytest.mark.asyncio
    async def test_inline_workflow_with_bad_structure(self, client, weather_workflow_id, weather_workflow_dict):
        weather_workflow_dict["nodes"].reverse()
        body = dict(EXECUTE_BODY, workflow=weather_workflow_dict)

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=body)

        assert response.status_code == 400
        assert "start node" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_engine_error_is_500(self, client, weather_workflow_id, weather_workflow_dict):
        weather_workflow_dict["edges"] = [
            e for e in weather_workflow_dict["edges"] if e["id"] != "e2"
        ]
        body = dict(EXECUTE_BODY, workflow=weather_workflow_dict)

        response = await client.post(f"/workflows/{weather_workflow_id}/execute", json=body)

        assert response.status_code == 500
        assert "has no outgoing edges" in response.json()["detail"]


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health_without_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"] == {"postgres": "not configured"}
        assert body["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_health_with_unreachable_database(self, app, client):
        class UnreachableDatabase:
            async def ping(self) -> bool:
                return False

        app.state.database = UnreachableDatabase()

        response = await client.get("/health")

        assert response.json()["status"] == "unhealthy"
        assert response.json()["services"] == {"postgres": "unhealthy"}
