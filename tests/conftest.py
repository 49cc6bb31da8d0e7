"""
Pytest fixtures and configuration for tests.
"""

from typing import AsyncGenerator, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from flowgraph.config import Environment, Settings
from flowgraph.config.settings import EngineSettings
from flowgraph.core.models import Workflow, WorkflowInput
from flowgraph.mailer import Mailer, MailerError, StubMailer
from flowgraph.nodes import NodeRegistry, WeatherClient, create_default_registry
from flowgraph.orchestrator import WorkflowEngine, WorkflowService
from flowgraph.seed import WEATHER_ALERT_WORKFLOW_ID, weather_alert_workflow_dict
from flowgraph.storage import InMemoryWorkflowRepository


class WeatherStub:
    """
    Fake weather endpoint for httpx.MockTransport.

    Records every request URL and answers with the configured status and
    temperature (or a raw body when given).
    """

    def __init__(
        self,
        temperature: float = 25.5,
        status_code: int = 200,
        body: Optional[str] = None,
    ):
        self.temperature = temperature
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(
            self.status_code,
            json={"current_weather": {"temperature": self.temperature}},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        environment=Environment.TEST,
        debug=True,
        log_level="DEBUG",
    )


@pytest.fixture
def weather_workflow_dict() -> dict:
    """Wire-format weather alert workflow: start -> form -> weather-api -> condition -> email/end."""
    return weather_alert_workflow_dict()


@pytest.fixture
def weather_workflow(weather_workflow_dict) -> Workflow:
    workflow = Workflow.model_validate(weather_workflow_dict)
    workflow.version = 1
    return workflow


@pytest.fixture
def workflow_input() -> WorkflowInput:
    """Input that exceeds the threshold at the default stub temperature."""
    return WorkflowInput(
        name="Alice",
        email="alice@example.com",
        city="Sydney",
        threshold=20,
        operator="greater_than",
    )


@pytest.fixture
def weather_stub() -> WeatherStub:
    return WeatherStub()


@pytest_asyncio.fixture
async def weather_client(weather_stub) -> AsyncGenerator[WeatherClient, None]:
    client = WeatherClient(timeout=5.0, transport=weather_stub.transport)
    yield client
    await client.aclose()


@pytest.fixture
def stub_mailer() -> StubMailer:
    return StubMailer()


class UnreachableMailer(Mailer):
    """Mailer whose relay always refuses delivery."""

    def __init__(self, error: Exception):
        self.error = error
        self.attempts = 0

    def send(self, to, subject, body, variables):
        self.attempts += 1
        raise self.error


@pytest.fixture
def unreachable_mailer() -> UnreachableMailer:
    return UnreachableMailer(MailerError("smtp relay unreachable"))


@pytest.fixture
def registry(weather_client, stub_mailer, test_settings) -> NodeRegistry:
    return create_default_registry(
        weather_client=weather_client,
        mailer=stub_mailer,
        settings=test_settings,
    )


@pytest.fixture
def engine(registry, test_settings) -> WorkflowEngine:
    return WorkflowEngine(registry, test_settings)


@pytest.fixture
def make_engine(registry) -> Callable[..., WorkflowEngine]:
    """Build an engine with custom engine settings."""

    def _make(**engine_options) -> WorkflowEngine:
        settings = Settings(
            environment=Environment.TEST,
            engine=EngineSettings(**engine_options),
        )
        return WorkflowEngine(registry, settings)

    return _make


@pytest_asyncio.fixture
async def repository(weather_workflow) -> InMemoryWorkflowRepository:
    """In-memory repository seeded with the weather alert workflow."""
    repo = InMemoryWorkflowRepository()
    await repo.create(weather_workflow)
    return repo


@pytest.fixture
def service(repository, engine, test_settings) -> WorkflowService:
    return WorkflowService(repository, engine, test_settings)


@pytest.fixture
def weather_workflow_id() -> str:
    return WEATHER_ALERT_WORKFLOW_ID
