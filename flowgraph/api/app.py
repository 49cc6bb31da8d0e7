"""
FastAPI application factory.

Creates and configures the workflow API application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowgraph import __version__
from flowgraph.api.routes import health_router, router
from flowgraph.config import Settings, get_settings
from flowgraph.nodes import WeatherClient, create_default_registry
from flowgraph.orchestrator import WorkflowEngine, WorkflowService
from flowgraph.storage.postgres import Database, PostgresWorkflowRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Wires database, repository, node registry, engine and service.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting workflow API...")

    database = Database(settings.postgres)
    await database.init()
    app.state.database = database
    logger.info("Database connection established")

    weather_client = WeatherClient(
        timeout=settings.weather.timeout,
        temperature_path=settings.weather.default_temperature_path,
    )
    registry = create_default_registry(weather_client=weather_client, settings=settings)
    engine = WorkflowEngine(registry, settings)
    app.state.workflow_service = WorkflowService(
        PostgresWorkflowRepository(database),
        engine,
        settings,
    )
    logger.info(f"Node registry ready: {', '.join(registry.registered_types)}")

    logger.info(f"Workflow API started - Environment: {settings.environment.value}")

    yield

    # Shutdown
    logger.info("Shutting down workflow API...")
    await weather_client.aclose()
    await database.close()
    logger.info("Workflow API shutdown complete")


async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400 rather than 422."""
    logger.error(f"Invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Graph-based workflow execution engine",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, invalid_request_handler)

    # Include routers
    app.include_router(router, prefix=settings.api.prefix)
    app.include_router(health_router, prefix=settings.api.prefix)

    return app
