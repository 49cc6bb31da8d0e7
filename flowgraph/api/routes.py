"""
FastAPI routes for the workflow API.

Implements:
- GET /workflows/:id - Get workflow definition
- POST /workflows/:id/execute - Run a workflow and return its execution record
- GET /health - Health check
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from flowgraph import __version__
from flowgraph.core.errors import (
    InvalidInputError,
    InvalidWorkflowError,
    WorkflowError,
    WorkflowNotFoundError,
    WorkflowStructureError,
)
from flowgraph.core.models import Workflow, WorkflowExecution, WorkflowInput
from flowgraph.orchestrator import WorkflowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["workflows"])
health_router = APIRouter(tags=["health"])


# ==================== Response Models ====================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]


# ==================== Dependency Injection ====================

async def get_workflow_service(request: Request) -> WorkflowService:
    """Get workflow service from app state."""
    return request.app.state.workflow_service


def to_http_error(error: WorkflowError) -> HTTPException:
    """Map an engine error onto an HTTP status."""
    if isinstance(error, WorkflowNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workflow not found",
        )
    if isinstance(error, (InvalidInputError, InvalidWorkflowError, WorkflowStructureError)):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(error),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to execute workflow: {error}",
    )


# ==================== Routes ====================

@router.get(
    "/{workflow_id}",
    response_model=Workflow,
    summary="Get workflow",
    description="Retrieve a workflow definition with its nodes and edges.",
)
async def get_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> Workflow:
    logger.debug(f"Returning workflow definition for id {workflow_id}")
    try:
        return await service.get_workflow(workflow_id)
    except WorkflowError as e:
        logger.error(f"Failed to get workflow {workflow_id}: {e}")
        raise to_http_error(e) from e


@router.post(
    "/{workflow_id}/execute",
    response_model=WorkflowExecution,
    summary="Execute workflow",
    description=(
        "Run a workflow synchronously. Completed and failed runs both return "
        "200 with the execution record; hard errors map to 400/404/500."
    ),
)
async def execute_workflow(
    workflow_id: str,
    workflow_input: WorkflowInput,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowExecution:
    logger.debug(f"Handling workflow execution for id {workflow_id}")
    try:
        return await service.execute_workflow(workflow_id, workflow_input)
    except WorkflowError as e:
        logger.error(f"Failed to execute workflow {workflow_id}: {e}")
        raise to_http_error(e) from e


# ==================== Health Check Routes ====================

@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the API and its database.",
)
async def health_check(request: Request) -> HealthResponse:
    """Check health of all services."""
    services = {}

    database = getattr(request.app.state, "database", None)
    if database is None:
        services["postgres"] = "not configured"
    elif await database.ping():
        services["postgres"] = "healthy"
    else:
        services["postgres"] = "unhealthy"

    overall_status = "unhealthy" if "unhealthy" in services.values() else "healthy"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )
