"""
Workflow service.

Coordinates storage, validation and execution for the HTTP layer.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from flowgraph.config import Settings, get_settings
from flowgraph.core.errors import InvalidWorkflowError, WorkflowNotFoundError
from flowgraph.core.models import Workflow, WorkflowExecution, WorkflowInput
from flowgraph.core.validator import validate_workflow, validate_workflow_structure
from flowgraph.orchestrator.engine import WorkflowEngine
from flowgraph.storage.repository import WorkflowRepository

logger = logging.getLogger(__name__)


def workflows_equal(a: Workflow, b: Workflow) -> bool:
    """
    Compare two workflow definitions by the fields an editor changes.

    Nodes are matched by id on type, position and label; edges by id on
    endpoints, type, animation, route key and label.
    """
    if a.name != b.name:
        return False
    if len(a.nodes) != len(b.nodes) or len(a.edges) != len(b.edges):
        return False

    nodes_a = {node.id: node for node in a.nodes}
    for node in b.nodes:
        other = nodes_a.get(node.id)
        if other is None:
            return False
        if (
            other.type != node.type
            or other.position.x != node.position.x
            or other.position.y != node.position.y
            or other.label != node.label
        ):
            return False

    edges_a = {edge.id: edge for edge in a.edges}
    for edge in b.edges:
        other = edges_a.get(edge.id)
        if other is None:
            return False
        if (
            other.source != edge.source
            or other.target != edge.target
            or other.edge_type != edge.edge_type
            or other.animated != edge.animated
            or other.route_key != edge.route_key
            or other.label != edge.label
        ):
            return False

    return True


class WorkflowService:
    """
    Workflow operations exposed to the API.

    Hard errors (unknown workflow, invalid input or structure, engine
    errors) propagate as WorkflowError subclasses.
    """

    def __init__(
        self,
        repository: WorkflowRepository,
        engine: WorkflowEngine,
        settings: Optional[Settings] = None,
    ):
        self.repository = repository
        self.engine = engine
        self.settings = settings or get_settings()

    # ==================== Definitions ====================

    async def get_workflow(self, workflow_id: str) -> Workflow:
        """
        Get a stored workflow.

        Raises:
            WorkflowNotFoundError: If the id is unknown or not a UUID
        """
        workflow = await self.repository.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    async def create_workflow(self, workflow: Workflow) -> Workflow:
        """Validate structure and store a new workflow at version 1."""
        validate_workflow_structure(workflow.nodes, workflow.edges)
        created = await self.repository.create(workflow)
        logger.debug(f"Created workflow {created.id}")
        return created

    async def update_workflow(self, workflow: Workflow) -> Workflow:
        """Validate structure and replace a stored workflow, bumping its version."""
        validate_workflow_structure(workflow.nodes, workflow.edges)
        updated = await self.repository.update(workflow)
        logger.debug(f"Updated workflow {updated.id} to version {updated.version}")
        return updated

    # ==================== Execution ====================

    def _parse_inline_workflow(self, workflow_id: str, raw: dict[str, Any]) -> Workflow:
        try:
            workflow = Workflow.model_validate(raw)
        except ValidationError as e:
            raise InvalidWorkflowError(f"failed to parse workflow for ID {workflow_id}: {e}") from e

        if not workflow.id:
            workflow.id = workflow_id
        elif workflow.id != workflow_id:
            raise InvalidWorkflowError(
                f"inline workflow ID {workflow.id} does not match {workflow_id}"
            )
        return workflow

    async def process_workflow_input(
        self,
        workflow_id: str,
        workflow_input: WorkflowInput,
    ) -> Optional[Workflow]:
        """
        Reconcile an inline workflow definition with storage.

        Returns None when the input carries no definition. Otherwise the
        definition is validated and either returned as stored (unchanged),
        or written through an update or a create, then re-read.
        """
        if workflow_input.workflow is None:
            return None

        logger.debug(f"Processing inline workflow for ID {workflow_id}")
        workflow = self._parse_inline_workflow(workflow_id, workflow_input.workflow)
        validate_workflow(workflow)

        if not self.settings.engine.persist_inline_workflows:
            return workflow

        existing = await self.repository.get(workflow_id)
        if existing is not None:
            if workflows_equal(existing, workflow):
                logger.debug(f"No changes detected in workflow {workflow_id}, using stored copy")
                return existing
            await self.update_workflow(workflow)
        else:
            await self.create_workflow(workflow)

        return await self.get_workflow(workflow_id)

    async def execute_workflow(
        self,
        workflow_id: str,
        workflow_input: WorkflowInput,
        *,
        timeout: Optional[float] = None,
    ) -> WorkflowExecution:
        """
        Validate input, resolve the workflow and run it.

        Raises:
            InvalidInputError: If the input fails validation
            WorkflowNotFoundError: If no workflow can be resolved
            WorkflowStructureError: If the workflow graph is invalid
        """
        workflow_input.ensure_valid()

        workflow = await self.process_workflow_input(workflow_id, workflow_input)
        if workflow is None:
            workflow = await self.get_workflow(workflow_id)

        validate_workflow_structure(workflow.nodes, workflow.edges)
        return await self.engine.execute(workflow, workflow_input, timeout=timeout)
