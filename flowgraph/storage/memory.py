"""In-memory implementation of the workflow repository."""

from typing import Optional
from uuid import uuid4

from flowgraph.core.errors import InvalidWorkflowError, WorkflowNotFoundError
from flowgraph.core.models import Workflow, utcnow
from flowgraph.storage.repository import WorkflowRepository, parse_workflow_id


class InMemoryWorkflowRepository(WorkflowRepository):
    """Store workflows in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._workflows: dict[str, Workflow] = {}

    async def create(self, workflow: Workflow) -> Workflow:
        workflow_id = workflow.id or str(uuid4())
        key = parse_workflow_id(workflow_id)
        if key is None:
            raise InvalidWorkflowError(f"workflow id must be a UUID: {workflow_id}")

        now = utcnow()
        stored = workflow.model_copy(
            deep=True,
            update={"id": workflow_id, "version": 1, "created_at": now, "updated_at": now},
        )
        self._workflows[str(key)] = stored
        return stored.model_copy(deep=True)

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        key = parse_workflow_id(workflow_id)
        if key is None:
            return None
        wf = self._workflows.get(str(key))
        return wf.model_copy(deep=True) if wf else None

    async def update(self, workflow: Workflow) -> Workflow:
        key = parse_workflow_id(workflow.id)
        existing = self._workflows.get(str(key)) if key else None
        if existing is None:
            raise WorkflowNotFoundError(workflow.id)

        stored = workflow.model_copy(
            deep=True,
            update={
                "version": existing.version + 1,
                "created_at": existing.created_at,
                "updated_at": utcnow(),
            },
        )
        self._workflows[str(key)] = stored
        return stored.model_copy(deep=True)

    async def delete(self, workflow_id: str) -> bool:
        key = parse_workflow_id(workflow_id)
        if key is None:
            return False
        return self._workflows.pop(str(key), None) is not None
