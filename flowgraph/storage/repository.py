"""Repository abstraction for workflow definition persistence."""

from typing import Optional, Protocol
from uuid import UUID

from flowgraph.core.models import Workflow


def parse_workflow_id(workflow_id: str) -> Optional[UUID]:
    """Parse a workflow id, None if it is not a UUID."""
    try:
        return UUID(str(workflow_id))
    except ValueError:
        return None


class WorkflowRepository(Protocol):
    """Protocol for workflow storage backends.

    Ids are UUID strings. A malformed id behaves like an unknown one.
    """

    async def create(self, workflow: Workflow) -> Workflow:
        """Persist a new workflow at version 1, assigning an id if it has none."""

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        """Load a workflow with its nodes and edges, None if unknown."""

    async def update(self, workflow: Workflow) -> Workflow:
        """Replace name, nodes and edges and bump the version.

        Raises WorkflowNotFoundError if the workflow does not exist.
        """

    async def delete(self, workflow_id: str) -> bool:
        """Delete a workflow, False if it did not exist."""
