"""Workflow definition storage."""

from flowgraph.storage.memory import InMemoryWorkflowRepository
from flowgraph.storage.repository import WorkflowRepository, parse_workflow_id

__all__ = [
    "InMemoryWorkflowRepository",
    "WorkflowRepository",
    "parse_workflow_id",
]
