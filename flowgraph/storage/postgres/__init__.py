"""PostgreSQL storage layer."""

from flowgraph.storage.postgres.database import Database
from flowgraph.storage.postgres.models import (
    Base,
    WorkflowEdgeModel,
    WorkflowModel,
    WorkflowNodeModel,
)
from flowgraph.storage.postgres.repository import PostgresWorkflowRepository

__all__ = [
    "Base",
    "Database",
    "PostgresWorkflowRepository",
    "WorkflowEdgeModel",
    "WorkflowModel",
    "WorkflowNodeModel",
]
