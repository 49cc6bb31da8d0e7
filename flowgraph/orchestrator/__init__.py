"""Workflow execution and service layer."""

from flowgraph.orchestrator.engine import WorkflowEngine
from flowgraph.orchestrator.service import WorkflowService, workflows_equal

__all__ = ["WorkflowEngine", "WorkflowService", "workflows_equal"]
