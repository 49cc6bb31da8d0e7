"""Core domain models and business logic."""

from flowgraph.core.models import (
    EdgeDefinition,
    ExecutionStatus,
    ExecutionStep,
    NodeData,
    NodeDefinition,
    NodeType,
    Operator,
    Workflow,
    WorkflowExecution,
    WorkflowInput,
)
from flowgraph.core.state_machine import ExecutionState, ExecutionStateMachine
from flowgraph.core.validator import (
    WorkflowValidator,
    validate_workflow,
    validate_workflow_structure,
)

__all__ = [
    "EdgeDefinition",
    "ExecutionStatus",
    "ExecutionStep",
    "NodeData",
    "NodeDefinition",
    "NodeType",
    "Operator",
    "Workflow",
    "WorkflowExecution",
    "WorkflowInput",
    "ExecutionState",
    "ExecutionStateMachine",
    "WorkflowValidator",
    "validate_workflow",
    "validate_workflow_structure",
]
