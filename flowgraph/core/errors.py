"""
Exception hierarchy for the workflow engine.

Every exception raised here is a *hard* error: the workflow could not be run
and no execution record is produced. Node failures during a run are recorded
inside the execution record instead and never surface as exceptions.
"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for all workflow engine errors."""

    code: str = "WORKFLOW_ERROR"


# ==================== Lookup / Input Errors ====================

class WorkflowNotFoundError(WorkflowError):
    """Raised when a workflow id does not resolve to a stored workflow."""

    code = "WORKFLOW_NOT_FOUND"

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow not found: {workflow_id}")


class InvalidInputError(WorkflowError):
    """Raised when caller-supplied execution input is invalid."""

    code = "INVALID_INPUT"


class InvalidWorkflowError(WorkflowError):
    """Raised when a workflow definition cannot be parsed or is incomplete."""

    code = "INVALID_WORKFLOW"


# ==================== Structural Errors ====================

class WorkflowStructureError(WorkflowError):
    """Base class for structural violations found by the graph validator."""

    code = "INVALID_WORKFLOW_STRUCTURE"
    default_message = "invalid workflow structure"

    def __init__(self, message: Optional[str] = None, **details: object):
        self.details = details
        super().__init__(message or self.default_message)


class EmptyWorkflowError(WorkflowStructureError):
    code = "EMPTY_WORKFLOW"
    default_message = "workflow must have at least one node"


class MissingStartNodeError(WorkflowStructureError):
    code = "MISSING_START_NODE"
    default_message = "workflow must begin with a start node"


class MissingEndNodeError(WorkflowStructureError):
    code = "MISSING_END_NODE"
    default_message = "workflow must end with an end node"


class StartNodePositionError(WorkflowStructureError):
    code = "START_NODE_POSITION"
    default_message = "start node must be the first node in the workflow"


class EndNodePositionError(WorkflowStructureError):
    code = "END_NODE_POSITION"
    default_message = "end node must be the last node in the workflow"


class DuplicateNodeIdError(WorkflowStructureError):
    code = "DUPLICATE_NODE_ID"
    default_message = "duplicate node ID found"


class EmptyNodeIdError(WorkflowStructureError):
    code = "EMPTY_NODE_ID"
    default_message = "node ID cannot be empty"


class MissingNodeTypeError(WorkflowStructureError):
    code = "MISSING_NODE_TYPE"
    default_message = "node requires a type"


class DuplicateEdgeIdError(WorkflowStructureError):
    code = "DUPLICATE_EDGE_ID"
    default_message = "duplicate edge ID found"


class EmptyEdgeIdError(WorkflowStructureError):
    code = "EMPTY_EDGE_ID"
    default_message = "edge ID cannot be empty"


class InvalidEdgeConnectionError(WorkflowStructureError):
    code = "INVALID_EDGE_CONNECTION"
    default_message = "edge has invalid source or target"


class EdgeToUnknownNodeError(WorkflowStructureError):
    code = "EDGE_TO_UNKNOWN_NODE"
    default_message = "edge references undefined node"


# ==================== Node / Registry Errors ====================

class UnregisteredNodeTypeError(WorkflowError):
    """Raised when the registry has no factory for a node type."""

    code = "UNREGISTERED_NODE_TYPE"

    def __init__(self, node_type: str):
        self.node_type = node_type
        super().__init__(f"no factory registered for node type {node_type!r}")


class NodeConfigError(WorkflowError):
    """Raised when a node's own configuration is invalid."""

    code = "NODE_CONFIG_ERROR"

    def __init__(self, node_id: str, message: str):
        self.node_id = node_id
        super().__init__(f"node {node_id}: {message}")


# ==================== Traversal Errors ====================

class NodeNotFoundError(WorkflowError):
    """Raised when traversal reaches a node id with no instance."""

    code = "NODE_NOT_FOUND"

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"node {node_id} not found in workflow")


class NoOutgoingEdgeError(WorkflowError):
    """Raised when a non-terminal node has no route to follow."""

    code = "NO_OUTGOING_EDGE"

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"node {node_id} has no outgoing edges")


class StepLimitExceededError(WorkflowError):
    """Raised when a run exceeds the configured step limit."""

    code = "STEP_LIMIT_EXCEEDED"

    def __init__(self, limit: int, node_id: str):
        self.limit = limit
        self.node_id = node_id
        super().__init__(
            f"execution exceeded {limit} steps (next node {node_id}); "
            f"the workflow graph probably contains a cycle"
        )


class InvalidStateTransitionError(WorkflowError):
    """Raised when an invalid execution state transition is attempted."""

    code = "INVALID_STATE_TRANSITION"

    def __init__(self, from_state: str, to_state: str, message: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition from {from_state} to {to_state}"
            + (f": {message}" if message else "")
        )
