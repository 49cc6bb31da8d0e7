"""
Node contract shared by every node variant.

A node is built from its persisted definition once per execution, runs once
per visit, and reports its result as NodeOutputs. Expected failures are
reported through a failed NodeOutputs; exceptions escaping execute() are
treated by the engine as hard errors.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from flowgraph.core.models import (
    ExecutionStatus,
    NodeDefinition,
    WorkflowInput,
    utcnow,
)

logger = logging.getLogger(__name__)


@dataclass
class NodeInfo:
    """Identity and display text of a node, read after execution."""

    id: str
    label: str
    description: str


@dataclass
class NodeRoutes:
    """Route targets of a branching node, resolved from the edge list."""

    true_route: Optional[str] = None
    false_route: Optional[str] = None


class ExecutionContext:
    """
    Per-execution context passed to every node.

    Carries the caller's deadline. Nodes doing blocking I/O bound their wait
    by remaining().
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        workflow_id: Optional[str] = None,
        execution_id: Optional[str] = None,
    ):
        self.timeout = timeout
        self.workflow_id = workflow_id
        self.execution_id = execution_id
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


@dataclass
class NodeInputs:
    """
    Everything a node can read while executing.

    node_data is a scratch bag shared by every node of one execution; it
    starts empty. prior_outputs maps node id to that node's NodeOutputs in
    execution order.
    """

    workflow_input: WorkflowInput
    node_data: dict[str, Any] = field(default_factory=dict)
    prior_outputs: dict[str, "NodeOutputs"] = field(default_factory=dict)


@dataclass
class NodeOutputs:
    """Result of one node execution."""

    data: dict[str, Any] = field(default_factory=dict)
    status: ExecutionStatus = ExecutionStatus.RUNNING
    started_at: datetime = field(default_factory=utcnow)
    ended_at: Optional[datetime] = None
    next_node_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == ExecutionStatus.FAILED

    def complete(self, data: Optional[dict[str, Any]] = None) -> "NodeOutputs":
        """Mark the outputs completed, optionally replacing the data."""
        if data is not None:
            self.data = data
        self.status = ExecutionStatus.COMPLETED
        self.ended_at = utcnow()
        return self

    def fail(self, message: str, /, **extra: Any) -> "NodeOutputs":
        """Mark the outputs failed with a human-readable message."""
        self.data.update(extra)
        self.data["error"] = message
        self.error = message
        self.status = ExecutionStatus.FAILED
        self.ended_at = utcnow()
        return self


class BaseNode(ABC):
    """
    Base class for workflow nodes.

    Subclasses set node_type and implement execute().
    """

    node_type: str = ""

    def __init__(self, definition: NodeDefinition):
        self.id = definition.id
        self.label = definition.label
        self.description = definition.description
        self.metadata = dict(definition.metadata)

    @abstractmethod
    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        """
        Run the node.

        Args:
            ctx: Execution context with the caller deadline
            inputs: Workflow input, shared node data and prior outputs

        Returns:
            NodeOutputs with status completed or failed
        """
        pass

    def validate(self) -> None:
        """
        Check the node's own configuration.

        Raises:
            NodeConfigError: If the configuration is incomplete
        """
        return None

    def get_base_info(self) -> NodeInfo:
        return NodeInfo(id=self.id, label=self.label, description=self.description)

    def _fail(self, outputs: NodeOutputs, message: str, /, **extra: Any) -> NodeOutputs:
        logger.warning(f"Node {self.id} ({self.node_type}) failed: {message}")
        return outputs.fail(message, **extra)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


NodeFactory = Callable[[NodeDefinition, NodeRoutes], BaseNode]
