"""
Domain models for the workflow engine.

All models use Pydantic for validation and serialization. Attributes are
snake_case in Python and camelCase on the wire.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from flowgraph.core.errors import InvalidInputError


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def duration_ms(started_at: Optional[datetime], ended_at: Optional[datetime]) -> int:
    """Milliseconds between two timestamps, 0 if either is missing."""
    if started_at is None or ended_at is None:
        return 0
    return max(0, int((ended_at - started_at).total_seconds() * 1000))


class NodeType(str, Enum):
    """Built-in node types."""

    START = "start"
    FORM = "form"
    INTEGRATION = "integration"
    CONDITION = "condition"
    EMAIL = "email"
    END = "end"


class Operator(str, Enum):
    """Comparison operators understood by condition nodes."""

    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EQUALS = "equals"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"

    @classmethod
    def parse(cls, value: Any) -> Optional["Operator"]:
        """Return the operator for an exact tag, or None if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None


class ExecutionStatus(str, Enum):
    """Status of a workflow execution or of a single step."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Workflow Definition ====================

class Position(CamelModel):
    """Canvas coordinates of a node (display only)."""

    x: float = 0.0
    y: float = 0.0


class NodeData(CamelModel):
    """Display text and per-type configuration of a node."""

    label: str = ""
    description: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: Any) -> Any:
        return {} if v is None else v


class NodeDefinition(CamelModel):
    """
    Persisted definition of a single node.

    ``type`` is kept as a plain string so unknown tags survive parsing and are
    reported by the registry rather than by model validation. Empty ids and
    types are likewise accepted here and rejected by the graph validator.
    """

    id: str = ""
    type: str = ""
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        if isinstance(v, NodeType):
            return v.value
        return "" if v is None else v

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def description(self) -> str:
        return self.data.description

    @property
    def metadata(self) -> dict[str, Any]:
        return self.data.metadata


class EdgeStyle(CamelModel):
    """Visual style of an edge."""

    stroke: str = "#000000"
    stroke_width: int = 1


class LabelStyle(CamelModel):
    """Visual style of an edge label."""

    fill: Optional[str] = None
    font_weight: Optional[str] = None


class EdgeDefinition(CamelModel):
    """
    Persisted definition of a directed edge.

    ``route_key`` (``sourceHandle`` on the wire) is empty for unconditional
    edges and ``"true"`` / ``"false"`` for edges leaving a condition node.
    """

    id: str = ""
    source: str = ""
    target: str = ""
    route_key: str = Field(default="", alias="sourceHandle")
    edge_type: str = Field(default="smoothstep", alias="type")
    animated: bool = False
    label: str = ""
    style: EdgeStyle = Field(default_factory=EdgeStyle)
    label_style: Optional[LabelStyle] = None

    @field_validator("route_key", "label", mode="before")
    @classmethod
    def default_strings(cls, v: Any) -> Any:
        return "" if v is None else v


class Workflow(CamelModel):
    """A workflow definition: ordered nodes plus edges."""

    id: str = ""
    name: str = ""
    version: int = 0
    nodes: list[NodeDefinition] = Field(default_factory=list)
    edges: list[EdgeDefinition] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, exclude=True)
    updated_at: Optional[datetime] = Field(default=None, exclude=True)

    def get_node(self, node_id: str) -> Optional[NodeDefinition]:
        """Get node definition by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


# ==================== Execution Input ====================

class WorkflowInput(CamelModel):
    """
    Caller-supplied input for one execution.

    ``workflow`` optionally carries an inline workflow definition that is
    used instead of the stored graph.
    """

    name: str = ""
    email: str = ""
    city: str = ""
    threshold: float = 0.0
    operator: str = ""
    workflow: Optional[dict[str, Any]] = None

    def ensure_valid(self) -> None:
        """
        Check the input for execution.

        Raises:
            InvalidInputError: On the first violated rule
        """
        if not self.name:
            raise InvalidInputError("name is required")
        if not self.email:
            raise InvalidInputError("email is required")
        if "@" not in self.email or "." not in self.email:
            raise InvalidInputError("invalid email format")
        if not self.city:
            raise InvalidInputError("city is required")
        if Operator.parse(self.operator) is None:
            raise InvalidInputError(f"invalid operator: {self.operator}")
        if self.threshold < 0:
            raise InvalidInputError("temperature cannot be negative")
        if self.threshold > 100:
            raise InvalidInputError("temperature must be below 100°C")


# ==================== Execution Record ====================

class ExecutionStep(CamelModel):
    """Recorded outcome of executing a single node."""

    step_number: int
    node_id: str
    node_type: str
    status: ExecutionStatus
    label: str = ""
    description: str = ""
    duration: int = Field(default=0, ge=0, description="Duration in milliseconds")
    output: dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class WorkflowExecution(CamelModel):
    """One run of a workflow, with its ordered steps."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    workflow_id: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    total_duration: int = Field(default=0, ge=0, description="Duration in milliseconds")
    steps: list[ExecutionStep] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == ExecutionStatus.COMPLETED

    @property
    def failed_step(self) -> Optional[ExecutionStep]:
        """The step that stopped a failed run, if any."""
        for step in self.steps:
            if step.status == ExecutionStatus.FAILED:
                return step
        return None

    def finish(self, status: ExecutionStatus) -> None:
        """Stamp the final status, end time and total duration."""
        self.status = status
        self.end_time = utcnow()
        self.total_duration = duration_ms(self.start_time, self.end_time)
