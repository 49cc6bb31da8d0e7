"""
State machine for workflow execution runs.

Implements explicit state transitions with validation and history.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from flowgraph.core.errors import InvalidStateTransitionError
from flowgraph.core.models import ExecutionStatus, utcnow


class ExecutionState(str, Enum):
    """
    Engine-level states of one execution.

    State transitions:
    - INITIALIZING -> RUNNING -> COMPLETED
    - INITIALIZING -> RUNNING -> FAILED
    """

    INITIALIZING = "initializing"  # Node instances and routes being built
    RUNNING = "running"            # Traversal in progress
    COMPLETED = "completed"        # End node reached
    FAILED = "failed"              # A node failed; traversal stopped

    @property
    def status(self) -> ExecutionStatus:
        """Status reported on the execution record for this state."""
        if self == ExecutionState.COMPLETED:
            return ExecutionStatus.COMPLETED
        if self == ExecutionState.FAILED:
            return ExecutionStatus.FAILED
        return ExecutionStatus.RUNNING


class StateTransition(BaseModel):
    """Represents a state transition event."""

    from_state: str
    to_state: str
    timestamp: datetime = Field(default_factory=utcnow)
    reason: Optional[str] = None


class ExecutionStateMachine:
    """
    State machine for a single execution.

    Terminal states accept no further transitions.
    """

    # Valid state transitions: from_state -> [valid_to_states]
    VALID_TRANSITIONS: dict[ExecutionState, set[ExecutionState]] = {
        ExecutionState.INITIALIZING: {ExecutionState.RUNNING},
        ExecutionState.RUNNING: {ExecutionState.COMPLETED, ExecutionState.FAILED},
        ExecutionState.COMPLETED: set(),  # Terminal state
        ExecutionState.FAILED: set(),     # Terminal state
    }

    TERMINAL_STATES: set[ExecutionState] = {
        ExecutionState.COMPLETED,
        ExecutionState.FAILED,
    }

    def __init__(self, initial_state: ExecutionState = ExecutionState.INITIALIZING):
        self._state = initial_state
        self._history: list[StateTransition] = []

    @property
    def state(self) -> ExecutionState:
        """Get current state."""
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        """Get state transition history."""
        return self._history.copy()

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in self.TERMINAL_STATES

    def can_transition_to(self, to_state: ExecutionState) -> bool:
        """Check if transition to given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(
        self,
        to_state: ExecutionState,
        reason: Optional[str] = None,
    ) -> StateTransition:
        """
        Transition to a new state.

        Raises:
            InvalidStateTransitionError: If transition is not valid
        """
        if not self.can_transition_to(to_state):
            valid = sorted(s.value for s in self.VALID_TRANSITIONS.get(self._state, set()))
            raise InvalidStateTransitionError(
                self._state.value,
                to_state.value,
                f"Valid transitions: {valid}",
            )

        transition = StateTransition(
            from_state=self._state.value,
            to_state=to_state.value,
            reason=reason,
        )

        self._history.append(transition)
        self._state = to_state

        return transition
