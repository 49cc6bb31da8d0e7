"""
Workflow execution engine.

Runs a workflow graph one node at a time:
- Node instantiation through the registry
- Route table construction from the edge list
- Sequential traversal from the start node
- Step recording and execution state management
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from flowgraph.config import Settings, get_settings
from flowgraph.core.errors import (
    MissingStartNodeError,
    NodeNotFoundError,
    NoOutgoingEdgeError,
    StepLimitExceededError,
    WorkflowError,
)
from flowgraph.core.models import (
    ExecutionStatus,
    ExecutionStep,
    NodeType,
    Workflow,
    WorkflowExecution,
    WorkflowInput,
    duration_ms,
)
from flowgraph.core.state_machine import ExecutionState, ExecutionStateMachine
from flowgraph.nodes.base import (
    BaseNode,
    ExecutionContext,
    NodeInputs,
    NodeOutputs,
    NodeRoutes,
)
from flowgraph.nodes.registry import NodeRegistry

logger = logging.getLogger(__name__)

# Route keys used on edges leaving a condition node
TRUE_ROUTE = "true"
FALSE_ROUTE = "false"
DEFAULT_ROUTE = ""


@dataclass
class ExecutionPlan:
    """Node instances and routing table built for one run."""

    nodes: dict[str, BaseNode] = field(default_factory=dict)
    # source node id -> route key -> target node id
    routes: dict[str, dict[str, str]] = field(default_factory=dict)
    start_node_id: str = ""


class WorkflowEngine:
    """
    Executes workflow graphs.

    Node failures end the run with a FAILED record. Structural problems met
    during traversal (unknown node, missing route, step limit) raise.
    """

    def __init__(
        self,
        registry: NodeRegistry,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry
        self.settings = settings or get_settings()

    async def execute(
        self,
        workflow: Workflow,
        workflow_input: WorkflowInput,
        *,
        timeout: Optional[float] = None,
    ) -> WorkflowExecution:
        """
        Run a workflow from its start node to its end node.

        Args:
            workflow: Workflow definition to run
            workflow_input: Caller-supplied input
            timeout: Overall deadline in seconds for blocking node I/O

        Returns:
            WorkflowExecution with status COMPLETED or FAILED

        Raises:
            WorkflowError: If the graph cannot be instantiated or traversed
        """
        execution = WorkflowExecution(
            workflow_id=workflow.id,
            metadata={
                "workflowVersion": workflow.version,
                "triggeredBy": workflow_input.name,
            },
        )
        state = ExecutionStateMachine()
        ctx = ExecutionContext(
            timeout=timeout,
            workflow_id=workflow.id,
            execution_id=execution.id,
        )

        logger.info(f"Starting execution {execution.id} of workflow {workflow.id}")

        plan = self._initialize(workflow)
        state.transition(ExecutionState.RUNNING)

        node_data: dict[str, Any] = {}
        prior_outputs: dict[str, NodeOutputs] = {}
        max_steps = self.settings.engine.max_steps
        current_id = plan.start_node_id

        while True:
            if max_steps is not None and len(execution.steps) >= max_steps:
                raise StepLimitExceededError(max_steps, current_id)

            node = plan.nodes.get(current_id)
            if node is None:
                raise NodeNotFoundError(current_id)

            inputs = NodeInputs(
                workflow_input=workflow_input,
                node_data=node_data,
                prior_outputs=prior_outputs,
            )
            outputs = await node.execute(ctx, inputs)

            step = self._create_step(node, outputs, len(execution.steps) + 1)
            execution.steps.append(step)
            prior_outputs[current_id] = outputs

            logger.debug(
                f"Execution {execution.id} step {step.step_number}: "
                f"{current_id} ({node.node_type}) -> {step.status.value}"
            )

            if outputs.failed:
                state.transition(ExecutionState.FAILED, reason=step.error)
                break

            if node.node_type == NodeType.END.value:
                state.transition(ExecutionState.COMPLETED)
                break

            current_id = self._find_next_node(node, outputs, plan.routes)

        execution.finish(state.state.status)
        logger.info(
            f"Execution {execution.id} finished: {execution.status.value} "
            f"after {len(execution.steps)} steps in {execution.total_duration}ms"
        )
        return execution

    def _initialize(self, workflow: Workflow) -> ExecutionPlan:
        """
        Build node instances and the routing table.

        Routes are built first so that branching nodes receive their targets
        at construction time.
        """
        plan = ExecutionPlan(routes=self._build_routes(workflow))

        for definition in workflow.nodes:
            source_routes = plan.routes.get(definition.id, {})
            routes = NodeRoutes(
                true_route=source_routes.get(TRUE_ROUTE),
                false_route=source_routes.get(FALSE_ROUTE),
            )
            try:
                node = self.registry.create(definition, routes)
            except WorkflowError:
                logger.error(f"Failed to create node {definition.id} ({definition.type})")
                raise

            if self.settings.engine.strict_node_validation:
                node.validate()

            plan.nodes[definition.id] = node
            if node.node_type == NodeType.START.value:
                plan.start_node_id = definition.id

        if not plan.start_node_id:
            raise MissingStartNodeError("no start node found in workflow")

        return plan

    def _build_routes(self, workflow: Workflow) -> dict[str, dict[str, str]]:
        routes: dict[str, dict[str, str]] = {}
        for edge in workflow.edges:
            source_routes = routes.setdefault(edge.source, {})
            if edge.route_key in source_routes:
                logger.warning(
                    f"Workflow {workflow.id}: edge {edge.id} overrides route "
                    f"{edge.source}[{edge.route_key!r}] -> {source_routes[edge.route_key]}"
                )
            source_routes[edge.route_key] = edge.target
        return routes

    def _create_step(
        self,
        node: BaseNode,
        outputs: NodeOutputs,
        step_number: int,
    ) -> ExecutionStep:
        """Record a node's outcome; label and description are read after execution."""
        info = node.get_base_info()
        status = ExecutionStatus.FAILED if outputs.failed else ExecutionStatus.COMPLETED

        error = outputs.error
        if error is None and isinstance(outputs.data.get("error"), str):
            error = outputs.data["error"]

        return ExecutionStep(
            step_number=step_number,
            node_id=info.id,
            node_type=node.node_type,
            status=status,
            label=info.label,
            description=info.description,
            duration=duration_ms(outputs.started_at, outputs.ended_at),
            output=outputs.data,
            timestamp=outputs.started_at,
            error=error,
            started_at=outputs.started_at,
            ended_at=outputs.ended_at,
        )

    def _find_next_node(
        self,
        node: BaseNode,
        outputs: NodeOutputs,
        routes: dict[str, dict[str, str]],
    ) -> str:
        """
        Choose the next node id.

        Order: explicit next_node_id, then the condition route key,
        then the unconditional route.
        """
        if outputs.next_node_id:
            return outputs.next_node_id

        source_routes = routes.get(node.id, {})

        if node.node_type == NodeType.CONDITION.value:
            route_key = TRUE_ROUTE if outputs.data.get("conditionMet") is True else FALSE_ROUTE
            if route_key in source_routes:
                return source_routes[route_key]

        if DEFAULT_ROUTE in source_routes:
            return source_routes[DEFAULT_ROUTE]

        raise NoOutgoingEdgeError(node.id)
