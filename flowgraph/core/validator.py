"""
Structural validation of workflow graphs.

Checks run in a fixed order and stop at the first violation. Each violation
raises a distinct WorkflowStructureError subclass carrying a stable code.
"""

from typing import Optional, Sequence

from flowgraph.core.errors import (
    DuplicateEdgeIdError,
    DuplicateNodeIdError,
    EdgeToUnknownNodeError,
    EmptyEdgeIdError,
    EmptyNodeIdError,
    EmptyWorkflowError,
    EndNodePositionError,
    InvalidEdgeConnectionError,
    InvalidWorkflowError,
    MissingEndNodeError,
    MissingNodeTypeError,
    MissingStartNodeError,
    StartNodePositionError,
)
from flowgraph.core.models import EdgeDefinition, NodeDefinition, NodeType, Workflow


class WorkflowValidator:
    """
    Validates the structure of a node/edge list before it is stored or run.

    Invariants:
    - at least one node
    - node ids are non-empty and unique, every node has a type
    - exactly one start node, at index 0
    - exactly one end node, at the last index
    - edge ids are non-empty and unique
    - every edge has a non-empty source and target that name existing nodes
    """

    def __init__(
        self,
        nodes: Sequence[NodeDefinition],
        edges: Sequence[EdgeDefinition],
    ):
        self.nodes = nodes
        self.edges = edges
        self._node_ids: set[str] = set()

    def validate(self) -> None:
        """
        Run every check in order.

        Raises:
            WorkflowStructureError: The first violation found
        """
        if not self.nodes:
            raise EmptyWorkflowError()

        start_index, end_index = self._validate_nodes()
        self._validate_terminals(start_index, end_index)
        self._validate_edges()

    def _validate_nodes(self) -> tuple[Optional[int], Optional[int]]:
        """
        Check node ids and types, locating the start and end nodes.

        The last start node and the first end node are reported so that a
        second node of either kind fails the position checks.
        """
        start_index: Optional[int] = None
        end_index: Optional[int] = None

        for i, node in enumerate(self.nodes):
            if node.type == NodeType.START.value:
                start_index = i
            if node.type == NodeType.END.value and end_index is None:
                end_index = i

            if not node.id:
                raise EmptyNodeIdError(index=i)
            if node.id in self._node_ids:
                raise DuplicateNodeIdError(
                    f"duplicate node ID found: {node.id}",
                    node_id=node.id,
                )
            self._node_ids.add(node.id)

            if not node.type:
                raise MissingNodeTypeError(
                    f"node {node.id} requires a type",
                    node_id=node.id,
                )

        return start_index, end_index

    def _validate_terminals(
        self,
        start_index: Optional[int],
        end_index: Optional[int],
    ) -> None:
        """Check presence and position of the start and end nodes."""
        if start_index is None:
            raise MissingStartNodeError()
        if end_index is None:
            raise MissingEndNodeError()
        if start_index != 0:
            raise StartNodePositionError(index=start_index)
        if end_index != len(self.nodes) - 1:
            raise EndNodePositionError(index=end_index)

    def _validate_edges(self) -> None:
        """Check edge ids and that every edge connects existing nodes."""
        edge_ids: set[str] = set()

        for edge in self.edges:
            if not edge.id:
                raise EmptyEdgeIdError()
            if edge.id in edge_ids:
                raise DuplicateEdgeIdError(
                    f"duplicate edge ID found: {edge.id}",
                    edge_id=edge.id,
                )
            edge_ids.add(edge.id)

            if not edge.source or not edge.target:
                raise InvalidEdgeConnectionError(
                    f"edge {edge.id} must have non-empty source and target",
                    edge_id=edge.id,
                )
            if edge.source not in self._node_ids:
                raise EdgeToUnknownNodeError(
                    f"edge {edge.id} references undefined source node {edge.source}",
                    edge_id=edge.id,
                    node_id=edge.source,
                )
            if edge.target not in self._node_ids:
                raise EdgeToUnknownNodeError(
                    f"edge {edge.id} references undefined target node {edge.target}",
                    edge_id=edge.id,
                    node_id=edge.target,
                )


def validate_workflow_structure(
    nodes: Sequence[NodeDefinition],
    edges: Sequence[EdgeDefinition],
) -> None:
    """
    Validate a node/edge list.

    Raises:
        WorkflowStructureError: The first violation found
    """
    WorkflowValidator(nodes, edges).validate()


def validate_workflow(workflow: Workflow) -> None:
    """
    Validate a complete workflow definition: its name and its structure.

    Raises:
        InvalidWorkflowError: If the workflow has no name
        WorkflowStructureError: The first structural violation found
    """
    if not workflow.name:
        raise InvalidWorkflowError("workflow requires a name")

    validate_workflow_structure(workflow.nodes, workflow.edges)
