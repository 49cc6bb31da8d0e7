"""Start node: entry point of every workflow."""

from flowgraph.core.models import NodeType
from flowgraph.nodes.base import BaseNode, ExecutionContext, NodeInputs, NodeOutputs


class StartNode(BaseNode):
    """Completes immediately with no data."""

    node_type = NodeType.START.value

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        return NodeOutputs().complete()
