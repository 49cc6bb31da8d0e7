"""End node: terminates the traversal."""

from flowgraph.core.models import NodeType
from flowgraph.nodes.base import BaseNode, ExecutionContext, NodeInputs, NodeOutputs


class EndNode(BaseNode):
    """Completes with a closing summary."""

    node_type = NodeType.END.value

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        return NodeOutputs().complete(
            {"summary": {"message": "Workflow execution finished"}}
        )
