"""Form node: exposes the caller's input to downstream nodes."""

from flowgraph.core.models import NodeType
from flowgraph.nodes.base import BaseNode, ExecutionContext, NodeInputs, NodeOutputs


class FormNode(BaseNode):
    """
    Copies the workflow input into its output.

    Downstream nodes read name, email and city from the top level of this
    node's data; formData holds the full submission.
    """

    node_type = NodeType.FORM.value

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        outputs = NodeOutputs()
        submitted = inputs.workflow_input

        form_data = {
            "name": submitted.name,
            "email": submitted.email,
            "city": submitted.city,
            "threshold": submitted.threshold,
            "operator": submitted.operator,
        }

        return outputs.complete({
            "message": "Form data processed successfully",
            "formData": form_data,
            "details": {
                "formType": self.label or "user_input",
                "fieldCount": len(form_data),
            },
            "name": submitted.name,
            "email": submitted.email,
            "city": submitted.city,
        })
