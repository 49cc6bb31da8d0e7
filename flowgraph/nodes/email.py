"""
Email node: sends an alert when the upstream condition was met.
"""

from typing import Any, Optional

from flowgraph.core.errors import NodeConfigError
from flowgraph.core.models import NodeDefinition, NodeType, utcnow
from flowgraph.mailer import EmailTemplate, Mailer, MailerError
from flowgraph.nodes.base import BaseNode, ExecutionContext, NodeInputs, NodeOutputs


class EmailNode(BaseNode):
    """
    Renders and dispatches an email through the configured mailer.

    Metadata:
        inputVariables: names looked up in prior outputs, execution order,
            first match wins
        emailTemplate: {subject, body} with {{name}} placeholders
        conditionNode: node whose result gates sending (default "condition")
        recipientNode: node whose output carries "email" (default "form")
    """

    node_type = NodeType.EMAIL.value

    def __init__(self, definition: NodeDefinition, mailer: Mailer):
        super().__init__(definition)
        self.mailer = mailer

        raw_variables = self.metadata.get("inputVariables")
        self.input_variables: list[str] = [
            v for v in raw_variables if isinstance(v, str)
        ] if isinstance(raw_variables, list) else []

        self.template = EmailTemplate.from_metadata(self.metadata.get("emailTemplate"))
        self.condition_node: str = self.metadata.get("conditionNode") or "condition"
        self.recipient_node: str = self.metadata.get("recipientNode") or "form"

    def _condition_met(self, inputs: NodeInputs) -> Optional[bool]:
        output = inputs.prior_outputs.get(self.condition_node)
        if output is None:
            return None
        met = output.data.get("conditionMet")
        if isinstance(met, bool):
            return met
        result = output.data.get("conditionResult")
        if isinstance(result, dict) and isinstance(result.get("result"), bool):
            return result["result"]
        return None

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        outputs = NodeOutputs()

        condition_met = self._condition_met(inputs)
        if condition_met is None:
            return self._fail(
                outputs, "Failed to get condition result", message="Failed to process email"
            )

        if not condition_met:
            return outputs.complete({
                "message": "Email not sent - condition not met",
                "details": {"reason": "Condition not met"},
            })

        recipient_output = inputs.prior_outputs.get(self.recipient_node)
        if recipient_output is None:
            return self._fail(
                outputs, "Failed to get form data", message="Failed to process email"
            )
        to = recipient_output.data.get("email")
        if not isinstance(to, str):
            return self._fail(
                outputs,
                "Failed to get email from form output",
                message="Failed to process email",
            )

        variables: dict[str, Any] = {}
        for name in self.input_variables:
            for output in inputs.prior_outputs.values():
                if name in output.data:
                    variables[name] = output.data[name]
                    break
            else:
                return self._fail(
                    outputs,
                    f"Missing required variable: {name}",
                    message="Failed to process email",
                )

        try:
            receipt = self.mailer.send(to, self.template.subject, self.template.body, variables)
        except (MailerError, OSError) as e:
            return self._fail(
                outputs, f"Failed to send email: {e}", message="Failed to process email"
            )

        return outputs.complete({
            "message": "Email sent successfully",
            "details": {"outputVariables": ["emailSent"]},
            "emailContent": {
                "to": to,
                "subject": receipt["subject"],
                "body": receipt["body"],
                "timestamp": utcnow().isoformat(),
            },
        })

    def validate(self) -> None:
        if not self.input_variables:
            raise NodeConfigError(self.id, "email node requires at least one input variable")
        if not self.template.subject or not self.template.body:
            raise NodeConfigError(
                self.id, "email node requires both subject and body templates"
            )
