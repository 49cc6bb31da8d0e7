"""
Condition node: compares a prior node's sample with the caller's threshold.
"""

from typing import Any, Optional

from flowgraph.core.errors import NodeConfigError
from flowgraph.core.models import NodeDefinition, NodeType, Operator, utcnow
from flowgraph.nodes.base import (
    BaseNode,
    ExecutionContext,
    NodeInputs,
    NodeOutputs,
    NodeRoutes,
)
from flowgraph.nodes.weather import weather_emoji

OPERATOR_SYMBOLS = {
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
    Operator.EQUALS: "=",
    Operator.GREATER_THAN_OR_EQUAL: "≥",
    Operator.LESS_THAN_OR_EQUAL: "≤",
}


def evaluate(sample: float, operator: Optional[Operator], threshold: float) -> bool:
    """Apply an operator; an unrecognized operator is never met."""
    if operator == Operator.GREATER_THAN:
        return sample > threshold
    if operator == Operator.LESS_THAN:
        return sample < threshold
    if operator == Operator.EQUALS:
        return sample == threshold
    if operator == Operator.GREATER_THAN_OR_EQUAL:
        return sample >= threshold
    if operator == Operator.LESS_THAN_OR_EQUAL:
        return sample <= threshold
    return False


def operator_symbol(operator: Optional[Operator]) -> str:
    return OPERATOR_SYMBOLS.get(operator, ">")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConditionNode(BaseNode):
    """
    Routes to the "true" or "false" edge depending on the comparison.

    Metadata:
        sourceNode: node whose output carries the sample (default "weather-api")
        sampleField: key of the sample in that output (default "temperature")
        conditionExpression: free-form expression, display only
    """

    node_type = NodeType.CONDITION.value

    def __init__(self, definition: NodeDefinition, routes: Optional[NodeRoutes] = None):
        super().__init__(definition)
        routes = routes or NodeRoutes()
        self.true_route = routes.true_route
        self.false_route = routes.false_route
        self.condition_expression: str = self.metadata.get("conditionExpression") or ""
        self.source_node: str = self.metadata.get("sourceNode") or "weather-api"
        self.sample_field: str = self.metadata.get("sampleField") or "temperature"

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        outputs = NodeOutputs()

        source = inputs.prior_outputs.get(self.source_node)
        sample = source.data.get(self.sample_field) if source is not None else None
        if not _is_number(sample):
            return self._fail(outputs, "Failed to get temperature")
        temperature = float(sample)

        threshold = inputs.workflow_input.threshold
        raw_operator = inputs.workflow_input.operator
        operator = Operator.parse(raw_operator)

        condition_met = evaluate(temperature, operator, threshold)
        outputs.next_node_id = self.true_route if condition_met else self.false_route

        symbol = operator_symbol(operator)
        message = (
            f"Temperature {temperature:.1f}°C {symbol} {threshold:.1f}°C "
            f"{weather_emoji(temperature)} - condition {'met' if condition_met else 'not met'}"
        )

        return outputs.complete({
            "message": message,
            "conditionMet": condition_met,
            "conditionResult": {
                "expression": f"temperature {symbol} threshold",
                "result": condition_met,
                "temperature": temperature,
                "operator": raw_operator,
                "threshold": threshold,
            },
            "details": {
                "conditionType": "temperature",
                "evaluatedAt": utcnow().isoformat(),
            },
        })

    def validate(self) -> None:
        if not self.true_route or not self.false_route:
            raise NodeConfigError(
                self.id, "condition node requires both true and false routes"
            )
