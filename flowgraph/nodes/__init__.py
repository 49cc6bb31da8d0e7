"""Node contract, registry and built-in node types."""

from flowgraph.nodes.base import (
    BaseNode,
    ExecutionContext,
    NodeFactory,
    NodeInfo,
    NodeInputs,
    NodeOutputs,
    NodeRoutes,
)
from flowgraph.nodes.registry import (
    NodeRegistry,
    create_default_registry,
    register_builtin_nodes,
)
from flowgraph.nodes.weather import WeatherAPIError, WeatherClient

__all__ = [
    "BaseNode",
    "ExecutionContext",
    "NodeFactory",
    "NodeInfo",
    "NodeInputs",
    "NodeOutputs",
    "NodeRoutes",
    "NodeRegistry",
    "create_default_registry",
    "register_builtin_nodes",
    "WeatherAPIError",
    "WeatherClient",
]
