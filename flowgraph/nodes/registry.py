"""
Node registry: maps node type tags to factories.
"""

import logging
from typing import Optional

from flowgraph.config import Settings, get_settings
from flowgraph.core.errors import UnregisteredNodeTypeError
from flowgraph.core.models import NodeDefinition, NodeType
from flowgraph.mailer import Mailer, StubMailer
from flowgraph.nodes.base import BaseNode, NodeFactory, NodeRoutes
from flowgraph.nodes.condition import ConditionNode
from flowgraph.nodes.email import EmailNode
from flowgraph.nodes.end import EndNode
from flowgraph.nodes.form import FormNode
from flowgraph.nodes.integration import IntegrationNode
from flowgraph.nodes.start import StartNode
from flowgraph.nodes.weather import WeatherClient

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Registry of node factories keyed by type tag.

    Registering a tag twice replaces the earlier factory.
    """

    def __init__(self):
        self._factories: dict[str, NodeFactory] = {}

    def register(self, node_type: str, factory: NodeFactory) -> None:
        key = node_type.value if isinstance(node_type, NodeType) else node_type
        if key in self._factories:
            logger.debug(f"Replacing factory for node type {key}")
        self._factories[key] = factory

    def is_registered(self, node_type: str) -> bool:
        return node_type in self._factories

    @property
    def registered_types(self) -> list[str]:
        return sorted(self._factories)

    def create(
        self,
        definition: NodeDefinition,
        routes: Optional[NodeRoutes] = None,
    ) -> BaseNode:
        """
        Build a node instance from its definition.

        Raises:
            UnregisteredNodeTypeError: If no factory is registered for the type
            NodeConfigError: If the factory rejects the definition
        """
        factory = self._factories.get(definition.type)
        if factory is None:
            raise UnregisteredNodeTypeError(definition.type)
        return factory(definition, routes or NodeRoutes())


def register_builtin_nodes(
    registry: NodeRegistry,
    *,
    weather_client: WeatherClient,
    mailer: Optional[Mailer] = None,
    settings: Optional[Settings] = None,
) -> NodeRegistry:
    """
    Register the six built-in node types.

    The weather client is owned by the caller, which must aclose() it. A
    stub mailer is built from settings when none is passed.
    """
    if mailer is None:
        settings = settings or get_settings()
        mailer = StubMailer(from_address=settings.mailer.from_address)

    registry.register(NodeType.START, lambda d, r: StartNode(d))
    registry.register(NodeType.FORM, lambda d, r: FormNode(d))
    registry.register(NodeType.INTEGRATION, lambda d, r: IntegrationNode(d, weather_client))
    registry.register(NodeType.CONDITION, lambda d, r: ConditionNode(d, r))
    registry.register(NodeType.EMAIL, lambda d, r: EmailNode(d, mailer))
    registry.register(NodeType.END, lambda d, r: EndNode(d))
    return registry


def create_default_registry(
    *,
    weather_client: WeatherClient,
    mailer: Optional[Mailer] = None,
    settings: Optional[Settings] = None,
) -> NodeRegistry:
    """Create a registry with every built-in node type."""
    return register_builtin_nodes(
        NodeRegistry(),
        weather_client=weather_client,
        mailer=mailer,
        settings=settings,
    )
