"""
Unit tests for the node registry.
"""

import pytest

from flowgraph.core.errors import NodeConfigError, UnregisteredNodeTypeError
from flowgraph.core.models import NodeDefinition, NodeType
from flowgraph.nodes import NodeRegistry, NodeRoutes, create_default_registry
from flowgraph.nodes.condition import ConditionNode
from flowgraph.nodes.end import EndNode
from flowgraph.nodes.start import StartNode


class TestNodeRegistry:
    """Tests for NodeRegistry."""

    def test_builtin_types(self, registry):
        assert registry.registered_types == sorted(t.value for t in NodeType)

    def test_unregistered_type(self, registry):
        with pytest.raises(UnregisteredNodeTypeError) as exc_info:
            registry.create(NodeDefinition(id="hook", type="webhook"))
        assert exc_info.value.node_type == "webhook"

    def test_create_passes_routes(self, registry):
        node = registry.create(
            NodeDefinition(id="check", type="condition"),
            NodeRoutes(true_route="a", false_route="b"),
        )
        assert isinstance(node, ConditionNode)
        assert (node.true_route, node.false_route) == ("a", "b")

    def test_create_without_routes(self, registry):
        node = registry.create(NodeDefinition(id="check", type="condition"))
        assert node.true_route is None

    def test_last_registration_wins(self):
        registry = NodeRegistry()
        registry.register(NodeType.START, lambda d, r: StartNode(d))
        registry.register("start", lambda d, r: EndNode(d))

        node = registry.create(NodeDefinition(id="s", type="start"))

        assert isinstance(node, EndNode)
        assert registry.registered_types == ["start"]

    def test_custom_type(self):
        registry = NodeRegistry()
        registry.register("noop", lambda d, r: EndNode(d))

        assert registry.is_registered("noop")
        assert not registry.is_registered("start")

    def test_factory_errors_propagate(self, registry):
        """Test that a node rejecting its config surfaces as NodeConfigError."""
        with pytest.raises(NodeConfigError):
            registry.create(NodeDefinition(id="api", type="integration"))

    def test_weather_client_is_required(self, stub_mailer):
        """Test the registry never builds an HTTP client nobody would close."""
        with pytest.raises(TypeError):
            create_default_registry(mailer=stub_mailer)

    @pytest.mark.asyncio
    async def test_uses_supplied_weather_client(self, weather_client, weather_workflow):
        registry = create_default_registry(weather_client=weather_client)

        node = registry.create(weather_workflow.get_node("weather-api"))

        assert node.weather_client is weather_client
