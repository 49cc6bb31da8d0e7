"""
Integration node: fetches the current temperature for the submitted city.
"""

from typing import Any, Optional

from pydantic import ValidationError

from flowgraph.core.errors import NodeConfigError
from flowgraph.core.models import NodeDefinition, NodeType
from flowgraph.nodes.base import BaseNode, ExecutionContext, NodeInputs, NodeOutputs
from flowgraph.nodes.weather import (
    DEFAULT_TEMPERATURE_PATH,
    WeatherAPIError,
    WeatherClient,
    WeatherOption,
)
from flowgraph.template import render_template


class IntegrationNode(BaseNode):
    """
    Calls the weather endpoint for a city chosen on the form.

    Metadata:
        apiEndpoint: URL template with {lat} and {lon} (required)
        options: list of {city, lat, lon}
        sourceNode: node whose output carries "city" (default "form")
        temperaturePath: dotted path to the temperature in the response
    """

    node_type = NodeType.INTEGRATION.value

    def __init__(self, definition: NodeDefinition, weather_client: WeatherClient):
        super().__init__(definition)
        self.weather_client = weather_client

        endpoint = self.metadata.get("apiEndpoint")
        if not isinstance(endpoint, str):
            raise NodeConfigError(self.id, "missing API endpoint")
        self.api_endpoint = endpoint

        self.options = self._parse_options(self.metadata.get("options"))
        self.source_node: str = self.metadata.get("sourceNode") or "form"
        self.temperature_path: str = (
            self.metadata.get("temperaturePath")
            or weather_client.temperature_path
            or DEFAULT_TEMPERATURE_PATH
        )

    def _parse_options(self, raw: Any) -> list[WeatherOption]:
        if not isinstance(raw, list):
            return []
        options = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                options.append(WeatherOption.model_validate(item))
            except ValidationError as e:
                raise NodeConfigError(self.id, f"invalid location option: {e}") from e
        return options

    def find_option(self, city: str) -> Optional[WeatherOption]:
        """Exact, case-sensitive lookup of a configured city."""
        for option in self.options:
            if option.city == city:
                return option
        return None

    async def execute(self, ctx: ExecutionContext, inputs: NodeInputs) -> NodeOutputs:
        outputs = NodeOutputs()

        source = inputs.prior_outputs.get(self.source_node)
        if source is None:
            return self._fail(outputs, "Failed to get form data")

        city = source.data.get("city")
        if not isinstance(city, str):
            return self._fail(outputs, "Failed to get city from form output")

        self.description = render_template(self.description, {"city": city})

        option = self.find_option(city)
        if option is None:
            return self._fail(outputs, f"City not found: {city}")

        timeout = self.weather_client.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            if remaining <= 0:
                return self._fail(
                    outputs,
                    "Weather API error: execution deadline exceeded",
                    message="Weather API request failed",
                )
            timeout = min(timeout, remaining)

        try:
            weather = await self.weather_client.get_weather(
                self.api_endpoint,
                option.lat,
                option.lon,
                city,
                temperature_path=self.temperature_path,
                timeout=timeout,
            )
        except WeatherAPIError as e:
            return self._fail(
                outputs,
                f"Weather API error: {e}",
                message="Weather API request failed",
            )

        temperature = weather.temperature
        return outputs.complete({
            "message": f"Retrieved temperature for {city}: {temperature:.1f}°C",
            "apiResponse": {
                "endpoint": self.api_endpoint,
                "method": "GET",
                "data": {
                    "temperature": temperature,
                    "location": city,
                },
            },
            "temperature": temperature,
            "location": city,
        })

    def validate(self) -> None:
        if not self.api_endpoint:
            raise NodeConfigError(self.id, "missing API endpoint")
        if not self.options:
            raise NodeConfigError(self.id, "no location options configured")
