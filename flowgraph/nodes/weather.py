"""
Weather lookup used by integration nodes.

Calls an Open-Meteo style endpoint with {lat}/{lon} placeholders and
extracts the current temperature.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE_PATH = "current_weather.temperature"


class WeatherAPIError(Exception):
    """Raised when the weather endpoint cannot produce a temperature."""


class WeatherOption(BaseModel):
    """A city the integration node knows coordinates for."""

    city: str = ""
    lat: float = 0.0
    lon: float = 0.0


class WeatherData(BaseModel):
    """Temperature reading for one location."""

    temperature: float
    location: str
    raw_response: dict[str, Any] = Field(default_factory=dict)


def weather_emoji(temperature: float) -> str:
    """Emoji describing how a temperature feels."""
    if temperature >= 35:
        return "🥵"
    if temperature >= 25:
        return "😎"
    if temperature >= 15:
        return "🙂"
    if temperature >= 5:
        return "🧥"
    return "🥶"


def build_weather_url(endpoint: str, lat: float, lon: float) -> str:
    """Substitute coordinates into the endpoint with six decimals."""
    return endpoint.replace("{lat}", f"{lat:f}").replace("{lon}", f"{lon:f}")


def extract_path(payload: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts, None if any key is missing."""
    current = payload
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


class WeatherClient:
    """
    Async HTTP client for weather lookups.

    One client is shared by every integration node of an engine. Pass a
    custom transport (e.g. httpx.MockTransport) to fake the endpoint.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        temperature_path: str = DEFAULT_TEMPERATURE_PATH,
    ):
        self.timeout = timeout
        self.temperature_path = temperature_path
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def get_weather(
        self,
        endpoint: str,
        lat: float,
        lon: float,
        city: str,
        *,
        temperature_path: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> WeatherData:
        """
        Fetch the current temperature for a location.

        Args:
            endpoint: URL template containing {lat} and {lon}
            lat: Latitude
            lon: Longitude
            city: Location name copied into the result
            temperature_path: Dotted path to the temperature in the JSON body
            timeout: Overall bound in seconds, defaults to the client timeout

        Raises:
            WeatherAPIError: On timeout, transport error, non-200 status,
                malformed JSON or a missing/non-numeric temperature
        """
        url = build_weather_url(endpoint, lat, lon)
        path = temperature_path or self.temperature_path
        limit = self.timeout if timeout is None else timeout

        logger.debug(f"Requesting weather for {city}: {url}")

        try:
            async with asyncio.timeout(limit):
                response = await self._http_client.get(url)
        except TimeoutError:
            raise WeatherAPIError(f"request timed out after {limit:.1f}s")
        except httpx.HTTPError as e:
            raise WeatherAPIError(f"failed to call weather API: {e}") from e

        if response.status_code != 200:
            raise WeatherAPIError(f"weather API returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise WeatherAPIError(f"failed to parse weather API response: {e}") from e

        temperature = extract_path(payload, path)
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise WeatherAPIError("invalid temperature value in API response")

        return WeatherData(
            temperature=float(temperature),
            location=city,
            raw_response=payload if isinstance(payload, dict) else {},
        )
