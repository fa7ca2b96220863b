"""
OpenWeatherMap Current Weather Tool

Fetches the current temperature and conditions at a coordinate.
"""

import logging
from typing import Any, Optional

import requests
from pydantic import BaseModel, Field

from ..errors import ToolExecutionError, TransportError
from ..models import WeatherToolConfig
from .base import Tool

logger = logging.getLogger(__name__)

# OpenWeatherMap ``units`` values and the unit they report temperatures in
UNIT_NAMES = {
    "metric": "Celsius",
    "imperial": "Fahrenheit",
    "standard": "Kelvin",
}

# Friendlier spellings the model tends to use
UNIT_ALIASES = {
    "celsius": "metric",
    "fahrenheit": "imperial",
    "kelvin": "standard",
}


class GetWeatherArgs(BaseModel):
    """Arguments for get_weather."""

    city: str = Field(description="the name of the city")
    longitude: float = Field(description="longitude of the location")
    latitude: float = Field(description="latitude of the location")
    unit: Optional[str] = Field(
        default=None,
        description='Unit of measurement - "Celsius" or "Fahrenheit", "Celsius" by default',
    )


def normalize_unit(unit: Optional[str]) -> str:
    """Map a requested unit onto an OpenWeatherMap ``units`` value."""
    if not unit:
        return "metric"
    key = unit.strip().lower()
    return UNIT_ALIASES.get(key, key)


class GetWeatherTool(Tool):
    """Current weather at a latitude/longitude via OpenWeatherMap."""

    name = "get_weather"
    description = "Get current weather of the location"
    parameters = GetWeatherArgs

    def __init__(self, config: WeatherToolConfig, timeout: float = 30.0):
        self.url = config.url
        self.api_key = config.api_key
        self.timeout = timeout

    def get_weather(
        self,
        city: str,
        latitude: float,
        longitude: float,
        unit: Optional[str] = None,
    ) -> dict:
        """
        Fetch current weather for a coordinate.

        Args:
            city: City name, echoed back in the result
            latitude: Latitude of the location
            longitude: Longitude of the location
            unit: ``metric``, ``imperial``, ``standard`` or a unit name

        Returns:
            Dictionary with city, coordinates, unit, temperature and condition

        Raises:
            TransportError: The request failed or returned a non-2xx status
            ToolExecutionError: The response body was not usable
        """
        units = normalize_unit(unit)
        params = {
            "lat": str(latitude),
            "lon": str(longitude),
            "appid": self.api_key,
            "units": units,
        }

        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Weather request failed: {e}")
            raise TransportError(f"Failed to get weather: {e}") from e

        if not response.ok:
            raise TransportError("Failed to get weather", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ToolExecutionError(
                self.name, f"Failed to parse JSON response: {e}"
            ) from e

        logger.debug(f"3rd party API response (OpenWeatherMap): {data}")

        if not isinstance(data, dict):
            raise ToolExecutionError(self.name, "Unexpected response shape")

        main = data.get("main") or {}
        weather = data.get("weather") or [{}]
        return {
            "city": city,
            "latitude": latitude,
            "longitude": longitude,
            "unit": UNIT_NAMES.get(units, "Kelvin"),
            "temperature": float(main.get("temp") or 0.0),
            "condition": weather[0].get("description") or "Unknown",
        }

    def call(self, args: Any) -> dict:
        args = args if isinstance(args, dict) else {}
        city = args.get("city")
        unit = args.get("unit")
        return self.get_weather(
            city=city if isinstance(city, str) else "Unknown City",
            latitude=_as_float(args.get("latitude")),
            longitude=_as_float(args.get("longitude")),
            unit=unit if isinstance(unit, str) else None,
        )


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0
