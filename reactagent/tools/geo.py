"""
OpenCage Geocoding Tool

Looks up the latitude and longitude of a city.
"""

import logging
from typing import Any

import requests
from pydantic import BaseModel, Field

from ..errors import ToolExecutionError, TransportError
from ..models import GeoToolConfig
from .base import Tool

logger = logging.getLogger(__name__)


class GetGeoLocationArgs(BaseModel):
    """Arguments for get_geo_location."""

    city: str = Field(description="the name of the city")


class GetGeoLocationTool(Tool):
    """Resolve a city name to coordinates via the OpenCage API."""

    name = "get_geo_location"
    description = "Get the latitude and longitude of a city"
    parameters = GetGeoLocationArgs

    def __init__(self, config: GeoToolConfig, timeout: float = 30.0):
        self.url = config.url
        self.api_key = config.api_key
        self.timeout = timeout

    def get_geo_location(self, city: str) -> dict:
        """
        Look up a city with OpenCage.

        Args:
            city: City name to geocode

        Returns:
            Dictionary with city, latitude and longitude

        Raises:
            TransportError: The request failed or returned a non-2xx status
            ToolExecutionError: The response body was not usable
        """
        params = {"key": self.api_key, "q": city, "pretty": "1"}

        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Geocoding request failed: {e}")
            raise TransportError(f"Failed to get geo location: {e}") from e

        if not response.ok:
            raise TransportError(
                "Failed to get geo location", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ToolExecutionError(
                self.name, f"Failed to parse JSON response: {e}"
            ) from e

        logger.debug(f"3rd party API response (OpenCage): {data}")

        if not isinstance(data, dict):
            raise ToolExecutionError(self.name, "Unexpected response shape")
        results = data.get("results") or [{}]
        geometry = results[0].get("geometry") or {}
        return {
            "city": city,
            "latitude": float(geometry.get("lat") or 0.0),
            "longitude": float(geometry.get("lng") or 0.0),
        }

    def call(self, args: Any) -> dict:
        args = args if isinstance(args, dict) else {}
        city = args.get("city")
        if not isinstance(city, str):
            city = "Unknown City"
        return self.get_geo_location(city)
