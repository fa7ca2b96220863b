"""
ReAct agent tools.

Available tools:
- get_geo_location: City coordinates via OpenCage
- get_weather: Current weather via OpenWeatherMap
"""

from .base import Tool, FunctionTool
from .registry import ToolRegistry
from .geo import GetGeoLocationTool, GetGeoLocationArgs
from .weather import GetWeatherTool, GetWeatherArgs

__all__ = [
    "Tool",
    "FunctionTool",
    "ToolRegistry",
    "GetGeoLocationTool",
    "GetGeoLocationArgs",
    "GetWeatherTool",
    "GetWeatherArgs",
]
