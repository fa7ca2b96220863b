"""
Data models for the ReAct agent.
"""

from .config import (
    LLMConfig,
    AgentConfig,
    GeoToolConfig,
    WeatherToolConfig,
    ToolsConfig,
    LoggingConfig,
    LangfuseConfig,
    AppConfig,
)

__all__ = [
    "LLMConfig",
    "AgentConfig",
    "GeoToolConfig",
    "WeatherToolConfig",
    "ToolsConfig",
    "LoggingConfig",
    "LangfuseConfig",
    "AppConfig",
]
