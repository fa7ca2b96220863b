"""
Configuration models for the ReAct agent.

Defines dataclasses for the YAML configuration file.
"""

from dataclasses import dataclass, field


@dataclass
class LLMConfig:
    """Configuration for the OpenAI-compatible completion endpoint."""
    api_key: str = ""
    base_url: str = ""
    model: str = ""
    timeout: float = 60.0


@dataclass
class AgentConfig:
    """Configuration for the ReAct loop."""
    name: str = "React Agent"
    description: str = "An agent that can react to user queries and use tools"
    max_iterations: int = 10
    schema_style: str = "legacy"


@dataclass
class GeoToolConfig:
    """Configuration for the OpenCage geocoding tool."""
    url: str = "https://api.opencagedata.com/geocode/v1/json"
    api_key: str = ""


@dataclass
class WeatherToolConfig:
    """Configuration for the OpenWeatherMap tool."""
    url: str = "https://api.openweathermap.org/data/2.5/weather"
    api_key: str = ""


@dataclass
class ToolsConfig:
    """Configuration for tool endpoints."""
    geo: GeoToolConfig = field(default_factory=GeoToolConfig)
    weather: WeatherToolConfig = field(default_factory=WeatherToolConfig)
    timeout: float = 30.0


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse observability.

    Tracing auto-enables when both public_key and secret_key are provided.
    """
    public_key: str = ""
    secret_key: str = ""
    host: str = ""
    debug: bool = False

    @property
    def is_configured(self) -> bool:
        """Check if Langfuse is configured (both keys present)."""
        return bool(self.public_key and self.secret_key)


@dataclass
class AppConfig:
    """
    Application configuration container.

    Holds all configuration sections loaded from config.yaml.
    """
    version: str = "1.0"
    llm: LLMConfig = field(default_factory=LLMConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)

    @property
    def log_level(self) -> str:
        """Shortcut for logging.level."""
        return self.logging.level
