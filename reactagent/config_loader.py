"""
Configuration loader for the ReAct agent.

Loads configuration from a YAML file with support for environment
variable interpolation, after pulling variables in from a dotenv file.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError
from .models import (
    LLMConfig,
    AgentConfig,
    GeoToolConfig,
    WeatherToolConfig,
    ToolsConfig,
    LoggingConfig,
    LangfuseConfig,
    AppConfig,
)

logger = logging.getLogger(__name__)

# Default config shipped inside the package
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "config.yaml"

# Regex for environment variable interpolation: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

SCHEMA_STYLES = ("legacy", "tool")

# Singleton cache for app config
_app_config: Optional[AppConfig] = None


def resolve_env_vars(value: str) -> str:
    """
    Resolve environment variable references in a string.

    Supports ${VAR} and ${VAR:-default} syntax. Unset variables without
    a default resolve to an empty string.

    Args:
        value: String potentially containing env var references

    Returns:
        String with env vars resolved
    """

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any) -> Any:
    """Recursively substitute environment variables in a data structure."""
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _as_number(section: str, key: str, value: Any, cast):
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid value for {section}.{key}: {value!r}"
        ) from e


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_llm_config(data: dict) -> LLMConfig:
    """Parse completion endpoint configuration from dict."""
    return LLMConfig(
        api_key=_as_str(data.get("api_key")),
        base_url=_as_str(data.get("base_url")),
        model=_as_str(data.get("model")),
        timeout=_as_number("llm", "timeout", data.get("timeout", 60.0), float),
    )


def _parse_agent_config(data: dict) -> AgentConfig:
    """Parse agent loop configuration from dict."""
    defaults = AgentConfig()
    return AgentConfig(
        name=_as_str(data.get("name", defaults.name)),
        description=_as_str(data.get("description", defaults.description)),
        max_iterations=_as_number(
            "agent", "max_iterations", data.get("max_iterations", 10), int
        ),
        schema_style=_as_str(data.get("schema_style", "legacy")).lower(),
    )


def _parse_tools_config(data: dict) -> ToolsConfig:
    """Parse tools configuration from dict."""
    geo_data = data.get("geo") or {}
    weather_data = data.get("weather") or {}

    return ToolsConfig(
        geo=GeoToolConfig(
            url=_as_str(geo_data.get("url", GeoToolConfig.url)),
            api_key=_as_str(geo_data.get("api_key")),
        ),
        weather=WeatherToolConfig(
            url=_as_str(weather_data.get("url", WeatherToolConfig.url)),
            api_key=_as_str(weather_data.get("api_key")),
        ),
        timeout=_as_number("tools", "timeout", data.get("timeout", 30.0), float),
    )


def _parse_logging_config(data: dict) -> LoggingConfig:
    """Parse logging configuration from dict."""
    return LoggingConfig(
        level=_as_str(data.get("level", "INFO")).upper() or "INFO",
    )


def _parse_langfuse_config(data: dict) -> LangfuseConfig:
    """Parse Langfuse configuration from dict."""
    return LangfuseConfig(
        public_key=_as_str(data.get("public_key")),
        secret_key=_as_str(data.get("secret_key")),
        host=_as_str(data.get("host")),
        debug=_as_bool(data.get("debug", False)),
    )


def load_environment(dotenv_path: Optional[str] = None) -> Optional[str]:
    """
    Load variables from a dotenv file into the process environment.

    An explicit path must exist. Without one, the nearest ``.env`` in the
    working directory or its parents is used when there is one.

    Returns:
        The path that was loaded, or None if no file was found.

    Raises:
        ConfigurationError: If an explicit path does not exist
    """
    if dotenv_path:
        if not Path(dotenv_path).is_file():
            raise ConfigurationError(f"Dotenv file not found at {dotenv_path}")
        load_dotenv(dotenv_path)
        logger.debug(f"Loaded environment from {dotenv_path}")
        return dotenv_path

    found = find_dotenv(usecwd=True)
    if not found:
        logger.debug("No .env file found, using process environment only")
        return None
    load_dotenv(found)
    logger.debug(f"Loaded environment from {found}")
    return found


def load_app_config(
    path: Optional[str] = None,
    dotenv_path: Optional[str] = None,
    reload: bool = False,
) -> AppConfig:
    """
    Load application configuration from a YAML file.

    Uses a singleton pattern - subsequent calls return the cached config
    unless reload=True is specified.

    Args:
        path: Path to the YAML configuration file. If None, uses the
              CONFIG_PATH env var or the packaged default config.
        dotenv_path: Dotenv file to load before interpolating variables.
        reload: If True, force reload from disk instead of using cache.

    Returns:
        AppConfig with all configuration loaded

    Raises:
        ConfigurationError: If the config file is missing, empty or invalid
    """
    global _app_config

    if _app_config is not None and not reload:
        return _app_config

    load_environment(dotenv_path)

    if path is None:
        path = os.environ.get("CONFIG_PATH") or str(DEFAULT_CONFIG_PATH)

    config_path = Path(path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found at {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Configuration file {config_path} is empty")

    raw_config = _substitute_env_vars_recursive(raw_config)

    app_config = AppConfig(
        version=_as_str(raw_config.get("version", "1.0")),
        llm=_parse_llm_config(raw_config.get("llm") or {}),
        agent=_parse_agent_config(raw_config.get("agent") or {}),
        tools=_parse_tools_config(raw_config.get("tools") or {}),
        logging=_parse_logging_config(raw_config.get("logging") or {}),
        langfuse=_parse_langfuse_config(raw_config.get("langfuse") or {}),
    )

    _app_config = app_config

    logger.debug(
        f"Configuration loaded: version={app_config.version}, "
        f"model={app_config.llm.model}"
    )

    return app_config


def validate_app_config(config: AppConfig) -> None:
    """
    Check that everything needed to start the loop is present.

    Raises:
        ConfigurationError: Listing every missing or invalid value
    """
    errors = []

    required = {
        "OPENAI_API_KEY (llm.api_key)": config.llm.api_key,
        "OPENAI_BASE_URL (llm.base_url)": config.llm.base_url,
        "LLM_MODEL (llm.model)": config.llm.model,
        "OPENCAGEDATA_API_KEY (tools.geo.api_key)": config.tools.geo.api_key,
        "OPENWEATHERMAP_API_KEY (tools.weather.api_key)": config.tools.weather.api_key,
    }
    for name, value in required.items():
        if not value:
            errors.append(f"missing {name}")

    if config.agent.max_iterations < 1:
        errors.append(
            f"agent.max_iterations must be at least 1, got {config.agent.max_iterations}"
        )
    if config.agent.schema_style not in SCHEMA_STYLES:
        errors.append(
            f"agent.schema_style must be one of {SCHEMA_STYLES}, "
            f"got {config.agent.schema_style!r}"
        )

    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))


def reset_config_cache() -> None:
    """Reset the configuration cache, forcing a reload on next access."""
    global _app_config
    _app_config = None
    logger.debug("Configuration cache reset")
