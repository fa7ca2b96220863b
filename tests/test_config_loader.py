"""
Tests for YAML configuration loading and validation.
"""

from unittest.mock import patch

import pytest

from reactagent.config_loader import (
    DEFAULT_CONFIG_PATH,
    load_app_config,
    load_environment,
    reset_config_cache,
    resolve_env_vars,
    validate_app_config,
)
from reactagent.errors import ConfigurationError
from reactagent.models import AppConfig, GeoToolConfig, LLMConfig, ToolsConfig, WeatherToolConfig

ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "LLM_MODEL",
    "LLM_TIMEOUT",
    "MAX_ITERATIONS",
    "TOOL_TIMEOUT",
    "OPENCAGEDATA_API_KEY",
    "OPENWEATHERMAP_API_KEY",
    "LOG_LEVEL",
    "LANGFUSE_PUBLIC_KEY",
    "LANGFUSE_SECRET_KEY",
    "LANGFUSE_HOST",
    "LANGFUSE_DEBUG",
    "CONFIG_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without agent variables or a discoverable .env."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch("reactagent.config_loader.find_dotenv", return_value=""):
        yield


@pytest.fixture
def full_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://llm.test/v1")
    monkeypatch.setenv("LLM_MODEL", "test-model")
    monkeypatch.setenv("OPENCAGEDATA_API_KEY", "geo-key")
    monkeypatch.setenv("OPENWEATHERMAP_API_KEY", "wx-key")


def _valid_config() -> AppConfig:
    return AppConfig(
        llm=LLMConfig(api_key="k", base_url="https://llm.test/v1", model="m"),
        tools=ToolsConfig(
            geo=GeoToolConfig(api_key="g"),
            weather=WeatherToolConfig(api_key="w"),
        ),
    )


class TestResolveEnvVars:
    """Tests for ${VAR} interpolation."""

    def test_set_variable(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "gpt-test")
        assert resolve_env_vars("model=${LLM_MODEL}") == "model=gpt-test"

    def test_default_used_when_unset(self):
        assert resolve_env_vars("${MAX_ITERATIONS:-10}") == "10"

    def test_unset_without_default_is_empty(self):
        assert resolve_env_vars("${OPENAI_API_KEY}") == ""

    def test_set_variable_beats_default(self, monkeypatch):
        monkeypatch.setenv("MAX_ITERATIONS", "4")
        assert resolve_env_vars("${MAX_ITERATIONS:-10}") == "4"


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_packaged_default(self, full_env):
        """The packaged config reads its values from the environment."""
        config = load_app_config()

        assert config.llm.api_key == "sk-test"
        assert config.llm.base_url == "https://llm.test/v1"
        assert config.llm.model == "test-model"
        assert config.llm.timeout == 60.0
        assert config.agent.max_iterations == 10
        assert config.agent.schema_style == "legacy"
        assert config.tools.geo.api_key == "geo-key"
        assert config.tools.weather.api_key == "wx-key"
        assert config.tools.timeout == 30.0
        assert config.log_level == "INFO"
        assert config.langfuse.is_configured is False

    def test_default_path_exists(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_numeric_overrides(self, full_env, monkeypatch):
        """Numbers may be overridden through the environment."""
        monkeypatch.setenv("MAX_ITERATIONS", "3")
        monkeypatch.setenv("LLM_TIMEOUT", "12.5")
        config = load_app_config()
        assert config.agent.max_iterations == 3
        assert config.llm.timeout == 12.5

    def test_invalid_number(self, full_env, monkeypatch):
        """A non-numeric iteration budget is a configuration error."""
        monkeypatch.setenv("MAX_ITERATIONS", "lots")
        with pytest.raises(ConfigurationError, match="agent.max_iterations"):
            load_app_config()

    def test_cached_until_reload(self, full_env, monkeypatch):
        """Later calls return the cached instance unless reloading."""
        first = load_app_config()
        monkeypatch.setenv("LLM_MODEL", "other-model")

        assert load_app_config() is first
        assert load_app_config(reload=True).llm.model == "other-model"

    def test_reset_cache(self, full_env):
        first = load_app_config()
        reset_config_cache()
        assert load_app_config() is not first

    def test_custom_path(self, tmp_path):
        """An explicit path is loaded and missing sections take defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "llm:\n  api_key: abc\n  model: local\nagent:\n  schema_style: TOOL\n"
        )

        config = load_app_config(path=str(config_file))

        assert config.llm.api_key == "abc"
        assert config.llm.model == "local"
        assert config.agent.schema_style == "tool"
        assert config.tools.geo.url == "https://api.opencagedata.com/geocode/v1/json"

    def test_config_path_env(self, tmp_path, monkeypatch):
        """CONFIG_PATH selects the file when no path is given."""
        config_file = tmp_path / "alt.yaml"
        config_file.write_text("llm:\n  model: from-env-path\n")
        monkeypatch.setenv("CONFIG_PATH", str(config_file))

        assert load_app_config().llm.model == "from-env-path"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_app_config(path=str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        with pytest.raises(ConfigurationError, match="empty"):
            load_app_config(path=str(config_file))

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("llm: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_app_config(path=str(config_file))

    def test_langfuse_enabled_by_keys(self, full_env, monkeypatch):
        monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk")
        monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk")
        monkeypatch.setenv("LANGFUSE_DEBUG", "true")

        config = load_app_config()

        assert config.langfuse.is_configured is True
        assert config.langfuse.debug is True


class TestLoadEnvironment:
    """Tests for dotenv loading."""

    def test_explicit_dotenv(self, tmp_path, monkeypatch):
        """Variables from an explicit dotenv file are loaded."""
        # recorded so the value loaded from the file is removed afterwards
        monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
        monkeypatch.delenv("OPENAI_API_KEY")
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("OPENAI_API_KEY=from-dotenv\n")

        assert load_environment(str(dotenv_file)) == str(dotenv_file)
        config = load_app_config(dotenv_path=str(dotenv_file))
        assert config.llm.api_key == "from-dotenv"

    def test_missing_explicit_dotenv(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Dotenv file not found"):
            load_environment(str(tmp_path / "nope.env"))

    def test_no_dotenv_is_fine(self):
        assert load_environment() is None


class TestValidateAppConfig:
    """Tests for validate_app_config."""

    def test_valid(self):
        validate_app_config(_valid_config())

    def test_lists_all_missing_keys(self):
        """Every missing key is named in one error."""
        with pytest.raises(ConfigurationError) as exc_info:
            validate_app_config(AppConfig())

        message = str(exc_info.value)
        for name in [
            "OPENAI_API_KEY",
            "OPENAI_BASE_URL",
            "LLM_MODEL",
            "OPENCAGEDATA_API_KEY",
            "OPENWEATHERMAP_API_KEY",
        ]:
            assert name in message

    def test_budget_below_one(self):
        config = _valid_config()
        config.agent.max_iterations = 0
        with pytest.raises(ConfigurationError, match="max_iterations"):
            validate_app_config(config)

    def test_unknown_schema_style(self):
        config = _valid_config()
        config.agent.schema_style = "functions"
        with pytest.raises(ConfigurationError, match="schema_style"):
            validate_app_config(config)
