"""
Tests for the command line entry point.
"""

import json
from unittest.mock import patch

import pytest

from conftest import make_completion, make_envelope
from reactagent.cli import build_parser, main
from reactagent.errors import ConfigurationError
from reactagent.models import (
    AppConfig,
    GeoToolConfig,
    LLMConfig,
    ToolsConfig,
    WeatherToolConfig,
)


@pytest.fixture
def app_config():
    return AppConfig(
        llm=LLMConfig(api_key="sk-secret", base_url="https://llm.test/v1", model="test-model"),
        tools=ToolsConfig(
            geo=GeoToolConfig(api_key="geo-key"),
            weather=WeatherToolConfig(api_key="wx-key"),
        ),
    )


@pytest.fixture
def patched_cli(app_config, mock_llm_client):
    with patch("reactagent.cli.load_app_config", return_value=app_config) as mock_load, patch(
        "reactagent.cli.LLMClient"
    ) as mock_client_cls:
        mock_client_cls.from_config.return_value = mock_llm_client
        yield mock_load, mock_llm_client


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["London"])
        assert args.location == "London"
        assert args.dotenv_absolute_path is None
        assert args.max_iterations is None
        assert args.json is False

    def test_options(self):
        args = build_parser().parse_args(
            ["Beijing", "-d", "/tmp/.env", "-c", "cfg.yaml", "-n", "4", "-v", "--trace"]
        )
        assert args.dotenv_absolute_path == "/tmp/.env"
        assert args.config == "cfg.yaml"
        assert args.max_iterations == 4
        assert args.verbose is True
        assert args.trace is True

    def test_location_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Tests for main()."""

    def test_prints_answer(self, patched_cli, capsys):
        mock_load, client = patched_cli

        client.create_chat_completion.return_value = make_completion(
            make_envelope("answer", "It is sunny in London.")
        )

        assert main(["London", "-d", "/tmp/test.env"]) == 0

        out = capsys.readouterr().out
        assert "OPENAI_BASE_URL: https://llm.test/v1" in out
        assert "LLM Model: test-model" in out
        assert "Final answer:" in out
        assert "It is sunny in London." in out
        assert "sk-secret" not in out
        mock_load.assert_called_once_with(path=None, dotenv_path="/tmp/test.env", reload=True)
        client.close.assert_called_once()

    def test_json_output(self, patched_cli, capsys):
        _, client = patched_cli

        client.create_chat_completion.side_effect = [
            make_completion(make_envelope("pause", "thinking")),
            make_completion(make_envelope("answer", "Cold.")),
        ]

        assert main(["Oslo", "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["query"] == "What is the weather like in Oslo today?"
        assert output["answer"] == "Cold."
        assert output["iterations"] == 2
        assert len(output["trace"]) == 2

    def test_budget_exhausted(self, patched_cli, capsys):
        _, client = patched_cli

        client.create_chat_completion.side_effect = [
            make_completion(make_envelope("pause", "hmm")) for _ in range(2)
        ]

        assert main(["Oslo", "-n", "2", "--trace"]) == 1

        out = capsys.readouterr().out
        assert "Error: Maximum iterations 2 reached" in out
        assert "REACT TRACE" in out

    def test_configuration_error(self, capsys):
        with patch(
            "reactagent.cli.load_app_config",
            side_effect=ConfigurationError("Dotenv file not found at /nope"),
        ):
            assert main(["London", "-d", "/nope"]) == 2

        assert "Configuration error: Dotenv file not found at /nope" in capsys.readouterr().err

    def test_missing_keys(self, capsys):
        with patch("reactagent.cli.load_app_config", return_value=AppConfig()):
            assert main(["London"]) == 2
        assert "OPENAI_API_KEY" in capsys.readouterr().err

    def test_invalid_max_iterations(self, patched_cli, capsys):
        assert main(["London", "-n", "0"]) == 2
        assert "max_iterations" in capsys.readouterr().err
