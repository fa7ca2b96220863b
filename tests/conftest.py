"""
Pytest configuration and fixtures for reactagent tests.
"""

import json
from unittest.mock import Mock

import pytest

from reactagent.config_loader import reset_config_cache
from reactagent.tracing import shutdown_tracing


def make_completion(content):
    """Create a mock chat completion response with one choice."""
    msg = Mock()
    msg.content = content
    response = Mock()
    response.choices = [Mock(message=msg)]
    response.usage = None
    return response


def make_envelope(state: str, thought: str, tool: str = "none", tool_input=None) -> str:
    """Build the JSON text of an action envelope."""
    return json.dumps(
        {
            "state": state,
            "thought": thought,
            "action": {"tool": tool, "input": {} if tool_input is None else tool_input},
        }
    )


@pytest.fixture
def mock_llm_client():
    """LLM client whose completion call is a Mock."""
    client = Mock()
    client.create_chat_completion = Mock()
    return client


@pytest.fixture
def scripted_llm_client(mock_llm_client):
    """LLM client that replies with a scripted list of texts/exceptions."""

    def script(*replies):
        side_effects = []
        for reply in replies:
            if isinstance(reply, Exception):
                side_effects.append(reply)
            else:
                side_effects.append(make_completion(reply))
        mock_llm_client.create_chat_completion.side_effect = side_effects
        return mock_llm_client

    return script


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset the config cache and tracing singleton around each test."""
    reset_config_cache()
    yield
    reset_config_cache()
    shutdown_tracing()
