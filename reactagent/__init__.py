"""
reactagent - ReAct tool-calling agent

This package provides:
- Conversation session over an OpenAI-compatible chat endpoint
- Strict JSON action protocol (pause/answer envelopes)
- Tool registry with geocoding and weather tools
- Bounded ReAct loop controller
- Command line entry point
"""

from .errors import (
    AgentError,
    ConfigurationError,
    TransportError,
    EmptyChoicesError,
    EmptyContentError,
    ProtocolError,
    ToolNotFoundError,
    ToolExecutionError,
    IterationBudgetExceeded,
)
from .llm_call import LLMClient
from .orchestration import ConversationSession, ReactLoop, parse_action
from .orchestrator import create_agent, run_query
from .tools import ToolRegistry

__all__ = [
    "AgentError",
    "ConfigurationError",
    "TransportError",
    "EmptyChoicesError",
    "EmptyContentError",
    "ProtocolError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "IterationBudgetExceeded",
    "LLMClient",
    "ConversationSession",
    "ReactLoop",
    "parse_action",
    "create_agent",
    "run_query",
    "ToolRegistry",
]

__version__ = "0.1.0"
