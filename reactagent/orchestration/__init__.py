"""
ReAct orchestration: session, action protocol, prompt and loop controller.
"""

from .session import ConversationSession, Message, Role
from .protocol import (
    NO_TOOL,
    Action,
    ActionEnvelope,
    ParseFailure,
    ReactState,
    parse_action,
)
from .prompt import DEFAULT_EXAMPLE, SYSTEM_PROMPT_TEMPLATE, create_system_prompt
from .tool_defs import FunctionSchemaStyle, build_function_schema, build_tool_definitions
from .loop import LoopState, OrchestrationStep, ReactLoop, format_observation

__all__ = [
    "ConversationSession",
    "Message",
    "Role",
    "NO_TOOL",
    "Action",
    "ActionEnvelope",
    "ParseFailure",
    "ReactState",
    "parse_action",
    "DEFAULT_EXAMPLE",
    "SYSTEM_PROMPT_TEMPLATE",
    "create_system_prompt",
    "FunctionSchemaStyle",
    "build_function_schema",
    "build_tool_definitions",
    "LoopState",
    "OrchestrationStep",
    "ReactLoop",
    "format_observation",
]
