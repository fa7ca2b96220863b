"""
Tool definitions for the ReAct loop.

Converts typed tool parameter models into JSON-schema function
descriptors, in either the legacy ``functions`` shape used by chat
completions or the newer ``tools`` shape.
"""

import copy
import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Union

from pydantic import BaseModel

if TYPE_CHECKING:
    from ..tools.base import Tool

logger = logging.getLogger(__name__)


class FunctionSchemaStyle(str, Enum):
    """Wire shape of a function descriptor."""

    LEGACY = "legacy"  # chat/completions ``functions`` field
    TOOL = "tool"  # assistants/responses ``tools`` field


def _parameters_schema(params: Union[type[BaseModel], dict]) -> dict:
    if isinstance(params, dict):
        schema = copy.deepcopy(params)
    else:
        schema = params.model_json_schema()

    schema.pop("title", None)
    schema.setdefault("type", "object")

    # pydantic titles every property after its field name; they add nothing
    for prop in schema.get("properties", {}).values():
        if isinstance(prop, dict):
            prop.pop("title", None)
    return schema


def build_function_schema(
    name: str,
    description: str,
    params: Union[type[BaseModel], dict],
    style: Union[FunctionSchemaStyle, str] = FunctionSchemaStyle.LEGACY,
) -> dict:
    """
    Build a function descriptor for one tool.

    Args:
        name: Tool name the model will call
        description: One-line description shown to the model
        params: Pydantic model describing the arguments, or a ready
            JSON schema dict
        style: ``legacy`` for ``{name, description, parameters}``,
            ``tool`` for ``{type: "function", function: {...}}``

    Returns:
        The JSON descriptor as a dict.
    """
    style = FunctionSchemaStyle(style)
    parameters = _parameters_schema(params)

    if style is FunctionSchemaStyle.LEGACY:
        return {
            "name": name,
            "description": description,
            "parameters": parameters,
        }
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


def build_tool_definitions(
    tools: Iterable["Tool"],
    style: Union[FunctionSchemaStyle, str] = FunctionSchemaStyle.LEGACY,
) -> list[dict]:
    """Build descriptors for a sequence of tools, keeping their order."""
    style = FunctionSchemaStyle(style)
    definitions = []
    for tool in tools:
        definitions.append(
            build_function_schema(tool.name, tool.description, tool.parameters, style)
        )
        logger.debug("Built %s descriptor for tool '%s'", style.value, tool.name)
    return definitions
