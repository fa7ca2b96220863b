"""
System prompt for the ReAct loop.

The template teaches the model the Thought -> Action -> PAUSE ->
Observation cycle and the exact JSON envelope it must reply with. The
available tools and an example session are substituted into the
``{available_tools}`` and ``{example}`` placeholders.
"""

import json
import logging
import re
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(available_tools|example)\}")

SYSTEM_PROMPT_TEMPLATE = """
You are an intelligent assistant that operates strictly in a loop of Thought -> Action -> PAUSE -> Observation.

Follow this interaction loop step by step:

**Thought**: Think step by step about the current task and the information you have.
**Action**: Call one of the available tools with its input parameters.
**PAUSE**: Stop and wait for the result. Do not generate anything beyond this point.
**Observation**: You will receive an observation after the action. Reflect on it and continue the loop.

Repeat the loop until you have enough information to give a final Answer.

***Response Format Rule***:
Reply only with JSON in exactly this format:
{
  "state": "pause" | "answer",
  "thought": "<step-by-step reasoning>",
  "action": {
    "tool": "<tool_name>",
    "input": {
      // tool-specific parameters
    }
  }
}

When calling a tool, set "state": "pause" and stop. Do not write the Observation or the Answer yourself.

When you only need to think without calling a tool, set "tool": "none" and "input": {}.

When ready to answer, set "state": "answer" and put the final answer in "thought", with "tool": "none".

This loop is strictly enforced. Any other output is invalid.


Your available tools are:
-------------------------
{available_tools}
-------------------------


Example session:
-------------------------
{example}
-------------------------

Now it's your turn to use the tools effectively. Return only the concise final answer in a single sentence. No additional text.
"""

DEFAULT_EXAMPLE = """
{
  "state": "pause",
  "thought": "I need the current weather in London. The get_weather tool needs coordinates, so I will first look up the latitude and longitude of London with get_geo_location.",
  "action": {
    "tool": "get_geo_location",
    "input": {
      "city": "London"
    }
  }
}

**Observation**: {"city": "London", "latitude": 51.5074, "longitude": -0.1278}

{
  "state": "pause",
  "thought": "Now I have the coordinates of London, so I can call get_weather. I will leave the unit as null to use the default.",
  "action": {
    "tool": "get_weather",
    "input": {
      "city": "London",
      "latitude": 51.5074,
      "longitude": -0.1278,
      "unit": null
    }
  }
}

**Observation**: {"city": "London", "latitude": 51.5074, "longitude": -0.1278, "unit": "Celsius", "temperature": 12.0, "condition": "overcast clouds"}

{
  "state": "answer",
  "thought": "The weather in London today is overcast with a temperature of 12°C.",
  "action": {
    "tool": "none",
    "input": {}
  }
}
"""


def _name_and_description(descriptor: dict) -> tuple[Optional[str], Optional[str]]:
    """Read name/description from either descriptor style."""
    source = descriptor
    if descriptor.get("type") == "function" and isinstance(
        descriptor.get("function"), dict
    ):
        source = descriptor["function"]
    name = source.get("name")
    description = source.get("description")
    if not isinstance(name, str) or not isinstance(description, str):
        return None, None
    return name, description


def build_tools_catalog(tool_descriptors: Sequence[dict]) -> str:
    """
    Format tool descriptors into the catalog block of the system prompt.

    Each tool gets a ``- name: description`` summary line followed by its
    full JSON descriptor, in input order.
    """
    parts = []
    for descriptor in tool_descriptors:
        name, description = _name_and_description(descriptor)
        if name is None:
            logger.debug("Skipping tool descriptor without name/description")
            continue
        parts.append(f"- {name}: {description}\n")
        parts.append(json.dumps(descriptor, indent=2, ensure_ascii=False))
        parts.append("\n\n")
    return "".join(parts)


def create_system_prompt(
    tool_descriptors: Sequence[dict],
    example: Optional[str] = None,
) -> str:
    """
    Render the system prompt for the given tools.

    Args:
        tool_descriptors: Function descriptors from ``build_function_schema``
        example: Example session transcript, defaults to DEFAULT_EXAMPLE

    Returns:
        The full system prompt text.
    """
    values = {
        "available_tools": build_tools_catalog(tool_descriptors),
        "example": DEFAULT_EXAMPLE if example is None else example,
    }
    # single pass, so placeholder text inside a value is left alone
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], SYSTEM_PROMPT_TEMPLATE)
