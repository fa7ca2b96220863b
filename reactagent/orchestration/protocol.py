"""
Action envelope protocol.

Every model reply must be a single JSON object:

    {"state": "pause" | "answer",
     "thought": "<string>",
     "action": {"tool": "<string>", "input": <any JSON>}}

Parsing is all-or-nothing: malformed JSON or any field of the wrong type
yields a ParseFailure instead of an exception.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, StrictStr, ValidationError, field_validator

from ..errors import ProtocolError

logger = logging.getLogger(__name__)

# Reserved tool name: no tool is invoked this turn.
NO_TOOL = "none"


class ReactState(str, Enum):
    """Protocol state carried by an envelope."""

    PAUSE = "pause"
    ANSWER = "answer"


class Action(BaseModel):
    """Tool invocation requested by the model."""

    tool: StrictStr
    input: Any


class ActionEnvelope(BaseModel):
    """One parsed model reply."""

    state: ReactState
    thought: StrictStr
    action: Action

    @field_validator("state", mode="before")
    @classmethod
    def normalize_state(cls, v):
        """Accept any casing of pause/answer."""
        if isinstance(v, str):
            return v.lower()
        return v

    @property
    def is_answer(self) -> bool:
        return self.state is ReactState.ANSWER

    @property
    def is_tool_call(self) -> bool:
        return self.state is ReactState.PAUSE and self.action.tool != NO_TOOL


@dataclass
class ParseFailure:
    """A reply that could not be parsed into an ActionEnvelope."""

    raw: str
    reason: str

    def to_error(self) -> ProtocolError:
        return ProtocolError(f"Failed to parse action envelope: {self.reason}")


def parse_action(raw: str) -> Union[ActionEnvelope, ParseFailure]:
    """
    Parse a raw model reply into an ActionEnvelope.

    Never raises on malformed input.

    Args:
        raw: Text returned by the model

    Returns:
        The parsed envelope, or a ParseFailure describing the first problem
    """
    if not isinstance(raw, str):
        return ParseFailure(raw=repr(raw), reason="reply is not text")

    try:
        return ActionEnvelope.model_validate_json(raw)
    except ValidationError as e:
        errors = e.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
            reason = f"{location}: {first.get('msg', 'invalid')}"
        else:
            reason = str(e)
        logger.debug("Envelope parse failed: %s", reason)
        return ParseFailure(raw=raw, reason=reason)
