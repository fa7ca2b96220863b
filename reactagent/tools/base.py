"""
Tool capability interface.

A tool is a named unit of external functionality with a typed argument
model. ``call`` takes the JSON input from the model's action envelope and
returns a JSON-serialisable result, raising on failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from ..orchestration.tool_defs import FunctionSchemaStyle, build_function_schema


class Tool(ABC):
    """Base class for every tool the agent can dispatch to."""

    name: str
    description: str
    parameters: Union[type[BaseModel], dict]

    @abstractmethod
    def call(self, args: Any) -> Any:
        """Run the tool with the model-supplied input."""
        raise NotImplementedError

    def descriptor(self, style: FunctionSchemaStyle = FunctionSchemaStyle.LEGACY) -> dict:
        """Function descriptor advertised to the model."""
        return build_function_schema(self.name, self.description, self.parameters, style)


class FunctionTool(Tool):
    """Adapts a plain function to the Tool interface."""

    def __init__(
        self,
        name: str,
        func: Callable[[Any], Any],
        description: str = "",
        parameters: Optional[Union[type[BaseModel], dict]] = None,
    ):
        self.name = name
        self.description = description
        self.parameters = parameters if parameters is not None else {"type": "object"}
        self._func = func

    def call(self, args: Any) -> Any:
        return self._func(args)
