"""
Tool Registry - name-keyed tool capabilities and dispatch.

Each agent owns its own registry. Tools are registered before the loop
starts and looked up by exact name; the registry is not modified while a
loop is running.
"""

import logging
from typing import Any, Iterator, Optional

from ..errors import ToolExecutionError, ToolNotFoundError
from ..orchestration.protocol import NO_TOOL
from .base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered collection of tools, dispatched by name."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, name: str, capability: Tool) -> None:
        """
        Register a tool under ``name``.

        A later registration under the same name replaces the earlier one.

        Raises:
            ValueError: If ``name`` is the reserved no-tool sentinel
            TypeError: If ``capability`` has no ``call`` method
        """
        if name == NO_TOOL:
            raise ValueError(f"Tool name '{NO_TOOL}' is reserved by the protocol")
        if not callable(getattr(capability, "call", None)):
            raise TypeError(f"Tool '{name}' must provide a call() method")
        if name in self._tools:
            logger.debug(f"Replacing tool '{name}'")
        self._tools[name] = capability

    def add(self, tool: Tool) -> None:
        """Register a tool under its own name."""
        self.register(tool.name, tool)

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))

    def get_tools_summary(self) -> str:
        """Get formatted summary of all tools for display."""
        lines = []
        for name, tool in self._tools.items():
            lines.append(f"- {name}: {getattr(tool, 'description', '')}")
        return "\n".join(lines)

    def dispatch(self, name: str, args: Any) -> Any:
        """
        Call the tool registered under ``name``.

        Raises:
            ToolNotFoundError: No tool is registered under ``name``
            ToolExecutionError: The tool raised while running
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name, args)

        logger.info(f"Executing tool: {name} with args: {args}")
        try:
            return tool.call(args)
        except Exception as e:
            logger.error(f"Tool '{name}' failed: {e}")
            raise ToolExecutionError(name, str(e)) from e
