"""
Error taxonomy for the ReAct agent.

Transport and protocol failures are recovered inside the loop, bounded by
the iteration budget. Everything else surfaces to the caller as the loop's
terminal failure.
"""

from typing import Optional


class AgentError(Exception):
    """Base class for all agent failures."""


class ConfigurationError(AgentError):
    """Required configuration is missing or invalid."""


class TransportError(AgentError):
    """Network or HTTP failure talking to the completion endpoint or a tool backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)
        self.status_code = status_code


class EmptyChoicesError(TransportError):
    """The completion endpoint returned no choices."""

    def __init__(self):
        super().__init__("No choices returned from the completion endpoint")


class EmptyContentError(TransportError):
    """The first choice carried no textual content."""

    def __init__(self):
        super().__init__("No content in the response message")


class ProtocolError(AgentError):
    """Model output did not match the action envelope format."""


class ToolNotFoundError(AgentError):
    """The model requested a tool that is not registered."""

    def __init__(self, tool_name: str, args=None):
        message = f"Tool not found: {tool_name}"
        if args is not None:
            message = f"{message} with args: {args}"
        super().__init__(message)
        self.tool_name = tool_name


class ToolExecutionError(AgentError):
    """A registered tool failed while executing."""

    def __init__(self, tool_name: str, reason: str):
        super().__init__(f"Tool '{tool_name}' failed: {reason}")
        self.tool_name = tool_name
        self.reason = reason


class IterationBudgetExceeded(AgentError):
    """The loop ran out of iterations before producing an answer."""

    def __init__(self, max_iterations: int):
        super().__init__(f"Maximum iterations {max_iterations} reached")
        self.max_iterations = max_iterations
