"""
Tests for the tool registry.
"""

from unittest.mock import Mock

import pytest

from reactagent.errors import ToolExecutionError, ToolNotFoundError, TransportError
from reactagent.tools.base import FunctionTool
from reactagent.tools.registry import ToolRegistry


class TestRegister:
    """Tests for registering tools."""

    def test_register_and_get(self):
        """A registered tool can be looked up by name."""
        registry = ToolRegistry()
        tool = FunctionTool("echo", lambda args: args, "Echo the input")
        registry.register("echo", tool)

        assert registry.get("echo") is tool
        assert "echo" in registry
        assert len(registry) == 1

    def test_add_uses_tool_name(self):
        """add() registers under the tool's own name."""
        registry = ToolRegistry()
        registry.add(FunctionTool("echo", lambda args: args))
        assert registry.names() == ["echo"]

    def test_get_unknown_returns_none(self):
        """Looking up an unknown name returns None."""
        assert ToolRegistry().get("missing") is None

    def test_last_registration_wins(self):
        """Re-registering a name replaces the tool."""
        registry = ToolRegistry()
        registry.register("t", FunctionTool("t", lambda args: 1))
        registry.register("t", FunctionTool("t", lambda args: 2))

        assert len(registry) == 1
        assert registry.dispatch("t", {}) == 2

    def test_none_is_reserved(self):
        """The no-tool sentinel cannot be registered."""
        with pytest.raises(ValueError):
            ToolRegistry().register("none", FunctionTool("none", lambda args: None))

    def test_capability_must_be_callable(self):
        """Objects without a call method are rejected."""
        with pytest.raises(TypeError):
            ToolRegistry().register("bad", object())

    def test_names_keep_registration_order(self):
        """Names are listed in registration order."""
        registry = ToolRegistry()
        for name in ["c", "a", "b"]:
            registry.register(name, FunctionTool(name, lambda args: None))
        assert registry.names() == ["c", "a", "b"]
        assert [t.name for t in registry] == ["c", "a", "b"]

    def test_tools_summary(self):
        """Summary lists one tool per line."""
        registry = ToolRegistry()
        registry.add(FunctionTool("a", lambda args: None, "First"))
        registry.add(FunctionTool("b", lambda args: None, "Second"))
        assert registry.get_tools_summary() == "- a: First\n- b: Second"


class TestDispatch:
    """Tests for dispatching tool calls."""

    def test_dispatch_passes_input_unchanged(self):
        """The model's input reaches the tool as-is."""
        capability = Mock()
        capability.call.return_value = {"ok": True}
        registry = ToolRegistry()
        registry.register("t", capability)

        payload = {"city": "Oslo", "nested": [1, 2]}
        assert registry.dispatch("t", payload) == {"ok": True}
        capability.call.assert_called_once_with(payload)

    def test_unregistered_tool(self):
        """Unknown names raise ToolNotFoundError."""
        with pytest.raises(ToolNotFoundError) as exc_info:
            ToolRegistry().dispatch("unregistered_tool", {})

        assert exc_info.value.tool_name == "unregistered_tool"
        assert "Tool not found: unregistered_tool" in str(exc_info.value)

    def test_tool_exception_wrapped(self):
        """Exceptions from a tool become ToolExecutionError."""
        def boom(args):
            raise KeyError("latitude")

        registry = ToolRegistry()
        registry.add(FunctionTool("t", boom))

        with pytest.raises(ToolExecutionError) as exc_info:
            registry.dispatch("t", {})
        assert exc_info.value.tool_name == "t"
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_tool_transport_error_wrapped(self):
        """Backend transport failures are tool failures to the loop."""
        def down(args):
            raise TransportError("Failed to get weather", status_code=503)

        registry = ToolRegistry()
        registry.add(FunctionTool("get_weather", down))

        with pytest.raises(ToolExecutionError) as exc_info:
            registry.dispatch("get_weather", {})
        assert "status 503" in str(exc_info.value)

    def test_registries_are_independent(self):
        """Each registry has its own tools."""
        first = ToolRegistry()
        second = ToolRegistry()
        first.add(FunctionTool("t", lambda args: None))

        assert "t" in first
        assert "t" not in second
