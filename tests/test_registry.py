"""Tests for the tool registry and dispatch."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from conftest import echo_tool, failing_tool
from orchestrator.models import ToolCall
from tools.registry import (
    Tool,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistry,
    build_default_registry,
    object_schema,
)


class TestToolRegistry:
    """Tests for the ToolRegistry class."""

    def test_register_and_get_tool(self):
        """Tools can be registered and retrieved."""
        registry = ToolRegistry()
        registry.register(echo_tool())

        tool = registry.get("echo")
        assert tool is not None
        assert tool.name == "echo"

    def test_get_unknown_returns_none(self):
        assert ToolRegistry().get("missing") is None

    def test_last_registration_wins(self):
        """Registering the same name twice keeps the second tool."""
        registry = ToolRegistry()
        registry.register(echo_tool())
        replacement = Tool("echo", "other", object_schema({}), execute=lambda args: "second")
        registry.register(replacement)

        assert len(registry) == 1
        assert registry.execute(ToolCall(name="echo")) == "second"

    def test_get_all_in_registration_order(self):
        registry = ToolRegistry()
        registry.register(echo_tool("b"))
        registry.register(echo_tool("a"))

        assert [t.name for t in registry.get_all()] == ["b", "a"]

    def test_definitions_match_tools(self, registry):
        """Every tool has a definition with non-empty name, description and schema."""
        definitions = registry.get_tool_definitions()

        assert len(definitions) == len(registry.get_all())
        for d in definitions:
            assert set(d) == {"name", "description", "input_schema"}
            assert d["name"] and d["description"] and d["input_schema"]
            assert registry.get(d["name"]) is not None

    def test_execute_calls_tool(self):
        registry = ToolRegistry()
        handler = MagicMock(return_value="ok")
        registry.register(Tool("t", "desc", object_schema({}), execute=handler))

        assert registry.execute(ToolCall(name="t", input={"x": 1})) == "ok"
        handler.assert_called_once_with({"x": 1})

    def test_execute_unknown_tool_raises(self):
        """Unknown tools propagate ToolNotFoundError instead of returning a string."""
        registry = ToolRegistry()

        with pytest.raises(ToolNotFoundError, match="Tool 'unknown_tool' not found"):
            registry.execute(ToolCall(name="unknown_tool"))

    def test_unknown_tool_suggests_close_name(self, registry):
        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.execute(ToolCall(name="ecko"))

        assert exc_info.value.suggestion == "echo"
        assert "Did you mean 'echo'?" in str(exc_info.value)

    def test_failing_tool_is_contained(self):
        """A raising tool becomes an error string, never an exception."""
        registry = ToolRegistry()
        registry.register(failing_tool())

        result = registry.execute(ToolCall(name="boom"))

        assert result == "Error executing tool 'boom': kaboom"

    def test_tool_execution_error_is_contained(self):
        def _execute(args):
            raise ToolExecutionError("Failed to read file: nope")

        registry = ToolRegistry()
        registry.register(Tool("read", "desc", object_schema({}), execute=_execute))

        assert registry.execute(ToolCall(name="read")).startswith("Error executing tool 'read': Failed to read file")


class TestDefaultRegistry:

    def test_registers_builtin_tools(self, tmp_path):
        registry = build_default_registry(tmp_path)

        assert registry.names() == ["read_file", "execute_command", "http_request", "search", "todo_write"]
        assert len(registry.get_tool_definitions()) == 5

    def test_each_call_builds_a_new_registry(self, tmp_path):
        assert build_default_registry(tmp_path) is not build_default_registry(tmp_path)
