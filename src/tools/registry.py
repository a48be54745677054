"""
src/tools/registry.py — tool registry and dispatch.

A Tool couples a name, a description and a JSON input schema (declared to the model)
with a plain Python callable that takes the model's input dict and returns text.

Two failure channels:
- an unknown tool name raises ToolNotFoundError (the caller asked for something
  that was never declared, so it must surface);
- a tool that raises while running is caught here and turned into an
  "Error executing tool '<name>': ..." string, so the model sees it and can adapt.
"""


from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from rapidfuzz import fuzz, process

from orchestrator.models import ToolCall


logger = logging.getLogger(__name__)


class ToolNotFoundError(LookupError):
    """Dispatch asked for a tool name that is not registered."""

    def __init__(self, name: str, suggestion: Optional[str] = None):

        self.name = name
        self.suggestion = suggestion
        message = f"Tool '{name}' not found"
        if suggestion:
            message += f". Did you mean '{suggestion}'?"
        super().__init__(message)


class ToolExecutionError(RuntimeError):
    """Raised by tool bodies; contained by ToolRegistry.execute."""


@dataclass
class Tool:

    name: str
    description: str
    input_schema: Dict[str, Any]
    execute: Callable[[Dict[str, Any]], str]


def object_schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    """Build the JSON schema object a tool declares for its input."""

    return {
        "type": "object",
        "properties": properties,
        "required": required or [],
    }


class ToolRegistry:
    """Name -> Tool mapping. Enumeration follows registration order; re-registering a name overwrites it."""

    def __init__(self) -> None:

        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:

        if tool.name in self._tools:
            logger.debug("Replacing tool: %s", tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def get(self, name: str) -> Optional[Tool]:

        return self._tools.get(name)

    def get_all(self) -> List[Tool]:

        return list(self._tools.values())

    def names(self) -> List[str]:

        return list(self._tools.keys())

    def __contains__(self, name: object) -> bool:

        return name in self._tools

    def __len__(self) -> int:

        return len(self._tools)

    def get_tool_definitions(self) -> List[Dict[str, Any]]:
        """Project each tool to {name, description, input_schema} for the completion endpoint."""

        return [
            {"name": t.name, "description": t.description, "input_schema": t.input_schema}
            for t in self._tools.values()
        ]

    def suggest(self, name: str) -> Optional[str]:
        """Closest registered name to `name`, if any is reasonably close."""

        if not self._tools:
            return None

        match = process.extractOne(name, self.names(), scorer=fuzz.WRatio, score_cutoff=70)

        if not match:
            return None

        suggestion, _score, _idx = match

        return suggestion

    def execute(self, call: ToolCall) -> str:
        """
        Run `call` against the registered tool.

        Raises:
            ToolNotFoundError: no tool is registered under `call.name`.

        Returns:
            The tool's text, or "Error executing tool '<name>': <message>" if it raised.
        """

        tool = self.get(call.name)

        if tool is None:
            raise ToolNotFoundError(call.name, self.suggest(call.name))

        try:
            return tool.execute(call.input)
        except Exception as e:
            logger.warning("Tool %s failed: %s", call.name, e)
            return f"Error executing tool '{call.name}': {e}"


def build_default_registry(cwd: Optional[Path] = None) -> ToolRegistry:
    """Create a registry holding every built-in tool. `cwd` bounds file access and command execution."""

    from tools import files, shell, todos, web

    root = Path(cwd) if cwd is not None else Path.cwd()
    registry = ToolRegistry()

    registry.register(files.read_file_tool(root))
    registry.register(shell.execute_command_tool(root))
    registry.register(web.http_request_tool())
    registry.register(web.search_tool())
    registry.register(todos.todo_write_tool())

    return registry
