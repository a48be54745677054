"""Shared fixtures: a scripted completion endpoint and small registries."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Union

import pytest

from orchestrator.models import ContentBlock, TextBlock, ToolUseBlock, Turn
from tools.registry import Tool, ToolRegistry, object_schema
from tools.todos import todo_write_tool


Reply = Union[List[ContentBlock], Callable[[List[Turn]], List[ContentBlock]]]


class ScriptedModel:
    """Completion endpoint double. Replays scripted replies and records every call."""

    def __init__(self, replies: List[Reply]):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, turns: List[Turn], tools: List[Dict[str, Any]], max_tokens: int) -> List[ContentBlock]:
        self.calls.append({"turns": list(turns), "tools": tools, "max_tokens": max_tokens})
        if not self.replies:
            return [TextBlock(text="done")]
        reply = self.replies.pop(0)
        return reply(turns) if callable(reply) else reply


def text(value: str) -> List[ContentBlock]:
    return [TextBlock(text=value)]


def tool_use(name: str, input: Dict[str, Any], id: str = "call_1") -> ToolUseBlock:
    return ToolUseBlock(id=id, name=name, input=input)


def todos(*items: tuple) -> Dict[str, Any]:
    """todos(("a", "Write docs", "pending"), ...) -> todo_write input."""
    return {
        "todos": [
            {"id": i, "content": c, "status": s, "priority": p[0] if p else "medium"}
            for i, c, s, *p in items
        ]
    }


def echo_tool(name: str = "echo") -> Tool:
    return Tool(
        name=name,
        description="Echo the given text",
        input_schema=object_schema({"text": {"type": "string"}}, required=["text"]),
        execute=lambda args: f"echo: {args.get('text', '')}",
    )


def failing_tool(name: str = "boom") -> Tool:
    def _execute(args):
        raise RuntimeError("kaboom")

    return Tool(
        name=name,
        description="Always fails",
        input_schema=object_schema({}),
        execute=_execute,
    )


@pytest.fixture
def registry() -> ToolRegistry:
    reg = ToolRegistry()
    reg.register(echo_tool())
    reg.register(failing_tool())
    reg.register(todo_write_tool())
    return reg
