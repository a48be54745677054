"""
src/tools/todos.py — todo_write tool.

The tool takes a full replacement task list and returns a formatted summary:
counts by status, then one line per item (status glyph, priority glyph, content).
It keeps no state; the orchestrator owns the task list and special-cases this tool.
"""


from __future__ import annotations
from typing import Any, Dict, Iterable, List
from pydantic import TypeAdapter

from config import PRIORITY_GLYPHS, STATUS_GLYPHS
from orchestrator.models import TaskItem, TaskPriority, TaskStatus
from tools.registry import Tool, object_schema


TOOL_NAME = "todo_write"
EMPTY_NOTICE = "No todos in the list."

_TASK_LIST = TypeAdapter(List[TaskItem])


def parse_todos(args: Dict[str, Any]) -> List[TaskItem]:
    """Validate the tool input into TaskItems. Raises pydantic.ValidationError on a malformed shape."""

    return _TASK_LIST.validate_python(args.get("todos", []))

def count_by_status(tasks: Iterable[TaskItem]) -> Dict[TaskStatus, int]:

    counts = {s: 0 for s in TaskStatus}

    for t in tasks:
        counts[t.status] += 1

    return counts

def render_item(task: TaskItem) -> str:

    return f"{STATUS_GLYPHS[task.status.value]} {PRIORITY_GLYPHS[task.priority.value]} {task.content}"

def format_summary(tasks: List[TaskItem]) -> str:

    counts = count_by_status(tasks)
    lines = [
        f"Todo list updated ({len(tasks)} total)",
        (
            f"Pending: {counts[TaskStatus.PENDING]}, "
            f"In progress: {counts[TaskStatus.IN_PROGRESS]}, "
            f"Completed: {counts[TaskStatus.COMPLETED]}"
        ),
        "",
    ]

    if not tasks:
        lines.append(EMPTY_NOTICE)
    else:
        lines.extend(render_item(t) for t in tasks)

    return "\n".join(lines)

def todo_write(args: Dict[str, Any]) -> str:

    return format_summary(parse_todos(args))

def todo_write_tool() -> Tool:

    return Tool(
        name=TOOL_NAME,
        description=(
            "Create or replace the task list for the current work. "
            "Always send the complete list; it overwrites the previous one. "
            "Keep exactly one task in_progress while working and mark tasks completed as soon as they are done."
        ),
        input_schema=object_schema(
            {
                "todos": {
                    "type": "array",
                    "description": "The full, updated task list",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string", "description": "Stable unique id for the task"},
                            "content": {"type": "string", "description": "What needs to be done"},
                            "status": {"type": "string", "enum": [s.value for s in TaskStatus]},
                            "priority": {"type": "string", "enum": [p.value for p in TaskPriority]},
                        },
                        "required": ["id", "content", "status", "priority"],
                    },
                },
            },
            required=["todos"],
        ),
        execute=todo_write,
    )
