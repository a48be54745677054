"""
src/orchestrator/prompts.py

System prompt and the synthetic directives the loop injects for task progression.
"""


SYSTEM_PROMPT = (
    "You are a capable assistant with access to tools for reading files, running shell commands, "
    "making HTTP requests, searching the web and tracking a task list. "
    "Use tools when they help; prefer actions over long explanations. "
    "For multi-step work, write a task list with todo_write, keep exactly one task in_progress, "
    "and mark each task completed as soon as it is done."
)

TASK_DIRECTIVE = (
    'Work on this one task now: "{content}" (id: {id}). '
    "When it is done, call todo_write with the full list and this task marked completed, then stop. "
    "Do not start any other task."
)

SEQUENCE_DIRECTIVE = (
    'Next task in the sequence: "{content}" (id: {id}, priority: {priority}). '
    "Complete only this task, then call todo_write marking it completed and stop."
)


def task_directive(task) -> str:

    return TASK_DIRECTIVE.format(content=task.content, id=task.id)

def sequence_directive(task) -> str:

    return SEQUENCE_DIRECTIVE.format(content=task.content, id=task.id, priority=task.priority.value)
