"""
src/orchestrator/tasks.py

Helpers over the orchestrator-owned task list: selection, change detection,
activation and the id-bearing state rendering echoed back to the model.
"""


from typing import Dict, List, Optional

from orchestrator.models import TaskItem, TaskStatus


_TRACKED = {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED}


def first_in_progress(tasks: List[TaskItem]) -> Optional[TaskItem]:

    return next((t for t in tasks if t.status == TaskStatus.IN_PROGRESS), None)

def next_pending(tasks: List[TaskItem]) -> Optional[TaskItem]:

    return next((t for t in tasks if t.status == TaskStatus.PENDING), None)

def find(tasks: List[TaskItem], task_id: str) -> Optional[TaskItem]:

    return next((t for t in tasks if t.id == task_id), None)

def count(tasks: List[TaskItem], status: TaskStatus) -> int:

    return sum(1 for t in tasks if t.status == status)

def has_progress_change(before: List[TaskItem], after: List[TaskItem]) -> bool:
    """
    True if the replacement list moved any item into or out of in_progress/completed,
    or if items were added or removed.
    """

    prior: Dict[str, TaskStatus] = {t.id: t.status for t in before}

    if set(prior) != {t.id for t in after}:
        return True

    for t in after:
        old = prior[t.id]
        if old != t.status and (old in _TRACKED or t.status in _TRACKED):
            return True

    return False

def select_for_progression(tasks: List[TaskItem]) -> Optional[TaskItem]:
    """The first pending item, unless something is already in progress (any number of them blocks)."""

    if first_in_progress(tasks) is not None:
        return None

    return next_pending(tasks)

def activate(tasks: List[TaskItem], task_id: str) -> List[TaskItem]:
    """Return a new list with `task_id` set to in_progress."""

    return [
        t.model_copy(update={"status": TaskStatus.IN_PROGRESS}) if t.id == task_id else t
        for t in tasks
    ]

def render_state(tasks: List[TaskItem]) -> str:

    if not tasks:
        return "Current task list state: (empty)"

    lines = ["Current task list state:"]
    for t in tasks:
        lines.append(f"- [{t.id}] {t.status.value} ({t.priority.value}): {t.content}")

    return "\n".join(lines)

def progress_line(tasks: List[TaskItem]) -> str:

    done = count(tasks, TaskStatus.COMPLETED)
    active = first_in_progress(tasks)
    line = f"Progress: {done}/{len(tasks)} completed"

    if active is not None:
        line += f" | In progress: {active.content}"

    return line
