"""
src/orchestrator/models.py

Pydantic models for conversation turns, tool-calling I/O, the task list and audit entries.
"""


from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# -------- Conversation content --------------------------------------------------


class TextBlock(BaseModel):

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    """An action request from the model: tool name, input and a correlation id."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    """The outcome of one action request, correlated by `tool_use_id`."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: bool = False


ContentBlock = Annotated[Union[TextBlock, ToolUseBlock, ToolResultBlock], Field(discriminator="type")]


class Turn(BaseModel):

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: Union[str, List[ContentBlock]]

    def tool_uses(self) -> List[ToolUseBlock]:
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, ToolUseBlock)]

    def first_text(self) -> Optional[str]:
        if isinstance(self.content, str):
            return self.content
        return next((b.text for b in self.content if isinstance(b, TextBlock)), None)


# -------- Task list -------------------------------------------------------------


class TaskStatus(str, Enum):

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskItem(BaseModel):

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM


# -------- Dispatch & audit ------------------------------------------------------


class ToolCall(BaseModel):

    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class AuditEntry(BaseModel):

    step: str
    ok: bool
    detail: str
    tool_call: Optional[ToolCall] = None
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class OrchestratorResult(BaseModel):

    summary: str
    rounds: int
    audit: List[AuditEntry]


class SequenceReport(BaseModel):
    """Outcome of running every pending task in order."""

    completed: int
    total: int
    cycles: int
    stalled_task: Optional[TaskItem] = None

    @property
    def stalled(self) -> bool:
        return self.stalled_task is not None

    @property
    def message(self) -> str:
        if self.stalled_task is not None:
            return (
                f"Stopped: task '{self.stalled_task.content}' (id: {self.stalled_task.id}) "
                f"is still in progress after a full cycle. Completed {self.completed}/{self.total} tasks."
            )
        return f"All tasks processed. Completed {self.completed}/{self.total} tasks."
