"""
src/orchestrator/router.py

Router: owns the conversation and the task list, runs the request -> dispatch -> fold loop,
and returns a tidy result.

One turn:
  AwaitingModel     append the caller's text, call the model with full history + tool definitions,
                    append its reply as an assistant turn
  Done              the reply has no tool calls -> return its first text
  DispatchingTools  run every tool call in order, fold all results into one user turn,
                    append any synthetic task directive, go back to AwaitingModel
"""


import logging
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
from pydantic import ValidationError

from config import MAX_TOKENS, MAX_TOOL_ROUNDS, NO_RESPONSE_TEXT
from orchestrator import prompts, tasks as tasklist
from orchestrator.conversation import Conversation
from orchestrator.models import (
    AuditEntry,
    ContentBlock,
    OrchestratorResult,
    SequenceReport,
    TaskItem,
    TaskStatus,
    ToolCall,
    ToolResultBlock,
    ToolUseBlock,
    Turn,
)
from tools.registry import ToolNotFoundError, ToolRegistry
from tools.todos import TOOL_NAME as TODO_TOOL, parse_todos


logger = logging.getLogger(__name__)

# (turns, tool definitions, max_tokens) -> content blocks
CompletionFn = Callable[[List[Turn], List[Dict[str, Any]], int], List[ContentBlock]]
ProgressFn = Callable[[List[TaskItem]], None]


class Orchestrator:

    def __init__(
            self,
            registry: ToolRegistry,
            complete: CompletionFn,
            *,
            max_tokens: int = MAX_TOKENS,
            max_rounds: int = MAX_TOOL_ROUNDS,
            on_progress: Optional[ProgressFn] = None,
    ):

        self.registry = registry
        self.complete = complete
        self.max_tokens = max_tokens
        self.max_rounds = max_rounds
        self.on_progress = on_progress

        self.conversation = Conversation()
        self._tasks: List[TaskItem] = []
        self._directives: List[str] = []
        self._directed: Set[str] = set()
        self._stalls: List[TaskItem] = []
        self._auto_progress = True

    # -------- State access -----------------------------------------------------
    @property
    def history(self) -> List[Turn]:

        return self.conversation.turns

    @property
    def tasks(self) -> List[TaskItem]:

        return list(self._tasks)

    def clear(self) -> None:
        """Forget the conversation and the task list."""

        self.conversation.clear()
        self._tasks = []
        self._directives = []
        self._directed = set()
        self._stalls = []

    # -------- Orchestrate ------------------------------------------------------
    def chat(self, user_text: str) -> str:

        return self.run_turn(user_text).summary

    def run_turn(self, user_text: str) -> OrchestratorResult:
        """
        Entry point: append the caller's text and loop until the model answers without tool calls.

        `max_rounds` bounds the model calls spent on the caller's request and, separately, on each
        task that auto-progression directs the model to. Errors raised by the completion callable
        propagate unchanged.
        """

        audit: List[AuditEntry] = []
        self.conversation.add("user", user_text)
        definitions = self.registry.get_tool_definitions()
        self._directed = set()
        rounds = 0
        budget = self.max_rounds

        while budget > 0:
            budget -= 1
            rounds += 1
            reply = self._ask_model(definitions)
            tool_uses = reply.tool_uses()

            if not tool_uses:
                audit.append(AuditEntry(step=f"model_round_{rounds}", ok=True, detail="No tool call: returning text."))
                return OrchestratorResult(summary=reply.first_text() or NO_RESPONSE_TEXT, rounds=rounds, audit=audit)

            results = [self._dispatch(tu, audit) for tu in tool_uses]
            self.conversation.add("user", results)

            while self._stalls:
                task = self._stalls.pop(0)
                audit.append(AuditEntry(step="task_stalled", ok=False, detail=f"Task {task.id} came back after its directive: {task.content}"))

            # Directives queued by auto-progression follow the results they were derived from;
            # each one opens a fresh round budget for its task
            while self._directives:
                directive = self._directives.pop(0)
                self.conversation.add("user", directive)
                audit.append(AuditEntry(step="auto_progress", ok=True, detail=directive))
                budget = self.max_rounds

        active = tasklist.first_in_progress(self._tasks)
        if active is not None and active.id in self._directed:
            logger.warning("Task %s still in progress after %d rounds", active.id, self.max_rounds)
            audit.append(AuditEntry(step="task_stalled", ok=False, detail=f"Task {active.id} still in progress: {active.content}"))

        # Safety stop: ask for a final answer with no tools declared
        logger.warning("Stopped after %d tool rounds", rounds)
        reply = self._ask_model([])
        audit.append(AuditEntry(step="max_rounds_reached", ok=True, detail="Stopped after max rounds; summarised."))

        return OrchestratorResult(summary=reply.first_text() or NO_RESPONSE_TEXT, rounds=rounds + 1, audit=audit)

    def _ask_model(self, definitions: List[Dict[str, Any]]) -> Turn:

        blocks = self.complete(self.conversation.turns, definitions, self.max_tokens)

        # Echo every reply back, even an empty one
        return self.conversation.add("assistant", list(blocks))

    # -------- Tool execution bridge --------------------------------------------
    def _dispatch(self, tool_use: ToolUseBlock, audit: List[AuditEntry]) -> ToolResultBlock:

        call = ToolCall(name=tool_use.name, input=tool_use.input)
        audit.append(AuditEntry(step="tool_call", ok=True, detail=f"Calling {call.name}", tool_call=call))

        try:
            if call.name == TODO_TOOL and call.name in self.registry:
                text, is_error = self._write_todos(call)
            else:
                text, is_error = self.registry.execute(call), False
        except ToolNotFoundError as e:
            logger.error("Model requested an undeclared tool: %s", call.name)
            text, is_error = str(e), True

        audit.append(AuditEntry(step="tool_result", ok=not is_error, detail=text if is_error else "ok", tool_call=call))

        return ToolResultBlock(tool_use_id=tool_use.id, content=text, is_error=is_error)

    def _write_todos(self, call: ToolCall) -> Tuple[str, bool]:
        """Replace the owned task list wholesale, then echo the new state back to the model."""

        try:
            new_tasks = parse_todos(call.input)
        except ValidationError as e:
            return f"Error executing tool '{call.name}': {e}", True

        before = self._tasks
        self._tasks = new_tasks

        text = self.registry.execute(call)
        text = f"{text}\n\n{tasklist.render_state(self._tasks)}"

        if tasklist.has_progress_change(before, self._tasks):
            self._notify_progress()
            self._maybe_auto_progress()

        return text, False

    def _notify_progress(self) -> None:

        logger.info(tasklist.progress_line(self._tasks))

        if self.on_progress is not None:
            self.on_progress(self.tasks)

    def _maybe_auto_progress(self) -> Optional[TaskItem]:
        """
        Activate the first pending task when nothing is in progress and queue a directive for it.

        A task is directed at most once per caller turn; if it comes back to pending afterwards it is
        reported as stalled and auto-progression stops there.
        """

        if not self._auto_progress:
            return None

        task = tasklist.select_for_progression(self._tasks)

        if task is None:
            return None

        if task.id in self._directed:
            logger.warning("Task %s returned to pending after its directive; not directing it again", task.id)
            self._stalls.append(task)
            return None

        self._directed.add(task.id)
        self._tasks = tasklist.activate(self._tasks, task.id)
        self._directives.append(prompts.task_directive(task))
        logger.info("Auto-progressing to task %s: %s", task.id, task.content)

        return task

    # -------- Sequence execution -----------------------------------------------
    def run_all_pending(self) -> SequenceReport:
        """
        Drive the task list to completion one task per cycle.

        Each cycle activates the current in-progress task (or the next pending one) and runs a full
        turn with a directive for it. The sequence stops with a stalled report when that task is still
        in progress afterwards, or when a task that already had its cycle comes up again.
        """

        attempted = set()
        stalled: Optional[TaskItem] = None
        self._auto_progress = False

        try:
            while True:
                task = tasklist.first_in_progress(self._tasks) or tasklist.next_pending(self._tasks)

                if task is None:
                    break
                if task.id in attempted:
                    stalled = task
                    break

                attempted.add(task.id)
                self._tasks = tasklist.activate(self._tasks, task.id)
                self._notify_progress()
                logger.info("Sequence cycle %d: %s", len(attempted), task.content)

                self.run_turn(prompts.sequence_directive(task))

                after = tasklist.find(self._tasks, task.id)
                if after is not None and after.status == TaskStatus.IN_PROGRESS:
                    stalled = after
                    break
        finally:
            self._auto_progress = True

        if stalled is not None:
            logger.warning("Task %s did not leave in_progress; stopping sequence", stalled.id)

        return SequenceReport(
            completed=tasklist.count(self._tasks, TaskStatus.COMPLETED),
            total=len(self._tasks),
            cycles=len(attempted),
            stalled_task=stalled,
        )
