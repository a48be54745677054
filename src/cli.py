"""
src/cli.py

Line-oriented prompt around the orchestrator. Type `exit` to quit.

Extra commands:
    /todos   show the task list
    /run     work through every pending task
    /clear   start a new conversation
"""


import argparse
import sys
from typing import List, Optional, TextIO

from config import DEFAULT_MODEL, EXIT_COMMAND, MAX_TOOL_ROUNDS, configure_logging
from orchestrator.llm_openai import OpenAIChat
from orchestrator.models import TaskItem
from orchestrator.router import Orchestrator
from orchestrator import tasks as tasklist
from tools.registry import build_default_registry
from tools.todos import format_summary


def build_orchestrator(model: str = DEFAULT_MODEL, max_rounds: int = MAX_TOOL_ROUNDS, out: TextIO = sys.stdout) -> Orchestrator:

    def on_progress(tasks: List[TaskItem]) -> None:
        print(f"📋 {tasklist.progress_line(tasks)}", file=out)

    return Orchestrator(
        build_default_registry(),
        OpenAIChat(model=model),
        max_rounds=max_rounds,
        on_progress=on_progress,
    )

def handle_line(orch: Orchestrator, line: str) -> Optional[str]:
    """Process one input line. Returns the text to print, or None when the session should end."""

    text = line.strip()

    if text.lower() == EXIT_COMMAND:
        return None
    if not text:
        return ""
    if text == "/todos":
        return format_summary(orch.tasks)
    if text == "/clear":
        orch.clear()
        return "Conversation cleared."
    if text == "/run":
        return orch.run_all_pending().message

    return orch.chat(text)

def repl(orch: Orchestrator, stdin: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:

    print(f'🤖 Agent started! Type "{EXIT_COMMAND}" to quit.\n', file=out)

    while True:
        print("You: ", end="", file=out, flush=True)
        line = stdin.readline()

        if not line:
            break

        try:
            reply = handle_line(orch, line)
        except Exception as e:
            # Endpoint failures end the turn, not the session
            print(f"❌ Error: {e}", file=out)
            continue

        if reply is None:
            break
        if reply:
            print(f"🤖 Agent: {reply}\n", file=out)

    print("👋 Goodbye!", file=out)

    return 0

def main(argv: Optional[List[str]] = None) -> int:

    ap = argparse.ArgumentParser(prog="agent", description="Tool-calling assistant")
    ap.add_argument("--model", default=DEFAULT_MODEL)
    ap.add_argument("--max-rounds", type=int, default=MAX_TOOL_ROUNDS)
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    return repl(build_orchestrator(args.model, args.max_rounds))


if __name__ == "__main__":

    sys.exit(main())

# EOF
