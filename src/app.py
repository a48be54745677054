"""
src/app.py

Gradio front-end: one command box wired to the orchestrator, with the latest reply,
the task list and the audit trail of the last turn.
"""


import json
from typing import Optional, Tuple
import gradio as gr

from orchestrator import tasks as tasklist
from orchestrator.llm_openai import OpenAIChat
from orchestrator.models import OrchestratorResult
from orchestrator.router import Orchestrator
from tools.registry import build_default_registry
from tools.todos import format_summary


APP_TITLE = "Tool Agent (Local Demo)"
APP_DESC = (
    "Type requests like: "
    "'what does README.md say?', 'run git status' or 'search for the latest httpx release'. "
    "Multi-step work is tracked in the task list; 'Run all pending' works through it."
)


def render_tasks(orch: Orchestrator) -> str:

    tasks = orch.tasks

    if not tasks:
        return format_summary(tasks)

    return f"{format_summary(tasks)}\n\n{tasklist.progress_line(tasks)}"

def render_audit(result: OrchestratorResult) -> str:

    return json.dumps(
        {
            "rounds": result.rounds,
            "audit_log": [e.model_dump(mode="json") for e in result.audit],
        },
        indent=2,
        ensure_ascii=False,
    )

def handle_command(orch: Orchestrator, command: str) -> Tuple[str, str, str]:
    """Run one turn. Returns (reply, task list, audit JSON)."""

    command = (command or "").strip()

    if not command:
        return "", render_tasks(orch), ""

    try:
        result = orch.run_turn(command)
    except Exception as e:
        return f"Error: {e}", render_tasks(orch), ""

    return result.summary, render_tasks(orch), render_audit(result)

def handle_run_all(orch: Orchestrator) -> Tuple[str, str]:

    try:
        report = orch.run_all_pending()
    except Exception as e:
        return f"Error: {e}", render_tasks(orch)

    return report.message, render_tasks(orch)

def handle_clear(orch: Orchestrator) -> Tuple[str, str, str]:

    orch.clear()

    return "Conversation cleared.", render_tasks(orch), ""

def app(orch: Optional[Orchestrator] = None):

    orch = orch or Orchestrator(build_default_registry(), OpenAIChat())

    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)

        with gr.Row():
            with gr.Column(scale=3):
                cmd = gr.Textbox(
                    label="Command",
                    placeholder="e.g., read pyproject.toml and list the dependencies",
                    lines=2
                )
                with gr.Row():
                    run = gr.Button("Send", variant="primary")
                    run_all = gr.Button("Run all pending")
                    clear = gr.Button("Clear")
                reply = gr.Markdown(label="Reply")
            with gr.Column(scale=2):
                todos = gr.Textbox(label="Task list", value=render_tasks(orch), lines=10, interactive=False)
                audit = gr.Code(label="Audit log", language="json")

        # Wire buttons
        run.click(
            fn=lambda command: handle_command(orch, command),
            inputs=[cmd],
            outputs=[reply, todos, audit]
        )
        cmd.submit(
            fn=lambda command: handle_command(orch, command),
            inputs=[cmd],
            outputs=[reply, todos, audit]
        )
        run_all.click(
            fn=lambda: handle_run_all(orch),
            inputs=[],
            outputs=[reply, todos]
        )
        clear.click(
            fn=lambda: handle_clear(orch),
            inputs=[],
            outputs=[reply, todos, audit]
        )

    return demo


if __name__ == "__main__":

    from config import configure_logging

    configure_logging()
    app().launch()

# EOF
