"""
src/tools/shell.py — execute_command tool.

Runs a shell command in the tool's working directory with a fixed timeout.
A non-zero exit, a spawn error or a timeout is a tool failure.
"""


import logging
import subprocess
from pathlib import Path
from typing import Any, Dict

from config import COMMAND_TIMEOUT_S
from tools.registry import Tool, ToolExecutionError, object_schema


logger = logging.getLogger(__name__)

TOOL_NAME = "execute_command"
NO_OUTPUT = "Command executed successfully with no output"


def format_output(stdout: str, stderr: str) -> str:
    """Combine stdout/stderr the way results are shown to the model."""

    result = ""

    if stdout:
        result += f"Output:\n{stdout}"
    if stderr:
        if result:
            result += "\n\n"
        result += f"Errors:\n{stderr}"

    return result or NO_OUTPUT

def execute_command(command: str, *, cwd: Path, timeout: int = COMMAND_TIMEOUT_S) -> str:
    """
    Run `command` through the shell.

    Raises:
        ToolExecutionError: the command exits non-zero, cannot be started, or times out.
    """

    logger.debug("Running command in %s: %s", cwd, command)

    try:
        proc = subprocess.run(
            command,
            shell=True,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolExecutionError(f"Command execution failed: timed out after {timeout}s: {command}") from e
    except OSError as e:
        raise ToolExecutionError(f"Command execution failed: {e}") from e

    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip()
        raise ToolExecutionError(
            f"Command execution failed: Command failed with exit code {proc.returncode}: {command}"
            + (f"\n{detail}" if detail else "")
        )

    return format_output(proc.stdout, proc.stderr)

def execute_command_tool(cwd: Path, timeout: int = COMMAND_TIMEOUT_S) -> Tool:

    def _execute(args: Dict[str, Any]) -> str:

        command = str(args.get("command") or "").strip()

        if not command:
            raise ToolExecutionError("Command execution failed: 'command' is required")

        return execute_command(command, cwd=cwd, timeout=timeout)

    return Tool(
        name=TOOL_NAME,
        description="Execute a shell command and return the output",
        input_schema=object_schema(
            {
                "command": {"type": "string", "description": "The shell command to execute"},
            },
            required=["command"],
        ),
        execute=_execute,
    )
