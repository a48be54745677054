"""
src/tools/files.py — read_file tool.

Reads a UTF-8 text file. The resolved path must stay inside the working directory
the tool was created for.
"""


from pathlib import Path
from typing import Any, Dict

from tools.registry import Tool, ToolExecutionError, object_schema


TOOL_NAME = "read_file"


def _resolve_inside(root: Path, file_path: str) -> Path:

    root = root.resolve()
    candidate = Path(file_path).expanduser()

    if not candidate.is_absolute():
        candidate = root / candidate

    resolved = candidate.resolve()

    if resolved != root and root not in resolved.parents:
        raise PermissionError("Access denied: file must be within current directory")

    return resolved

def read_file(root: Path, file_path: str) -> str:
    """
    Return the contents of `file_path`, resolved relative to `root`.

    Raises:
        ToolExecutionError: the path escapes `root` or the file cannot be read.
    """

    try:
        path = _resolve_inside(root, file_path)
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ToolExecutionError(f"Failed to read file: {e}") from e

    return f"File contents of {file_path}:\n\n{content}"

def read_file_tool(root: Path) -> Tool:

    def _execute(args: Dict[str, Any]) -> str:

        file_path = args.get("file_path")

        if not file_path:
            raise ToolExecutionError("Failed to read file: 'file_path' is required")

        return read_file(root, str(file_path))

    return Tool(
        name=TOOL_NAME,
        description="Read the contents of a file from the filesystem",
        input_schema=object_schema(
            {
                "file_path": {"type": "string", "description": "The path to the file to read"},
            },
            required=["file_path"],
        ),
        execute=_execute,
    )
