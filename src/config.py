"""
src/config.py
"""


import logging
import os
from typing import Dict, Optional
from dotenv import load_dotenv


def load_env(path: Optional[str] = None) -> bool:
    """Load a .env file (ENV_FILE, default ./.env) without overriding variables already set."""

    return load_dotenv(path or os.getenv("ENV_FILE", ".env"))


# Runs before the constants below are read
load_env()


def _env_int(name: str, default: int) -> int:

    raw = os.getenv(name)

    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from None


# Completion endpoint
DEFAULT_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
MAX_TOKENS: int = _env_int("MAX_TOKENS", 1000)
MAX_TOOL_ROUNDS: int = _env_int("MAX_TOOL_ROUNDS", 25)     # Model calls per turn before forcing a final answer

# Tool bounds
COMMAND_TIMEOUT_S: int = _env_int("COMMAND_TIMEOUT_S", 30)
HTTP_TIMEOUT_S: int = _env_int("HTTP_TIMEOUT_S", 10)
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE")

# Web search (Brave)
BRAVE_SEARCH_URL: str = os.getenv("BRAVE_SEARCH_URL", "https://api.search.brave.com/res/v1/web/search")
DEFAULT_SEARCH_COUNT: int = 10
MAX_SEARCH_COUNT: int = 20
DEFAULT_COUNTRY: str = "US"

# Front-end
EXIT_COMMAND: str = "exit"
NO_RESPONSE_TEXT: str = "(no response text)"

# Display glyphs for the task list
STATUS_GLYPHS: Dict[str, str] = {
    "pending": "⏳",
    "in_progress": "🔄",
    "completed": "✅",
}
PRIORITY_GLYPHS: Dict[str, str] = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🟢",
}


def openai_api_key() -> Optional[str]:

    return os.getenv("OPENAI_API_KEY")

def brave_api_key() -> Optional[str]:

    return os.getenv("BRAVE_API_KEY")

def configure_logging(verbose: int = 0) -> None:
    """Set up root logging once; LOG_LEVEL overrides the verbosity flag."""

    level = logging.DEBUG if verbose >= 1 else logging.WARNING

    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        level = getattr(logging, env_level.upper(), level)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
# EOF
