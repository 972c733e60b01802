"""
Errors for promptdir, and error logging for the CLI and server.

Only PromptNotFoundError is meant to reach callers; I/O problems while
scanning or watching are logged and absorbed by the cache.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ERROR_LOG_NAME = ".promptdir-errors.log"


class PromptError(Exception):
    """Base class for promptdir errors."""


class PromptNotFoundError(PromptError, FileNotFoundError):
    """The requested prompt has no file in the prompts directory."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Prompt "{name}" not found')

    def __str__(self) -> str:
        return f'Prompt "{self.name}" not found'


def _error_log_path(prompts_dir: Optional[Path] = None) -> Path:
    """Resolve error log path, respecting PROMPTS_DIR.

    The log has no .md suffix, so the cache never indexes it.
    """
    if prompts_dir is None:
        env_dir = os.environ.get("PROMPTS_DIR")
        prompts_dir = Path(env_dir).expanduser() if env_dir else None
    if prompts_dir is not None:
        return Path(prompts_dir) / ERROR_LOG_NAME
    return Path.home() / ".promptdir" / "errors.log"


def log_exception(exc: Exception, context: str = "", prompts_dir: Optional[Path] = None) -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)
        prompts_dir: Directory to write the log into (default: PROMPTS_DIR)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path(prompts_dir)
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # never fail over the error log itself
    return log_path
