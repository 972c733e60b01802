"""
promptdir

A directory of Markdown prompts served to AI agents over MCP, with an
in-memory metadata cache kept in sync by a filesystem watcher.

Quick Start:
    from promptdir import PromptCache, PromptStore

    store = PromptStore(PromptCache(Path("prompts")))
    await store.save_prompt("Code Review", "Review this diff...")
    prompts = await store.list_prompts()

CLI Usage:
    promptdir list
    promptdir add "Code Review" --file review.md
    promptdir mcp                      # stdio MCP server

Default Directory:
    prompts/ next to the installed package.
    Override with PROMPTS_DIR or --dir.

Environment Variables:
    PROMPTS_DIR      - Override the prompts directory
    PROMPTS_VERBOSE  - Set to 1 for debug logging on stderr
"""

__version__ = "1.2.0"

from .cache import PromptCache
from .errors import PromptError, PromptNotFoundError
from .store import PromptStore
from .types import PromptInfo

__all__ = [
    "PromptCache",
    "PromptError",
    "PromptInfo",
    "PromptNotFoundError",
    "PromptStore",
    "__version__",
]
