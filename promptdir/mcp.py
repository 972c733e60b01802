"""
MCP stdio server for the prompt directory.

Exposes prompt CRUD operations as MCP tools so AI agents can save, browse
and reuse prompts kept as Markdown files.

Usage:
    promptdir mcp                                   # stdio server (via CLI)
    claude mcp add prompts -- promptdir mcp         # Claude Code integration

The prompt list is served from an in-memory cache that a filesystem watcher
keeps current, so files edited outside the server appear without a restart.

Tool failures (missing prompt, empty content, bad difficulty, disk errors)
raise ToolError, which the server returns as an error result.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from .cache import PromptCache
from .cli import format_prompt_list
from .config import SERVER_NAME, load_config
from .errors import PromptNotFoundError
from .store import PromptStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Store (composition root)
# ---------------------------------------------------------------------------

_store: Optional[PromptStore] = None


def _get_store() -> PromptStore:
    """Lazy-init the store with default config (respects PROMPTS_DIR env)."""
    global _store
    if _store is None:
        config = load_config()
        cache = PromptCache(config.prompts_dir, preview_length=config.preview_length)
        _store = PromptStore(cache)
    return _store


@asynccontextmanager
async def _lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Warm the cache and start the watcher before serving; stop it on exit."""
    store = _get_store()
    prompts = await store.list_prompts()
    logger.info("Serving %d prompts from %s", len(prompts), store.prompts_dir)
    try:
        yield
    finally:
        await store.close()


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

mcp = FastMCP(
    SERVER_NAME,
    instructions=(
        "A library of reusable prompts stored as Markdown files. "
        "List prompts to browse titles and previews, get a prompt for its full text, "
        "and add or delete prompts to curate the library."
    ),
    lifespan=_lifespan,
)


# ---------------------------------------------------------------------------
# Tool annotations
# ---------------------------------------------------------------------------

_READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False)
_IDEMPOTENT = ToolAnnotations(idempotentHint=True, destructiveHint=False)
_DESTRUCTIVE = ToolAnnotations(destructiveHint=True, idempotentHint=False)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool(
    description="Add a new prompt to the collection",
    annotations=_IDEMPOTENT,
)
async def add_prompt(
    name: Annotated[str, Field(description="Name of the prompt")],
    content: Annotated[str, Field(description="Content of the prompt in markdown format")],
) -> str:
    """Save a prompt."""
    if not content:
        raise ToolError("Content is required for add_prompt")
    try:
        filename = await _get_store().save_prompt(name, content)
    except OSError as e:
        logger.error("Failed to save prompt %r: %s", name, e)
        raise ToolError(str(e)) from e
    return f'Prompt "{name}" saved as {filename}'


@mcp.tool(
    description="Retrieve a prompt by name",
    annotations=_READ_ONLY,
)
async def get_prompt(
    name: Annotated[str, Field(description="Name of the prompt to retrieve")],
) -> str:
    """Return a prompt's full content."""
    try:
        return await _get_store().read_prompt(name)
    except PromptNotFoundError as e:
        raise ToolError(str(e)) from e


@mcp.tool(
    description="List all available prompts",
    annotations=_READ_ONLY,
)
async def list_prompts() -> str:
    """List prompts with metadata and previews."""
    prompts = await _get_store().list_prompts()
    return format_prompt_list(prompts)


@mcp.tool(
    description="Delete a prompt by name",
    annotations=_DESTRUCTIVE,
)
async def delete_prompt(
    name: Annotated[str, Field(description="Name of the prompt to delete")],
) -> str:
    """Delete a prompt."""
    try:
        await _get_store().delete_prompt(name)
    except PromptNotFoundError as e:
        raise ToolError(str(e)) from e
    return f'Prompt "{name}" deleted successfully'


@mcp.tool(
    description=(
        "Create a prompt with a metadata header (title, description, category, "
        "tags, difficulty, author) followed by its content"
    ),
    annotations=_IDEMPOTENT,
)
async def create_structured_prompt(
    name: Annotated[str, Field(description="Name of the prompt")],
    title: Annotated[str, Field(description="Human-readable title")],
    description: Annotated[str, Field(description="What the prompt is for")],
    content: Annotated[str, Field(description="Prompt body in markdown format")],
    category: Annotated[Optional[str], Field(
        description='Category, e.g. "development" or "writing"',
    )] = None,
    tags: Annotated[Optional[list[str]], Field(
        description="Tags for finding the prompt later",
    )] = None,
    difficulty: Annotated[Optional[str], Field(
        description="One of: beginner, intermediate, advanced",
    )] = None,
    author: Annotated[Optional[str], Field(description="Author of the prompt")] = None,
) -> str:
    """Save a prompt with a frontmatter header."""
    if not content:
        raise ToolError("Content is required for create_structured_prompt")
    try:
        filename = await _get_store().create_structured_prompt(
            name, content,
            title=title, description=description, category=category,
            tags=tags, difficulty=difficulty, author=author,
        )
    except (ValueError, OSError) as e:
        raise ToolError(str(e)) from e
    return f'Structured prompt "{name}" saved as {filename}'


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Run the MCP stdio server."""
    import os
    import signal
    # anyio's stdin reader shields the blocking readline from cancellation,
    # so the first Ctrl+C would never take effect.
    signal.signal(signal.SIGINT, lambda *_: os._exit(130))

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
