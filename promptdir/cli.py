"""
CLI interface for the prompt directory.

Usage:
    promptdir list
    promptdir get code_review
    promptdir add "Code Review" --file review.md
    promptdir mcp
"""

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from .cache import PromptCache
from .config import PROMPTS_DIR_ENV, VERBOSE_ENV, load_config
from .errors import PromptNotFoundError
from .logging_config import configure_quiet_mode, enable_debug_mode
from .store import PromptStore
from .types import PromptInfo

# Set PROMPTS_VERBOSE=1 to enable debug mode via environment
if os.environ.get(VERBOSE_ENV) == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from . import __version__
        print(f"promptdir {__version__}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_dir_override: Optional[Path] = None


def _dir_callback(value: Optional[Path]):
    global _dir_override
    _dir_override = value


def _get_dir_override() -> Optional[Path]:
    return _dir_override


app = typer.Typer(
    name="promptdir",
    help="Markdown prompt library served over MCP.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


# -----------------------------------------------------------------------------
# Rendering (shared with the MCP server)
# -----------------------------------------------------------------------------

def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def format_prompt(prompt: PromptInfo) -> str:
    """Markdown block for one prompt: heading, metadata, preview."""
    output = f"## {prompt.name}\n"
    if prompt.metadata:
        output += "**Metadata:**\n"
        for key, value in prompt.metadata.items():
            output += f"- {key}: {_format_value(value)}\n"
        output += "\n"
    output += f"**Preview:** {prompt.preview}\n"
    return output


def format_prompt_list(prompts: list[PromptInfo]) -> str:
    """Markdown listing of prompts, or a notice when there are none."""
    if not prompts:
        return "No prompts available"
    return "# Available Prompts\n\n" + "\n---\n\n".join(format_prompt(p) for p in prompts)


def _prompts_to_json(prompts: list[PromptInfo]) -> str:
    return json.dumps([p.to_dict() for p in prompts], indent=2, ensure_ascii=False, default=str)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _get_store() -> PromptStore:
    config = load_config(_get_dir_override())
    return PromptStore(PromptCache(config.prompts_dir, preview_length=config.preview_length))


def _read_content(file: Optional[Path]) -> str:
    """Prompt content from --file, else stdin."""
    if file is not None:
        return file.read_text(encoding="utf-8")
    if sys.stdin.isatty():
        typer.echo("Error: provide --file or pipe content on stdin", err=True)
        raise typer.Exit(1)
    return sys.stdin.read()


async def _list_once(store: PromptStore) -> list[PromptInfo]:
    """Scan without leaving a watcher running (the CLI exits right away)."""
    await store.cache.initialize()
    return sorted(store.cache.all(), key=lambda p: p.name)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    prompts_dir: Annotated[Optional[Path], typer.Option(
        "--dir", "-d",
        envvar=PROMPTS_DIR_ENV,
        help="Path to the prompts directory",
        callback=_dir_callback,
        is_eager=True,
    )] = None,
):
    """Markdown prompt library served over MCP."""


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command("list")
def list_cmd(
    output_json: Annotated[bool, typer.Option(
        "--json", "-j", help="Output as JSON",
    )] = False,
):
    """List prompts with their metadata and a preview."""
    prompts = asyncio.run(_list_once(_get_store()))
    if output_json:
        typer.echo(_prompts_to_json(prompts))
    else:
        typer.echo(format_prompt_list(prompts))


@app.command()
def get(
    name: Annotated[str, typer.Argument(help="Prompt name")],
):
    """Print a prompt's full content."""
    try:
        content = asyncio.run(_get_store().read_prompt(name))
    except PromptNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(content, nl=False)


@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Prompt name")],
    file: Annotated[Optional[Path], typer.Option(
        "--file", "-f", help="Read content from this file instead of stdin",
        exists=True, dir_okay=False,
    )] = None,
):
    """Add or replace a prompt."""
    content = _read_content(file)
    filename = asyncio.run(_get_store().save_prompt(name, content))
    typer.echo(f'Prompt "{name}" saved as {filename}')


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Prompt name")],
    title: Annotated[str, typer.Option("--title", help="Prompt title")],
    description: Annotated[str, typer.Option("--description", help="What the prompt does")],
    category: Annotated[Optional[str], typer.Option("--category", help="Category")] = None,
    tag: Annotated[Optional[list[str]], typer.Option(
        "--tag", "-t", help="Tag (repeatable)",
    )] = None,
    difficulty: Annotated[Optional[str], typer.Option(
        "--difficulty", help="beginner, intermediate or advanced",
    )] = None,
    author: Annotated[Optional[str], typer.Option("--author", help="Author")] = None,
    file: Annotated[Optional[Path], typer.Option(
        "--file", "-f", help="Read content from this file instead of stdin",
        exists=True, dir_okay=False,
    )] = None,
):
    """Add a prompt with a frontmatter header."""
    content = _read_content(file)
    try:
        filename = asyncio.run(_get_store().create_structured_prompt(
            name, content,
            title=title, description=description, category=category,
            tags=tag, difficulty=difficulty, author=author,
        ))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f'Structured prompt "{name}" saved as {filename}')


@app.command()
def delete(
    name: Annotated[str, typer.Argument(help="Prompt name")],
):
    """Delete a prompt."""
    try:
        asyncio.run(_get_store().delete_prompt(name))
    except PromptNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f'Prompt "{name}" deleted successfully')


@app.command()
def mcp():
    """Start MCP stdio server for AI agent integration."""
    if _get_dir_override() is not None:
        os.environ[PROMPTS_DIR_ENV] = str(_get_dir_override())
    from .mcp import main as mcp_main
    mcp_main()


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="promptdir CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
