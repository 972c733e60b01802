"""
Shared pytest fixtures for promptdir tests.

Every test gets its own prompts directory under tmp_path.
"""

import asyncio
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from promptdir.cache import PromptCache
from promptdir.store import PromptStore


def make_prompt_text(body: str, metadata: dict[str, Any] | None = None) -> str:
    """Prompt file text with an optional frontmatter header."""
    if not metadata:
        return body
    header = yaml.safe_dump(metadata, sort_keys=False)
    return f"---\n{header}---\n{body}"


async def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll predicate until it holds or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.05)
    return predicate()


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    d = tmp_path / "prompts"
    d.mkdir()
    return d


@pytest.fixture
def write_prompt(prompts_dir: Path):
    """Write a prompt file directly, bypassing the store."""

    def _write(filename: str, body: str = "Prompt body", metadata: dict | None = None) -> Path:
        path = prompts_dir / filename
        path.write_text(make_prompt_text(body, metadata), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cache(prompts_dir: Path) -> PromptCache:
    return PromptCache(prompts_dir)


@pytest.fixture
def store(cache: PromptCache) -> PromptStore:
    return PromptStore(cache)


@pytest.fixture
def wait_for():
    """Async poller for conditions set by watcher threads."""
    return _wait_for
