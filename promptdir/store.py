"""
File operations for prompts (create, read, list, delete).

Reads and writes go straight to disk. Listing is served from the
PromptCache, which the first list call loads and starts watching.

Writes never touch the cache: the watcher's event for the written file
updates it shortly afterwards. A list right after a save or delete may
therefore still show the previous state.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .cache import PromptCache
from .errors import PromptNotFoundError
from .frontmatter import render_prompt
from .naming import encode_name, prompt_filename
from .types import PromptInfo, validate_difficulty

logger = logging.getLogger(__name__)


class PromptStore:
    """CRUD operations on the prompts directory, backed by a metadata cache."""

    def __init__(self, cache: PromptCache):
        self.cache = cache

    @property
    def prompts_dir(self) -> Path:
        return self.cache.prompts_dir

    def _path(self, name: str) -> Path:
        return self.prompts_dir / prompt_filename(name)

    async def _ensure_dir(self) -> None:
        await asyncio.to_thread(self.prompts_dir.mkdir, parents=True, exist_ok=True)

    async def list_prompts(self) -> list[PromptInfo]:
        """
        List all prompts from the cache, sorted by name.

        An empty cache triggers a full scan and starts the watcher, so the
        first caller pays for the scan.
        """
        if self.cache.is_empty():
            await self.cache.refresh()
            self.cache.start_watching()
        return sorted(self.cache.all(), key=lambda p: p.name)

    async def read_prompt(self, name: str) -> str:
        """Return the full text of a prompt file."""
        path = self._path(name)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Read failed for %s: %s", path, e)
            raise PromptNotFoundError(name) from e

    async def save_prompt(self, name: str, content: str) -> str:
        """
        Write a prompt, replacing any existing file with the same stem.

        Returns:
            The filename written, e.g. ``hello_world_.md``
        """
        await self._ensure_dir()
        filename = prompt_filename(name)
        path = self.prompts_dir / filename
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        logger.debug("Saved prompt %r as %s", name, filename)
        return filename

    async def create_structured_prompt(
        self,
        name: str,
        content: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        difficulty: Optional[str] = None,
        author: Optional[str] = None,
    ) -> str:
        """
        Save a prompt with a frontmatter header built from the given fields.

        Empty fields are left out of the header.

        Raises:
            ValueError: If difficulty is not a known level
        """
        if difficulty:
            validate_difficulty(difficulty)

        fields = {
            "title": title,
            "description": description,
            "category": category,
            "tags": list(tags) if tags else None,
            "difficulty": difficulty,
            "author": author,
        }
        metadata = {k: v for k, v in fields.items() if v}
        return await self.save_prompt(name, render_prompt(metadata, content))

    async def delete_prompt(self, name: str) -> bool:
        """
        Delete a prompt file.

        Raises:
            PromptNotFoundError: If there is no file for the name
        """
        path = self._path(name)
        try:
            await asyncio.to_thread(path.unlink)
        except OSError as e:
            raise PromptNotFoundError(name) from e
        logger.debug("Deleted %s", path)
        return True

    async def prompt_exists(self, name: str) -> bool:
        """Check the filesystem (not the cache) for a prompt file."""
        return await asyncio.to_thread(self._path(name).is_file)

    def get_prompt_info(self, name: str) -> Optional[PromptInfo]:
        """Cached metadata for a prompt, by canonical name or by the name it was saved under."""
        info = self.cache.get(name)
        if info is None:
            info = self.cache.get(encode_name(name))
        return info

    async def close(self) -> None:
        await self.cache.shutdown()
