"""
In-memory metadata cache for the prompts directory.

The cache holds one PromptInfo per prompt file: frontmatter plus a short
preview, never the full body. It is filled by a full directory scan and then
kept current by a filesystem watcher, so files edited by other tools show up
without an explicit refresh.

Concurrency:
    All state lives on one asyncio event loop. Directory listing and file
    reads run in worker threads via asyncio.to_thread. Watcher events arrive
    on watchdog's observer thread and each one becomes its own task on the
    loop, so handlers for different files complete in no particular order.
    The index is only ever changed by a full replace at the end of
    initialize() or by a single-key set/pop in an event handler.
"""

import asyncio
import concurrent.futures
import logging
import os
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, Optional

from .frontmatter import PREVIEW_LENGTH, extract, make_preview
from .naming import PROMPT_SUFFIX, decode_filename, is_prompt_filename
from .types import CacheState, PromptInfo
from .watcher import DirectoryWatcher

logger = logging.getLogger(__name__)


class PromptCache:
    """
    Cache of prompt metadata, synchronized with the directory by a watcher.

    Lifecycle:
        UNINITIALIZED -> LOADING -> READY, driven by refresh(). A direct
        initialize() call always performs a fresh full reload; two overlapping
        calls race and whichever finishes last wins.
    """

    def __init__(self, prompts_dir: Path, *, preview_length: int = PREVIEW_LENGTH):
        self._prompts_dir = Path(prompts_dir)
        self._preview_length = preview_length
        self._prompts: dict[str, PromptInfo] = {}
        self._state = CacheState.UNINITIALIZED
        self._loading: Optional[asyncio.Task] = None
        self._watcher: Optional[DirectoryWatcher] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[concurrent.futures.Future] = set()

    @property
    def prompts_dir(self) -> Path:
        return self._prompts_dir

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def watching(self) -> bool:
        return self._watcher is not None

    # -------------------------------------------------------------------------
    # Read accessors (no I/O)
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Optional[PromptInfo]:
        return self._prompts.get(name)

    def all(self) -> list[PromptInfo]:
        return list(self._prompts.values())

    def is_empty(self) -> bool:
        return not self._prompts

    def size(self) -> int:
        return len(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    def __contains__(self, name: object) -> bool:
        return name in self._prompts

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def _ensure_dir(self) -> None:
        try:
            await asyncio.to_thread(self._prompts_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create prompts directory %s: %s", self._prompts_dir, e)

    def _list_filenames(self) -> list[str]:
        with os.scandir(self._prompts_dir) as entries:
            return sorted(
                entry.name for entry in entries
                if is_prompt_filename(entry.name, include_hidden=True) and entry.is_file()
            )

    async def _load_prompt(self, filename: str) -> Optional[PromptInfo]:
        """Parse one prompt file. Returns None if it can't be read."""
        path = self._prompts_dir / filename
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load prompt metadata for %s: %s", filename, e)
            return None

        parsed = extract(text)
        return PromptInfo(
            name=decode_filename(filename),
            metadata=parsed.metadata,
            preview=make_preview(parsed.body, self._preview_length),
        )

    async def initialize(self) -> None:
        """
        Reload every prompt file, replacing the whole index.

        Files that fail to load are logged and left out. If the directory
        can't be listed the previous index is kept. Never raises for I/O.
        """
        await self._ensure_dir()

        try:
            filenames = await asyncio.to_thread(self._list_filenames)
        except OSError as e:
            logger.error("Failed to initialize cache: %s", e)
            return

        results = await asyncio.gather(*(self._load_prompt(f) for f in filenames))
        prompts = {info.name: info for info in results if info is not None}

        self._prompts = prompts
        self._state = CacheState.READY
        logger.info("Loaded %d prompts into cache", len(prompts))

    async def refresh(self) -> None:
        """Run a full reload, joining one that is already in flight.

        Concurrent callers share a single directory scan.
        """
        task = self._loading
        if task is None:
            if self._state is CacheState.UNINITIALIZED:
                self._state = CacheState.LOADING
            task = self._loading = asyncio.ensure_future(self.initialize())
        try:
            await asyncio.shield(task)
        finally:
            if self._loading is task and task.done():
                self._loading = None
            if self._state is CacheState.LOADING and task.done():
                self._state = CacheState.UNINITIALIZED

    # -------------------------------------------------------------------------
    # Watcher event handlers
    # -------------------------------------------------------------------------

    async def handle_upsert(self, filename: str) -> None:
        """A prompt file was created or modified: reload it and replace its record."""
        if not is_prompt_filename(filename):
            return
        info = await self._load_prompt(filename)
        if info is None:
            return
        if info.name in self._prompts:
            logger.info("Prompt updated: %s", filename)
        else:
            logger.info("Prompt added: %s", filename)
        self._prompts[info.name] = info

    async def handle_remove(self, filename: str) -> None:
        """A prompt file was deleted: drop its record if present."""
        if not is_prompt_filename(filename):
            return
        if self._prompts.pop(decode_filename(filename), None) is not None:
            logger.info("Prompt deleted: %s", filename)

    def handle_error(self, error: BaseException) -> None:
        """Watcher faults are logged; watching continues."""
        logger.error("File watcher error: %s", error, exc_info=error)

    def _submit(self, coro: Coroutine[Any, Any, None]) -> None:
        """Schedule a handler on the cache's loop (called from the observer thread)."""
        loop = self._loop
        if loop is None or loop.is_closed():
            coro.close()
            return
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        self._pending.add(future)
        future.add_done_callback(self._handler_done)

    def _handler_done(self, future: concurrent.futures.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.handle_error(error)

    def _on_upsert(self, filename: str) -> None:
        self._submit(self.handle_upsert(filename))

    def _on_remove(self, filename: str) -> None:
        self._submit(self.handle_remove(filename))

    async def _wait_for_pending(self) -> None:
        """Wait until every dispatched watcher event has been handled."""
        while self._pending:
            futures = [asyncio.wrap_future(f) for f in list(self._pending)]
            await asyncio.gather(*futures, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Watching
    # -------------------------------------------------------------------------

    def start_watching(self) -> None:
        """
        Subscribe to filesystem changes. No-op if already watching.

        Must be called from the event loop the cache is used on.
        """
        if self._watcher is not None:
            return

        self._loop = asyncio.get_running_loop()
        watcher = DirectoryWatcher(
            self._prompts_dir,
            PROMPT_SUFFIX,
            on_upsert=self._on_upsert,
            on_remove=self._on_remove,
            on_error=self.handle_error,
        )
        try:
            watcher.start()
        except OSError as e:
            self.handle_error(e)
            return

        self._watcher = watcher
        logger.info("File watcher initialized for %s", self._prompts_dir)

    async def shutdown(self) -> None:
        """Stop watching. Safe to call when the watcher never started."""
        watcher, self._watcher = self._watcher, None
        if watcher is not None:
            await asyncio.to_thread(watcher.stop)
            logger.debug("File watcher stopped")
