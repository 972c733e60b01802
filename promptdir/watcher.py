"""File watcher for the prompts directory.

Uses watchdog to observe a single directory (not recursive) and reports
prompt files being written or removed. Callbacks run on the observer thread
and receive bare filenames; the cache hands them over to its event loop.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class PromptEventHandler(FileSystemEventHandler):
    """Filters watchdog events down to prompt files in one directory."""

    def __init__(
        self,
        directory: Path,
        suffix: str,
        on_upsert: Callable[[str], None],
        on_remove: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ):
        super().__init__()
        self._directory = Path(directory).resolve()
        self._suffix = suffix
        self._on_upsert = on_upsert
        self._on_remove = on_remove
        self._on_error = on_error

    def _filename(self, path: str | bytes) -> str | None:
        """Bare filename if path is a watched prompt file, else None."""
        p = Path(os.fsdecode(path))
        if p.name.startswith(".") or not p.name.endswith(self._suffix):
            return None
        if p.parent.resolve() != self._directory:
            return None
        return p.name

    def _dispatch(self, callback: Callable[[str], None], path: str | bytes) -> None:
        filename = self._filename(path)
        if filename is None:
            return
        try:
            callback(filename)
        except Exception as e:
            self._on_error(e)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(self._on_upsert, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(self._on_upsert, event.src_path)

    def on_closed(self, event: FileSystemEvent) -> None:
        # Closed after writing: the file's final content is on disk
        if not event.is_directory:
            self._dispatch(self._on_upsert, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(self._on_remove, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Renames and editors' atomic saves: the old name goes away, the new one appears
        if event.is_directory:
            return
        self._dispatch(self._on_remove, event.src_path)
        self._dispatch(self._on_upsert, event.dest_path)


class DirectoryWatcher:
    """
    Watch one directory for prompt file changes.

    watchdog reports only changes after start(); files already present are
    never announced, so the caller's own initial scan covers them.
    """

    def __init__(
        self,
        directory: Path,
        suffix: str,
        on_upsert: Callable[[str], None],
        on_remove: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ):
        self.directory = Path(directory)
        self._handler = PromptEventHandler(directory, suffix, on_upsert, on_remove, on_error)
        self._observer: Observer | None = None  # type: ignore[valid-type]

    @property
    def is_alive(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        """Start the observer thread."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self._handler, str(self.directory), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.debug("Watching %s for prompt changes", self.directory)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the observer thread and wait for it to exit."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout)
        logger.debug("Stopped watching %s", self.directory)
