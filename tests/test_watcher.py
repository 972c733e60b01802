"""Tests for the watchdog event filter and the DirectoryWatcher wrapper."""

from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirCreatedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from promptdir.watcher import DirectoryWatcher, PromptEventHandler


@pytest.fixture
def callbacks():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture
def handler(prompts_dir, callbacks):
    on_upsert, on_remove, on_error = callbacks
    return PromptEventHandler(prompts_dir, ".md", on_upsert, on_remove, on_error)


class TestPromptEventHandler:

    def test_created_and_modified_upsert(self, handler, callbacks, prompts_dir):
        on_upsert, on_remove, _ = callbacks
        handler.dispatch(FileCreatedEvent(str(prompts_dir / "a.md")))
        handler.dispatch(FileModifiedEvent(str(prompts_dir / "a.md")))
        handler.dispatch(FileClosedEvent(str(prompts_dir / "a.md")))
        assert [c.args for c in on_upsert.call_args_list] == [("a.md",)] * 3
        on_remove.assert_not_called()

    def test_deleted_removes(self, handler, callbacks, prompts_dir):
        on_upsert, on_remove, _ = callbacks
        handler.dispatch(FileDeletedEvent(str(prompts_dir / "a.md")))
        on_remove.assert_called_once_with("a.md")
        on_upsert.assert_not_called()

    def test_moved_removes_source_and_adds_dest(self, handler, callbacks, prompts_dir):
        on_upsert, on_remove, _ = callbacks
        handler.dispatch(FileMovedEvent(str(prompts_dir / "old.md"), str(prompts_dir / "new.md")))
        on_remove.assert_called_once_with("old.md")
        on_upsert.assert_called_once_with("new.md")

    def test_atomic_save_from_temp_file(self, handler, callbacks, prompts_dir):
        on_upsert, on_remove, _ = callbacks
        handler.dispatch(FileMovedEvent(str(prompts_dir / ".a.md.tmp"), str(prompts_dir / "a.md")))
        on_remove.assert_not_called()
        on_upsert.assert_called_once_with("a.md")

    @pytest.mark.parametrize("filename", [".hidden.md", "notes.txt", "a.md~", "a.md.swp"])
    def test_ignored_files(self, handler, callbacks, prompts_dir, filename):
        on_upsert, on_remove, _ = callbacks
        handler.dispatch(FileCreatedEvent(str(prompts_dir / filename)))
        handler.dispatch(FileDeletedEvent(str(prompts_dir / filename)))
        on_upsert.assert_not_called()
        on_remove.assert_not_called()

    def test_ignores_directories(self, handler, callbacks, prompts_dir):
        on_upsert, _, _ = callbacks
        handler.dispatch(DirCreatedEvent(str(prompts_dir / "folder.md")))
        on_upsert.assert_not_called()

    def test_ignores_other_directories(self, handler, callbacks, prompts_dir):
        on_upsert, _, _ = callbacks
        handler.dispatch(FileCreatedEvent(str(prompts_dir / "sub" / "a.md")))
        on_upsert.assert_not_called()

    def test_bytes_paths(self, handler, callbacks, prompts_dir):
        on_upsert, _, _ = callbacks
        handler.dispatch(FileCreatedEvent(bytes(prompts_dir / "b.md")))
        on_upsert.assert_called_once_with("b.md")

    def test_callback_errors_go_to_on_error(self, handler, callbacks, prompts_dir):
        on_upsert, _, on_error = callbacks
        error = RuntimeError("event loop is closed")
        on_upsert.side_effect = error
        handler.dispatch(FileCreatedEvent(str(prompts_dir / "a.md")))
        on_error.assert_called_once_with(error)


class TestDirectoryWatcher:

    def test_start_and_stop(self, prompts_dir, callbacks):
        watcher = DirectoryWatcher(prompts_dir, ".md", *callbacks)
        assert watcher.is_alive is False
        watcher.start()
        try:
            assert watcher.is_alive
        finally:
            watcher.stop()
        assert watcher.is_alive is False

    def test_stop_without_start(self, prompts_dir, callbacks):
        watcher = DirectoryWatcher(prompts_dir, ".md", *callbacks)
        watcher.stop()
        assert watcher.is_alive is False

    def test_start_twice_keeps_observer(self, prompts_dir, callbacks):
        watcher = DirectoryWatcher(prompts_dir, ".md", *callbacks)
        watcher.start()
        try:
            observer = watcher._observer
            watcher.start()
            assert watcher._observer is observer
        finally:
            watcher.stop()

    def test_missing_directory_raises(self, tmp_path, callbacks):
        watcher = DirectoryWatcher(tmp_path / "missing", ".md", *callbacks)
        with pytest.raises(OSError):
            watcher.start()
        assert watcher.is_alive is False
