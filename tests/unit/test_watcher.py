"""Tests for change-event building and the filesystem watcher."""

from __future__ import annotations

from pathlib import Path

import pytest
from watchfiles import Change

from changelens.analyzer.models import ChangeType, FileChange
from changelens.config import WatcherConfig
from changelens.watcher import FileWatcher, _change_type_from_watchfiles, build_file_change, content_hash


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve()
    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("def main():\n    pass\n")
    return root


class TestBuildFileChange:
    """Tests for build_file_change."""

    def test_reads_text_content(self, project: Path) -> None:
        path = project / "src" / "app.py"
        change = build_file_change(ChangeType.ADD, path)

        assert change.path == str(path)
        assert change.change_type == ChangeType.ADD
        assert change.language == "python"
        assert change.content == "def main():\n    pass\n"
        assert change.content_hash == content_hash(change.content)

    def test_content_can_be_disabled(self, project: Path) -> None:
        change = build_file_change(ChangeType.CHANGE, project / "src" / "app.py", include_content=False)

        assert change.content is None
        assert change.content_hash is not None

    def test_large_file_is_not_read(self, project: Path) -> None:
        big = project / "src" / "big.py"
        big.write_text("x = 1\n" * 400)

        change = build_file_change(ChangeType.CHANGE, big, max_file_size_kb=1)

        assert change.content is None
        assert change.content_hash is not None

    def test_unlink_has_no_content(self, project: Path) -> None:
        change = build_file_change(ChangeType.UNLINK, project / "src" / "gone.ts")

        assert change.content is None
        assert change.content_hash is None
        assert change.language == "typescript"

    def test_vanished_file(self, project: Path) -> None:
        change = build_file_change(ChangeType.CHANGE, project / "src" / "missing.py")

        assert change.content is None
        assert change.content_hash is None

    def test_watchfiles_change_mapping(self) -> None:
        assert _change_type_from_watchfiles(Change.added) == ChangeType.ADD
        assert _change_type_from_watchfiles(Change.modified) == ChangeType.CHANGE
        assert _change_type_from_watchfiles(Change.deleted) == ChangeType.UNLINK


class TestFileWatcher:
    """Tests for FileWatcher event handling."""

    @pytest.fixture
    def received(self) -> list[FileChange]:
        return []

    @pytest.fixture
    def watcher(self, project: Path, received: list[FileChange]) -> FileWatcher:
        async def callback(change: FileChange) -> None:
            received.append(change)

        return FileWatcher([project], callback)

    @pytest.mark.asyncio
    async def test_dispatches_change(self, watcher: FileWatcher, project: Path, received: list[FileChange]) -> None:
        change = await watcher.handle(ChangeType.ADD, project / "src" / "app.py")

        assert change is not None
        assert received == [change]
        assert received[0].language == "python"

    @pytest.mark.asyncio
    async def test_unchanged_content_is_skipped(
        self, watcher: FileWatcher, project: Path, received: list[FileChange]
    ) -> None:
        path = project / "src" / "app.py"
        await watcher.handle(ChangeType.ADD, path)

        assert await watcher.handle(ChangeType.CHANGE, path) is None

        path.write_text("def main():\n    return 1\n")
        assert await watcher.handle(ChangeType.CHANGE, path) is not None
        assert [c.change_type for c in received] == [ChangeType.ADD, ChangeType.CHANGE]

    @pytest.mark.asyncio
    async def test_unlink_forgets_hash(self, watcher: FileWatcher, project: Path, received: list[FileChange]) -> None:
        path = project / "src" / "app.py"
        await watcher.handle(ChangeType.ADD, path)
        await watcher.handle(ChangeType.UNLINK, path)

        assert await watcher.handle(ChangeType.CHANGE, path) is not None
        assert [c.change_type for c in received] == [ChangeType.ADD, ChangeType.UNLINK, ChangeType.CHANGE]

    @pytest.mark.asyncio
    async def test_ignored_and_hidden_directories(
        self, watcher: FileWatcher, project: Path, received: list[FileChange]
    ) -> None:
        (project / "node_modules" / "lib").mkdir(parents=True)
        (project / "node_modules" / "lib" / "index.js").write_text("module.exports = {}\n")
        (project / ".cache").mkdir()
        (project / ".cache" / "data.json").write_text("{}\n")

        assert await watcher.handle(ChangeType.ADD, project / "node_modules" / "lib" / "index.js") is None
        assert await watcher.handle(ChangeType.ADD, project / ".cache" / "data.json") is None
        assert received == []

    @pytest.mark.asyncio
    async def test_unknown_files_and_directories_are_skipped(self, watcher: FileWatcher, project: Path) -> None:
        (project / "logo.png").write_bytes(b"\x89PNG")

        assert await watcher.handle(ChangeType.ADD, project / "logo.png") is None
        assert await watcher.handle(ChangeType.ADD, project / "src") is None

    @pytest.mark.asyncio
    async def test_manifest_without_language_is_processed(
        self, watcher: FileWatcher, project: Path, received: list[FileChange]
    ) -> None:
        (project / "go.mod").write_text("module example.com/app\n")

        change = await watcher.handle(ChangeType.ADD, project / "go.mod")

        assert change is not None
        assert change.language is None
        assert change.content == "module example.com/app\n"

    @pytest.mark.asyncio
    async def test_callback_error_is_contained(self, project: Path) -> None:
        async def callback(change: FileChange) -> None:
            raise RuntimeError("analyzer down")

        watcher = FileWatcher([project], callback)

        assert await watcher.handle(ChangeType.ADD, project / "src" / "app.py") is not None

    @pytest.mark.asyncio
    async def test_custom_ignore_dirs(self, project: Path, received: list[FileChange]) -> None:
        async def callback(change: FileChange) -> None:
            received.append(change)

        watcher = FileWatcher([project], callback, WatcherConfig(ignore_dirs=["src"]))

        assert await watcher.handle(ChangeType.ADD, project / "src" / "app.py") is None

    @pytest.mark.asyncio
    async def test_start_and_stop(self, watcher: FileWatcher) -> None:
        assert watcher.is_running is False

        await watcher.start()
        assert watcher.is_running is True

        await watcher.stop()
        assert watcher.is_running is False
