"""File system watcher producing change events.

Watches for file changes using watchfiles, builds FileChange events with
language, content and content hash, and drops modifications that leave the
content unchanged.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from watchfiles import Change, awatch

from changelens.analyzer.heuristics import PROJECT_MANIFESTS
from changelens.analyzer.models import ChangeType, FileChange
from changelens.config import WatcherConfig
from changelens.languages import detect_language, is_text_file

logger = logging.getLogger(__name__)


def _change_type_from_watchfiles(change: Change) -> ChangeType:
    """Convert watchfiles Change enum to a ChangeType."""
    if change == Change.added:
        return ChangeType.ADD
    elif change == Change.deleted:
        return ChangeType.UNLINK
    return ChangeType.CHANGE


def content_hash(content: str) -> str:
    """sha256 hex digest of text content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def build_file_change(
    change_type: ChangeType,
    path: Path,
    include_content: bool = True,
    max_file_size_kb: int = 1000,
) -> FileChange:
    """Build a FileChange for a path.

    Content is read only for text files and project manifests within the
    size limit. For unlinks, or files that vanish before they can be read,
    the event carries no content.

    Args:
        change_type: Kind of change
        path: Path of the changed file
        include_content: Read text content into the event
        max_file_size_kb: Files larger than this are not read

    Raises:
        OSError: If a file that should be readable cannot be read
            (other than having been deleted meanwhile)
    """
    language = detect_language(path)
    content: str | None = None
    digest: str | None = None

    if change_type is not ChangeType.UNLINK:
        try:
            stat = path.stat()
            readable = is_text_file(path) or path.name in PROJECT_MANIFESTS
            if include_content and readable and stat.st_size <= max_file_size_kb * 1024:
                content = path.read_text(encoding="utf-8", errors="replace")
                digest = content_hash(content)
            else:
                digest = content_hash(f"{stat.st_size}-{stat.st_mtime_ns}")
        except FileNotFoundError:
            logger.debug(f"File disappeared before it was read: {path}")

    return FileChange(
        path=str(path),
        change_type=change_type,
        content=content,
        language=language,
        content_hash=digest,
    )


class FileWatcher:
    """Async filesystem watcher with filtering and content deduplication.

    Watches specified paths and invokes a callback with a FileChange for
    each relevant file, skipping hidden and ignored directories.

    Attributes:
        paths: List of paths to watch
        callback: Async callback invoked with each FileChange
        config: Watcher configuration
    """

    def __init__(
        self,
        paths: list[Path],
        callback: Callable[[FileChange], Awaitable[None]],
        config: WatcherConfig | None = None,
    ) -> None:
        """Initialize the file watcher.

        Args:
            paths: List of paths to watch for changes
            callback: Async callback(change) invoked on changes
            config: Watcher configuration (defaults if omitted)
        """
        self.paths = [p.resolve() for p in paths]
        self.callback = callback
        self.config = config or WatcherConfig()
        self._ignore_dirs = set(self.config.ignore_dirs)
        self._hashes: dict[str, str] = {}
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    async def start(self) -> None:
        """Start watching for file changes.

        Creates a background task that monitors the filesystem.
        """
        if self._task is not None:
            logger.warning("FileWatcher already running")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._watch())
        logger.info(f"FileWatcher started, watching {len(self.paths)} paths")

    async def stop(self) -> None:
        """Stop watching for file changes."""
        if self._task is None:
            return

        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("FileWatcher stopped")

    async def _watch(self) -> None:
        """Main watch loop - monitors filesystem and invokes callback."""
        try:
            async for changes in awatch(
                *self.paths,
                stop_event=self._stop_event,
                watch_filter=self._watch_filter,
                debounce=self.config.debounce_ms,
            ):
                for raw_change, path_str in changes:
                    await self.handle(_change_type_from_watchfiles(raw_change), Path(path_str))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"FileWatcher error: {e}")
            raise

    async def handle(self, change_type: ChangeType, path: Path) -> FileChange | None:
        """Turn one raw filesystem event into a FileChange and dispatch it.

        Returns:
            The dispatched change, or None if it was filtered or unchanged
        """
        if not self._should_process(path):
            return None

        try:
            change = build_file_change(
                change_type,
                path,
                include_content=self.config.include_content,
                max_file_size_kb=self.config.max_file_size_kb,
            )
        except OSError as e:
            logger.error(f"Failed to read changed file {path}: {e}")
            return None

        if not self._record_hash(change):
            logger.debug(f"Skipping unchanged content: {path}")
            return None

        try:
            await self.callback(change)
        except Exception as e:
            logger.error(f"Error processing {path}: {e}")
        return change

    def _record_hash(self, change: FileChange) -> bool:
        """Track content hashes; False for a modification with identical content."""
        if change.change_type is ChangeType.UNLINK:
            self._hashes.pop(change.path, None)
            return True
        if change.content_hash is None:
            return True
        if change.change_type is ChangeType.CHANGE and self._hashes.get(change.path) == change.content_hash:
            return False
        self._hashes[change.path] = change.content_hash
        return True

    def _watch_filter(self, change: Change, path: str) -> bool:
        """Filter function for watchfiles."""
        return self._should_process(Path(path))

    def _should_process(self, path: Path) -> bool:
        """Check if a file should be processed.

        Keeps files with a known language or manifest name, and skips
        hidden and ignored directories.
        """
        if path.is_dir():
            return False

        if detect_language(path) is None and path.name not in PROJECT_MANIFESTS:
            return False

        for part in self._relative_parent_parts(path):
            if part in self._ignore_dirs:
                return False
            if part.startswith(".") and part not in {".", ".."}:
                return False

        return True

    def _relative_parent_parts(self, path: Path) -> tuple[str, ...]:
        # Only directories below the watched root are filtered
        for root in self.paths:
            try:
                return path.parent.relative_to(root).parts
            except ValueError:
                continue
        return path.parent.parts

    @property
    def is_running(self) -> bool:
        """Check if the watcher is currently running."""
        return self._task is not None and not self._task.done()


__all__ = [
    "FileWatcher",
    "build_file_change",
    "content_hash",
]
