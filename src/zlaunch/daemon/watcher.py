"""Watches the XDG applications directories and reports desktop entry changes."""

import asyncio
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from zlaunch.daemon.events import ApplicationsChanged, EventSender

logger = logging.getLogger(__name__)

_CHANGE_EVENTS = frozenset({"created", "deleted", "modified", "moved"})


class _DesktopEntryHandler(FileSystemEventHandler):
    """Forwards ``.desktop`` changes from the observer thread to the asyncio loop."""

    def __init__(self, watcher: "ApplicationWatcher") -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _CHANGE_EVENTS:
            return
        paths = [os.fsdecode(event.src_path)]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(os.fsdecode(dest))
        for path in paths:
            if path.endswith(".desktop"):
                self._watcher.notify(Path(path))


class ApplicationWatcher:
    """Posts one debounced ApplicationsChanged event per burst of desktop entry changes."""

    def __init__(self, directories: Iterable[Path], sender: EventSender, debounce: float = 0.5) -> None:
        """Initialize the watcher.

        Args:
            directories: Directories to watch. Missing ones are skipped.
            sender: Event channel producer.
            debounce: Quiet period in seconds before changes are reported.

        """
        self._directories = list(directories)
        self._sender = sender
        self._debounce = debounce
        self._observer: Observer | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: set[Path] = set()
        self._timer: asyncio.TimerHandle | None = None

    @property
    def running(self) -> bool:
        """True while the observer thread runs."""
        return self._observer is not None

    def start(self) -> None:
        """Start watching. Must be called from the running asyncio loop."""
        if self._observer is not None:
            return
        self._loop = asyncio.get_running_loop()
        existing = [d for d in self._directories if d.is_dir()]
        if not existing:
            logger.info("No applications directories to watch")
            return
        handler = _DesktopEntryHandler(self)
        observer = Observer()
        for directory in existing:
            observer.schedule(handler, str(directory), recursive=True)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %d applications directories", len(existing))

    def stop(self) -> None:
        """Stop the observer thread and drop pending changes."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info("Applications watcher stopped")

    def notify(self, path: Path) -> None:
        """Record a changed desktop entry. Safe to call from any thread."""
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._schedule, path)

    def _schedule(self, path: Path) -> None:
        self._pending.add(path)
        if self._timer is not None:
            self._timer.cancel()
        assert self._loop is not None  # noqa: S101
        self._timer = self._loop.call_later(self._debounce, self._flush)

    def _flush(self) -> None:
        self._timer = None
        if not self._pending:
            return
        paths = tuple(sorted(self._pending))
        self._pending.clear()
        logger.info("Desktop entries changed: %d files", len(paths))
        self._sender.send(ApplicationsChanged(paths))
