"""Boundary between the daemon and the launcher window.

Rendering lives outside the daemon. The event loop only needs a way to create a window,
close it, and tell it about theme or application changes. The headless implementation
keeps the daemon usable without a UI toolkit.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from zlaunch.compositor import Compositor, WindowInfo
from zlaunch.daemon.events import EventSender
from zlaunch.modes import LauncherMode
from zlaunch.settings import Settings
from zlaunch.themes import Theme

logger = logging.getLogger(__name__)


class LauncherWindow(Protocol):
    """A visible launcher window owned by the event loop."""

    def close(self) -> None:
        """Destroy the window."""

    def refresh_theme(self, theme: Theme) -> None:
        """Re-render with a new theme."""

    def reload_applications(self) -> None:
        """Re-read the desktop entries shown in the window."""


class WindowFactory(Protocol):
    """Creates launcher windows."""

    def create(
        self, windows: Sequence[WindowInfo], modes: Sequence[LauncherMode], settings: Settings, theme: Theme
    ) -> LauncherWindow:
        """Build and show a window. May raise; the caller stays hidden on failure."""
        ...


class HeadlessWindow:
    """Launcher window without a surface. Tracks state and forwards user actions."""

    def __init__(
        self,
        windows: Sequence[WindowInfo],
        modes: Sequence[LauncherMode],
        theme: Theme,
        *,
        compositor: Compositor,
        events: EventSender,
    ) -> None:
        """Initialize the window.

        Args:
            windows: Windows listed for switching.
            modes: Modes the launcher opened with.
            theme: Active theme.
            compositor: Backend used to focus a selected window.
            events: Event channel producer for hide requests.

        """
        self.windows = list(windows)
        self.modes = tuple(modes)
        self.theme = theme
        self.closed = False
        self._compositor = compositor
        self._events = events

    def close(self) -> None:
        """Mark the window closed."""
        self.closed = True
        logger.debug("Launcher window closed")

    def refresh_theme(self, theme: Theme) -> None:
        """Switch to a new theme."""
        self.theme = theme
        logger.debug("Launcher theme changed to %s", theme.name)

    def reload_applications(self) -> None:
        """Re-read desktop entries. Nothing is cached without a surface."""
        logger.debug("Launcher applications reloaded")

    def activate(self, window: WindowInfo) -> None:
        """Switch to a listed window and hide the launcher, as selecting it in the list does."""
        self._compositor.focus_window(window.address)
        self.dismiss()

    def dismiss(self) -> None:
        """User pressed Escape or the window lost focus."""
        self._events.request_hide()


class HeadlessWindowFactory:
    """WindowFactory producing HeadlessWindow instances."""

    def __init__(self, compositor: Compositor, events: EventSender) -> None:
        """Initialize with the backend and event producer handed to every window."""
        self._compositor = compositor
        self._events = events
        self.last: HeadlessWindow | None = None

    def create(
        self, windows: Sequence[WindowInfo], modes: Sequence[LauncherMode], settings: Settings, theme: Theme
    ) -> HeadlessWindow:
        """Build a headless window sized from settings. Only the most recent one is kept."""
        logger.info(
            "Showing launcher (%dx%d, modes: %s, %d windows)",
            settings.window_width,
            settings.window_height,
            ", ".join(modes),
            len(windows),
        )
        window = HeadlessWindow(windows, modes, theme, compositor=self._compositor, events=self._events)
        self.last = window
        return window
