"""The daemon event loop: single consumer of the event channel and owner of window state.

Events are handled strictly one at a time. Compositor calls run in a worker thread
but are awaited, so no two transitions overlap.
"""

import asyncio
import enum
import logging
from collections.abc import Sequence

from zlaunch.compositor import Compositor, WindowInfo
from zlaunch.daemon.events import ApplicationsChanged, CommandEvent, DaemonEvent, EventChannel, ReplySlot, WindowEvent
from zlaunch.daemon.protocol import (
    Command,
    GetTheme,
    Hide,
    ListThemes,
    Quit,
    Reload,
    Response,
    SetTheme,
    Show,
    Toggle,
)
from zlaunch.daemon.queries import answer_query
from zlaunch.errors import ThemeNotFoundError
from zlaunch.modes import LauncherMode
from zlaunch.settings import SettingsStore
from zlaunch.themes import Theme, ThemeCatalog
from zlaunch.ui import LauncherWindow, WindowFactory

logger = logging.getLogger(__name__)


class WindowState(enum.Enum):
    """Visibility of the launcher window."""

    HIDDEN = "hidden"
    SHOWING = "showing"  # window under construction
    VISIBLE = "visible"


class DaemonEventLoop:
    """Consumes daemon events and drives the launcher window."""

    def __init__(
        self,
        channel: EventChannel,
        compositor: Compositor,
        window_factory: WindowFactory,
        settings: SettingsStore,
        themes: ThemeCatalog,
    ) -> None:
        """Initialize the loop in the hidden state.

        Args:
            channel: Event source. The loop is its only consumer.
            compositor: Backend used to list windows before a show.
            window_factory: Creates the launcher window.
            settings: Shared settings store (written only by SetTheme).
            themes: Theme catalog used to validate SetTheme.

        """
        self._channel = channel
        self._compositor = compositor
        self._window_factory = window_factory
        self._settings = settings
        self._themes = themes
        self._window: LauncherWindow | None = None
        self.state = WindowState.HIDDEN
        self.reload_requested = False

    @property
    def window(self) -> LauncherWindow | None:
        """The visible window, if any."""
        return self._window

    async def run(self) -> None:
        """Process events until Quit, Reload or channel close."""
        while True:
            event = await self._channel.recv()
            if event is None:
                logger.debug("Event channel closed, leaving event loop")
                return
            if not await self.handle(event):
                return

    async def handle(self, event: DaemonEvent) -> bool:
        """Handle one event. Return False when the loop must stop."""
        match event:
            case CommandEvent(command=command, reply=reply):
                return await self._handle_command(command, reply)
            case WindowEvent.REQUEST_HIDE:
                self._hide()
            case ApplicationsChanged(paths=paths):
                logger.debug("Applications changed: %d paths", len(paths))
                if self.state is WindowState.VISIBLE and self._window is not None:
                    self._window.reload_applications()
        return True

    async def _handle_command(self, command: Command, reply: ReplySlot) -> bool:
        logger.debug("Command: %s", command.name)
        try:
            match command:
                case Show(modes=modes):
                    reply.send(await self._show(modes))
                case Hide():
                    self._hide()
                    reply.send(Response.success())
                case Toggle(modes=modes):
                    if self.state is WindowState.VISIBLE:
                        self._hide()
                        reply.send(Response.success())
                    else:
                        reply.send(await self._show(modes))
                case SetTheme(theme=name):
                    reply.send(self._set_theme(name))
                case ListThemes() | GetTheme():
                    reply.send(answer_query(command, self._settings, self._themes))
                case Reload():
                    reply.send(Response.success())
                    self._hide()
                    self.reload_requested = True
                    logger.info("Reload requested")
                    return False
                case Quit():
                    reply.send(Response.success())
                    self._hide()
                    logger.info("Quit requested")
                    return False
        except Exception:
            logger.exception("Error handling %s", command.name)
            self._recover()
            reply.send(Response.fail("internal", "Internal daemon error."))
        return True

    async def _show(self, modes: Sequence[LauncherMode] | None) -> Response:
        if self.state is WindowState.VISIBLE:
            return Response.success()
        self.state = WindowState.SHOWING
        windows = await self._list_windows()
        settings = self._settings.get()
        effective = tuple(modes) if modes else settings.effective_modes()
        try:
            self._window = self._window_factory.create(windows, effective, settings, self._current_theme(settings.theme))
        except Exception as e:
            logger.exception("Failed to create launcher window")
            self._window = None
            self.state = WindowState.HIDDEN
            return Response.fail("internal", f"Failed to create launcher window: {e}")
        self.state = WindowState.VISIBLE
        return Response.success()

    async def _list_windows(self) -> list[WindowInfo]:
        try:
            return await asyncio.to_thread(self._compositor.list_windows)
        except Exception as e:  # noqa: BLE001
            logger.warning("Failed to list windows via %s: %s", self._compositor.name, e)
            return []

    def _current_theme(self, name: str) -> Theme:
        try:
            return self._themes.load(name)
        except ThemeNotFoundError:
            logger.warning("Theme '%s' not found, falling back to default", name)
            return Theme()

    def _hide(self) -> None:
        if self.state is not WindowState.VISIBLE:
            return
        window, self._window = self._window, None
        self.state = WindowState.HIDDEN
        if window is not None:
            window.close()

    def _set_theme(self, name: str) -> Response:
        try:
            theme = self._themes.load(name)
        except ThemeNotFoundError as e:
            return Response.fail(e.code, str(e))
        self._settings.set_theme(name)
        if self.state is WindowState.VISIBLE and self._window is not None:
            self._window.refresh_theme(theme)
        logger.info("Theme set to '%s'", name)
        return Response.success()

    def _recover(self) -> None:
        """Leave a half-finished transition in a consistent state."""
        if self.state is WindowState.SHOWING:
            self.state = WindowState.VISIBLE if self._window is not None else WindowState.HIDDEN
