"""Daemon runtime: wires transport, event loop, compositor and watcher into one asyncio loop."""

import asyncio
import logging
import signal
import sys
import threading

from zlaunch.compositor import Compositor, detect_compositor
from zlaunch.compositor.hyprland import HyprlandCompositor
from zlaunch.config import Config
from zlaunch.daemon.event_loop import DaemonEventLoop
from zlaunch.daemon.events import EventChannel, EventSender
from zlaunch.daemon.reload import ReloadController, RestartStrategy
from zlaunch.daemon.server import IpcServer
from zlaunch.daemon.watcher import ApplicationWatcher
from zlaunch.errors import AlreadyRunningError, CompositorError
from zlaunch.settings import SettingsStore
from zlaunch.themes import ThemeCatalog
from zlaunch.ui import HeadlessWindowFactory, WindowFactory

logger = logging.getLogger(__name__)


class Daemon:
    """One daemon lifetime, from binding the endpoint to the event loop returning."""

    def __init__(
        self,
        cfg: Config,
        *,
        compositor: Compositor | None = None,
        window_factory: WindowFactory | None = None,
        watch_applications: bool = True,
    ) -> None:
        """Initialize the daemon.

        Args:
            cfg: Application configuration.
            compositor: Backend override (detected when omitted).
            window_factory: Window factory override (headless when omitted).
            watch_applications: Start the desktop entry watcher.

        """
        self._cfg = cfg
        self._compositor = compositor
        self._window_factory = window_factory
        self._watch_applications = watch_applications
        self.settings = SettingsStore(cfg.config_path)
        self.themes = ThemeCatalog(cfg.themes_dir)
        self.event_loop: DaemonEventLoop | None = None
        self.sender: EventSender | None = None
        self.ready = asyncio.Event()

    async def run(self) -> bool:
        """Serve until Quit, Reload or a termination signal. Return True if a reload was requested.

        Raises:
            AlreadyRunningError: A live daemon owns the endpoint.
            OSError: The endpoint could not be bound.

        """
        channel = EventChannel()
        self.sender = channel.sender()
        # Bind first: a second instance must not touch the compositor
        server = IpcServer(self._cfg.endpoint, self.sender, self.settings, self.themes)
        await server.start()
        watcher = ApplicationWatcher(self._cfg.applications_dirs, self.sender)
        loop = asyncio.get_running_loop()
        signals = _install_signal_handlers(loop, channel)
        try:
            compositor = self._compositor or await asyncio.to_thread(detect_compositor)
            await self._apply_blur(compositor)
            factory = self._window_factory or HeadlessWindowFactory(compositor, self.sender)
            event_loop = DaemonEventLoop(channel, compositor, factory, self.settings, self.themes)
            self.event_loop = event_loop
            if self._watch_applications:
                watcher.start()
            self.ready.set()
            await event_loop.run()
        finally:
            channel.close()
            for sig in signals:
                loop.remove_signal_handler(sig)
            watcher.stop()
            await server.close()
            logger.info("Daemon stopped")
        return event_loop.reload_requested

    async def _apply_blur(self, compositor: Compositor) -> None:
        if not isinstance(compositor, HyprlandCompositor) or not self.settings.get().hyprland_auto_blur:
            return
        try:
            await asyncio.to_thread(compositor.apply_blur_layer_rules)
        except CompositorError as e:
            logger.warning("Failed to apply Hyprland blur layer rules: %s", e)


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, channel: EventChannel) -> list[signal.Signals]:
    """Close the event channel on SIGTERM/SIGINT so the daemon shuts down cleanly."""
    if sys.platform == "win32" or threading.current_thread() is not threading.main_thread():
        return []

    def _on_signal(sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down", sig.name)
        channel.close()

    installed = []
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _on_signal, sig)
        installed.append(sig)
    return installed


def run_daemon(cfg: Config, restart: RestartStrategy | None = None) -> int:
    """Entry point: run the daemon, then reload if requested. Return the process exit code."""
    try:
        reload_requested = asyncio.run(Daemon(cfg).run())
    except AlreadyRunningError as e:
        logger.info("%s", e)
        return 0
    except OSError as e:
        logger.error("Failed to start IPC server at %s: %s", cfg.endpoint, e)  # noqa: TRY400
        return 1
    if not reload_requested:
        return 0
    try:
        return ReloadController(cfg.endpoint, restart).exec_reload()
    except OSError:
        logger.exception("Reload failed")
        return 1
