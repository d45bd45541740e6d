"""Tests for the headless launcher window."""

from zlaunch.daemon.event_loop import DaemonEventLoop
from zlaunch.daemon.events import CommandEvent, EventChannel, ReplySlot, WindowEvent
from zlaunch.daemon.protocol import Hide, Show
from zlaunch.modes import LauncherMode
from zlaunch.settings import Settings, SettingsStore
from zlaunch.themes import Theme, ThemeCatalog
from zlaunch.ui import HeadlessWindowFactory


class TestHeadlessWindow:
    """Window lifecycle and user actions."""

    async def test_create_tracks_last_window(self, stub_compositor):
        """The factory exposes the window it built last."""
        factory = HeadlessWindowFactory(stub_compositor, EventChannel().sender())
        window = factory.create(stub_compositor.windows, [LauncherMode.APPLICATIONS], Settings(), Theme())
        assert factory.last is window
        assert window.modes == (LauncherMode.APPLICATIONS,)
        assert [w.address for w in window.windows] == ["0x1", "0x2"]
        window.close()
        assert window.closed

    async def test_repeated_shows_keep_one_window(self, tmp_path, stub_compositor):
        """Many show/hide cycles through the event loop keep no closed windows around."""
        channel = EventChannel()
        factory = HeadlessWindowFactory(stub_compositor, channel.sender())
        loop = DaemonEventLoop(
            channel, stub_compositor, factory, SettingsStore(tmp_path / "config.toml"), ThemeCatalog(tmp_path / "themes")
        )
        previous = None
        for _ in range(50):
            for command in (Show(), Hide()):
                slot = ReplySlot()
                await loop.handle(CommandEvent(command, slot))
                assert (await slot.wait()).ok
            assert factory.last is not previous
            assert factory.last.closed
            previous = factory.last
        assert not hasattr(factory, "created")

    async def test_activate_focuses_and_requests_hide(self, stub_compositor):
        """Selecting a window focuses it and asks the event loop to hide."""
        channel = EventChannel()
        factory = HeadlessWindowFactory(stub_compositor, channel.sender())
        window = factory.create(stub_compositor.windows, [LauncherMode.WINDOWS], Settings(), Theme())
        window.activate(window.windows[1])
        assert stub_compositor.focused == ["0x2"]
        assert await channel.recv() is WindowEvent.REQUEST_HIDE

    async def test_refresh_theme(self, stub_compositor):
        """A theme change replaces the window's theme."""
        window = HeadlessWindowFactory(stub_compositor, EventChannel().sender()).create([], [], Settings(), Theme())
        nord = Theme(name="nord")
        window.refresh_theme(nord)
        assert window.theme is nord
