"""Tests for shared compositor helpers and the no-op backend."""

from zlaunch.compositor.base import (
    CompositorCapabilities,
    WindowInfo,
    display_title,
    filter_launcher_windows,
    is_launcher_window,
)
from zlaunch.compositor.noop import NoopCompositor


def _window(class_name: str) -> WindowInfo:
    return WindowInfo(address="0x1", title="t", class_name=class_name, workspace=1, focused=False)


class TestHelpers:
    """Title fallback and self-filtering."""

    def test_display_title_falls_back_to_class(self):
        """An empty title shows the class instead."""
        assert display_title("", "foot") == "foot"
        assert display_title("~/src", "foot") == "~/src"

    def test_launcher_window_matched_case_insensitively(self):
        """The launcher's own class is recognized in any case."""
        assert is_launcher_window("zlaunch")
        assert is_launcher_window("ZLaunch")
        assert not is_launcher_window("firefox")

    def test_filter_drops_launcher(self):
        """Only the launcher's own window is removed."""
        windows = [_window("firefox"), _window("zlaunch"), _window("foot")]
        assert [w.class_name for w in filter_launcher_windows(windows)] == ["firefox", "foot"]


class TestCapabilities:
    """Capability presets."""

    def test_presets(self):
        """Full enables everything, limited only switching, none nothing."""
        full = CompositorCapabilities.full()
        assert full.blur_support and full.workspace_info and full.focus_tracking
        limited = CompositorCapabilities.limited()
        assert limited.window_switching
        assert not limited.blur_support
        assert not limited.workspace_info
        assert CompositorCapabilities.none() == CompositorCapabilities()


class TestNoop:
    """Fallback backend."""

    def test_lists_nothing_and_focus_succeeds(self):
        """No windows; focusing anything is a quiet success."""
        compositor = NoopCompositor()
        assert compositor.list_windows() == []
        compositor.focus_window("anything")
        assert compositor.name == "None"
        assert not compositor.capabilities.window_switching
