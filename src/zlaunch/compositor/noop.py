"""Fallback backend for unsupported compositors."""

from zlaunch.compositor.base import Compositor, CompositorCapabilities, WindowInfo


class NoopCompositor(Compositor):
    """Lists no windows; focusing is a successful no-op."""

    name = "None"

    @property
    def capabilities(self) -> CompositorCapabilities:
        """No features."""
        return CompositorCapabilities.none()

    def list_windows(self) -> list[WindowInfo]:
        """Return an empty list."""
        return []

    def focus_window(self, window_id: str) -> None:
        """Do nothing."""
