"""Compositor client interface shared by every backend."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

LAUNCHER_CLASS = "zlaunch"


@dataclass(frozen=True)
class WindowInfo:
    """A top-level window, normalized from whatever the compositor reports."""

    address: str
    title: str
    class_name: str
    workspace: int
    focused: bool


@dataclass(frozen=True)
class CompositorCapabilities:
    """Which launcher features the active compositor supports."""

    blur_support: bool = False
    layer_shell: bool = False
    window_switching: bool = False
    workspace_info: bool = False
    focus_tracking: bool = False

    @staticmethod
    def full() -> "CompositorCapabilities":
        """Fully featured compositor."""
        return CompositorCapabilities(
            blur_support=True, layer_shell=True, window_switching=True, workspace_info=True, focus_tracking=True
        )

    @staticmethod
    def limited() -> "CompositorCapabilities":
        """Compositor that can list and focus windows but reports no workspace or focus state."""
        return CompositorCapabilities(layer_shell=True, window_switching=True)

    @staticmethod
    def none() -> "CompositorCapabilities":
        """No compositor integration."""
        return CompositorCapabilities()


class Compositor(ABC):
    """Window listing and focusing for one compositor.

    Calls block on local IPC. Run them off the event loop.
    """

    name: str = ""

    @property
    @abstractmethod
    def capabilities(self) -> CompositorCapabilities:
        """Features this backend supports."""

    @abstractmethod
    def list_windows(self) -> list[WindowInfo]:
        """Return the current windows, without the launcher's own.

        Raises:
            CompositorError: The compositor could not be queried.

        """

    @abstractmethod
    def focus_window(self, window_id: str) -> None:
        """Focus a window by the address reported in WindowInfo.

        Raises:
            CompositorError: The compositor refused or could not be reached.

        """


def display_title(title: str, class_name: str) -> str:
    """Return the title, or the class when the title is empty."""
    return title or class_name


def is_launcher_window(class_name: str) -> bool:
    """Check whether a window class belongs to the launcher itself."""
    return class_name.lower() == LAUNCHER_CLASS


def filter_launcher_windows(windows: Iterable[WindowInfo]) -> list[WindowInfo]:
    """Drop the launcher's own window."""
    return [w for w in windows if not is_launcher_window(w.class_name)]
