"""KWin backend: D-Bus feature check, ``kdotool`` for the actual window data."""

import logging
import os
import subprocess  # nosec B404
from collections.abc import Callable
from typing import TypeAlias

from zlaunch.compositor.base import Compositor, CompositorCapabilities, WindowInfo, display_title, filter_launcher_windows
from zlaunch.errors import CompositorError

logger = logging.getLogger(__name__)

_TOOL_TIMEOUT = 2.0

ToolRunner: TypeAlias = Callable[[list[str]], str]


def run_tool(args: list[str]) -> str:
    """Run a command-line tool and return its stdout.

    Raises:
        CompositorError: The tool is missing, timed out or exited non-zero.

    """
    try:
        # S603: args are built from literals and window ids reported by kdotool itself
        result = subprocess.run(args, check=False, capture_output=True, text=True, timeout=_TOOL_TIMEOUT)  # noqa: S603  # nosec B603
    except FileNotFoundError as e:
        raise CompositorError(f"{args[0]} not found") from e
    except subprocess.SubprocessError as e:
        raise CompositorError(f"{args[0]} failed: {e}") from e
    if result.returncode != 0:
        raise CompositorError(f"{args[0]} exited with status {result.returncode}: {result.stderr.strip()}")
    return result.stdout


def kwin_on_dbus() -> bool:
    """Check that KWin answers ``supportInformation`` on the session bus."""
    try:
        from pydbus import SessionBus  # noqa: PLC0415
    except ImportError as e:
        logger.debug("pydbus is required for KWin detection: %s", e)
        return False
    try:
        kwin = SessionBus().get("org.kde.KWin", "/KWin")
        kwin.supportInformation()
    except Exception as e:  # noqa: BLE001
        logger.debug("KWin D-Bus check failed: %s", e)
        return False
    return True


class KWinCompositor(Compositor):
    """KWin client driven through the ``kdotool`` CLI."""

    name = "KWin"

    def __init__(self, run: ToolRunner = run_tool) -> None:
        """Initialize with the tool runner (replaceable in tests)."""
        self._run = run

    @staticmethod
    def detect(kwin_available: Callable[[], bool] = kwin_on_dbus) -> "KWinCompositor | None":
        """Return a client inside a KDE session whose KWin answers on D-Bus."""
        if not os.environ.get("KDE_SESSION_VERSION"):
            return None
        if not kwin_available():
            return None
        return KWinCompositor()

    @property
    def capabilities(self) -> CompositorCapabilities:
        """Switching only; no blur rules, workspace or focus state guarantees."""
        return CompositorCapabilities.limited()

    def _query(self, *args: str) -> str:
        return self._run(["kdotool", *args]).strip()

    def list_windows(self) -> list[WindowInfo]:
        """List every window kdotool can find."""
        ids = self._query("search", ".*").split()
        try:
            active = self._query("getactivewindow")
        except CompositorError:
            active = ""
        windows: list[WindowInfo] = []
        for wid in ids:
            class_name = self._query("getwindowclassname", wid)
            try:
                desktop = int(self._query("get_desktop_for_window", wid))
            except (CompositorError, ValueError):
                desktop = 0
            windows.append(
                WindowInfo(
                    address=wid,
                    title=display_title(self._query("getwindowname", wid), class_name),
                    class_name=class_name,
                    workspace=max(desktop + 1, 0),
                    focused=wid == active,
                )
            )
        return filter_launcher_windows(windows)

    def focus_window(self, window_id: str) -> None:
        """Activate with kdotool, falling back to the KRunner windows runner over qdbus."""
        try:
            self._query("windowactivate", window_id)
        except CompositorError as e:
            logger.debug("kdotool windowactivate failed, trying qdbus: %s", e)
            self._run(["qdbus", "org.kde.KWin", "/WindowsRunner", "org.kde.krunner1.Run", f"0_{window_id}", ""])
