"""Niri backend: newline-delimited JSON over ``$NIRI_SOCKET``."""

import json
import os
from pathlib import Path
from typing import Any

from zlaunch.compositor import ipc
from zlaunch.compositor.base import Compositor, CompositorCapabilities, WindowInfo, display_title, filter_launcher_windows
from zlaunch.errors import CompositorError


class NiriCompositor(Compositor):
    """Niri client. Replies are ``{"Ok": ...}`` or ``{"Err": ...}`` on one line."""

    name = "Niri"

    def __init__(self, socket_path: Path) -> None:
        """Initialize with the socket path from NIRI_SOCKET."""
        self.socket_path = socket_path

    @staticmethod
    def detect() -> "NiriCompositor | None":
        """Return a client when NIRI_SOCKET is set."""
        path = os.environ.get("NIRI_SOCKET")
        return NiriCompositor(Path(path)) if path else None

    @property
    def capabilities(self) -> CompositorCapabilities:
        """Full feature set."""
        return CompositorCapabilities.full()

    def _request(self, message: object) -> Any:  # noqa: ANN401
        """Send one JSON request and return the ``Ok`` payload."""
        payload = (json.dumps(message) + "\n").encode()
        reply = ipc.request(self.socket_path, payload, until_newline=True, compositor=self.name)
        try:
            obj = json.loads(reply)
        except json.JSONDecodeError as e:
            raise CompositorError(f"Failed to parse Niri reply: {e}") from e
        if not isinstance(obj, dict) or "Ok" not in obj:
            err = obj.get("Err") if isinstance(obj, dict) else obj
            raise CompositorError(f"Niri returned an error: {err}")
        return obj["Ok"]

    def list_windows(self) -> list[WindowInfo]:
        """List windows via the ``Windows`` request."""
        ok = self._request("Windows")
        windows = ok.get("Windows") if isinstance(ok, dict) else None
        if not isinstance(windows, list):
            raise CompositorError("Unexpected Niri Windows reply.")
        try:
            return filter_launcher_windows(_parse_window(w) for w in windows if isinstance(w, dict))
        except (TypeError, ValueError) as e:
            raise CompositorError(f"Unexpected Niri window entry: {e}") from e

    def focus_window(self, window_id: str) -> None:
        """Run the ``FocusWindow`` action. Window ids are integers."""
        try:
            wid = int(window_id)
        except ValueError as e:
            raise CompositorError(f"Invalid Niri window id: {window_id}") from e
        self._request({"Action": {"FocusWindow": {"id": wid}}})


def _parse_window(window: dict[str, Any]) -> WindowInfo:
    app_id = str(window.get("app_id") or "")
    return WindowInfo(
        address=str(window.get("id", "")),
        title=display_title(str(window.get("title") or ""), app_id),
        class_name=app_id,
        workspace=int(window.get("workspace_id") or 0),
        focused=bool(window.get("is_focused", False)),
    )
