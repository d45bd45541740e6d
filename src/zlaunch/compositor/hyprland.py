"""Hyprland backend: JSON replies over the per-instance ``.socket.sock``."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from zlaunch.compositor import ipc
from zlaunch.compositor.base import (
    LAUNCHER_CLASS,
    Compositor,
    CompositorCapabilities,
    WindowInfo,
    display_title,
    filter_launcher_windows,
)
from zlaunch.errors import CompositorError

logger = logging.getLogger(__name__)

BLUR_LAYER_RULES = (
    f"blur,{LAUNCHER_CLASS}",
    f"ignorezero,{LAUNCHER_CLASS}",
    f"blurpopups,{LAUNCHER_CLASS}",
    f"ignorealpha 0.35,{LAUNCHER_CLASS}",
)


class HyprlandCompositor(Compositor):
    """Hyprland client. Requests carry no newline; replies end at connection close."""

    name = "Hyprland"

    def __init__(self, socket_path: Path) -> None:
        """Initialize with the instance socket path."""
        self.socket_path = socket_path

    @staticmethod
    def detect() -> "HyprlandCompositor | None":
        """Return a client when HYPRLAND_INSTANCE_SIGNATURE is set."""
        signature = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE")
        if not signature:
            return None
        runtime_dir = os.environ.get("XDG_RUNTIME_DIR") or "/tmp"  # noqa: S108
        return HyprlandCompositor(Path(runtime_dir) / "hypr" / signature / ".socket.sock")

    @property
    def capabilities(self) -> CompositorCapabilities:
        """Full feature set."""
        return CompositorCapabilities.full()

    def _send(self, command: str) -> str:
        return ipc.request(self.socket_path, command.encode(), compositor=self.name)

    def list_windows(self) -> list[WindowInfo]:
        """List mapped, visible clients with a class."""
        reply = self._send("j/clients")
        try:
            clients = json.loads(reply)
        except json.JSONDecodeError as e:
            raise CompositorError(f"Failed to parse Hyprland clients JSON: {e}") from e
        if not isinstance(clients, list):
            raise CompositorError("Unexpected Hyprland clients reply.")
        try:
            return filter_launcher_windows(w for w in map(_parse_client, clients) if w is not None)
        except (TypeError, ValueError) as e:
            raise CompositorError(f"Unexpected Hyprland client entry: {e}") from e

    def focus_window(self, window_id: str) -> None:
        """Dispatch ``focuswindow address:<id>``."""
        reply = self._send(f"dispatch focuswindow address:{window_id}")
        if reply.strip() != "ok":
            raise CompositorError(f"Hyprland refused to focus {window_id}: {reply.strip()}")

    def apply_blur_layer_rules(self) -> None:
        """Register the launcher layer rules that enable background blur."""
        for rule in BLUR_LAYER_RULES:
            reply = self._send(f"keyword layerrule {rule}")
            if reply.strip() != "ok":
                logger.warning("Hyprland rejected layer rule '%s': %s", rule, reply.strip())
        logger.info("Applied Hyprland blur layer rules")


def _parse_client(client: Any) -> WindowInfo | None:  # noqa: ANN401
    """Normalize one entry of ``j/clients``. Return None for windows that should not be listed."""
    if not isinstance(client, dict):
        return None
    if not client.get("mapped", False) or client.get("hidden", False):
        return None
    class_name = str(client.get("class") or "")
    if not class_name:
        return None
    workspace = client.get("workspace") or {}
    return WindowInfo(
        address=str(client.get("address", "")),
        title=display_title(str(client.get("title") or ""), class_name),
        class_name=class_name,
        workspace=int(workspace.get("id") or 0) if isinstance(workspace, dict) else 0,
        focused=client.get("focusHistoryID") == 0,
    )
