"""Synchronous client for CLI → daemon communication."""

import socket
from collections.abc import Sequence

from zlaunch.daemon.endpoint import Endpoint
from zlaunch.daemon.endpoint import is_daemon_running as is_daemon_running
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
    decode_response,
    encode_command,
)
from zlaunch.errors import DaemonNotRunningError, ZlaunchError
from zlaunch.modes import LauncherMode

# Read buffer size
_BUFSIZE = 65536

NOT_RUNNING_MESSAGE = "zlaunch daemon is not running. Start it first by running: zlaunch"


def _recv_line(s: socket.socket) -> bytes:
    """Read from socket until newline (protocol framing delimiter) or connection close."""
    chunks: list[bytes] = []
    while True:
        chunk = s.recv(_BUFSIZE)
        if not chunk:
            break
        chunks.append(chunk)
        if b"\n" in chunk:
            break
    return b"".join(chunks)


def _modes(modes: Sequence[LauncherMode] | None) -> tuple[LauncherMode, ...] | None:
    return tuple(modes) if modes else None


class DaemonClient:
    """Synchronous client that talks to the daemon, one connection per command."""

    def __init__(self, endpoint: Endpoint, timeout: float = 10.0) -> None:
        """Initialize client.

        Args:
            endpoint: Daemon endpoint.
            timeout: Socket timeout in seconds.

        """
        self._endpoint = endpoint
        self._timeout = timeout

    def send(self, command: Command) -> Response:
        """Send a command to the daemon and return the response.

        Raises:
            DaemonNotRunningError: Nothing accepts connections on the endpoint.
            ZlaunchError: The connection broke mid-request (code: ``io``).
            ProtocolError: The daemon closed the connection or replied with garbage.

        """
        try:
            s = self._endpoint.connect(self._timeout)
        except OSError as e:
            raise DaemonNotRunningError(NOT_RUNNING_MESSAGE) from e
        with s:
            try:
                s.sendall(encode_command(command))
                data = _recv_line(s)
            except OSError as e:
                raise ZlaunchError(f"Lost connection to the daemon: {e}", code="io") from e
        return decode_response(data)

    # --- Convenience methods ---

    def show(self, modes: Sequence[LauncherMode] | None = None) -> Response:
        """Show the launcher."""
        return self.send(Show(modes=_modes(modes)))

    def hide(self) -> Response:
        """Hide the launcher."""
        return self.send(Hide())

    def toggle(self, modes: Sequence[LauncherMode] | None = None) -> Response:
        """Toggle launcher visibility."""
        return self.send(Toggle(modes=_modes(modes)))

    def quit(self) -> Response:
        """Stop the daemon."""
        return self.send(Quit())

    def reload(self) -> Response:
        """Restart the daemon in place."""
        return self.send(Reload())

    def set_theme(self, name: str) -> Response:
        """Switch the active theme."""
        return self.send(SetTheme(theme=name))

    def list_themes(self) -> Response:
        """List available themes."""
        return self.send(ListThemes())

    def get_theme(self) -> Response:
        """Get the active theme name."""
        return self.send(GetTheme())
