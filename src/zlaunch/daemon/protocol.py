"""Command/Response protocol for CLI-daemon communication.

JSON over a local stream socket with newline framing. Each message is one JSON line.

Request:  {"command": "set_theme", "params": {"name": "nord"}}
Response: {"ok": true, "data": {}}
Error:    {"ok": false, "data": {}, "error": "theme_not_found", "message": "Theme 'x' not found"}
"""

import json
from dataclasses import dataclass, field
from typing import ClassVar, TypeAlias

from zlaunch.errors import ProtocolError
from zlaunch.modes import LauncherMode

# Upper bound for one encoded request line, newline included
MAX_MESSAGE_SIZE = 1024


@dataclass(frozen=True)
class Show:
    """Open the launcher. ``modes`` of None means the configured defaults."""

    name: ClassVar[str] = "show"
    modes: tuple[LauncherMode, ...] | None = None


@dataclass(frozen=True)
class Hide:
    """Close the launcher if visible."""

    name: ClassVar[str] = "hide"


@dataclass(frozen=True)
class Toggle:
    """Hide if visible, else show."""

    name: ClassVar[str] = "toggle"
    modes: tuple[LauncherMode, ...] | None = None


@dataclass(frozen=True)
class Quit:
    """Stop the daemon."""

    name: ClassVar[str] = "quit"


@dataclass(frozen=True)
class SetTheme:
    """Switch to the named theme."""

    name: ClassVar[str] = "set_theme"
    theme: str


@dataclass(frozen=True)
class Reload:
    """Restart the daemon in place."""

    name: ClassVar[str] = "reload"


@dataclass(frozen=True)
class ListThemes:
    """Query the available themes."""

    name: ClassVar[str] = "list_themes"


@dataclass(frozen=True)
class GetTheme:
    """Query the active theme name."""

    name: ClassVar[str] = "get_theme"


Command: TypeAlias = Show | Hide | Toggle | Quit | SetTheme | Reload | ListThemes | GetTheme

_SIMPLE: dict[str, Command] = {c.name: c for c in (Hide(), Quit(), Reload(), ListThemes(), GetTheme())}

# Answered from read-only state without entering the event loop
READ_ONLY_COMMANDS = (ListThemes, GetTheme)


@dataclass(frozen=True)
class Response:
    """Daemon response: success/error envelope with data."""

    ok: bool
    data: dict[str, object] = field(default_factory=dict)
    error: str = ""
    message: str = ""

    @staticmethod
    def success(data: dict[str, object] | None = None) -> "Response":
        """Build a success response."""
        return Response(ok=True, data=data or {})

    @staticmethod
    def fail(error: str, message: str) -> "Response":
        """Build an error response."""
        return Response(ok=False, error=error, message=message)


def _command_params(cmd: Command) -> dict[str, object]:
    match cmd:
        case Show(modes=modes) | Toggle(modes=modes) if modes is not None:
            return {"modes": [m.value for m in modes]}
        case SetTheme(theme=theme):
            return {"name": theme}
        case _:
            return {}


def encode_command(cmd: Command) -> bytes:
    """Serialize a Command to a newline-terminated JSON bytes line."""
    return json.dumps({"command": cmd.name, "params": _command_params(cmd)}).encode() + b"\n"


def _parse_modes(params: dict[str, object]) -> tuple[LauncherMode, ...] | None:
    """Parse the optional ``modes`` parameter.

    Raises:
        ProtocolError: Not a list of known mode names.

    """
    raw = params.get("modes")
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(m, str) for m in raw):
        raise ProtocolError("'modes' must be a list of strings.")
    modes: list[LauncherMode] = []
    for value in raw:
        mode = LauncherMode.parse(value)
        if mode is None:
            raise ProtocolError(f"Unknown mode: {value}")
        modes.append(mode)
    return tuple(modes) or None


def decode_command(data: bytes) -> Command:
    """Deserialize a JSON bytes line into a Command.

    Raises:
        ProtocolError: Invalid JSON, wrong shape, unknown command or bad parameters.

    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e
    if not isinstance(obj, dict) or not isinstance(obj.get("command"), str):
        raise ProtocolError("Request must be an object with a 'command' string.")
    params = obj.get("params", {})
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise ProtocolError("'params' must be an object.")

    command: str = obj["command"]
    match command:
        case "show":
            return Show(modes=_parse_modes(params))
        case "toggle":
            return Toggle(modes=_parse_modes(params))
        case "set_theme":
            theme = params.get("name")
            if not isinstance(theme, str) or not theme:
                raise ProtocolError("Missing 'name' parameter.")
            return SetTheme(theme=theme)
        case _ if command in _SIMPLE:
            return _SIMPLE[command]
        case _:
            raise ProtocolError(f"Unknown command: {command}")


def encode_response(resp: Response) -> bytes:
    """Serialize a Response to a newline-terminated JSON bytes line."""
    payload: dict[str, object] = {"ok": resp.ok, "data": resp.data}
    if not resp.ok:
        payload["error"] = resp.error
        payload["message"] = resp.message
    return json.dumps(payload).encode() + b"\n"


def decode_response(data: bytes) -> Response:
    """Deserialize a JSON bytes line into a Response.

    Raises:
        ProtocolError: The daemon sent something that is not a response object.

    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"Invalid response from daemon: {e}") from e
    if not isinstance(obj, dict) or not isinstance(obj.get("ok"), bool):
        raise ProtocolError("Invalid response from daemon.")
    return Response(ok=obj["ok"], data=obj.get("data") or {}, error=obj.get("error", ""), message=obj.get("message", ""))
