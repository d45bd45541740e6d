"""Blocking request/response over a compositor's Unix socket."""

import socket
from pathlib import Path

from zlaunch.errors import CompositorError

_BUFSIZE = 65536


def _recv(s: socket.socket, *, until_newline: bool) -> bytes:
    """Read until connection close, or until the first newline when requested."""
    chunks: list[bytes] = []
    while True:
        chunk = s.recv(_BUFSIZE)
        if not chunk:
            break
        chunks.append(chunk)
        if until_newline and b"\n" in chunk:
            break
    data = b"".join(chunks)
    if until_newline:
        data = data.split(b"\n", 1)[0]
    return data


def request(socket_path: Path, payload: bytes, *, until_newline: bool = False, compositor: str = "compositor") -> str:
    """Send one request and return the decoded reply.

    Raises:
        CompositorError: Connect, write or read failed.

    """
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
            s.connect(str(socket_path))
            s.sendall(payload)
            data = _recv(s, until_newline=until_newline)
    except OSError as e:
        raise CompositorError(f"Failed to talk to {compositor} socket {socket_path}: {e}") from e
    try:
        return data.decode()
    except UnicodeDecodeError as e:
        raise CompositorError(f"Invalid reply from {compositor}: {e}") from e
