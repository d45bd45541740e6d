"""Shared fixtures: short socket directories, configs and fake compositor sockets."""

import socket
import tempfile
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from zlaunch.compositor.base import Compositor, CompositorCapabilities, WindowInfo
from zlaunch.config import Config


@pytest.fixture
def sock_dir() -> Iterator[Path]:
    """Short-named temporary directory (Unix socket paths are limited to ~108 bytes)."""
    with tempfile.TemporaryDirectory(prefix="zl-", dir="/tmp") as d:  # noqa: S108
        yield Path(d)


@pytest.fixture
def cfg(tmp_path: Path, sock_dir: Path) -> Config:
    """Config with every directory under temporary paths."""
    return Config(
        config_dir=tmp_path / "config",
        runtime_dir=sock_dir,
        state_dir=tmp_path / "state",
        data_dirs=(tmp_path / "data",),
    )


class FakeSocketServer:
    """One-thread Unix socket server answering each connection with handler(request)."""

    def __init__(self, path: Path, handler: Callable[[bytes], bytes], *, until_newline: bool) -> None:
        self.path = path
        self.requests: list[bytes] = []
        self._handler = handler
        self._until_newline = until_newline
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(str(path))
        self._sock.listen()
        self._sock.settimeout(0.2)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _read(self, conn: socket.socket) -> bytes:
        data = b""
        while True:
            chunk = conn.recv(65536)
            if not chunk:
                break
            data += chunk
            if not self._until_newline or b"\n" in data:
                break
        return data

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except TimeoutError:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(2.0)
                request = self._read(conn)
                self.requests.append(request)
                conn.sendall(self._handler(request))

    def close(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2.0)
        self._sock.close()


@pytest.fixture
def fake_socket_server(sock_dir: Path) -> Iterator[Callable[..., FakeSocketServer]]:
    """Factory for FakeSocketServer instances, closed after the test."""
    servers: list[FakeSocketServer] = []

    def factory(handler: Callable[[bytes], bytes], *, until_newline: bool = False, name: str = "c.sock") -> FakeSocketServer:
        server = FakeSocketServer(sock_dir / name, handler, until_newline=until_newline)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


class StubCompositor(Compositor):
    """In-memory compositor for event loop and runtime tests."""

    name = "Stub"

    def __init__(self, windows: list[WindowInfo] | None = None, *, fail: bool = False) -> None:
        self.windows = windows or []
        self.fail = fail
        self.list_calls = 0
        self.focused: list[str] = []

    @property
    def capabilities(self) -> CompositorCapabilities:
        return CompositorCapabilities.full()

    def list_windows(self) -> list[WindowInfo]:
        self.list_calls += 1
        if self.fail:
            msg = "compositor unreachable"
            raise OSError(msg)
        return list(self.windows)

    def focus_window(self, window_id: str) -> None:
        self.focused.append(window_id)


FIREFOX = WindowInfo(address="0x1", title="Mozilla Firefox", class_name="firefox", workspace=1, focused=True)
TERMINAL = WindowInfo(address="0x2", title="~", class_name="foot", workspace=2, focused=False)


@pytest.fixture
def stub_compositor() -> StubCompositor:
    """Compositor stub reporting two windows."""
    return StubCompositor([FIREFOX, TERMINAL])
