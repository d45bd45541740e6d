"""The daemon's well-known local endpoint.

A Unix domain socket on POSIX systems, a fixed localhost TCP port on Windows.
Everything above this module treats both the same way.
"""

import contextlib
import logging
import os
import socket
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

if sys.platform != "win32":
    import fcntl

logger = logging.getLogger(__name__)

WINDOWS_HOST = "127.0.0.1"
WINDOWS_PORT = 47827


@dataclass(frozen=True)
class Endpoint:
    """Address of the daemon: either a socket path or a localhost port."""

    path: Path | None = None
    port: int | None = None
    host: str = WINDOWS_HOST

    @staticmethod
    def default(runtime_dir: Path, app_name: str) -> "Endpoint":
        """Return the platform's default endpoint for the application."""
        if sys.platform == "win32":
            return Endpoint(port=WINDOWS_PORT)
        return Endpoint(path=runtime_dir / f"{app_name}.sock")

    @property
    def is_unix(self) -> bool:
        """True when the endpoint is a Unix domain socket."""
        return self.path is not None

    def __str__(self) -> str:
        return str(self.path) if self.path is not None else f"{self.host}:{self.port}"

    def exists(self) -> bool:
        """Check whether something occupies the endpoint path (always False for TCP)."""
        return self.path is not None and (self.path.exists() or self.path.is_symlink())

    def connect(self, timeout: float | None = None) -> socket.socket:
        """Open a client connection to the endpoint.

        Raises:
            OSError: The endpoint refused or does not exist.

        """
        if self.path is not None:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.settimeout(timeout)
                sock.connect(str(self.path))
            except BaseException:
                sock.close()
                raise
            return sock
        return socket.create_connection((self.host, self.port), timeout=timeout)

    def is_connectable(self, timeout: float = 1.0) -> bool:
        """Check if a peer is accepting connections on the endpoint."""
        try:
            with self.connect(timeout):
                pass
        except OSError:
            return False
        else:
            return True

    def bind(self) -> socket.socket:
        """Create a listening socket bound to the endpoint.

        The Unix socket is created owner-only. Binding never removes an existing file.

        Raises:
            OSError: The address is in use or cannot be bound.

        """
        if self.path is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            try:
                sock.bind((self.host, self.port))
                sock.listen()
            except BaseException:
                sock.close()
                raise
            return sock

        self.path.parent.mkdir(parents=True, exist_ok=True)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        # Restrict umask before socket creation to prevent TOCTOU permission window
        old_umask = os.umask(0o077)
        try:
            sock.bind(str(self.path))
            sock.listen()
        except BaseException:
            sock.close()
            raise
        finally:
            os.umask(old_umask)
        self.path.chmod(0o600)
        return sock

    @property
    def lock_path(self) -> Path | None:
        """File serializing concurrent binds of a Unix socket endpoint."""
        return self.path.with_name(self.path.name + ".lock") if self.path is not None else None

    @contextlib.contextmanager
    def bind_lock(self) -> Iterator[None]:
        """Hold an exclusive flock while probing, replacing and binding the socket.

        Only daemons starting at the same moment contend for it. Liveness is still decided
        by connecting to the socket. A no-op for TCP endpoints.
        """
        lock_path = self.lock_path
        if lock_path is None:
            yield
            return
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            yield
        finally:
            os.close(fd)

    def remove(self) -> None:
        """Remove the socket file, if any."""
        if self.path is None:
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to clean up IPC socket %s: %s", self.path, e)


def is_daemon_running(endpoint: Endpoint) -> bool:
    """Check whether a daemon answers on the endpoint. Response content is irrelevant."""
    return endpoint.is_connectable()
