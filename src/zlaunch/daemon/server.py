"""Asyncio IPC server: one command per connection, one response back.

Parses requests at the connection boundary and forwards valid commands to the event loop
through the event channel. Malformed input never reaches the event loop.
"""

import asyncio
import contextlib
import errno
import logging
import os
import socket

from zlaunch.daemon.endpoint import Endpoint
from zlaunch.daemon.events import EventSender
from zlaunch.daemon.protocol import (
    MAX_MESSAGE_SIZE,
    READ_ONLY_COMMANDS,
    Response,
    decode_command,
    encode_response,
)
from zlaunch.daemon.queries import answer_query
from zlaunch.errors import AlreadyRunningError, ProtocolError
from zlaunch.settings import SettingsStore
from zlaunch.themes import ThemeCatalog

logger = logging.getLogger(__name__)

# Seconds a client may take to send its request line
REQUEST_TIMEOUT = 5.0

# Seconds close() waits for in-flight connections
CLOSE_TIMEOUT = 1.0


def _already_running(endpoint: Endpoint) -> AlreadyRunningError:
    return AlreadyRunningError(f"zlaunch daemon is already running at {endpoint}")


def bind_endpoint(endpoint: Endpoint) -> socket.socket:
    """Bind the endpoint, taking over a stale socket file but never a live daemon's.

    Concurrent starts are serialized by the endpoint's bind lock, so exactly one of them binds.

    Raises:
        AlreadyRunningError: Another daemon accepts connections on the endpoint.
        OSError: The endpoint cannot be bound for any other reason.

    """
    with endpoint.bind_lock():
        try:
            return endpoint.bind()
        except OSError as e:
            if e.errno != errno.EADDRINUSE:
                raise
            if endpoint.is_connectable():
                raise _already_running(endpoint) from e
            if not endpoint.is_unix:
                raise
        logger.info("Removing stale socket %s", endpoint)
        endpoint.remove()
        try:
            return endpoint.bind()
        except OSError as e:
            # A daemon that does not take the bind lock got there first
            if e.errno == errno.EADDRINUSE and endpoint.is_connectable():
                raise _already_running(endpoint) from e
            raise


class IpcServer:
    """Listens on the daemon endpoint and feeds commands into the event channel."""

    def __init__(
        self,
        endpoint: Endpoint,
        sender: EventSender,
        settings: SettingsStore,
        themes: ThemeCatalog,
        *,
        request_timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the server.

        Args:
            endpoint: Well-known daemon endpoint.
            sender: Producer handle of the event channel.
            settings: Read-only view used to answer theme queries.
            themes: Theme catalog used to answer theme queries.
            request_timeout: Seconds a client may take to send its request line.

        """
        self._endpoint = endpoint
        self._sender = sender
        self._settings = settings
        self._themes = themes
        self._request_timeout = request_timeout
        self._server: asyncio.AbstractServer | None = None

    @property
    def endpoint(self) -> Endpoint:
        """The endpoint this server owns."""
        return self._endpoint

    async def start(self) -> None:
        """Bind the endpoint and start accepting connections.

        Raises:
            AlreadyRunningError: A live daemon owns the endpoint.
            OSError: Binding failed.

        """
        sock = bind_endpoint(self._endpoint)
        try:
            if self._endpoint.is_unix:
                self._server = await asyncio.start_unix_server(self._handle_client, sock=sock, limit=MAX_MESSAGE_SIZE)
            else:
                self._server = await asyncio.start_server(self._handle_client, sock=sock, limit=MAX_MESSAGE_SIZE)
        except BaseException:
            sock.close()
            self._endpoint.remove()
            raise
        logger.info("Daemon listening on %s (pid %d)", self._endpoint, os.getpid())

    async def close(self) -> None:
        """Stop accepting connections and remove the socket file.

        Connections still open after CLOSE_TIMEOUT seconds are left behind.
        """
        if self._server is None:
            self._endpoint.remove()
            return
        self._server.close()
        self._endpoint.remove()
        try:
            await asyncio.wait_for(self._server.wait_closed(), CLOSE_TIMEOUT)
        except TimeoutError:
            logger.warning("Client connections still open after %.1fs, not waiting for them", CLOSE_TIMEOUT)
        except OSError as e:
            logger.debug("Error while closing server: %s", e)
        self._server = None

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Handle a single client connection: read request, dispatch, send response."""
        try:
            try:
                line = await asyncio.wait_for(reader.readline(), self._request_timeout)
            except TimeoutError:
                logger.debug("Client sent no request within %.1fs", self._request_timeout)
                resp = Response.fail(ProtocolError.code, "Timed out waiting for request.")
            except ValueError:
                # readline() reports an overrun of the reader limit as ValueError
                resp = Response.fail(ProtocolError.code, f"Message exceeds {MAX_MESSAGE_SIZE} bytes.")
            else:
                if not line.strip():
                    return
                resp = await self._dispatch(line)
            writer.write(encode_response(resp))
            await writer.drain()
        except ConnectionError as e:
            logger.debug("Client went away: %s", e)
        except Exception:
            logger.exception("Error handling client")
            with contextlib.suppress(ConnectionError):
                writer.write(encode_response(Response.fail("internal", "Internal server error.")))
                await writer.drain()
        finally:
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    async def _dispatch(self, line: bytes) -> Response:
        """Decode a request line and obtain its response."""
        try:
            command = decode_command(line)
        except ProtocolError as e:
            logger.debug("Rejected request: %s", e)
            return Response.fail(e.code, str(e))
        logger.debug("Request: %s", command.name)
        if isinstance(command, READ_ONLY_COMMANDS):
            return answer_query(command, self._settings, self._themes)
        return await self._sender.request(command)
