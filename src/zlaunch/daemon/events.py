"""Unified event channel feeding the daemon event loop.

Producers (IPC connections, the UI, the application watcher) may run on any thread.
The single consumer is the event loop task.
"""

import asyncio
import enum
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from zlaunch.daemon.protocol import Command, Response

logger = logging.getLogger(__name__)


class WindowEvent(enum.Enum):
    """Events raised by the launcher window itself."""

    REQUEST_HIDE = "request_hide"


@dataclass(frozen=True)
class ApplicationsChanged:
    """Desktop entries changed on disk. Carries no reply slot."""

    paths: tuple[Path, ...] = ()


class ReplySlot:
    """Single-use handoff of one Response from the event loop to a waiting requester."""

    def __init__(self) -> None:
        """Create the slot bound to the running asyncio loop."""
        self._future: asyncio.Future[Response] = asyncio.get_running_loop().create_future()

    @property
    def is_used(self) -> bool:
        """True once a response was sent or the requester gave up."""
        return self._future.done()

    def send(self, response: Response) -> bool:
        """Deliver the response. A second send, or a send after abandon, is a no-op returning False."""
        if self._future.done():
            logger.debug("Reply slot already used or abandoned, dropping %s response", "ok" if response.ok else response.error)
            return False
        self._future.set_result(response)
        return True

    def abandon(self) -> None:
        """Mark the requester as gone."""
        if not self._future.done():
            self._future.cancel()

    async def wait(self) -> Response:
        """Wait for the response."""
        return await self._future


@dataclass(frozen=True)
class CommandEvent:
    """A transport command paired with the slot its response goes to."""

    command: Command
    reply: ReplySlot


DaemonEvent: TypeAlias = CommandEvent | WindowEvent | ApplicationsChanged

CHANNEL_CLOSED_MESSAGE = "Daemon is shutting down."


class EventChannel:
    """Unbounded ordered multi-producer queue with a single consumer.

    Must be created inside the running asyncio loop that consumes it.
    """

    def __init__(self) -> None:
        """Create an open channel bound to the running loop."""
        self._loop = asyncio.get_running_loop()
        self._thread_id = threading.get_ident()
        self._queue: asyncio.Queue[DaemonEvent | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        """True after close()."""
        return self._closed

    def sender(self) -> "EventSender":
        """Return a producer handle usable from any thread."""
        return EventSender(self)

    def send(self, event: DaemonEvent) -> bool:
        """Enqueue an event. Return False if the channel is closed."""
        if self._closed:
            return False
        if threading.get_ident() == self._thread_id:
            self._put(event)
        else:
            try:
                self._loop.call_soon_threadsafe(self._put, event)
            except RuntimeError:
                # loop already closed
                return False
        return True

    async def recv(self) -> DaemonEvent | None:
        """Wait for the next event. Return None once the channel is closed."""
        if self._closed:
            return None
        return await self._queue.get()

    def close(self) -> None:
        """Close the channel and answer every undelivered command with a channel_closed error."""
        if self._closed:
            return
        self._closed = True
        while not self._queue.empty():
            _reject(self._queue.get_nowait())
        self._queue.put_nowait(None)

    def _put(self, event: DaemonEvent) -> None:
        if self._closed:
            _reject(event)
            return
        self._queue.put_nowait(event)


def _reject(event: DaemonEvent | None) -> None:
    if isinstance(event, CommandEvent):
        event.reply.send(Response.fail("channel_closed", CHANNEL_CLOSED_MESSAGE))


class EventSender:
    """Producer handle for an EventChannel."""

    def __init__(self, channel: EventChannel) -> None:
        """Wrap the channel."""
        self._channel = channel

    def send(self, event: DaemonEvent) -> bool:
        """Enqueue an event. Return False if the daemon is shutting down."""
        return self._channel.send(event)

    def request_hide(self) -> bool:
        """Ask the event loop to hide the window."""
        return self.send(WindowEvent.REQUEST_HIDE)

    async def request(self, command: Command) -> Response:
        """Send a command from the loop thread and wait for its single response."""
        slot = ReplySlot()
        if not self.send(CommandEvent(command, slot)):
            return Response.fail("channel_closed", CHANNEL_CLOSED_MESSAGE)
        try:
            return await slot.wait()
        finally:
            slot.abandon()
