"""Tests for the event channel and reply slots."""

import asyncio
import threading

from zlaunch.daemon.events import ApplicationsChanged, CommandEvent, EventChannel, ReplySlot, WindowEvent
from zlaunch.daemon.protocol import Hide, Response, Show


class TestReplySlot:
    """Single-use reply semantics."""

    async def test_first_send_delivers(self):
        """The first response reaches the waiter."""
        slot = ReplySlot()
        assert slot.send(Response.success({"n": 1}))
        assert await slot.wait() == Response.success({"n": 1})

    async def test_second_send_is_noop(self):
        """A second send returns False and does not change the delivered response."""
        slot = ReplySlot()
        slot.send(Response.success())
        assert not slot.send(Response.fail("internal", "late"))
        assert (await slot.wait()).ok

    async def test_send_after_abandon(self):
        """Sending to an abandoned slot returns False without raising."""
        slot = ReplySlot()
        slot.abandon()
        assert slot.is_used
        assert not slot.send(Response.success())


class TestEventChannel:
    """Ordering, cross-thread sends and close semantics."""

    async def test_fifo_order(self):
        """Events are received in send order."""
        channel = EventChannel()
        sender = channel.sender()
        events = [WindowEvent.REQUEST_HIDE, ApplicationsChanged(), WindowEvent.REQUEST_HIDE]
        for event in events:
            assert sender.send(event)
        assert [await channel.recv() for _ in events] == events

    async def test_send_from_other_thread(self):
        """Producers on other threads deliver through the loop."""
        channel = EventChannel()
        sender = channel.sender()
        thread = threading.Thread(target=sender.request_hide)
        thread.start()
        thread.join()
        assert await asyncio.wait_for(channel.recv(), 1.0) == WindowEvent.REQUEST_HIDE

    async def test_send_after_close(self):
        """A closed channel refuses events."""
        channel = EventChannel()
        channel.close()
        assert channel.closed
        assert not channel.sender().send(WindowEvent.REQUEST_HIDE)

    async def test_recv_after_close(self):
        """recv() returns None once closed."""
        channel = EventChannel()
        channel.close()
        assert await channel.recv() is None

    async def test_close_wakes_waiting_consumer(self):
        """A consumer blocked in recv() wakes up with None."""
        channel = EventChannel()
        waiter = asyncio.create_task(channel.recv())
        await asyncio.sleep(0)
        channel.close()
        assert await asyncio.wait_for(waiter, 1.0) is None

    async def test_close_answers_queued_commands(self):
        """Undelivered commands get a channel_closed response."""
        channel = EventChannel()
        slot = ReplySlot()
        channel.send(CommandEvent(Hide(), slot))
        channel.close()
        resp = await slot.wait()
        assert resp.error == "channel_closed"

    async def test_request_on_closed_channel(self):
        """EventSender.request() fails fast when closed."""
        channel = EventChannel()
        channel.close()
        resp = await channel.sender().request(Show())
        assert not resp.ok
        assert resp.error == "channel_closed"

    async def test_request_waits_for_reply(self):
        """EventSender.request() returns what the consumer replies."""
        channel = EventChannel()

        async def consumer():
            event = await channel.recv()
            assert isinstance(event, CommandEvent)
            event.reply.send(Response.success({"seen": event.command.name}))

        task = asyncio.create_task(consumer())
        resp = await channel.sender().request(Hide())
        await task
        assert resp.data == {"seen": "hide"}
