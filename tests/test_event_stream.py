from __future__ import annotations

import asyncio
import json
import logging

import pytest

from cute_couple.event_stream import AppEvent, FanoutChannel, serialize_event


def test_publish_without_subscribers_is_not_an_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="cute_couple.event_stream")
    channel = FanoutChannel()

    assert channel.publish("eventReminder", {"message": "hi"}) == 0
    assert "event stream broadcast type=eventReminder clients=0" in caplog.text


def test_every_connected_subscriber_receives_once() -> None:
    channel = FanoutChannel()
    subs = [channel.subscribe() for _ in range(3)]

    assert channel.publish("sweetReminder", {"message": "m"}) == 3

    for sub in subs:
        assert sub.pending() == 1
        event = sub.get_nowait()
        assert event.type == "sweetReminder"
        assert event.data == {"message": "m"}
        assert sub.pending() == 0


def test_late_subscriber_does_not_see_earlier_publish() -> None:
    channel = FanoutChannel()
    channel.publish("sweetReminder", {"message": "early"})

    sub = channel.subscribe()
    assert sub.pending() == 0


def test_unsubscribed_handle_receives_nothing_and_unsubscribe_is_idempotent() -> None:
    channel = FanoutChannel()
    keep = channel.subscribe()
    gone = channel.subscribe()

    channel.unsubscribe(gone)
    channel.unsubscribe(gone)
    assert channel.connected_count() == 1

    assert channel.publish("sweetReminder", {"message": "m"}) == 1
    assert keep.pending() == 1
    assert gone.pending() == 0


def test_full_subscriber_queue_drops_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="cute_couple.event_stream")
    channel = FanoutChannel()
    slow = channel.subscribe()
    maxsize = slow.queue.maxsize

    for i in range(maxsize + 1):
        channel.publish("sweetReminder", {"n": i})

    assert slow.pending() == maxsize
    assert "subscriber queue full" in caplog.text
    assert slow.get_nowait().data == {"n": 0}


def test_serialize_event_keeps_type_and_data() -> None:
    text = serialize_event(AppEvent(type="sweetReminder", data={"message": "💕 hi"}))
    assert "💕" in text
    assert json.loads(text) == {"type": "sweetReminder", "data": {"message": "💕 hi"}}


@pytest.mark.asyncio
async def test_publish_from_worker_thread_reaches_loop_subscriber() -> None:
    channel = FanoutChannel()
    sub = channel.subscribe()

    delivered = await asyncio.to_thread(channel.publish, "eventReminder", {"message": "soon"})
    assert delivered == 1

    event = await asyncio.wait_for(sub.get(), timeout=1.0)
    assert event.type == "eventReminder"
    assert event.data["message"] == "soon"
