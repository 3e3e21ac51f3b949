from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from cute_couple.event_stream import FanoutChannel
from cute_couple.reminders.scheduler import ReminderScheduler
from cute_couple.reminders.service import EVENT_REMINDER_EVENT, SWEET_REMINDER_EVENT, ReminderService
from tests.conftest import FixedClock, InMemoryEventStore, make_event


NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _build(store: InMemoryEventStore, channel: FanoutChannel, *, sweet: float, event: float) -> ReminderScheduler:
    service = ReminderService(
        channel=channel,
        store=store,
        clock=FixedClock(NOW),
        pool=["💕"],
        lookahead_seconds=3600,
    )
    return ReminderScheduler(service, sweet_reminder_interval_seconds=sweet, event_check_interval_seconds=event)


@pytest.mark.asyncio
async def test_both_schedules_fire_and_stop_silences_them() -> None:
    channel = FanoutChannel()
    sub = channel.subscribe()
    store = InMemoryEventStore([make_event("1", NOW + timedelta(minutes=5), title="Picnic")])
    scheduler = _build(store, channel, sweet=0.02, event=0.03)

    scheduler.start()
    assert scheduler.running
    await asyncio.sleep(0.2)
    await scheduler.stop()
    assert not scheduler.running

    received = []
    while sub.pending():
        received.append(sub.get_nowait())
    types = [e.type for e in received]
    assert SWEET_REMINDER_EVENT in types
    # --- 予定は1回だけ通知される ---
    assert types.count(EVENT_REMINDER_EVENT) == 1
    assert store.get("1").notified is True

    await asyncio.sleep(0.1)
    assert sub.pending() == 0


@pytest.mark.asyncio
async def test_start_is_idempotent_and_first_fire_waits_for_interval() -> None:
    channel = FanoutChannel()
    sub = channel.subscribe()
    scheduler = _build(InMemoryEventStore([]), channel, sweet=60, event=60)

    scheduler.start()
    scheduler.start()
    assert [t.name for t in scheduler.tasks] == ["periodic_sweet_reminder", "periodic_event_reminder"]

    await asyncio.sleep(0.05)
    assert sub.pending() == 0

    await scheduler.stop()
    assert scheduler.tasks == []
