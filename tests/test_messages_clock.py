from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cute_couple.clock import get_clock_service
from cute_couple.reminders.messages import describe_lookahead, format_event_reminder_message


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(3600, "1 hour"), (7200, "2 hours"), (60, "1 minute"), (1800, "30 minutes"), (90, "90 seconds")],
)
def test_describe_lookahead(seconds: int, expected: str) -> None:
    assert describe_lookahead(seconds) == expected


def test_event_reminder_message() -> None:
    assert (
        format_event_reminder_message("Dinner", lookahead_seconds=3600)
        == "🎉 Upcoming event: Dinner in 1 hour! 💕"
    )


def test_clock_returns_aware_utc_now() -> None:
    clock = get_clock_service()
    before = datetime.now(timezone.utc)
    now = clock.now_utc()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
    assert before <= now <= datetime.now(timezone.utc)
    assert get_clock_service() is clock
