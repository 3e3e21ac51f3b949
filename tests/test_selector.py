from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from cute_couple.reminders.selector import pick_from_pool, select_upcoming
from tests.conftest import FixedIndex, make_event


NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


def test_pick_uses_index_from_rng() -> None:
    assert pick_from_pool(["A", "B"], FixedIndex(1)) == "B"


def test_pick_single_element_pool() -> None:
    rng = random.Random(7)
    assert {pick_from_pool(["only"], rng) for _ in range(20)} == {"only"}


def test_pick_empty_pool_raises() -> None:
    with pytest.raises(ValueError):
        pick_from_pool([], FixedIndex(0))


def test_pick_covers_every_element() -> None:
    pool = ["a", "b", "c", "d"]
    rng = random.Random(1234)
    picked = [pick_from_pool(pool, rng) for _ in range(2000)]
    assert set(picked) == set(pool)


def test_select_upcoming_only_unnotified_inside_window() -> None:
    events = [
        make_event("1", datetime(2024, 1, 1, 10, 30, tzinfo=timezone.utc)),
        make_event("2", datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)),
        make_event("3", datetime(2024, 1, 1, 10, 15, tzinfo=timezone.utc), notified=True),
    ]
    selected = select_upcoming(events, NOW, HOUR)
    assert [e.id for e in selected] == ["1"]


def test_select_upcoming_window_bounds_are_inclusive() -> None:
    events = [
        make_event("start", NOW),
        make_event("end", NOW + HOUR),
        make_event("before", NOW - timedelta(seconds=1)),
        make_event("after", NOW + HOUR + timedelta(seconds=1)),
    ]
    selected = select_upcoming(events, NOW, HOUR)
    assert [e.id for e in selected] == ["start", "end"]


def test_select_upcoming_keeps_input_order_and_accepts_naive_now() -> None:
    events = [
        make_event("late", NOW + timedelta(minutes=50)),
        make_event("early", NOW + timedelta(minutes=5)),
    ]
    selected = select_upcoming(events, NOW.replace(tzinfo=None), HOUR)
    assert [e.id for e in selected] == ["late", "early"]
