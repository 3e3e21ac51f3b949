from __future__ import annotations

import asyncio
import logging

import pytest

from cute_couple.runtime.periodic import start_periodic_task, stop_periodic_tasks


logger = logging.getLogger("tests.periodic")


async def _wait_until(predicate, *, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        start_periodic_task([], name="bad", interval_seconds=0, wait_first=True, func=None, logger=logger)


@pytest.mark.asyncio
async def test_runs_repeatedly_and_stops_firing_after_stop() -> None:
    tasks: list = []
    calls: list[int] = []

    async def _tick() -> None:
        calls.append(1)

    periodic = start_periodic_task(
        tasks, name="repeat", interval_seconds=0.01, wait_first=False, func=_tick, logger=logger
    )
    await _wait_until(lambda: len(calls) >= 3)

    await stop_periodic_tasks(tasks, logger=logger)
    assert tasks == []
    assert periodic.task.done()

    count = len(calls)
    await asyncio.sleep(0.05)
    assert len(calls) == count


@pytest.mark.asyncio
async def test_wait_first_delays_first_run_and_stop_wakes_waiter() -> None:
    tasks: list = []
    calls: list[int] = []

    async def _tick() -> None:
        calls.append(1)

    start_periodic_task(tasks, name="slow", interval_seconds=60, wait_first=True, func=_tick, logger=logger)
    await asyncio.sleep(0.05)
    assert calls == []

    await asyncio.wait_for(stop_periodic_tasks(tasks, logger=logger), timeout=1.0)
    assert calls == []


@pytest.mark.asyncio
async def test_failure_is_logged_and_loop_continues(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="tests.periodic")
    tasks: list = []

    async def _boom() -> None:
        raise RuntimeError("boom")

    periodic = start_periodic_task(
        tasks, name="boom", interval_seconds=0.01, wait_first=False, func=_boom, logger=logger
    )
    await _wait_until(lambda: periodic.ticks >= 3)
    assert not periodic.task.done()

    await stop_periodic_tasks(tasks, logger=logger)
    assert "periodic task failed: name=boom" in caplog.text


@pytest.mark.asyncio
async def test_stop_lets_in_flight_tick_finish() -> None:
    tasks: list = []
    started = asyncio.Event()
    finished: list[bool] = []

    async def _slow() -> None:
        started.set()
        await asyncio.sleep(0.1)
        finished.append(True)

    start_periodic_task(tasks, name="inflight", interval_seconds=60, wait_first=False, func=_slow, logger=logger)
    await asyncio.wait_for(started.wait(), timeout=1.0)

    await stop_periodic_tasks(tasks, logger=logger, timeout_seconds=5.0)
    assert finished == [True]


@pytest.mark.asyncio
async def test_stop_cancels_tick_that_exceeds_timeout(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="tests.periodic")
    tasks: list = []
    started = asyncio.Event()

    async def _hang() -> None:
        started.set()
        await asyncio.Event().wait()

    periodic = start_periodic_task(
        tasks, name="hang", interval_seconds=60, wait_first=False, func=_hang, logger=logger
    )
    await asyncio.wait_for(started.wait(), timeout=1.0)

    await stop_periodic_tasks(tasks, logger=logger, timeout_seconds=0.05)
    assert periodic.task.cancelled()
    assert "cancelled after timeout" in caplog.text
