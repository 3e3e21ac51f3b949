"""
リマインダースケジューラ

sweetReminder と eventReminder の2つの定期タスクを、独立に起動/停止する。
どちらも wait_first=True（起動直後には発火しない）。
"""

from __future__ import annotations

import logging

from cute_couple.reminders.service import ReminderService
from cute_couple.runtime.periodic import PeriodicTask, start_periodic_task, stop_periodic_tasks


logger = logging.getLogger(__name__)


class ReminderScheduler:
    """2本の定期タスクを所有するスケジューラ。"""

    def __init__(
        self,
        service: ReminderService,
        *,
        sweet_reminder_interval_seconds: float,
        event_check_interval_seconds: float,
    ) -> None:
        self._service = service
        self._sweet_interval = float(sweet_reminder_interval_seconds)
        self._event_interval = float(event_check_interval_seconds)
        self._tasks: list[PeriodicTask] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    @property
    def tasks(self) -> list[PeriodicTask]:
        return list(self._tasks)

    def start(self) -> None:
        """2本の定期タスクを起動する（実行中のイベントループ内で呼ぶ）。多重呼び出しは無視する。"""

        if self._tasks:
            return

        async def _sweet_tick() -> None:
            await self._service.sweet_reminder_tick()

        async def _event_tick() -> None:
            await self._service.event_reminder_tick()

        start_periodic_task(
            self._tasks,
            name="periodic_sweet_reminder",
            interval_seconds=self._sweet_interval,
            wait_first=True,
            func=_sweet_tick,
            logger=logger,
        )
        start_periodic_task(
            self._tasks,
            name="periodic_event_reminder",
            interval_seconds=self._event_interval,
            wait_first=True,
            func=_event_tick,
            logger=logger,
        )
        logger.info(
            "reminder scheduler started sweet_interval=%ss event_interval=%ss",
            self._sweet_interval,
            self._event_interval,
        )

    async def stop(self, *, timeout_seconds: float = 10.0) -> None:
        """両方の定期タスクを止める。実行中の tick は完了を待つ。"""

        await stop_periodic_tasks(self._tasks, logger=logger, timeout_seconds=timeout_seconds)
