"""
アプリライフサイクル登録。

目的:
    - startup / shutdown の副作用を 1 箇所へ集約する。
    - `main.py` は登録呼び出しだけにする。
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from cute_couple.clock import get_clock_service
from cute_couple.config import Config
from cute_couple.reminders.scheduler import ReminderScheduler
from cute_couple.reminders.service import ReminderService
from cute_couple.reminders.store import SqlEventStore


logger = logging.getLogger(__name__)


def build_reminder_scheduler(app: FastAPI, *, config: Config) -> ReminderScheduler:
    """app.state のファンアウトチャネルに配るスケジューラを組み立てる。"""

    service = ReminderService(
        channel=app.state.fanout_channel,
        store=SqlEventStore(),
        clock=get_clock_service(),
        pool=config.sweet_reminder_messages,
        lookahead_seconds=config.event_lookahead_seconds,
    )
    return ReminderScheduler(
        service,
        sweet_reminder_interval_seconds=config.sweet_reminder_interval_seconds,
        event_check_interval_seconds=config.event_check_interval_seconds,
    )


def register_lifecycle_hooks(app: FastAPI, *, config: Config) -> None:
    """
    FastAPI の startup / shutdown フックを登録する。
    """

    # --- スケジューラは生成だけ先に済ませ、起動は startup で行う ---
    app.state.reminder_scheduler = build_reminder_scheduler(app, config=config)

    @app.on_event("startup")
    async def start_reminder_scheduler() -> None:
        """リマインダーの定期タスクを起動する。"""

        if not config.reminders_enabled:
            logger.info("reminder scheduler disabled by config")
            return
        app.state.reminder_scheduler.start()

    @app.on_event("shutdown")
    async def stop_reminder_scheduler() -> None:
        """定期実行タスクを停止する（実行中の tick は完了を待つ）。"""

        await app.state.reminder_scheduler.stop()
