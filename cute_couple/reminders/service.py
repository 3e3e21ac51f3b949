"""
リマインダーサービス

定期タスクから呼ばれる「1回分（tick）」の処理を持つ。

- sweet_reminder_tick: プールから1件選んで sweetReminder を配る
- event_reminder_tick: 先読み窓に入った未通知の予定ごとに eventReminder を配り、notified を書き戻す

書き戻しの方針:
    - 予定1件ごとに「配信 → 書き戻し完了を待つ」の順で処理し、全件の書き戻しが終わってから tick を終える。
    - 前回の event_reminder_tick が終わっていなければ、今回は何もしない（二重通知を防ぐ）。
    - ストアの失敗はログに残して tick を打ち切る。残りは次回の tick で拾われる。
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import timedelta
from typing import Optional, Sequence

from cute_couple import schemas
from cute_couple.clock import ClockService
from cute_couple.event_stream import FanoutChannel
from cute_couple.reminders.messages import format_event_reminder_message
from cute_couple.reminders.selector import IndexSource, pick_from_pool, select_upcoming
from cute_couple.reminders.store import EventStore


logger = logging.getLogger(__name__)

SWEET_REMINDER_EVENT = "sweetReminder"
EVENT_REMINDER_EVENT = "eventReminder"


class ReminderService:
    """sweetReminder / eventReminder の tick 処理。"""

    def __init__(
        self,
        *,
        channel: FanoutChannel,
        store: EventStore,
        clock: ClockService,
        pool: Sequence[str],
        lookahead_seconds: int,
        rng: Optional[IndexSource] = None,
    ) -> None:
        # --- 空プールは設定ミスなので、配信時ではなく生成時に落とす ---
        if not pool:
            raise ValueError("sweet reminder pool must contain at least one message")
        if int(lookahead_seconds) <= 0:
            raise ValueError("lookahead_seconds must be a positive integer")
        self._channel = channel
        self._store = store
        self._clock = clock
        self._pool = tuple(str(m) for m in pool)
        self._lookahead_seconds = int(lookahead_seconds)
        self._rng: IndexSource = rng if rng is not None else random.Random()
        self._event_tick_lock = asyncio.Lock()

    async def sweet_reminder_tick(self) -> str:
        """プールから1件選んで配る。選んだメッセージを返す。"""

        message = pick_from_pool(self._pool, self._rng)
        payload = schemas.SweetReminderPayload(message=message, timestamp=self._clock.now_utc())
        self._channel.publish(SWEET_REMINDER_EVENT, payload.model_dump(mode="json", by_alias=True))
        logger.info("sweet reminder sent: %s", message)
        return message

    async def event_reminder_tick(self) -> list[str]:
        """
        先読み窓の予定を配って notified を書き戻す。

        Returns:
            配信し、書き戻しまで終えた予定IDのリスト。
        """

        # --- 前回の tick が走っていれば重ねない ---
        if self._event_tick_lock.locked():
            logger.info("event reminder tick skipped (previous tick still running)")
            return []

        async with self._event_tick_lock:
            now = self._clock.now_utc()
            window = timedelta(seconds=self._lookahead_seconds)

            # --- 範囲検索（I/O は worker thread で） ---
            try:
                candidates = await asyncio.to_thread(self._store.query_events_in_window, now, now + window)
            except Exception as exc:  # noqa: BLE001
                logger.exception("event reminder query failed: %s", str(exc))
                return []

            upcoming = select_upcoming(candidates, now, window)
            dispatched: list[str] = []
            for event in upcoming:
                payload = schemas.EventReminderPayload(
                    message=format_event_reminder_message(event.title, lookahead_seconds=self._lookahead_seconds),
                    event=event,
                    timestamp=self._clock.now_utc(),
                )
                self._channel.publish(EVENT_REMINDER_EVENT, payload.model_dump(mode="json", by_alias=True))

                # --- 書き戻しの完了を待ってから次へ ---
                try:
                    await asyncio.to_thread(self._store.mark_notified, event.id)
                except Exception as exc:  # noqa: BLE001
                    logger.exception(
                        "event reminder write-back failed; tick aborted event_id=%s error=%s", event.id, str(exc)
                    )
                    break
                dispatched.append(event.id)
                logger.info("event reminder sent: %s", event.title)
            return dispatched
