"""
リマインダー用の予定ストア

CRUD 層が所有する calendar_events に対して、リマインダーが行う操作は2つだけ:
    - 先読み窓の範囲検索（未通知のみ）
    - notified=true の書き戻し（冪等）
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol, Sequence

from sqlalchemy import select, update

from cute_couple import schemas
from cute_couple.storage.db import session_scope
from cute_couple.storage.models import CalendarEvent
from cute_couple.storage.repo import event_to_schema
from cute_couple.time_utils import to_utc_ts, to_utc_ts_ceil


logger = logging.getLogger(__name__)


class EventStore(Protocol):
    """リマインダーサービスが使う予定ストアの口。"""

    def query_events_in_window(self, start: datetime, end: datetime) -> Sequence[schemas.CalendarEventOut]:
        """date が [start, end] に入り、notified が true でない予定を返す。"""
        ...

    def mark_notified(self, event_id: str) -> bool:
        """notified=true を書き戻す。対象が存在すれば True。"""
        ...


class SqlEventStore:
    """SQLAlchemy（cute_couple.db）上の EventStore 実装。"""

    def query_events_in_window(self, start: datetime, end: datetime) -> list[schemas.CalendarEventOut]:
        # --- DB は秒精度なので、窓を秒へ広げて引き、厳密な判定は selector に任せる ---
        start_ts = to_utc_ts(start)
        end_ts = to_utc_ts_ceil(end)
        with session_scope() as session:
            rows = (
                session.execute(
                    select(CalendarEvent)
                    .where(CalendarEvent.date_ts >= start_ts)
                    .where(CalendarEvent.date_ts <= end_ts)
                    .where(CalendarEvent.notified.is_not(True))
                    .order_by(CalendarEvent.date_ts.asc())
                )
                .scalars()
                .all()
            )
            return [event_to_schema(r) for r in rows]

    def mark_notified(self, event_id: str) -> bool:
        # --- 条件付き UPDATE 1文。既に true でも成功扱い（冪等） ---
        with session_scope() as session:
            result = session.execute(
                update(CalendarEvent).where(CalendarEvent.id == str(event_id)).values(notified=True)
            )
            matched = int(result.rowcount or 0) > 0
        if not matched:
            logger.debug("mark_notified: event not found event_id=%s", event_id)
        return matched
