"""共通 fixture とテスト用のスタブ。"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cute_couple import schemas
from cute_couple.config import Config, build_config
from cute_couple.storage import db as db_module


def make_event(
    event_id: str,
    date: datetime,
    *,
    notified: bool = False,
    title: Optional[str] = None,
) -> schemas.CalendarEventOut:
    """テスト用の予定レコードを作る。"""
    created = datetime(2023, 12, 1, tzinfo=timezone.utc)
    return schemas.CalendarEventOut(
        id=event_id,
        title=title or f"event {event_id}",
        description="",
        date=date,
        time="",
        type="date",
        priority="medium",
        recurring=False,
        recurring_type="monthly",
        notified=notified,
        created_at=created,
        updated_at=created,
    )


class FixedClock:
    """now_utc() が固定値を返す時計。"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now


class FixedIndex:
    """randrange() が固定の添字を返す乱数源。"""

    def __init__(self, index: int) -> None:
        self.index = index
        self.calls: list[int] = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        return self.index


class InMemoryEventStore:
    """
    EventStore のメモリ実装。

    query_error / mark_error に例外を入れると、その呼び出しで送出する。
    query_gate を渡すと、query はそれが set されるまで止まる。
    """

    def __init__(self, events: list[schemas.CalendarEventOut]) -> None:
        self._lock = threading.Lock()
        self.events = list(events)
        self.query_calls = 0
        self.marked: list[str] = []
        self.query_error: Optional[Exception] = None
        self.mark_error: Optional[Callable[[str], Optional[Exception]]] = None
        self.query_gate: Optional[threading.Event] = None
        self.query_started = threading.Event()

    def query_events_in_window(self, start: datetime, end: datetime) -> list[schemas.CalendarEventOut]:
        self.query_started.set()
        if self.query_gate is not None:
            self.query_gate.wait(timeout=5.0)
        with self._lock:
            self.query_calls += 1
            if self.query_error is not None:
                raise self.query_error
            return [e for e in self.events if start <= e.date <= end and not e.notified]

    def mark_notified(self, event_id: str) -> bool:
        if self.mark_error is not None:
            err = self.mark_error(event_id)
            if err is not None:
                raise err
        with self._lock:
            for i, e in enumerate(self.events):
                if e.id == event_id:
                    self.events[i] = e.model_copy(update={"notified": True})
                    self.marked.append(event_id)
                    return True
        return False

    def get(self, event_id: str) -> schemas.CalendarEventOut:
        with self._lock:
            return next(e for e in self.events if e.id == event_id)


@pytest.fixture
def make_config(tmp_path) -> Callable[..., Config]:
    """tmp_path 配下を保存先にした Config を作る。"""

    def _make(**overrides: Any) -> Config:
        data: dict[str, Any] = {
            "port": 5000,
            "log_level": "INFO",
            "db_path": str(tmp_path / "data" / "test.db"),
            "uploads_dir": str(tmp_path / "uploads"),
            "log_file_path": str(tmp_path / "logs" / "test.log"),
        }
        data.update(overrides)
        return build_config(data)

    return _make


@pytest.fixture
def db(tmp_path) -> Iterator[None]:
    """tmp_path に空の DB を初期化する。"""
    db_module.init_db(tmp_path / "store.db")
    yield
    db_module.dispose_db()


@pytest.fixture
def app(make_config) -> Iterator[FastAPI]:
    """リマインダーを止めたアプリ（テストから直接 publish する）。"""
    from cute_couple.main import create_app

    application = create_app(make_config(reminders_enabled=False))
    yield application
    db_module.dispose_db()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
