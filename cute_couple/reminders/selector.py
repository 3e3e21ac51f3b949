"""
リマインダー選択（純粋関数）

- プールモード: 固定メッセージから1件を一様ランダムに選ぶ
- 先読みモード: 予定の中から [now, now + window] に入る未通知のものを選ぶ
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, Sequence, TypeVar

from cute_couple.time_utils import ensure_utc


class IndexSource(Protocol):
    """乱数源（テストでは固定値を返すものに差し替える）。"""

    def randrange(self, stop: int) -> int: ...


class SchedulableEvent(Protocol):
    """先読み判定に必要な属性だけを持つ予定。"""

    date: datetime
    notified: bool


E = TypeVar("E", bound=SchedulableEvent)


def pick_from_pool(pool: Sequence[str], rng: IndexSource) -> str:
    """
    プールから1件を一様ランダムに選ぶ。

    Raises:
        ValueError: プールが空の場合（設定ミスなので起動時に弾かれている想定）。
    """
    if not pool:
        raise ValueError("reminder pool must not be empty")
    return pool[int(rng.randrange(len(pool)))]


def select_upcoming(events: Sequence[E], now: datetime, window: timedelta) -> list[E]:
    """
    先読み窓に入る未通知の予定を返す。

    - now <= date <= now + window（両端を含む）
    - notified が true のものは除外する
    - 入力順は保つ
    """
    start = ensure_utc(now)
    end = start + window
    out: list[E] = []
    for ev in events:
        if bool(getattr(ev, "notified", False)):
            continue
        d = ensure_utc(ev.date)
        if start <= d <= end:
            out.append(ev)
    return out
