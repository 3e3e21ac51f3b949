"""
時刻ユーティリティ

DBには UNIX秒（UTC）で保存し、APIやイベント配信では ISO 8601 に変換する。

注意:
- DB自体の保存形式（UNIX秒）は変更しない（範囲検索・ソートが簡単なため）。
- naive な datetime は UTC とみなす。
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional


def ensure_utc(dt: datetime) -> datetime:
    """datetime を aware UTC に揃える（naive は UTC とみなす）。"""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc_ts(dt: datetime) -> int:
    """datetime を UTC の UNIX秒へ変換する（秒未満は切り捨て）。"""

    return int(math.floor(ensure_utc(dt).timestamp()))


def to_utc_ts_ceil(dt: datetime) -> int:
    """datetime を UTC の UNIX秒へ変換する（秒未満は切り上げ）。"""

    return int(math.ceil(ensure_utc(dt).timestamp()))


def from_utc_ts(ts_utc: Optional[int]) -> Optional[datetime]:
    """UTCのUNIX秒を aware UTC の datetime へ変換する。None はそのまま返す。"""

    if ts_utc is None:
        return None
    return datetime.fromtimestamp(int(ts_utc), tz=timezone.utc)

