"""
アプリ内時計サービス。

目的:
    - リマインダーが参照する「現在時刻」を1箇所から取る。
    - テストでは now_utc() を持つ別オブジェクトに差し替える。
"""

from __future__ import annotations

from datetime import datetime, timezone


class ClockService:
    """
    アプリ内で共有する時計サービス。

    方針:
        - OSの現在時刻（UTC）をそのまま使う。
        - 返す datetime は常に aware UTC。
    """

    def now_utc(self) -> datetime:
        """現在時刻（aware UTC）を返す。"""

        return datetime.now(timezone.utc)


_clock_service = ClockService()


def get_clock_service() -> ClockService:
    """時計サービスのシングルトンを返す。"""

    return _clock_service
