"""
リマインダー機能パッケージ。

目的:
    - 定期リマインダー（sweetReminder）と予定リマインダー（eventReminder）の
      選択 / ストア / サービス / スケジューラを1箇所へ集約する。
"""

from __future__ import annotations
