"""
実行時基盤パッケージ。

目的:
    - 定期実行タスクなど、ドメインに依存しない実行時ユーティリティを置く。
"""

from __future__ import annotations
