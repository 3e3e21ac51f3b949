"""
アプリ起動配線パッケージ。

目的:
    - 起動時の配線を `main.py` から分離する。
    - 初期化手順を責務ごとに読みやすく保つ。
"""

from __future__ import annotations
