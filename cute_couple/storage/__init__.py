"""
永続化パッケージ。

目的:
    - SQLite 接続、ORM モデル、CRUD 操作を1箇所へ集約する。
"""

from __future__ import annotations
