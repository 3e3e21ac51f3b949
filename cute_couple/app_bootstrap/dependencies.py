"""
依存オブジェクトの生成。

目的:
    - FastAPI の Depends で使う入口を起動配線側に寄せる。
    - ファンアウトチャネルは app.state に1つだけ持ち、グローバル変数にしない。
"""

from __future__ import annotations

from typing import Iterator

from fastapi.requests import HTTPConnection
from sqlalchemy.orm import Session

from cute_couple.config import Config, get_config_store
from cute_couple.event_stream import FanoutChannel
from cute_couple.storage.db import get_db


def get_config_dep() -> Config:
    """
    Config を Depends 用に返す。
    """

    return get_config_store().config


def get_db_dep() -> Iterator[Session]:
    """
    DB セッションを Depends 用に返す。
    """

    # --- 既存の generator をそのまま流す ---
    yield from get_db()


def get_fanout_channel_dep(conn: HTTPConnection) -> FanoutChannel:
    """
    アプリに1つの FanoutChannel を Depends 用に返す（HTTP / WebSocket 共通）。
    """

    return conn.app.state.fanout_channel
