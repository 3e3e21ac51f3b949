"""
DB（cute_couple.db）接続とセッション管理

写真・予定・学習アイテム・メモを1つの SQLite ファイルに保存する。
CRUD（HTTP）とリマインダー（定期タスク）の両方がここのセッションを使う。
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker


logger = logging.getLogger(__name__)

# cute_couple.db 用 Base
Base = declarative_base()

# グローバルセッション
SessionLocal: sessionmaker | None = None
_engine: Engine | None = None


def get_db_url(db_path: str | Path) -> str:
    """SQLite ファイルパスから SQLAlchemy URL を返す。"""

    p = Path(db_path).resolve()
    return f"sqlite:///{p}"


def init_db(db_path: str | Path) -> None:
    """
    DB を初期化する（起動時）。

    - セッションファクトリを作成する
    - テーブルを作成する
    """

    global SessionLocal, _engine

    # --- 保存先ディレクトリを先に作る ---
    Path(db_path).resolve().parent.mkdir(parents=True, exist_ok=True)

    db_url = get_db_url(db_path)
    # --- 定期タスクは worker thread から触るため、スレッドチェックを外してロック解消を待つ ---
    connect_args = {"check_same_thread": False, "timeout": 10.0}
    engine = create_engine(db_url, future=True, connect_args=connect_args)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    _engine = engine

    # テーブル群を作成（モデル import が必要）
    import cute_couple.storage.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("DB initialized: %s", db_url)


def dispose_db() -> None:
    """エンジンを破棄する（テストの後始末や終了時）。"""

    global SessionLocal, _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
    SessionLocal = None


def is_db_available() -> bool:
    """DB に接続できるかを返す（ヘルスチェック用）。"""

    if _engine is None:
        return False
    try:
        with _engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:  # noqa: BLE001
        logger.warning("DB health check failed: %s", str(exc))
        return False


def get_db() -> Iterator[Session]:
    """
    セッションを取得する（FastAPI依存性注入用）。

    使用後は自動でクローズされる。
    """

    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextlib.contextmanager
def session_scope() -> Iterator[Session]:
    """
    セッションスコープ（with文用）。

    正常終了時はコミット、例外時はロールバックする。
    """

    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
