"""
HTTP ルート登録。

目的:
    - router 登録、CORS、アップロード配信の配線をまとめる。
    - `main.py` から HTTP 配線の詳細を外す。
"""

from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cute_couple import schemas
from cute_couple.api import calendar, notes, notifications, photos, study
from cute_couple.app_bootstrap.dependencies import get_fanout_channel_dep
from cute_couple.config import Config
from cute_couple.event_stream import FanoutChannel
from cute_couple.storage.db import is_db_available


def register_http_routes(app: FastAPI, *, config: Config) -> None:
    """
    API router、CORS、アップロード配信を登録する。
    """

    # --- CORS（ブラウザクライアントの配信元） ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_origin_regex=config.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- API router を登録する ---
    app.include_router(photos.router, prefix="/api")
    app.include_router(calendar.router, prefix="/api")
    app.include_router(study.router, prefix="/api")
    app.include_router(notes.router, prefix="/api")
    app.include_router(notifications.router, prefix="/api")

    # --- ヘルスチェックを登録する（DB未接続でも返す） ---
    @app.get("/api/health", response_model=schemas.HealthResponse)
    def health(channel: FanoutChannel = Depends(get_fanout_channel_dep)) -> schemas.HealthResponse:
        """稼働確認用のヘルスチェックを返す。"""

        db_ok = is_db_available()
        return schemas.HealthResponse(
            status="Server is running! 💕",
            database="Connected 🟢" if db_ok else "Not Connected 🔴",
            message="All systems go!" if db_ok else "Database is not available",
            connected_clients=channel.connected_count(),
        )

    # --- アップロード済み写真の静的配信 ---
    app.mount("/uploads", StaticFiles(directory=str(config.uploads_dir)), name="uploads")
