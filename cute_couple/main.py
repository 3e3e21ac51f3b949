"""
FastAPI エントリポイント

cute_couple APIサーバーのメインモジュール。
アプリケーションの初期化、ルーターの登録、起動/終了イベントの処理を行う。

NOTE: モジュール import 時にはアプリを作らない。uvicorn には factory として渡す。
"""

from __future__ import annotations

from fastapi import FastAPI

from cute_couple.app_bootstrap.config_bootstrap import bootstrap_runtime_config
from cute_couple.app_bootstrap.lifecycle import register_lifecycle_hooks
from cute_couple.app_bootstrap.routers import register_http_routes
from cute_couple.config import Config
from cute_couple.event_stream import FanoutChannel


def create_app(config: Config | None = None) -> FastAPI:
    """
    アプリ生成と初期化を行う。
    設定→ログ→DB→ファンアウト→ルータ→ライフサイクルの順で初期化を実行する。
    """

    # --- 1. 設定 / ログ / DB ---
    runtime_config = bootstrap_runtime_config(config)

    # --- 2. FastAPIアプリ作成 ---
    app = FastAPI(title="cute_couple API")
    app.state.config = runtime_config

    # --- 3. ファンアウトチャネルはプロセスに1つ。スケジューラと WebSocket が同じものを使う ---
    app.state.fanout_channel = FanoutChannel()

    # --- 4. ルータとライフサイクル ---
    register_http_routes(app, config=runtime_config)
    register_lifecycle_hooks(app, config=runtime_config)
    return app
