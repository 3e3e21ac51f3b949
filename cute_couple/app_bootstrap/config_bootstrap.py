"""
起動時の設定・DB初期化。

目的:
    - create_app() から初期化の詳細を切り離す。
    - 設定 -> ログ -> DB -> 保存先 の順序を1箇所で固定する。
"""

from __future__ import annotations

from pathlib import Path

from cute_couple.config import Config, ConfigStore, load_config, set_global_config_store
from cute_couple.logging_config import setup_logging, suppress_uvicorn_access_log_paths
from cute_couple.storage.db import init_db


def bootstrap_runtime_config(config: Config | None = None) -> Config:
    """
    起動時の初期化を実行し、確定した Config を返す。

    Args:
        config: 構築済みの設定（テスト等）。None なら setting.toml を読む。

    Returns:
        起動完了後にアプリ全体で使う Config。
    """

    # --- 1. TOML 設定を読み込み、ログ設定を先に確定する ---
    toml_config = config if config is not None else load_config()
    setup_logging(
        toml_config.log_level,
        log_file_enabled=toml_config.log_file_enabled,
        log_file_path=toml_config.log_file_path,
        log_file_max_bytes=toml_config.log_file_max_bytes,
    )
    # --- ヘルスチェックのポーリングはアクセスログに出さない ---
    suppress_uvicorn_access_log_paths("/api/health")

    # --- 2. グローバル設定ストアに登録する ---
    set_global_config_store(ConfigStore(toml_config))

    # --- 3. DB とアップロード先を用意する ---
    init_db(toml_config.db_path)
    Path(toml_config.uploads_dir).mkdir(parents=True, exist_ok=True)
    return toml_config
