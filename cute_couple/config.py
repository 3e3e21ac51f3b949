"""
設定読み込みとランタイム設定ストア

TOML設定ファイルの読み込みと、実行時に参照する設定の管理を行う。
設定は起動時に読み込まれ、Configとして各モジュールから参照される。
"""

from __future__ import annotations

import pathlib
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional

import tomli

from cute_couple import paths
from cute_couple.reminders.messages import DEFAULT_SWEET_REMINDERS


@dataclass
class Config:
    """
    TOML起動設定（起動時のみ使用、変更不可）。
    待受ポート、ログ、保存先、リマインダー周期を保持する。
    """
    port: int  # API の待受ポート
    log_level: str  # ログレベル（DEBUG, INFO, WARNING, ERROR）
    log_file_enabled: bool  # ファイルログ有効/無効
    log_file_path: str  # ファイルログの保存先パス
    log_file_max_bytes: int  # ファイルログのローテーションサイズ（bytes）
    db_path: str  # SQLite ファイルのパス
    uploads_dir: str  # 写真アップロードの保存先ディレクトリ
    upload_max_bytes: int  # アップロード1件あたりの最大サイズ（bytes）
    cors_origins: List[str]  # CORS 許可オリジン
    cors_origin_regex: Optional[str]  # CORS 許可オリジン（正規表現）
    reminders_enabled: bool  # 起動時にリマインダースケジューラを動かすか
    sweet_reminder_interval_seconds: int  # sweetReminder の発火間隔
    event_check_interval_seconds: int  # eventReminder（予定の先読み）の発火間隔
    event_lookahead_seconds: int  # 先読み幅
    sweet_reminder_messages: List[str] = field(default_factory=lambda: list(DEFAULT_SWEET_REMINDERS))


class ConfigStore:
    """
    ランタイム設定ストア。
    スレッドセーフに設定を保持し、各モジュールから参照可能にする。
    """

    def __init__(self, toml_config: Config) -> None:
        self._toml = toml_config
        self._lock = threading.Lock()

    @property
    def config(self) -> Config:
        """起動時に読み込んだ設定を返す。"""
        with self._lock:
            return self._toml


def _require(config_dict: dict, key: str) -> Any:
    """
    設定辞書から必須キーを取得する。
    キーが存在しないか空の場合はValueErrorを発生させる。
    """
    if key not in config_dict or config_dict[key] in (None, ""):
        raise ValueError(f"config key '{key}' is required")
    return config_dict[key]


_ALLOWED_KEYS = {
    "port",
    "log_level",
    "log_file_enabled",
    "log_file_path",
    "log_file_max_bytes",
    "db_path",
    "uploads_dir",
    "upload_max_bytes",
    "cors_origins",
    "cors_origin_regex",
    "reminders_enabled",
    "sweet_reminder_interval_seconds",
    "event_check_interval_seconds",
    "event_lookahead_seconds",
    "sweet_reminder_messages",
}


def load_config(path: str | pathlib.Path | None = None) -> Config:
    """
    TOML設定ファイルを読み込む。
    許可されていないキーが含まれる場合はエラーを発生させる。
    """
    # --- 設定ファイルは app_root の config/setting.toml を既定にする ---
    config_path = pathlib.Path(paths.get_default_config_file_path() if path is None else path)
    config_path = paths.resolve_path_under_app_root(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    with config_path.open("rb") as f:
        data = tomli.load(f)
    return build_config(data)


def build_config(data: dict[str, Any]) -> Config:
    """
    TOML をパースした辞書から Config を構築する。
    値の検証（正の整数、空でないプール）はここで行い、起動時に弾く。
    """
    unknown_keys = sorted(set(data.keys()) - _ALLOWED_KEYS)
    if unknown_keys:
        keys = ", ".join(repr(k) for k in unknown_keys)
        raise ValueError(f"unknown config key(s): {keys} (allowed: {sorted(_ALLOWED_KEYS)})")

    # --- 正の整数でなければ起動時に弾く ---
    def require_positive(key: str, default: int) -> int:
        v = int(data.get(key, default))
        if v <= 0:
            raise ValueError(f"{key} must be a positive integer")
        return v

    # --- パス類は相対指定なら app_root 基準に解決する ---
    raw_log_file_path = str(data.get("log_file_path", "logs/cute_couple.log"))
    raw_db_path = str(data.get("db_path", "data/cute_couple.db"))
    raw_uploads_dir = str(data.get("uploads_dir", "uploads"))

    # --- メッセージプール（空は設定ミスなので起動時に落とす） ---
    messages_raw = data.get("sweet_reminder_messages", list(DEFAULT_SWEET_REMINDERS))
    if not isinstance(messages_raw, list):
        raise ValueError("sweet_reminder_messages must be a list of strings")
    messages = [str(m).strip() for m in messages_raw if str(m or "").strip()]
    if not messages:
        raise ValueError("sweet_reminder_messages must contain at least one message")

    cors_origins_raw = data.get("cors_origins", ["http://localhost:3000"])
    if not isinstance(cors_origins_raw, list):
        raise ValueError("cors_origins must be a list of strings")
    cors_origin_regex = data.get("cors_origin_regex", r"^https://.*\.vercel\.app$")

    return Config(
        # --- サーバー待受ポート（必須） ---
        port=int(_require(data, "port")),
        log_level=str(_require(data, "log_level")).upper(),
        log_file_enabled=bool(data.get("log_file_enabled", False)),
        log_file_path=str(paths.resolve_path_under_app_root(raw_log_file_path)),
        log_file_max_bytes=require_positive("log_file_max_bytes", 200_000),
        db_path=str(paths.resolve_path_under_app_root(raw_db_path)),
        uploads_dir=str(paths.resolve_path_under_app_root(raw_uploads_dir)),
        upload_max_bytes=require_positive("upload_max_bytes", 10 * 1024 * 1024),
        cors_origins=[str(o) for o in cors_origins_raw],
        cors_origin_regex=(str(cors_origin_regex) if cors_origin_regex else None),
        reminders_enabled=bool(data.get("reminders_enabled", True)),
        # --- リマインダー周期（既定: 2時間毎 / 30分毎 / 1時間先まで） ---
        sweet_reminder_interval_seconds=require_positive("sweet_reminder_interval_seconds", 2 * 60 * 60),
        event_check_interval_seconds=require_positive("event_check_interval_seconds", 30 * 60),
        event_lookahead_seconds=require_positive("event_lookahead_seconds", 60 * 60),
        sweet_reminder_messages=messages,
    )


# グローバル設定ストア（シングルトン）
_config_store: ConfigStore | None = None


def set_global_config_store(store: ConfigStore) -> None:
    """グローバルConfigStoreを設定。起動時に一度だけ呼び出される。"""
    global _config_store
    _config_store = store


def get_config_store() -> ConfigStore:
    """
    グローバルConfigStoreを取得。
    初期化されていない場合はRuntimeErrorを発生させる。
    """
    if _config_store is None:
        raise RuntimeError("ConfigStore not initialized")
    return _config_store
