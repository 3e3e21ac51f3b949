"""
保存先パスの解決。

目的:
    - 設定ファイル / DB / アップロード / ログの置き場所を1箇所に集約する。
    - 相対パス指定は app_root 基準で解決する（起動ディレクトリに依存しない）。
"""

from __future__ import annotations

import sys
from pathlib import Path


def get_app_root_dir() -> Path:
    """アプリのルートディレクトリを返す。"""

    # --- PyInstaller (frozen) の場合は exe の隣を使う ---
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent

    # --- 通常実行はリポジトリルート（package の親）を使う ---
    return Path(__file__).resolve().parent.parent


def resolve_path_under_app_root(path: str | Path) -> Path:
    """相対パスなら app_root 基準で絶対パスへ解決する。"""

    p = Path(path)
    if p.is_absolute():
        return p
    return (get_app_root_dir() / p).resolve()


def _ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def get_config_dir() -> Path:
    """config/ ディレクトリを返す（無ければ作る）。"""

    return _ensure_dir(get_app_root_dir() / "config")


def get_default_config_file_path() -> Path:
    """既定の設定ファイルパス（config/setting.toml）を返す。"""

    return get_config_dir() / "setting.toml"


def get_data_dir() -> Path:
    """data/ ディレクトリを返す（無ければ作る）。"""

    return _ensure_dir(get_app_root_dir() / "data")


def get_uploads_dir() -> Path:
    """写真アップロードの既定保存先を返す（無ければ作る）。"""

    return _ensure_dir(get_app_root_dir() / "uploads")


def get_logs_dir() -> Path:
    """logs/ ディレクトリを返す（無ければ作る）。"""

    return _ensure_dir(get_app_root_dir() / "logs")
