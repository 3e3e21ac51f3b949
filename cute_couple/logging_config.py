"""
ログ設定

起動時に1回だけ呼び出し、ルートロガーのハンドラとレベルを確定する。
ファイル出力はサイズローテーションで肥大化を防ぐ。
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_suppressed_access_paths: set[str] = set()
_access_filter_installed = False
_installed_handlers: list[logging.Handler] = []


def setup_logging(
    level: str,
    *,
    log_file_enabled: bool = False,
    log_file_path: str | None = None,
    log_file_max_bytes: int = 200_000,
) -> None:
    """
    ルートロガーを設定する。

    Args:
        level: ログレベル名（DEBUG/INFO/WARNING/ERROR）。
        log_file_enabled: True ならファイルにも出力する。
        log_file_path: ファイルログの保存先。
        log_file_max_bytes: ローテーションサイズ（bytes）。
    """
    root = logging.getLogger()
    root.setLevel(str(level or "INFO").upper())

    # --- 多重呼び出しでハンドラが増えないよう、前回このモジュールが付けたものだけ外す ---
    for h in _installed_handlers:
        root.removeHandler(h)
        h.close()
    _installed_handlers.clear()

    formatter = logging.Formatter(_LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)
    _installed_handlers.append(console)

    if log_file_enabled and log_file_path:
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(path),
            maxBytes=int(log_file_max_bytes),
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _installed_handlers.append(file_handler)


class _AccessPathFilter(logging.Filter):
    """uvicorn.access から特定パスのリクエスト行を除外する。"""

    def filter(self, record: logging.LogRecord) -> bool:
        # --- uvicorn.access の args は (client, method, path, http_version, status) ---
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            path = str(args[2] or "").split("?", 1)[0]
            if path in _suppressed_access_paths:
                return False
        return True


def suppress_uvicorn_access_log_paths(*paths: str) -> None:
    """指定パスへのアクセスログを uvicorn.access から除外する。"""

    global _access_filter_installed
    _suppressed_access_paths.update(str(p) for p in paths)
    if _access_filter_installed:
        return
    logging.getLogger("uvicorn.access").addFilter(_AccessPathFilter())
    _access_filter_installed = True
