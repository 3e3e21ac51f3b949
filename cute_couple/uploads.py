"""
写真アップロードの保存/削除

multipart で受け取った画像を uploads ディレクトリへ書き出す。
ファイル名は「ミリ秒時刻-乱数+元の拡張子」で衝突を避ける。
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile


logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class UploadRejected(Exception):
    """アップロードを受け付けられない（画像でない / 大きすぎる）。"""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = int(status_code)


@dataclass(frozen=True)
class StoredUpload:
    """保存済みファイルの情報。"""

    filename: str
    original_name: str
    path: Path
    size: int


def make_stored_filename(original_name: str) -> str:
    """保存用ファイル名を作る（例: 1700000000000-123456789.jpg）。"""

    ext = Path(str(original_name or "")).suffix.lower()
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}{ext}"


async def save_image_upload(upload: UploadFile, *, uploads_dir: Path, max_bytes: int) -> StoredUpload:
    """
    画像アップロードを保存する。

    Raises:
        UploadRejected: 画像以外（400）/ サイズ超過（413）。
    """
    content_type = str(upload.content_type or "")
    if not content_type.startswith("image/"):
        raise UploadRejected("Only image files are allowed!", status_code=400)

    uploads_dir.mkdir(parents=True, exist_ok=True)
    original_name = str(upload.filename or "upload")
    filename = make_stored_filename(original_name)
    dest = uploads_dir / filename

    # --- チャンクで書き出し、上限を超えたら途中で止めて消す ---
    # NOTE: ファイル I/O は worker thread で行い、定期タスクや WebSocket 送信を止めない。
    size = 0
    try:
        f = await asyncio.to_thread(dest.open, "wb")
        try:
            while True:
                chunk = await upload.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > int(max_bytes):
                    raise UploadRejected("File too large", status_code=413)
                await asyncio.to_thread(f.write, chunk)
        finally:
            await asyncio.to_thread(f.close)
    except Exception:
        await asyncio.to_thread(dest.unlink, missing_ok=True)
        raise

    logger.info("photo stored filename=%s size=%s", filename, size)
    return StoredUpload(filename=filename, original_name=original_name, path=dest, size=size)


def delete_stored_file(path: str | Path) -> bool:
    """保存済みファイルを消す。無ければ False。"""

    p = Path(path)
    if not p.exists():
        return False
    p.unlink()
    return True
