from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from cute_couple.uploads import UploadRejected, save_image_upload


def _upload(data: bytes, *, filename: str = "us.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def thread_calls(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """asyncio.to_thread に渡された関数名を記録する。"""
    calls: list[str] = []
    real_to_thread = asyncio.to_thread

    async def _recording(func, /, *args, **kwargs):
        calls.append(getattr(func, "__name__", repr(func)))
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", _recording)
    return calls


@pytest.mark.asyncio
async def test_multi_chunk_upload_is_written_off_the_event_loop(tmp_path: Path, thread_calls: list[str]) -> None:
    data = bytes(range(256)) * 800  # 200 KiB: several chunks

    stored = await save_image_upload(_upload(data), uploads_dir=tmp_path, max_bytes=1024 * 1024)

    assert stored.size == len(data)
    assert stored.path.read_bytes() == data
    assert stored.path.suffix == ".png"
    assert thread_calls[0] == "open"
    assert thread_calls.count("write") >= 2
    assert thread_calls[-1] == "close"


@pytest.mark.asyncio
async def test_oversize_upload_removes_partial_file(tmp_path: Path, thread_calls: list[str]) -> None:
    data = b"x" * (200 * 1024)

    with pytest.raises(UploadRejected) as excinfo:
        await save_image_upload(_upload(data), uploads_dir=tmp_path, max_bytes=100 * 1024)

    assert excinfo.value.status_code == 413
    assert list(tmp_path.iterdir()) == []
    assert "unlink" in thread_calls


@pytest.mark.asyncio
async def test_non_image_is_rejected_before_writing(tmp_path: Path, thread_calls: list[str]) -> None:
    with pytest.raises(UploadRejected) as excinfo:
        await save_image_upload(_upload(b"hi", filename="a.txt", content_type="text/plain"), uploads_dir=tmp_path, max_bytes=10)

    assert excinfo.value.status_code == 400
    assert thread_calls == []
    assert list(tmp_path.iterdir()) == []
