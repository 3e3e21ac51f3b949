"""
/photos エンドポイント（写真）

multipart の photo フィールドで画像を受け取り、uploads ディレクトリへ保存する。
保存したファイルは /uploads/<filename> で配信される。
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from cute_couple import schemas
from cute_couple.app_bootstrap.dependencies import get_config_dep, get_db_dep
from cute_couple.config import Config
from cute_couple.storage import repo
from cute_couple.uploads import UploadRejected, delete_stored_file, save_image_upload


router = APIRouter(prefix="/photos", tags=["photos"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=schemas.PhotoSaved)
async def upload_photo(
    photo: UploadFile = File(...),
    title: str = Form(""),
    description: str = Form(""),
    db: Session = Depends(get_db_dep),
    config: Config = Depends(get_config_dep),
) -> schemas.PhotoSaved:
    """画像を保存してメタ情報を登録する。"""
    try:
        stored = await save_image_upload(
            photo,
            uploads_dir=Path(config.uploads_dir),
            max_bytes=int(config.upload_max_bytes),
        )
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    # --- DB 登録に失敗したらファイルも消す ---
    try:
        saved = repo.create_photo(
            db,
            title=title,
            description=description,
            filename=stored.filename,
            original_name=stored.original_name,
            path=str(stored.path),
            size=stored.size,
        )
        db.commit()
    except Exception:
        db.rollback()
        delete_stored_file(stored.path)
        raise
    return schemas.PhotoSaved(photo=saved)


@router.get("", response_model=list[schemas.PhotoOut])
def list_photos(db: Session = Depends(get_db_dep)) -> list[schemas.PhotoOut]:
    """写真を新しい順で返す。"""
    return repo.list_photos(db)


@router.delete("/{photo_id}", response_model=schemas.DeleteResult)
def delete_photo(photo_id: str, db: Session = Depends(get_db_dep)) -> schemas.DeleteResult:
    """ファイルとメタ情報を削除する。"""
    photo = repo.get_photo(db, photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    if not delete_stored_file(photo.path):
        logger.warning("photo file already missing photo_id=%s path=%s", photo_id, photo.path)
    repo.delete_photo(db, photo_id)
    db.commit()
    return schemas.DeleteResult()
