"""
/study エンドポイント（学習アイテム）
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cute_couple import schemas
from cute_couple.app_bootstrap.dependencies import get_db_dep
from cute_couple.storage import repo


router = APIRouter(prefix="/study", tags=["study"])


@router.post("", response_model=schemas.StudyItemSaved)
def create_study_item(
    request: schemas.StudyItemCreate,
    db: Session = Depends(get_db_dep),
) -> schemas.StudyItemSaved:
    item = repo.create_study_item(db, request)
    db.commit()
    return schemas.StudyItemSaved(study_item=item)


@router.get("", response_model=list[schemas.StudyItemOut])
def list_study_items(db: Session = Depends(get_db_dep)) -> list[schemas.StudyItemOut]:
    """学習アイテムを新しい順で返す。"""
    return repo.list_study_items(db)


@router.put("/{item_id}", response_model=schemas.StudyItemSaved)
def update_study_item(
    item_id: str,
    request: schemas.StudyItemUpdate,
    db: Session = Depends(get_db_dep),
) -> schemas.StudyItemSaved:
    item = repo.update_study_item(db, item_id, request)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study item not found")
    db.commit()
    return schemas.StudyItemSaved(study_item=item)


@router.delete("/{item_id}", response_model=schemas.DeleteResult)
def delete_study_item(item_id: str, db: Session = Depends(get_db_dep)) -> schemas.DeleteResult:
    if not repo.delete_study_item(db, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study item not found")
    db.commit()
    return schemas.DeleteResult()
