"""
/notes エンドポイント（メモ）
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cute_couple import schemas
from cute_couple.app_bootstrap.dependencies import get_db_dep
from cute_couple.storage import repo


router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=schemas.NoteSaved)
def create_note(request: schemas.NoteCreate, db: Session = Depends(get_db_dep)) -> schemas.NoteSaved:
    note = repo.create_note(db, request)
    db.commit()
    return schemas.NoteSaved(note=note)


@router.get("", response_model=list[schemas.NoteOut])
def list_notes(db: Session = Depends(get_db_dep)) -> list[schemas.NoteOut]:
    """メモを新しい順で返す。"""
    return repo.list_notes(db)


@router.put("/{note_id}", response_model=schemas.NoteSaved)
def update_note(
    note_id: str,
    request: schemas.NoteUpdate,
    db: Session = Depends(get_db_dep),
) -> schemas.NoteSaved:
    note = repo.update_note(db, note_id, request)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    db.commit()
    return schemas.NoteSaved(note=note)


@router.delete("/{note_id}", response_model=schemas.DeleteResult)
def delete_note(note_id: str, db: Session = Depends(get_db_dep)) -> schemas.DeleteResult:
    if not repo.delete_note(db, note_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    db.commit()
    return schemas.DeleteResult()
