"""
/events エンドポイント（カレンダーの予定）

予定の作成/一覧/更新/削除を行う。
notified（リマインダー送信済みの印）は PUT で送られれば上書きされる。
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cute_couple import schemas
from cute_couple.app_bootstrap.dependencies import get_db_dep
from cute_couple.storage import repo


router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)


@router.post("", response_model=schemas.CalendarEventSaved)
def create_event(
    request: schemas.CalendarEventCreate,
    db: Session = Depends(get_db_dep),
) -> schemas.CalendarEventSaved:
    """予定を作成する。"""
    event = repo.create_event(db, request)
    db.commit()
    logger.info("calendar event created event_id=%s", event.id)
    return schemas.CalendarEventSaved(event=event)


@router.get("", response_model=list[schemas.CalendarEventOut])
def list_events(db: Session = Depends(get_db_dep)) -> list[schemas.CalendarEventOut]:
    """予定を日付の昇順で返す。"""
    return repo.list_events(db)


@router.put("/{event_id}", response_model=schemas.CalendarEventSaved)
def update_event(
    event_id: str,
    request: schemas.CalendarEventUpdate,
    db: Session = Depends(get_db_dep),
) -> schemas.CalendarEventSaved:
    """送られたキーだけを反映する。"""
    event = repo.update_event(db, event_id, request)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    db.commit()
    return schemas.CalendarEventSaved(event=event)


@router.delete("/{event_id}", response_model=schemas.DeleteResult)
def delete_event(event_id: str, db: Session = Depends(get_db_dep)) -> schemas.DeleteResult:
    """予定を削除する。"""
    if not repo.delete_event(db, event_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    db.commit()
    return schemas.DeleteResult()
