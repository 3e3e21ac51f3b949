"""
CRUD リポジトリ

HTTP ハンドラから呼ばれる ORM 操作をまとめる。
ORM インスタンスは外へ出さず、Pydantic スキーマへ変換して返す。
commit は呼び出し側（API ハンドラ）で行う。
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from cute_couple import schemas
from cute_couple.storage.models import CalendarEvent, Note, Photo, StudyItem
from cute_couple.time_utils import from_utc_ts, to_utc_ts


def new_id() -> str:
    """レコードIDを採番する。"""
    return uuid.uuid4().hex


def _now_ts() -> int:
    return int(time.time())


def _json_dumps(payload: Any) -> str:
    """DB保存向けにJSONを安定した形式でダンプする（絵文字等を保持）。"""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _json_list(text_in: str | None) -> list[Any]:
    """JSON文字列を list として読む（壊れていれば空list）。"""
    try:
        obj = json.loads(str(text_in or "[]"))
    except json.JSONDecodeError:
        return []
    return obj if isinstance(obj, list) else []


# --- 予定 ---


def event_to_schema(row: CalendarEvent) -> schemas.CalendarEventOut:
    """CalendarEvent 行をスキーマへ変換する。"""
    return schemas.CalendarEventOut(
        id=row.id,
        title=row.title,
        description=row.description,
        date=from_utc_ts(row.date_ts),
        time=row.time,
        type=row.type,
        priority=row.priority,
        recurring=bool(row.recurring),
        recurring_type=row.recurring_type,
        notified=bool(row.notified),
        created_at=from_utc_ts(row.created_at),
        updated_at=from_utc_ts(row.updated_at),
    )


def create_event(session: Session, req: schemas.CalendarEventCreate) -> schemas.CalendarEventOut:
    now = _now_ts()
    row = CalendarEvent(
        id=new_id(),
        title=req.title,
        description=req.description,
        date_ts=to_utc_ts(req.date),
        time=req.time,
        type=req.type,
        priority=req.priority,
        recurring=req.recurring,
        recurring_type=req.recurring_type,
        notified=req.notified,
        created_at=now,
        updated_at=now,
    )
    session.add(row)
    session.flush()
    return event_to_schema(row)


def list_events(session: Session) -> list[schemas.CalendarEventOut]:
    """予定を日付の昇順で返す。"""
    rows = session.execute(select(CalendarEvent).order_by(CalendarEvent.date_ts.asc())).scalars().all()
    return [event_to_schema(r) for r in rows]


def update_event(
    session: Session, event_id: str, req: schemas.CalendarEventUpdate
) -> Optional[schemas.CalendarEventOut]:
    """
    送られたキーだけを反映する。対象が無ければ None。

    NOTE: notified もそのまま反映する（false を送れば再通知の対象に戻る）。
    """
    row = session.get(CalendarEvent, event_id)
    if row is None:
        return None
    changes = req.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None:
            continue
        if key == "date":
            row.date_ts = to_utc_ts(value)
        else:
            setattr(row, key, value)
    row.updated_at = _now_ts()
    session.flush()
    return event_to_schema(row)


def delete_event(session: Session, event_id: str) -> bool:
    row = session.get(CalendarEvent, event_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True


# --- 写真 ---


def photo_to_schema(row: Photo) -> schemas.PhotoOut:
    """Photo 行をスキーマへ変換する。"""
    return schemas.PhotoOut(
        id=row.id,
        title=row.title,
        description=row.description,
        filename=row.filename,
        original_name=row.original_name,
        path=row.path,
        size=int(row.size),
        upload_date=from_utc_ts(row.upload_date_ts),
        tags=[str(t) for t in _json_list(row.tags_json)],
        favorite=bool(row.favorite),
    )


def create_photo(
    session: Session,
    *,
    title: str,
    description: str,
    filename: str,
    original_name: str,
    path: str,
    size: int,
) -> schemas.PhotoOut:
    row = Photo(
        id=new_id(),
        title=title or "Untitled",
        description=description or "",
        filename=filename,
        original_name=original_name,
        path=path,
        size=int(size),
        upload_date_ts=_now_ts(),
        tags_json="[]",
        favorite=False,
    )
    session.add(row)
    session.flush()
    return photo_to_schema(row)


def list_photos(session: Session) -> list[schemas.PhotoOut]:
    """写真をアップロードの新しい順で返す。"""
    rows = session.execute(select(Photo).order_by(Photo.upload_date_ts.desc())).scalars().all()
    return [photo_to_schema(r) for r in rows]


def get_photo(session: Session, photo_id: str) -> Optional[schemas.PhotoOut]:
    row = session.get(Photo, photo_id)
    return photo_to_schema(row) if row is not None else None


def delete_photo(session: Session, photo_id: str) -> bool:
    row = session.get(Photo, photo_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True


# --- 学習アイテム ---


def study_item_to_schema(row: StudyItem) -> schemas.StudyItemOut:
    """StudyItem 行をスキーマへ変換する。"""
    return schemas.StudyItemOut(
        id=row.id,
        title=row.title,
        description=row.description,
        type=row.type,
        subject=row.subject,
        priority=row.priority,
        due_date=from_utc_ts(row.due_date_ts),
        completed=bool(row.completed),
        time_spent=int(row.time_spent),
        progress=int(row.progress),
        resources=[schemas.StudyResource.model_validate(x) for x in _json_list(row.resources_json)],
        flashcards=[schemas.Flashcard.model_validate(x) for x in _json_list(row.flashcards_json)],
        created_at=from_utc_ts(row.created_at),
        updated_at=from_utc_ts(row.updated_at),
    )


def _dump_items(items: list[schemas.WireModel]) -> str:
    return _json_dumps([x.model_dump(mode="json", by_alias=True) for x in items])


def create_study_item(session: Session, req: schemas.StudyItemCreate) -> schemas.StudyItemOut:
    now = _now_ts()
    row = StudyItem(
        id=new_id(),
        title=req.title,
        description=req.description,
        type=req.type,
        subject=req.subject,
        priority=req.priority,
        due_date_ts=(to_utc_ts(req.due_date) if req.due_date is not None else None),
        completed=req.completed,
        time_spent=req.time_spent,
        progress=req.progress,
        resources_json=_dump_items(req.resources),
        flashcards_json=_dump_items(req.flashcards),
        created_at=now,
        updated_at=now,
    )
    session.add(row)
    session.flush()
    return study_item_to_schema(row)


def list_study_items(session: Session) -> list[schemas.StudyItemOut]:
    """学習アイテムを作成の新しい順で返す。"""
    rows = session.execute(select(StudyItem).order_by(StudyItem.created_at.desc())).scalars().all()
    return [study_item_to_schema(r) for r in rows]


def update_study_item(
    session: Session, item_id: str, req: schemas.StudyItemUpdate
) -> Optional[schemas.StudyItemOut]:
    row = session.get(StudyItem, item_id)
    if row is None:
        return None
    # --- ネスト構造はモデルのまま取り出して JSON 列へ書く ---
    for key in req.model_fields_set:
        value = getattr(req, key)
        # --- 期限は null を明示すれば消せる（他の列は NOT NULL なので null は無視する） ---
        if key == "due_date":
            row.due_date_ts = to_utc_ts(value) if value is not None else None
            continue
        if value is None:
            continue
        if key == "resources":
            row.resources_json = _dump_items(value)
        elif key == "flashcards":
            row.flashcards_json = _dump_items(value)
        else:
            setattr(row, key, value)
    row.updated_at = _now_ts()
    session.flush()
    return study_item_to_schema(row)


def delete_study_item(session: Session, item_id: str) -> bool:
    row = session.get(StudyItem, item_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True


# --- メモ ---


def note_to_schema(row: Note) -> schemas.NoteOut:
    """Note 行をスキーマへ変換する。"""
    return schemas.NoteOut(
        id=row.id,
        title=row.title,
        content=row.content,
        type=row.type,
        tags=[str(t) for t in _json_list(row.tags_json)],
        color=row.color,
        pinned=bool(row.pinned),
        mood=row.mood,
        created_at=from_utc_ts(row.created_at),
        updated_at=from_utc_ts(row.updated_at),
    )


def create_note(session: Session, req: schemas.NoteCreate) -> schemas.NoteOut:
    now = _now_ts()
    row = Note(
        id=new_id(),
        title=req.title,
        content=req.content,
        type=req.type,
        tags_json=_json_dumps(list(req.tags)),
        color=req.color,
        pinned=req.pinned,
        mood=req.mood,
        created_at=now,
        updated_at=now,
    )
    session.add(row)
    session.flush()
    return note_to_schema(row)


def list_notes(session: Session) -> list[schemas.NoteOut]:
    """メモを作成の新しい順で返す。"""
    rows = session.execute(select(Note).order_by(Note.created_at.desc())).scalars().all()
    return [note_to_schema(r) for r in rows]


def update_note(session: Session, note_id: str, req: schemas.NoteUpdate) -> Optional[schemas.NoteOut]:
    row = session.get(Note, note_id)
    if row is None:
        return None
    for key, value in req.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if key == "tags":
            row.tags_json = _json_dumps(list(value))
        else:
            setattr(row, key, value)
    row.updated_at = _now_ts()
    session.flush()
    return note_to_schema(row)


def delete_note(session: Session, note_id: str) -> bool:
    row = session.get(Note, note_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True
