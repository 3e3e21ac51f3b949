"""
API リクエスト/レスポンスの Pydantic モデル

FastAPI エンドポイントとイベント配信で使用するスキーマ定義。
ワイヤ上のキーは camelCase（IDは `_id`）で、ブラウザクライアントの既存形式に合わせる。
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cute_couple.time_utils import ensure_utc


EventType = Literal["date", "anniversary", "birthday", "study", "reminder", "other"]
Priority = Literal["low", "medium", "high"]
RecurringType = Literal["daily", "weekly", "monthly", "yearly"]
StudyItemType = Literal["assignment", "exam", "project", "reading", "flashcard", "note", "timer"]
ResourceType = Literal["video", "article", "pdf", "website", "other"]
Difficulty = Literal["easy", "medium", "hard"]
NoteType = Literal["love-note", "study-note", "reminder", "memory", "other"]
Mood = Literal["happy", "love", "excited", "calm", "motivated", "grateful", "other"]


class WireModel(BaseModel):
    """camelCase で入出力する共通ベース。"""

    # --- クライアントは取得したレコードをそのまま送り返すことがあるため、未知キーは無視する ---
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _utc_or_none(v: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(v) if v is not None else None


# --- 予定（カレンダー） ---


class CalendarEventCreate(WireModel):
    """POST /events 用リクエスト。"""

    title: str = Field(min_length=1)
    description: str = ""
    date: datetime  # 予定の発生時刻（日付のみなら 00:00 UTC）
    time: str = ""  # 表示用の時刻ラベル
    type: EventType = "other"
    priority: Priority = "medium"
    recurring: bool = False
    recurring_type: RecurringType = "monthly"
    notified: bool = False

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, v: datetime) -> datetime:
        """naive は UTC とみなして aware UTC へ揃える。"""
        return ensure_utc(v)


class CalendarEventUpdate(WireModel):
    """
    PUT /events/{id} 用リクエスト。

    送られたキーだけを反映する。notified=false を送ると再通知の対象に戻る。
    """

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    type: Optional[EventType] = None
    priority: Optional[Priority] = None
    recurring: Optional[bool] = None
    recurring_type: Optional[RecurringType] = None
    notified: Optional[bool] = None

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _utc_or_none(v)


class CalendarEventOut(WireModel):
    """予定の完全なレコード（API応答 / eventReminder 配信の両方で使う）。"""

    id: str = Field(alias="_id")
    title: str
    description: str
    date: datetime
    time: str
    type: str
    priority: str
    recurring: bool
    recurring_type: str
    notified: bool
    created_at: datetime
    updated_at: datetime


class CalendarEventSaved(WireModel):
    success: bool = True
    event: CalendarEventOut


# --- 写真 ---


class PhotoOut(WireModel):
    """アップロード済み写真のメタ情報。"""

    id: str = Field(alias="_id")
    title: str
    description: str
    filename: str
    original_name: str
    path: str
    size: int
    upload_date: datetime
    tags: List[str] = Field(default_factory=list)
    favorite: bool = False


class PhotoSaved(WireModel):
    success: bool = True
    photo: PhotoOut


# --- 学習アイテム ---


class StudyResource(WireModel):
    title: str = ""
    url: str = ""
    type: ResourceType = "other"


class Flashcard(WireModel):
    question: str = ""
    answer: str = ""
    difficulty: Difficulty = "medium"
    last_reviewed: Optional[datetime] = None
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)


class StudyItemCreate(WireModel):
    """POST /study 用リクエスト。"""

    title: str = Field(min_length=1)
    description: str = ""
    type: StudyItemType
    subject: str = ""
    priority: Priority = "medium"
    due_date: Optional[datetime] = None
    completed: bool = False
    time_spent: int = Field(default=0, ge=0)  # 分
    progress: int = Field(default=0, ge=0, le=100)  # %
    resources: List[StudyResource] = Field(default_factory=list)
    flashcards: List[Flashcard] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _utc_or_none(v)


class StudyItemUpdate(WireModel):
    """PUT /study/{id} 用リクエスト（送られたキーだけを反映する）。"""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[StudyItemType] = None
    subject: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None
    time_spent: Optional[int] = Field(default=None, ge=0)
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    resources: Optional[List[StudyResource]] = None
    flashcards: Optional[List[Flashcard]] = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _utc_or_none(v)


class StudyItemOut(WireModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    type: str
    subject: str
    priority: str
    due_date: Optional[datetime] = None
    completed: bool
    time_spent: int
    progress: int
    resources: List[StudyResource]
    flashcards: List[Flashcard]
    created_at: datetime
    updated_at: datetime


class StudyItemSaved(WireModel):
    success: bool = True
    study_item: StudyItemOut


# --- メモ ---


class NoteCreate(WireModel):
    """POST /notes 用リクエスト。"""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    type: NoteType = "other"
    tags: List[str] = Field(default_factory=list)
    color: str = "#FFB6C1"
    pinned: bool = False
    mood: Mood = "happy"


class NoteUpdate(WireModel):
    """PUT /notes/{id} 用リクエスト（送られたキーだけを反映する）。"""

    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    type: Optional[NoteType] = None
    tags: Optional[List[str]] = None
    color: Optional[str] = None
    pinned: Optional[bool] = None
    mood: Optional[Mood] = None


class NoteOut(WireModel):
    id: str = Field(alias="_id")
    title: str
    content: str
    type: str
    tags: List[str]
    color: str
    pinned: bool
    mood: str
    created_at: datetime
    updated_at: datetime


class NoteSaved(WireModel):
    success: bool = True
    note: NoteOut


# --- 共通 ---


class DeleteResult(WireModel):
    success: bool = True


class HealthResponse(WireModel):
    """GET /health 応答（DB未接続でも返す）。"""

    status: str
    database: str
    message: str
    connected_clients: int


# --- リマインダー配信ペイロード ---


class SweetReminderPayload(WireModel):
    """sweetReminder: 定期的な励ましメッセージ。"""

    message: str
    timestamp: datetime


class EventReminderPayload(WireModel):
    """eventReminder: 先読み窓に入った予定の通知（予定レコードを丸ごと含む）。"""

    message: str
    event: CalendarEventOut
    timestamp: datetime
