"""
cute_couple.db の ORM モデル定義

写真（photos）、予定（calendar_events）、学習アイテム（study_items）、
メモ（notes）を定義する。時刻はすべて UTC の UNIX秒で保存する。
リスト/ネスト構造は *_json 列に JSON 文字列で保持する。
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from cute_couple.storage.db import Base


class Photo(Base):
    """アップロード済み写真のメタ情報（本体はアップロードディレクトリに置く）。"""

    __tablename__ = "photos"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="Untitled")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    original_name: Mapped[str] = mapped_column(Text, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    upload_date_ts: Mapped[int] = mapped_column(Integer, nullable=False)
    tags_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CalendarEvent(Base):
    """カレンダーの予定。

    - notified はリマインダー送信済みの印（リマインダー側は true にしかしない）
    - CRUD 側の更新で notified=false が渡されると再通知の対象に戻る
    """

    __tablename__ = "calendar_events"
    __table_args__ = (
        # --- 先読み検索（date範囲 + 未通知）用 ---
        Index("ix_calendar_events_date_notified", "date_ts", "notified"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date_ts: Mapped[int] = mapped_column(Integer, nullable=False)
    time: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False, default="other")
    priority: Mapped[str] = mapped_column(Text, nullable=False, default="medium")
    recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_type: Mapped[str] = mapped_column(Text, nullable=False, default="monthly")
    notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class StudyItem(Base):
    """学習アイテム（課題/試験/フラッシュカード等）。"""

    __tablename__ = "study_items"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False, default="")
    priority: Mapped[str] = mapped_column(Text, nullable=False, default="medium")
    due_date_ts: Mapped[Optional[int]] = mapped_column(Integer)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 分
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # %
    resources_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    flashcards_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class Note(Base):
    """メモ（ラブレター/学習メモ/思い出など）。"""

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False, default="other")
    tags_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    color: Mapped[str] = mapped_column(Text, nullable=False, default="#FFB6C1")
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    mood: Mapped[str] = mapped_column(Text, nullable=False, default="happy")
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)
