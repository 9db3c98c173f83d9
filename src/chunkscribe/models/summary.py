"""Summary data models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class ContentType(str, Enum):
    MEETING = "meeting"
    TECHNICAL = "technical"
    PERSONAL_JOURNAL = "personal_journal"
    GENERAL = "general"


class TaskItem(BaseModel):
    text: str
    priority: str = "medium"  # high | medium | low


class ReminderItem(BaseModel):
    text: str
    time_reference: str | None = None


class TitleItem(BaseModel):
    text: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class SummaryResult(BaseModel):
    """Output of a summarization capability."""

    summary: str
    tasks: list[TaskItem] = Field(default_factory=list)
    reminders: list[ReminderItem] = Field(default_factory=list)
    titles: list[TitleItem] = Field(default_factory=list)
    content_type: ContentType | None = None


class StoredSummary(BaseModel):
    """Summary persisted for a recording."""

    recording_path: str
    recording_name: str
    engine: str
    summary: str
    tasks: list[TaskItem] = Field(default_factory=list)
    reminders: list[ReminderItem] = Field(default_factory=list)
    titles: list[TitleItem] = Field(default_factory=list)
    content_type: ContentType = ContentType.GENERAL
    original_length: int = 0
    processing_time: float = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
