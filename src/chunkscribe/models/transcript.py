"""Transcript data models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class TranscriptSegment(BaseModel):
    """Speaker-attributed span of text.

    Times are relative to the chunk before reassembly and relative to the
    original recording afterwards.
    """

    speaker: str = "Speaker"
    text: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


class TranscriptChunk(BaseModel):
    """Transcription result for one audio chunk."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    chunk_id: str
    sequence_number: int
    transcript: str
    segments: list[TranscriptSegment] = Field(default_factory=list)
    start_time: float
    end_time: float
    processing_time: float | None = None

    @property
    def has_content(self) -> bool:
        return bool(self.transcript.strip())


class FinalTranscript(BaseModel):
    """Complete transcript of one recording on the original timeline."""

    version: str = "1.0"
    recording_path: str
    recording_name: str
    title: str | None = None
    engine: str = ""
    duration_seconds: float = 0.0
    segments: list[TranscriptSegment] = Field(default_factory=list)
    text: str = ""
    speakers: dict[str, str] = Field(default_factory=dict)
    chunk_count: int = 1
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
