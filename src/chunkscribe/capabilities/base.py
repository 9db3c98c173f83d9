"""Base protocols for transcription and summarization capabilities."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from chunkscribe.models.summary import SummaryResult
from chunkscribe.models.transcript import TranscriptSegment


class TranscriptionResult(BaseModel):
    """What a transcription capability returns for one file."""

    text: str = ""
    segments: list[TranscriptSegment] = Field(default_factory=list)
    confidence: float = 0.0
    success: bool = True
    error: str | None = None
    processing_time: float = 0.0


class TranscriptionCapability(Protocol):
    """Protocol that all transcription engines must implement."""

    name: str

    def transcribe(self, path: Path | str) -> TranscriptionResult: ...


class SummarizationCapability(Protocol):
    """Protocol that all summarization engines must implement."""

    name: str

    def summarize(self, text: str) -> SummaryResult: ...
