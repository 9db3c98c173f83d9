"""Processing job models — the scheduler's unit of work."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from chunkscribe.models.chunk import AudioChunk

INTERRUPTED_MARKER = "Processing was interrupted"
INTERRUPTED_MESSAGE = (
    f"{INTERRUPTED_MARKER} when the execution budget ran out. "
    "The job has been queued and will resume when the app is active."
)
CANCELLED_MESSAGE = "Cancelled by user"
TERMINATED_MESSAGE = "App was terminated during processing"
NO_CONTENT_MESSAGE = "No transcript content generated"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptionEngine(str, Enum):
    NOT_CONFIGURED = "not_configured"
    OPENAI = "openai"
    OPENAI_COMPATIBLE = "openai_compatible"
    WHISPER = "whisper"
    AWS_TRANSCRIBE = "aws_transcribe"
    APPLE_INTELLIGENCE = "apple_intelligence"


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class JobKind(BaseModel):
    """What a job does and which engine does it."""

    type: Literal["transcription", "summarization"]
    engine: str

    @property
    def display_name(self) -> str:
        return f"{self.type.capitalize()} ({self.engine})"

    @classmethod
    def transcription(cls, engine: TranscriptionEngine | str) -> JobKind:
        return cls(type="transcription", engine=TranscriptionEngine(engine).value)

    @classmethod
    def summarization(cls, engine: str) -> JobKind:
        return cls(type="summarization", engine=engine)


class ProcessingJob(BaseModel):
    """A queued, running or finished unit of work.

    ``recording_path`` is relative to the recordings root so jobs survive a
    relocation of the storage directory. ``error`` carries the failure
    reason whenever ``status`` is ``failed``. ``owner`` names the worker
    process that started the job (``host:pid``).
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: JobKind
    recording_path: str
    recording_name: str
    status: JobStatus = JobStatus.QUEUED
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=_now)
    start_time: datetime = Field(default_factory=_now)
    completion_time: datetime | None = None
    chunks: list[AudioChunk] | None = None
    error: str | None = None
    owner: str | None = None

    def resolve(self, root: Path) -> Path:
        return Path(root) / self.recording_path

    @property
    def is_failed(self) -> bool:
        return self.status is JobStatus.FAILED

    @property
    def is_interrupted(self) -> bool:
        return self.is_failed and INTERRUPTED_MARKER in (self.error or "")

    def same_target(self, other: ProcessingJob) -> bool:
        """Same recording and same job kind (type + engine)."""
        return (
            self.recording_path == other.recording_path
            and self.kind.display_name == other.kind.display_name
        )

    def started(self, owner: str | None = None) -> ProcessingJob:
        return self.model_copy(update={
            "status": JobStatus.PROCESSING,
            "owner": owner,
            "start_time": _now(),
            "completion_time": None,
            "error": None,
        })

    def completed(self) -> ProcessingJob:
        return self.model_copy(update={
            "status": JobStatus.COMPLETED,
            "progress": 1.0,
            "completion_time": _now(),
            "error": None,
        })

    def failed(self, reason: str) -> ProcessingJob:
        return self.model_copy(update={
            "status": JobStatus.FAILED,
            "completion_time": _now(),
            "error": reason,
        })

    def requeued(self) -> ProcessingJob:
        return self.model_copy(update={
            "status": JobStatus.QUEUED,
            "owner": None,
            "progress": 0.0,
            "completion_time": None,
            "error": None,
        })

    def with_progress(self, progress: float) -> ProcessingJob:
        """Advance progress; it never moves backwards within a run."""
        progress = min(max(progress, self.progress), 1.0)
        return self.model_copy(update={"progress": progress})
