"""Pydantic data models for chunkscribe."""

from chunkscribe.models.chunk import (
    AudioChunk,
    ByDuration,
    ByFileSize,
    ChunkingResult,
    Combined,
    LimitStrategy,
)
from chunkscribe.models.config import Settings
from chunkscribe.models.job import JobKind, JobStatus, ProcessingJob, TranscriptionEngine
from chunkscribe.models.summary import ContentType, StoredSummary, SummaryResult
from chunkscribe.models.transcript import FinalTranscript, TranscriptChunk, TranscriptSegment

__all__ = [
    "AudioChunk",
    "ByDuration",
    "ByFileSize",
    "ChunkingResult",
    "Combined",
    "LimitStrategy",
    "Settings",
    "JobKind",
    "JobStatus",
    "ProcessingJob",
    "TranscriptionEngine",
    "ContentType",
    "StoredSummary",
    "SummaryResult",
    "FinalTranscript",
    "TranscriptChunk",
    "TranscriptSegment",
]
