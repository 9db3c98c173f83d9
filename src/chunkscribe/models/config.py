"""Configuration models for each pipeline component."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from chunkscribe.models.chunk import MIB, ByDuration, Combined, LimitStrategy
from chunkscribe.models.job import TranscriptionEngine
from chunkscribe.utils.io import read_yaml, to_plain

CONFIG_FILENAME = "chunkscribe.yaml"


class ChunkingConfig(BaseModel):
    """Chunk sizing controller settings.

    The shrink/grow factors and utilization thresholds are empirical and
    due for benchmarking; they are kept here so they can be retuned without
    touching the controller.
    """

    overlap_seconds: float = Field(default=5.0, ge=0.0, le=60.0)
    size_safety_margin: float = Field(default=0.6, gt=0.0, le=1.0)
    overflow_shrink: float = Field(default=0.6, gt=0.0, lt=1.0)
    first_chunk_shrink: float = Field(default=0.3, gt=0.0, lt=1.0)
    combined_shrink: float = Field(default=0.7, gt=0.0, lt=1.0)
    grow_factor: float = Field(default=1.1, ge=1.0, le=2.0)
    slack_utilization: float = Field(default=0.5, gt=0.0, lt=1.0)
    combined_slack_utilization: float = Field(default=0.6, gt=0.0, lt=1.0)
    max_export_attempts: int = Field(default=8, ge=1, le=50)
    min_chunk_seconds: float = Field(default=1.0, gt=0.0)
    chunk_marker: str = "_chunk_"
    chunk_extension: str = ".m4a"
    temp_dirname: str = "chunks"


class EmptyChunkPolicy(str, Enum):
    PLACEHOLDER = "placeholder"
    FAIL = "fail"


class ProcessingConfig(BaseModel):
    """Per-chunk transcription settings."""

    empty_chunk_policy: EmptyChunkPolicy = EmptyChunkPolicy.PLACEHOLDER
    no_speech_placeholder: str = "[No speech detected in this audio segment]"
    capability_retry_attempts: int = Field(default=3, ge=1, le=10)
    default_speaker: str = "Speaker"


class SchedulerConfig(BaseModel):
    """Job queue settings."""

    stale_threshold_seconds: float = Field(default=3600.0, gt=0.0)
    jobs_filename: str = "jobs.yaml"
    transcripts_dirname: str = "transcripts"
    summaries_dirname: str = "summaries"
    logs_dirname: str = "logs"
    data_dirname: str = ".chunkscribe"


class BudgetConfig(BaseModel):
    """Execution budget escalation thresholds, in seconds."""

    poll_interval: float = Field(default=30.0, gt=0.0)
    warn_below: float = Field(default=600.0, gt=0.0)
    prepare_below: float = Field(default=120.0, gt=0.0)
    force_below: float = Field(default=30.0, gt=0.0)


def _default_engine_limits() -> dict[str, LimitStrategy]:
    openai = Combined(max_bytes=24 * MIB, max_seconds=1300)
    two_hours = ByDuration(max_seconds=2 * 60 * 60)
    fifteen_minutes = ByDuration(max_seconds=15 * 60)
    return {
        TranscriptionEngine.NOT_CONFIGURED.value: fifteen_minutes,
        TranscriptionEngine.OPENAI.value: openai,
        TranscriptionEngine.OPENAI_COMPATIBLE.value: openai,
        TranscriptionEngine.WHISPER.value: two_hours,
        TranscriptionEngine.AWS_TRANSCRIBE.value: two_hours,
        TranscriptionEngine.APPLE_INTELLIGENCE.value: fifteen_minutes,
    }


class Settings(BaseModel):
    """All component configurations."""

    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    engine_limits: dict[str, LimitStrategy] = Field(default_factory=_default_engine_limits)
    whisper_model: str = "large-v3-turbo"
    whisper_device: str = "cpu"
    llm_model: str = "claude-sonnet-4-6"

    def limits_for(self, engine: TranscriptionEngine | str) -> LimitStrategy:
        engine = TranscriptionEngine(engine).value
        limits = self.engine_limits.get(engine)
        if limits is None:
            return self.engine_limits[TranscriptionEngine.NOT_CONFIGURED.value]
        return limits


def load_settings(root: Path | str) -> Settings:
    """Load settings from ``<root>/chunkscribe.yaml``; defaults if absent."""
    path = Path(root) / CONFIG_FILENAME
    if not path.exists():
        return Settings()
    data = read_yaml(path)
    return Settings.model_validate(to_plain(data))
