"""Chunk data models and engine limit strategies."""

from __future__ import annotations

import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

MIB = 1024 * 1024


class ByFileSize(BaseModel):
    """Engine accepts files up to ``max_bytes``."""

    kind: Literal["file_size"] = "file_size"
    max_bytes: int = Field(gt=0)

    @property
    def description(self) -> str:
        return f"File size limit: {self.max_bytes // MIB} MB"


class ByDuration(BaseModel):
    """Engine accepts audio up to ``max_seconds`` long."""

    kind: Literal["duration"] = "duration"
    max_seconds: float = Field(gt=0)

    @property
    def description(self) -> str:
        return f"Duration limit: {int(self.max_seconds // 60)} minutes"


class Combined(BaseModel):
    """Engine requires both the size and the duration limit to hold."""

    kind: Literal["combined"] = "combined"
    max_bytes: int = Field(gt=0)
    max_seconds: float = Field(gt=0)

    @property
    def description(self) -> str:
        return (
            f"Combined limits: {self.max_bytes // MIB} MB and "
            f"{int(self.max_seconds // 60)} minutes"
        )


LimitStrategy = Annotated[
    Union[ByFileSize, ByDuration, Combined],
    Field(discriminator="kind"),
]


class AudioChunk(BaseModel):
    """A contiguous time slice of a source recording."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    original_path: str
    chunk_path: str  # equals original_path when no split happened
    sequence_number: int = Field(ge=0)
    start_time: float = Field(ge=0.0)
    end_time: float
    file_size: int = 0

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def is_identity(self) -> bool:
        return self.chunk_path == self.original_path


class ChunkingResult(BaseModel):
    """Outcome of one chunking run."""

    chunks: list[AudioChunk] = Field(default_factory=list)
    total_duration: float = 0.0
    total_size: int = 0
    chunking_time: float = 0.0

    @property
    def needs_chunking(self) -> bool:
        return len(self.chunks) > 1
