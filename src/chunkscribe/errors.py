"""Exception hierarchy for the processing pipeline.

Errors raised inside chunk export, transcription or reassembly abort only
the job that raised them; the scheduler catches them at the job boundary.
"""

from __future__ import annotations


class ChunkscribeError(Exception):
    """Base class for all pipeline errors."""


class JobAlreadyRunning(ChunkscribeError):
    """Raised when a job is submitted while another one is processing."""

    def __init__(self, job_id: str | None = None):
        self.job_id = job_id
        message = "A processing job is already running"
        if job_id:
            message += f" ({job_id})"
        super().__init__(message)


class FileNotFound(ChunkscribeError, FileNotFoundError):
    """Audio file, chunk file or stored transcript is missing."""


class InvalidAudioFormat(ChunkscribeError):
    """File exists but is empty, corrupted or carries no audio stream."""


class ChunkExportFailed(ChunkscribeError):
    """A chunk could not be exported within its limits."""


class ReassemblyFailed(ChunkscribeError):
    """Per-chunk transcripts could not be merged into one timeline."""


class EngineNotConfigured(ChunkscribeError):
    """No capability is registered for the requested engine."""

    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(
            f"Engine '{engine}' is not configured. "
            "Register a capability for it or choose another engine."
        )


class CapabilityFailure(ChunkscribeError):
    """A transcription or summarization capability failed."""

    def __init__(self, message: str, wrapped: BaseException | None = None):
        self.wrapped = wrapped
        if wrapped is not None:
            message = f"{message}: {wrapped}"
        super().__init__(message)


class JobTimeout(ChunkscribeError):
    """A job stayed in processing longer than the stale threshold."""


class Cancelled(ChunkscribeError):
    """The active job was cancelled or suspended before it finished."""
