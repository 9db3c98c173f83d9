"""Per-chunk transcription with output validation."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from chunkscribe.capabilities.base import TranscriptionCapability, TranscriptionResult
from chunkscribe.errors import (
    CapabilityFailure,
    ChunkscribeError,
    FileNotFound,
    InvalidAudioFormat,
)
from chunkscribe.models.chunk import AudioChunk
from chunkscribe.models.config import EmptyChunkPolicy, ProcessingConfig
from chunkscribe.models.transcript import TranscriptChunk, TranscriptSegment
from chunkscribe.utils.progress import log_step, log_warning
from chunkscribe.utils.retry import retry_api

ProgressCallback = Callable[[float, int, int], None]


class ChunkProcessor:
    """Runs a transcription capability over chunks, one at a time."""

    def __init__(self, config: ProcessingConfig | None = None):
        self.config = config or ProcessingConfig()

    def process(self, chunk: AudioChunk, capability: TranscriptionCapability) -> TranscriptChunk:
        """Transcribe one chunk.

        Raises:
            FileNotFound: chunk file is missing
            InvalidAudioFormat: chunk file is empty
            CapabilityFailure: the engine failed or (under the ``fail``
                policy) returned no text
        """
        chunk_path = Path(chunk.chunk_path)
        if not chunk_path.exists():
            raise FileNotFound(f"Chunk file not found: {chunk_path}")
        if chunk_path.stat().st_size == 0:
            raise InvalidAudioFormat(f"Chunk file is empty: {chunk_path}")

        log_step(
            "Transcribe",
            f"{chunk_path.name} [{chunk.start_time:.0f}s–{chunk.end_time:.0f}s] "
            f"with {capability.name}",
        )

        started = time.time()
        result = self._transcribe(capability, chunk_path)
        elapsed = time.time() - started

        if not result.success:
            raise CapabilityFailure(
                f"Transcription failed for {capability.name}",
                wrapped=RuntimeError(result.error or "engine reported failure"),
            )

        text = result.text
        if not text.strip():
            log_warning(
                f"Empty transcription for {chunk_path.name} "
                f"({len(result.segments)} segments)"
            )
            if self.config.empty_chunk_policy is EmptyChunkPolicy.FAIL:
                raise CapabilityFailure(
                    f"No speech detected in chunk {chunk.sequence_number} ({chunk_path.name})"
                )
            text = self.config.no_speech_placeholder

        segments = result.segments or [
            TranscriptSegment(
                speaker=self.config.default_speaker,
                text=text,
                start=0.0,
                end=chunk.duration,
            )
        ]

        return TranscriptChunk(
            chunk_id=chunk.id,
            sequence_number=chunk.sequence_number,
            transcript=text,
            segments=segments,
            start_time=chunk.start_time,
            end_time=chunk.end_time,
            processing_time=elapsed,
        )

    def process_all(
        self,
        chunks: list[AudioChunk],
        capability: TranscriptionCapability,
        *,
        on_progress: ProgressCallback | None = None,
        checkpoint: Callable[[], None] | None = None,
        baseline: float = 0.2,
        span: float = 0.7,
    ) -> list[TranscriptChunk]:
        """Transcribe chunks sequentially in sequence-number order.

        ``checkpoint`` runs before every chunk and may raise to stop the
        run; ``on_progress`` receives ``baseline + span * index / total``.
        """
        ordered = sorted(chunks, key=lambda c: c.sequence_number)
        total = len(ordered)
        results: list[TranscriptChunk] = []

        for index, chunk in enumerate(ordered):
            if checkpoint is not None:
                checkpoint()
            if on_progress is not None:
                on_progress(baseline + span * index / total, index, total)
            results.append(self.process(chunk, capability))

        return results

    def _transcribe(self, capability: TranscriptionCapability, path: Path) -> TranscriptionResult:
        call = retry_api(self.config.capability_retry_attempts)(capability.transcribe)
        try:
            return call(path)
        except ChunkscribeError:
            raise
        except Exception as e:
            raise CapabilityFailure(
                f"Transcription failed for {capability.name}", wrapped=e
            ) from e
