"""Adaptive chunking of recordings against engine size/duration limits."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from chunkscribe.chunking.base import AudioProbe, ChunkExporter
from chunkscribe.errors import ChunkExportFailed, FileNotFound
from chunkscribe.models.chunk import (
    AudioChunk,
    ByDuration,
    ByFileSize,
    ChunkingResult,
    Combined,
    LimitStrategy,
)
from chunkscribe.models.config import ChunkingConfig
from chunkscribe.utils.ffprobe import AudioInfo
from chunkscribe.utils.progress import log_step, log_warning

_EPSILON = 1e-6


class ChunkingEngine:
    """Decides whether a recording needs splitting and splits it.

    Chunk length is driven by a small feedback controller: the target
    duration is seeded from the engine limit and the file's average bitrate,
    shrunk hard whenever an exported chunk overflows the byte limit and
    grown gently while chunks come out well under it.
    """

    def __init__(
        self,
        probe: AudioProbe,
        exporter: ChunkExporter,
        config: ChunkingConfig | None = None,
    ):
        self.probe = probe
        self.exporter = exporter
        self.config = config or ChunkingConfig()

    def is_chunk_file(self, path: Path | str) -> bool:
        return self.config.chunk_marker in Path(path).name

    def should_chunk(self, path: Path | str, strategy: LimitStrategy) -> bool:
        """Check whether the file exceeds the engine limits."""
        info = self._probe_existing(path)
        needs = self._exceeds(info, strategy)
        log_step(
            "Chunk",
            f"{Path(path).name}: {info.duration_seconds:.0f}s, "
            f"{info.byte_size} bytes — {strategy.description} → "
            f"{'split' if needs else 'no split'}",
        )
        return needs

    def chunk(
        self,
        path: Path | str,
        strategy: LimitStrategy,
        output_dir: Path | str | None = None,
        *,
        checkpoint: Callable[[], None] | None = None,
    ) -> ChunkingResult:
        """Split ``path`` into chunks that satisfy ``strategy``.

        A file that is already a chunk, or that fits the limits, comes back
        as a single chunk whose ``chunk_path`` is the file itself.
        ``checkpoint`` runs before every export and may raise to stop.
        """
        path = Path(path)
        started = time.monotonic()
        info = self._probe_existing(path)

        if self.is_chunk_file(path):
            log_step("Chunk", f"{path.name} is already a chunk, not splitting again")
            return self._identity(path, info, started)

        if not self._exceeds(info, strategy):
            return self._identity(path, info, started)

        if output_dir is None:
            output_dir = path.parent / self.config.temp_dirname
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        chunks = self._split(path, info, strategy, output_dir, checkpoint)

        log_step(
            "Chunk",
            f"{path.name}: {len(chunks)} chunks in {time.monotonic() - started:.1f}s",
        )
        return ChunkingResult(
            chunks=chunks,
            total_duration=info.duration_seconds,
            total_size=info.byte_size,
            chunking_time=time.monotonic() - started,
        )

    def seed_duration(self, info: AudioInfo, strategy: LimitStrategy) -> float:
        """Initial target chunk duration for a file under ``strategy``."""
        if isinstance(strategy, ByDuration):
            return strategy.max_seconds
        from_size = strategy.max_bytes * self.config.size_safety_margin / info.bytes_per_second
        if isinstance(strategy, Combined):
            return min(strategy.max_seconds, from_size)
        return from_size

    def cleanup_chunks(self, chunks: list[AudioChunk]) -> int:
        """Delete exported chunk files, never the original recording."""
        deleted = 0
        for chunk in chunks:
            if chunk.is_identity:
                continue
            chunk_path = Path(chunk.chunk_path)
            try:
                if chunk_path.exists():
                    chunk_path.unlink()
                    deleted += 1
            except OSError as e:
                log_warning(f"Could not delete chunk {chunk_path.name}: {e}")

        if deleted and chunks:
            self._cleanup_temp_dir(Path(chunks[0].chunk_path).parent)
        return deleted

    def validate_chunks(self, chunks: list[AudioChunk]) -> None:
        """Ensure every chunk file exists and is readable."""
        for chunk in chunks:
            chunk_path = Path(chunk.chunk_path)
            if not chunk_path.exists():
                raise ChunkExportFailed(f"Chunk file not found: {chunk_path.name}")
            try:
                with open(chunk_path, "rb") as f:
                    f.read(1)
            except OSError as e:
                raise ChunkExportFailed(f"Chunk file not readable: {chunk_path.name}") from e

    # -- internals ---------------------------------------------------------

    def _probe_existing(self, path: Path | str) -> AudioInfo:
        if not Path(path).exists():
            raise FileNotFound(f"Audio file not found: {path}")
        return self.probe.probe(path)

    def _exceeds(self, info: AudioInfo, strategy: LimitStrategy) -> bool:
        if isinstance(strategy, ByFileSize):
            return info.byte_size > strategy.max_bytes
        if isinstance(strategy, ByDuration):
            return info.duration_seconds > strategy.max_seconds
        return (
            info.byte_size > strategy.max_bytes
            or info.duration_seconds > strategy.max_seconds
        )

    def _identity(self, path: Path, info: AudioInfo, started: float) -> ChunkingResult:
        chunk = AudioChunk(
            original_path=str(path),
            chunk_path=str(path),
            sequence_number=0,
            start_time=0.0,
            end_time=info.duration_seconds,
            file_size=info.byte_size,
        )
        return ChunkingResult(
            chunks=[chunk],
            total_duration=info.duration_seconds,
            total_size=info.byte_size,
            chunking_time=time.monotonic() - started,
        )

    def _split(
        self,
        path: Path,
        info: AudioInfo,
        strategy: LimitStrategy,
        output_dir: Path,
        checkpoint: Callable[[], None] | None = None,
    ) -> list[AudioChunk]:
        cfg = self.config
        total = info.duration_seconds
        max_bytes = getattr(strategy, "max_bytes", None)
        seed = self.seed_duration(info, strategy)
        target = seed

        log_step(
            "Chunk",
            f"{strategy.description}; seed chunk length {seed:.1f}s "
            f"({info.bytes_per_second:.0f} B/s)",
        )

        chunks: list[AudioChunk] = []
        current = 0.0
        sequence = 0
        attempts = 0

        try:
            while current < total - _EPSILON:
                step_end = min(current + target, total)
                is_final = step_end >= total - _EPSILON
                if is_final:
                    step_end = total
                    end = total
                elif step_end + cfg.overlap_seconds >= total - _EPSILON:
                    # overlap would swallow the tail chunk
                    end = step_end
                else:
                    end = step_end + cfg.overlap_seconds
                if checkpoint is not None:
                    checkpoint()
                destination = output_dir / f"{path.stem}{cfg.chunk_marker}{sequence:03d}{cfg.chunk_extension}"

                try:
                    size = self.exporter.export(path, current, end, destination)
                except BaseException:
                    destination.unlink(missing_ok=True)
                    raise

                if max_bytes is not None and size > max_bytes:
                    attempts += 1
                    destination.unlink(missing_ok=True)
                    if attempts >= cfg.max_export_attempts:
                        raise ChunkExportFailed(
                            f"Chunk {sequence} still exceeds {max_bytes} bytes "
                            f"after {attempts} attempts ({size} bytes)"
                        )
                    shrunk = target * self._shrink_factor(strategy, sequence)
                    target = max(shrunk, cfg.min_chunk_seconds)
                    log_warning(
                        f"Chunk {sequence} is {size} bytes (> {max_bytes}); "
                        f"retrying with {target:.1f}s"
                    )
                    continue

                chunks.append(AudioChunk(
                    original_path=str(path),
                    chunk_path=str(destination),
                    sequence_number=sequence,
                    start_time=current,
                    end_time=end,
                    file_size=size,
                ))

                if self._has_slack(size, step_end - current, strategy):
                    target = min(target * cfg.grow_factor, seed)

                attempts = 0
                current = step_end
                sequence += 1
        except BaseException:
            removed = self.cleanup_chunks(chunks)
            if removed:
                log_warning(f"Splitting {path.name} stopped, removed {removed} exported chunks")
            raise

        return chunks

    def _shrink_factor(self, strategy: LimitStrategy, sequence: int) -> float:
        if isinstance(strategy, Combined):
            return self.config.combined_shrink
        if sequence == 0:
            # bitrate estimate is least reliable before any chunk was measured
            return self.config.first_chunk_shrink
        return self.config.overflow_shrink

    def _has_slack(self, size: int, step: float, strategy: LimitStrategy) -> bool:
        cfg = self.config
        if isinstance(strategy, ByFileSize):
            budget = strategy.max_bytes * cfg.size_safety_margin
            return size < budget * cfg.slack_utilization
        if isinstance(strategy, Combined):
            return (
                size / strategy.max_bytes < cfg.combined_slack_utilization
                and step / strategy.max_seconds < cfg.combined_slack_utilization
            )
        return False

    def _cleanup_temp_dir(self, temp_dir: Path) -> None:
        if not temp_dir.exists():
            return
        contents = list(temp_dir.iterdir())
        if all(self.config.chunk_marker in p.name for p in contents):
            try:
                for p in contents:
                    p.unlink()
                temp_dir.rmdir()
            except OSError as e:
                log_warning(f"Could not remove chunk directory {temp_dir}: {e}")
