"""Merging per-chunk transcripts into one timeline."""

from __future__ import annotations

from chunkscribe.errors import ReassemblyFailed
from chunkscribe.models.transcript import FinalTranscript, TranscriptChunk, TranscriptSegment
from chunkscribe.utils.progress import log_step

DEDUP_PREFIX_CHARS = 50


class TranscriptReassembler:
    """Merge ordered chunk transcripts into a single transcript.

    Steps:
    1. Sort by sequence number and require exactly 0..N-1
    2. Shift segment times by each chunk's start time
    3. Drop overlap duplicates (same text prefix, same rounded start second)
    4. Sort by start time and join the text
    """

    def __init__(self, prefix_chars: int = DEDUP_PREFIX_CHARS):
        self.prefix_chars = prefix_chars

    def reassemble(
        self,
        chunks: list[TranscriptChunk],
        *,
        recording_path: str,
        recording_name: str,
        engine: str = "",
    ) -> FinalTranscript:
        if not chunks:
            raise ReassemblyFailed("No transcript chunks provided")

        ordered = sorted(chunks, key=lambda c: c.sequence_number)
        for index, chunk in enumerate(ordered):
            if chunk.sequence_number != index:
                raise ReassemblyFailed(f"Missing chunk sequence number {index}")

        shifted: list[TranscriptSegment] = []
        speakers: dict[str, str] = {}
        for chunk in ordered:
            for seg in chunk.segments:
                shifted.append(seg.model_copy(update={
                    "start": seg.start + chunk.start_time,
                    "end": seg.end + chunk.start_time,
                }))
                speakers.setdefault(seg.speaker, seg.speaker)

        segments = self.remove_duplicates(shifted)
        segments.sort(key=lambda s: s.start)

        log_step(
            "Reassemble",
            f"{len(ordered)} chunks, {len(shifted)} segments → {len(segments)} unique",
        )

        return FinalTranscript(
            recording_path=recording_path,
            recording_name=recording_name,
            engine=engine,
            duration_seconds=ordered[-1].end_time,
            segments=segments,
            text=" ".join(s.text for s in segments),
            speakers=speakers,
            chunk_count=len(ordered),
        )

    def remove_duplicates(self, segments: list[TranscriptSegment]) -> list[TranscriptSegment]:
        """Keep the first of every (text prefix, rounded start) pair."""
        seen: set[tuple[str, int]] = set()
        unique: list[TranscriptSegment] = []
        for seg in segments:
            key = (seg.text[: self.prefix_chars], round(seg.start))
            if key in seen:
                continue
            seen.add(key)
            unique.append(seg)
        return unique
