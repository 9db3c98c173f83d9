"""Transcript and summary files, one JSON document per recording."""

from __future__ import annotations

import hashlib
from pathlib import Path

from chunkscribe.errors import FileNotFound
from chunkscribe.models.summary import StoredSummary
from chunkscribe.models.transcript import FinalTranscript
from chunkscribe.utils.io import read_json, write_json


class TranscriptRepository:
    """Stores results under ``transcripts/`` and ``summaries/``.

    Files are keyed by the recording path (relative to the recordings root),
    so re-running a job overwrites the previous result.
    """

    def __init__(self, transcripts_dir: Path | str, summaries_dir: Path | str):
        self.transcripts_dir = Path(transcripts_dir)
        self.summaries_dir = Path(summaries_dir)

    def transcript_path(self, recording_path: str) -> Path:
        return self.transcripts_dir / f"{_key(recording_path)}.json"

    def summary_path(self, recording_path: str) -> Path:
        return self.summaries_dir / f"{_key(recording_path)}.json"

    def save_transcript(self, transcript: FinalTranscript) -> Path:
        path = self.transcript_path(transcript.recording_path)
        write_json(path, transcript.model_dump(mode="json"))
        return path

    def load_transcript(self, recording_path: str) -> FinalTranscript:
        path = self.transcript_path(recording_path)
        if not path.exists():
            raise FileNotFound(f"No transcript found for {recording_path}")
        return FinalTranscript.model_validate(read_json(path))

    def has_transcript(self, recording_path: str) -> bool:
        return self.transcript_path(recording_path).exists()

    def save_summary(self, summary: StoredSummary) -> Path:
        path = self.summary_path(summary.recording_path)
        write_json(path, summary.model_dump(mode="json"))
        return path

    def load_summary(self, recording_path: str) -> StoredSummary:
        path = self.summary_path(recording_path)
        if not path.exists():
            raise FileNotFound(f"No summary found for {recording_path}")
        return StoredSummary.model_validate(read_json(path))


def _key(recording_path: str) -> str:
    """Readable, collision-free file stem for a recording path."""
    stem = Path(recording_path).stem
    digest = hashlib.sha1(recording_path.encode("utf-8")).hexdigest()[:8]
    return f"{stem}-{digest}"
