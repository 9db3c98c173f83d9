"""Protocols for the media collaborators used by the chunking engine."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from chunkscribe.utils.ffprobe import AudioInfo


class AudioProbe(Protocol):
    """Reports duration and byte size of an audio file."""

    def probe(self, path: Path | str) -> AudioInfo: ...


class ChunkExporter(Protocol):
    """Writes ``[start, end)`` of a source file to ``destination``.

    Returns the byte size of the written file. Must leave a non-empty file
    behind or raise ``ChunkExportFailed``.
    """

    def export(
        self,
        source: Path | str,
        start: float,
        end: float,
        destination: Path | str,
    ) -> int: ...
