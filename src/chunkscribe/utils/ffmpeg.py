"""FFmpeg command runner and chunk exporter."""

from __future__ import annotations

import subprocess
from pathlib import Path

from chunkscribe.errors import ChunkExportFailed


class FFmpegError(Exception):
    """Raised when an FFmpeg command fails."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"FFmpeg failed (rc={returncode}): {stderr[:500]}")


def run_ffmpeg(args: list[str], *, check: bool = True) -> subprocess.CompletedProcess:
    """Run an FFmpeg command with standard options."""
    cmd = ["ffmpeg", "-y", "-hide_banner", "-loglevel", "error"] + args
    result = subprocess.run(cmd, capture_output=True, text=True)
    if check and result.returncode != 0:
        raise FFmpegError(cmd, result.returncode, result.stderr)
    return result


def extract_region(
    input_path: Path | str,
    output_path: Path | str,
    start: float,
    duration: float,
    *,
    bitrate: str = "128k",
) -> None:
    """Extract a time region from an audio file as AAC."""
    run_ffmpeg([
        "-ss", f"{start:.3f}",
        "-i", str(input_path),
        "-t", f"{duration:.3f}",
        "-vn",
        "-c:a", "aac",
        "-b:a", bitrate,
        str(output_path),
    ])


class FFmpegChunkExporter:
    """Exports ``[start, end)`` of a recording to a standalone file."""

    def __init__(self, bitrate: str = "128k"):
        self.bitrate = bitrate

    def export(
        self,
        source: Path | str,
        start: float,
        end: float,
        destination: Path | str,
    ) -> int:
        """Export a region and return the size of the written file."""
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        if destination.exists():
            destination.unlink()

        try:
            extract_region(source, destination, start, end - start, bitrate=self.bitrate)
        except FFmpegError as e:
            raise ChunkExportFailed(f"Export failed for {destination.name}: {e}") from e

        if not destination.exists():
            raise ChunkExportFailed(f"Exported chunk file not found: {destination}")
        size = destination.stat().st_size
        if size == 0:
            raise ChunkExportFailed(f"Exported chunk file is empty: {destination}")
        return size
