"""FFprobe wrapper for audio file metadata extraction."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path

from chunkscribe.errors import FileNotFound, InvalidAudioFormat


@dataclass
class AudioInfo:
    """Audio file metadata extracted via FFprobe."""

    path: str
    duration_seconds: float
    byte_size: int
    sample_rate: int = 0
    channels: int = 0
    codec: str = ""
    format_name: str = ""

    @property
    def bytes_per_second(self) -> float:
        return self.byte_size / self.duration_seconds

    @property
    def format_short(self) -> str:
        suffix = Path(self.path).suffix.lower().lstrip(".")
        if suffix in ("m4a", "mp4") or self.codec == "aac":
            return "AAC"
        if suffix:
            return suffix.upper()
        return self.format_name.upper()


def probe_audio(path: Path | str) -> AudioInfo:
    """Probe an audio file with FFprobe and return metadata."""
    path = Path(path)
    if not path.exists():
        raise FileNotFound(f"Audio file not found: {path}")

    byte_size = path.stat().st_size
    if byte_size <= 0:
        raise InvalidAudioFormat(f"Audio file is empty: {path}")

    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(path),
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        data = json.loads(result.stdout)
    except (subprocess.CalledProcessError, json.JSONDecodeError) as e:
        raise InvalidAudioFormat(f"Could not read audio metadata from {path}: {e}") from e

    audio_stream = None
    for stream in data.get("streams", []):
        if stream.get("codec_type") == "audio":
            audio_stream = stream
            break

    if audio_stream is None:
        raise InvalidAudioFormat(f"No audio stream found in: {path}")

    fmt = data.get("format", {})
    duration = float(fmt.get("duration", audio_stream.get("duration", 0)) or 0)
    if duration <= 0:
        raise InvalidAudioFormat(f"Invalid duration ({duration}) for: {path}")

    return AudioInfo(
        path=str(path),
        duration_seconds=duration,
        byte_size=byte_size,
        sample_rate=int(audio_stream.get("sample_rate", 0) or 0),
        channels=int(audio_stream.get("channels", 0) or 0),
        codec=audio_stream.get("codec_name", ""),
        format_name=fmt.get("format_name", ""),
    )


class FFprobeAudioProbe:
    """Audio probe backed by the ffprobe binary."""

    def probe(self, path: Path | str) -> AudioInfo:
        return probe_audio(path)
