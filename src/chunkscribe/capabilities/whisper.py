"""Local transcription with faster-whisper."""

from __future__ import annotations

import time
from pathlib import Path

from chunkscribe.capabilities.base import TranscriptionResult
from chunkscribe.models.transcript import TranscriptSegment
from chunkscribe.utils.progress import log_step


class WhisperTranscription:
    """faster-whisper transcription, CPU by default.

    The model is loaded lazily on first use and reused for every chunk.
    """

    name = "whisper"

    def __init__(
        self,
        *,
        model_size: str = "large-v3-turbo",
        device: str = "cpu",
        language: str | None = None,
        vad_enabled: bool = True,
        vad_min_silence_ms: int = 500,
        speaker: str = "Speaker",
    ):
        self.model_size = model_size
        self.device = device
        self.language = language
        self.vad_enabled = vad_enabled
        self.vad_min_silence_ms = vad_min_silence_ms
        self.speaker = speaker
        self._model = None

    def _load_model(self):
        if self._model is not None:
            return self._model
        try:
            from faster_whisper import WhisperModel
        except ImportError:
            raise ImportError(
                "faster-whisper is required for the whisper engine. "
                "Install with: pip install chunkscribe[transcription]"
            )

        compute_type = "int8" if self.device == "cpu" else "float16"
        log_step("Transcribe", f"Loading model: {self.model_size} ({self.device}, {compute_type})")
        self._model = WhisperModel(self.model_size, device=self.device, compute_type=compute_type)
        return self._model

    def transcribe(self, path: Path | str) -> TranscriptionResult:
        model = self._load_model()
        start_time = time.time()

        vad_params = None
        if self.vad_enabled:
            vad_params = dict(
                min_silence_duration_ms=self.vad_min_silence_ms,
                speech_pad_ms=200,
            )

        segments_gen, info = model.transcribe(
            str(path),
            beam_size=5,
            vad_filter=self.vad_enabled,
            vad_parameters=vad_params,
            language=self.language,
        )

        segments: list[TranscriptSegment] = []
        for seg in segments_gen:
            text = seg.text.strip()
            if not text:
                continue
            segments.append(TranscriptSegment(
                speaker=self.speaker,
                text=text,
                start=seg.start,
                end=seg.end,
            ))

        return TranscriptionResult(
            text=" ".join(s.text for s in segments),
            segments=segments,
            confidence=float(getattr(info, "language_probability", 0.0) or 0.0),
            success=True,
            processing_time=time.time() - start_time,
        )
