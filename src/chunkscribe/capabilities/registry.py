"""Engine name → capability lookup."""

from __future__ import annotations

from typing import Callable

from chunkscribe.capabilities.base import SummarizationCapability, TranscriptionCapability
from chunkscribe.errors import EngineNotConfigured
from chunkscribe.models.config import Settings
from chunkscribe.models.job import TranscriptionEngine


class CapabilityRegistry:
    """Maps engine names to capability factories.

    Capabilities are built on first use and cached, so expensive models are
    loaded once per process.
    """

    def __init__(self):
        self._transcription: dict[str, Callable[[], TranscriptionCapability]] = {}
        self._summarization: dict[str, Callable[[], SummarizationCapability]] = {}
        self._cache: dict[tuple[str, str], object] = {}

    def register_transcription(
        self,
        engine: TranscriptionEngine | str,
        factory: Callable[[], TranscriptionCapability],
    ) -> None:
        key = TranscriptionEngine(engine).value
        self._transcription[key] = factory
        self._cache.pop(("transcription", key), None)

    def register_summarization(
        self,
        engine: str,
        factory: Callable[[], SummarizationCapability],
    ) -> None:
        self._summarization[engine] = factory
        self._cache.pop(("summarization", engine), None)

    def transcription(self, engine: TranscriptionEngine | str) -> TranscriptionCapability:
        try:
            key = TranscriptionEngine(engine).value
        except ValueError:
            raise EngineNotConfigured(str(engine))
        if key == TranscriptionEngine.NOT_CONFIGURED.value or key not in self._transcription:
            raise EngineNotConfigured(key)
        return self._get(("transcription", key), self._transcription[key])

    def summarization(self, engine: str) -> SummarizationCapability:
        if engine not in self._summarization:
            raise EngineNotConfigured(engine)
        return self._get(("summarization", engine), self._summarization[engine])

    @property
    def transcription_engines(self) -> list[str]:
        return sorted(self._transcription)

    @property
    def summarization_engines(self) -> list[str]:
        return sorted(self._summarization)

    def _get(self, key: tuple[str, str], factory: Callable[[], object]):
        if key not in self._cache:
            self._cache[key] = factory()
        return self._cache[key]


def default_registry(settings: Settings | None = None) -> CapabilityRegistry:
    """Registry with the engines that ship with chunkscribe."""
    from chunkscribe.capabilities.claude import ClaudeSummarization
    from chunkscribe.capabilities.whisper import WhisperTranscription
    from chunkscribe.processing.content import ExtractiveSummarization

    settings = settings or Settings()
    registry = CapabilityRegistry()
    registry.register_transcription(
        TranscriptionEngine.WHISPER,
        lambda: WhisperTranscription(
            model_size=settings.whisper_model,
            device=settings.whisper_device,
            speaker=settings.processing.default_speaker,
        ),
    )
    registry.register_summarization(
        "claude",
        lambda: ClaudeSummarization(model=settings.llm_model),
    )
    registry.register_summarization("local", ExtractiveSummarization)
    return registry
