"""Pluggable transcription and summarization engines."""

from chunkscribe.capabilities.base import (
    SummarizationCapability,
    TranscriptionCapability,
    TranscriptionResult,
)
from chunkscribe.capabilities.registry import CapabilityRegistry, default_registry

__all__ = [
    "SummarizationCapability",
    "TranscriptionCapability",
    "TranscriptionResult",
    "CapabilityRegistry",
    "default_registry",
]
