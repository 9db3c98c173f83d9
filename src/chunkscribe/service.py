"""Wiring of the scheduler and its collaborators for one recordings root."""

from __future__ import annotations

from pathlib import Path

from chunkscribe.capabilities.registry import CapabilityRegistry, default_registry
from chunkscribe.chunking.engine import ChunkingEngine
from chunkscribe.models.config import Settings, load_settings
from chunkscribe.notify import ConsoleNotifier, NotificationSender
from chunkscribe.processing.processor import ChunkProcessor
from chunkscribe.processing.reassembly import TranscriptReassembler
from chunkscribe.scheduler.budget import (
    DeadlineBudgetProvider,
    ExecutionBudgetMonitor,
    UnlimitedBudgetProvider,
)
from chunkscribe.scheduler.lifecycle import LifecycleSignals
from chunkscribe.scheduler.scheduler import JobScheduler
from chunkscribe.store.job_store import YamlJobStore
from chunkscribe.store.transcripts import TranscriptRepository
from chunkscribe.utils.ffmpeg import FFmpegChunkExporter
from chunkscribe.utils.ffprobe import FFprobeAudioProbe


def data_dir(root: Path, settings: Settings) -> Path:
    return root / settings.scheduler.data_dirname


def build_repository(root: Path | str, settings: Settings | None = None) -> TranscriptRepository:
    root = Path(root).resolve()
    settings = settings or load_settings(root)
    data = data_dir(root, settings)
    return TranscriptRepository(
        data / settings.scheduler.transcripts_dirname,
        data / settings.scheduler.summaries_dirname,
    )


def build_scheduler(
    root: Path | str,
    *,
    budget_seconds: float | None = None,
    settings: Settings | None = None,
    registry: CapabilityRegistry | None = None,
    notifier: NotificationSender | None = None,
    signals: LifecycleSignals | None = None,
) -> JobScheduler:
    """Scheduler backed by ffmpeg, the YAML job store and the default engines."""
    root = Path(root).resolve()
    settings = settings or load_settings(root)
    data = data_dir(root, settings)

    if budget_seconds is None:
        provider = UnlimitedBudgetProvider()
    else:
        provider = DeadlineBudgetProvider(budget_seconds)

    return JobScheduler(
        root,
        store=YamlJobStore(data / settings.scheduler.jobs_filename),
        chunking=ChunkingEngine(FFprobeAudioProbe(), FFmpegChunkExporter(), settings.chunking),
        registry=registry or default_registry(settings),
        transcripts=build_repository(root, settings),
        processor=ChunkProcessor(settings.processing),
        reassembler=TranscriptReassembler(),
        notifier=notifier or ConsoleNotifier(),
        budget=ExecutionBudgetMonitor(provider, settings.budget),
        signals=signals,
        settings=settings,
        logs_dir=data / settings.scheduler.logs_dirname,
    )
