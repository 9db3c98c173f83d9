from pathlib import Path

import pytest

from chunkscribe.capabilities.base import TranscriptionResult
from chunkscribe.capabilities.registry import CapabilityRegistry
from chunkscribe.chunking.engine import ChunkingEngine
from chunkscribe.models.config import Settings
from chunkscribe.models.transcript import TranscriptSegment
from chunkscribe.processing.content import ExtractiveSummarization
from chunkscribe.scheduler.budget import ExecutionBudgetMonitor, LeaseHandle
from chunkscribe.scheduler.scheduler import JobScheduler
from chunkscribe.store.job_store import YamlJobStore
from chunkscribe.store.transcripts import TranscriptRepository
from chunkscribe.utils.ffprobe import AudioInfo

BYTES_PER_SECOND = 1000


def make_recording(directory, name, seconds, bps=BYTES_PER_SECOND):
    """Fake audio file whose size encodes its duration."""
    path = Path(directory) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * int(seconds * bps))
    return path


class FakeProbe:
    def __init__(self, bps=BYTES_PER_SECOND):
        self.bps = bps

    def probe(self, path):
        size = Path(path).stat().st_size
        return AudioInfo(path=str(path), duration_seconds=size / self.bps, byte_size=size)


class FakeExporter:
    """Writes ``(end - start) * bps * inflation`` bytes per chunk."""

    def __init__(self, bps=BYTES_PER_SECOND, inflation=1.0):
        self.bps = bps
        self.inflation = inflation
        self.calls = []

    def export(self, source, start, end, destination):
        self.calls.append((start, end))
        size = max(int((end - start) * self.bps * self.inflation), 1)
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_bytes(b"\0" * size)
        return size


class FakeCapability:
    """Transcribes every file to one segment naming the file."""

    name = "fake"

    def __init__(self, on_call=None, result=None):
        self.on_call = on_call
        self.result = result
        self.calls = []

    def transcribe(self, path):
        self.calls.append(Path(path))
        if self.on_call is not None:
            self.on_call(Path(path))
        if self.result is not None:
            return self.result
        text = f"Words spoken in {Path(path).stem}."
        return TranscriptionResult(
            text=text,
            segments=[TranscriptSegment(speaker="Speaker 1", text=text, start=0.0, end=2.0)],
            confidence=0.9,
        )


class FakeBudgetProvider:
    def __init__(self, remaining=None):
        self.remaining = remaining
        self.begun = []
        self.ended = []
        self.on_expire = None

    def remaining_time(self):
        return self.remaining

    def begin_lease(self, tag, on_expire):
        self.begun.append(tag)
        self.on_expire = on_expire
        return LeaseHandle(tag)

    def end_lease(self, handle):
        self.ended.append(handle.tag)

    def expire(self):
        self.on_expire()


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, title, body, *, identifier=None, metadata=None):
        self.sent.append((title, body))

    @property
    def titles(self):
        return [title for title, _ in self.sent]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def provider():
    return FakeBudgetProvider()


@pytest.fixture
def capability():
    return FakeCapability()


@pytest.fixture
def make_scheduler(tmp_path, notifier, provider):
    """Scheduler over ``tmp_path`` with fake media, engines and budget."""

    def build(capability=None, settings=None, summarizer=None, signals=None):
        settings = settings or Settings()
        data = tmp_path / ".chunkscribe"
        registry = CapabilityRegistry()
        if capability is not None:
            registry.register_transcription("whisper", lambda: capability)
        registry.register_summarization("local", lambda: summarizer or ExtractiveSummarization())
        budget = ExecutionBudgetMonitor(provider, settings.budget)
        return JobScheduler(
            tmp_path,
            store=YamlJobStore(data / "jobs.yaml"),
            chunking=ChunkingEngine(FakeProbe(), FakeExporter(), settings.chunking),
            registry=registry,
            transcripts=TranscriptRepository(data / "transcripts", data / "summaries"),
            notifier=notifier,
            budget=budget,
            signals=signals,
            settings=settings,
            logs_dir=data / "logs",
        )

    return build
