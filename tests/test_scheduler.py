from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from conftest import FakeCapability, FakeExporter, FakeProbe, make_recording

from chunkscribe.capabilities.base import TranscriptionResult
from chunkscribe.chunking.engine import ChunkingEngine
from chunkscribe.errors import JobAlreadyRunning
from chunkscribe.models.chunk import ByDuration
from chunkscribe.models.config import ProcessingConfig, Settings
from chunkscribe.models.job import (
    CANCELLED_MESSAGE,
    INTERRUPTED_MESSAGE,
    NO_CONTENT_MESSAGE,
    TERMINATED_MESSAGE,
    JobKind,
    JobStatus,
    ProcessingJob,
)
from chunkscribe.models.transcript import TranscriptSegment
from chunkscribe.scheduler.lifecycle import LifecycleSignals
from chunkscribe.scheduler.scheduler import lease_tag, worker_id
from chunkscribe.store.job_store import YamlJobStore


def _store(tmp_path):
    return YamlJobStore(tmp_path / ".chunkscribe" / "jobs.yaml")


def _job(name, engine="whisper"):
    return ProcessingJob(
        kind=JobKind.transcription(engine),
        recording_path=f"{name}.m4a",
        recording_name=name,
    )


def test_transcription_job_completes(tmp_path, make_scheduler, capability, notifier, provider):
    make_recording(tmp_path, "memo.m4a", 30)
    scheduler = make_scheduler(capability)

    job = scheduler.enqueue_transcription("memo.m4a", "whisper")
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.COMPLETED
    assert scheduler.get_job_progress(job.id) == 1.0
    assert scheduler.current_job is None
    assert not scheduler.budget.lease_held
    assert provider.begun == ["AudioProcessing-Transcription(whisper)-memo"]
    assert "Transcription Complete" in notifier.titles

    transcript = scheduler.transcripts.load_transcript("memo.m4a")
    assert transcript.text == "Words spoken in memo."
    assert transcript.title == "Words spoken in memo"
    assert _store(tmp_path).get_job(job.id).status is JobStatus.COMPLETED


def test_long_recording_is_chunked_and_reassembled(tmp_path, make_scheduler, capability, notifier):
    make_recording(tmp_path, "talk.m4a", 185)
    settings = Settings(engine_limits={"whisper": ByDuration(max_seconds=60)})
    scheduler = make_scheduler(capability, settings=settings)

    job = scheduler.enqueue_transcription("talk.m4a", "whisper")
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.COMPLETED
    transcript = scheduler.transcripts.load_transcript("talk.m4a")
    assert transcript.chunk_count == 4
    assert [s.start for s in transcript.segments] == [0, 60, 120, 180]
    assert not (tmp_path / "chunks").exists()
    progress = [t for t in notifier.titles if t.startswith("Processing Transcription")]
    assert len(progress) == 3


def test_precomputed_chunks_are_used(tmp_path, make_scheduler, capability):
    path = make_recording(tmp_path, "talk.m4a", 185)
    chunks = ChunkingEngine(FakeProbe(), FakeExporter()).chunk(path, ByDuration(max_seconds=100)).chunks
    scheduler = make_scheduler(capability)

    job = scheduler.enqueue_transcription("talk.m4a", "whisper", chunks=chunks)
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.COMPLETED
    assert scheduler.transcripts.load_transcript("talk.m4a").chunk_count == 2
    assert [p.name for p in capability.calls] == ["talk_chunk_000.m4a", "talk_chunk_001.m4a"]


def test_only_one_job_processes_at_a_time(tmp_path, make_scheduler):
    for name in ("a", "b", "c"):
        make_recording(tmp_path, f"{name}.m4a", 10)
    processing_counts = []

    def count(_path):
        processing_counts.append(
            sum(j.status is JobStatus.PROCESSING for j in scheduler.jobs)
        )

    scheduler = make_scheduler(FakeCapability(on_call=count))
    for name in ("a", "b", "c"):
        scheduler.enqueue_transcription(f"{name}.m4a", "whisper")
    scheduler.process_next()

    assert processing_counts == [1, 1, 1]
    assert all(j.status is JobStatus.COMPLETED for j in scheduler.jobs)


def test_enqueue_is_rejected_while_a_job_processes(tmp_path, make_scheduler):
    make_recording(tmp_path, "a.m4a", 10)
    errors = []

    def enqueue_more(_path):
        for submit in (
            lambda: scheduler.enqueue_transcription("b.m4a", "whisper"),
            lambda: scheduler.enqueue_summarization("a.m4a", "local"),
        ):
            try:
                submit()
            except JobAlreadyRunning as e:
                errors.append(e)

    scheduler = make_scheduler(FakeCapability(on_call=enqueue_more))
    job = scheduler.enqueue_transcription("a.m4a", "whisper")
    scheduler.process_next()

    assert len(errors) == 2
    assert errors[0].job_id == job.id
    assert len(scheduler.jobs) == 1


def test_failure_does_not_stall_the_queue(tmp_path, make_scheduler, capability, notifier):
    make_recording(tmp_path, "memo.m4a", 30)
    scheduler = make_scheduler(capability)

    broken = scheduler.enqueue_transcription("missing.m4a", "whisper")
    good = scheduler.enqueue_transcription("memo.m4a", "whisper")
    scheduler.process_next()

    failed = scheduler.jobs[0]
    assert failed.id == broken.id
    assert failed.status is JobStatus.FAILED
    assert "Recording not found" in failed.error
    assert failed.completion_time is not None
    assert scheduler.get_job_status(good.id) is JobStatus.COMPLETED
    assert "Processing Failed" in notifier.titles

    log_file = tmp_path / ".chunkscribe" / "logs" / f"{broken.id}.log"
    assert "FileNotFound" in log_file.read_text()


def test_unconfigured_engine_fails_the_job(tmp_path, make_scheduler, capability):
    make_recording(tmp_path, "memo.m4a", 30)
    scheduler = make_scheduler(capability)

    job = scheduler.enqueue_transcription("memo.m4a", "openai")
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.FAILED
    assert "not configured" in scheduler.jobs[0].error


def test_blank_transcript_fails_the_job(tmp_path, make_scheduler, notifier):
    make_recording(tmp_path, "quiet.m4a", 30)
    settings = Settings(processing=ProcessingConfig(no_speech_placeholder=""))
    scheduler = make_scheduler(FakeCapability(result=TranscriptionResult(text="")), settings=settings)

    job = scheduler.enqueue_transcription("quiet.m4a", "whisper")
    scheduler.process_next()

    assert scheduler.jobs[0].status is JobStatus.FAILED
    assert scheduler.jobs[0].error == NO_CONTENT_MESSAGE
    assert not scheduler.transcripts.has_transcript(job.recording_path)
    assert "Transcription Failed" in notifier.titles


def test_budget_exhaustion_interrupts_the_active_job(tmp_path, make_scheduler, provider, notifier):
    make_recording(tmp_path, "a.m4a", 10)
    make_recording(tmp_path, "b.m4a", 10)
    provider.remaining = 20
    scheduler = make_scheduler(FakeCapability(on_call=lambda _p: scheduler.budget.check()))

    first = scheduler.enqueue_transcription("a.m4a", "whisper")
    second = scheduler.enqueue_transcription("b.m4a", "whisper")
    scheduler.process_next()

    job = scheduler.jobs[0]
    assert job.id == first.id
    assert job.status is JobStatus.FAILED
    assert "interrupted" in job.error
    assert job.is_interrupted
    assert scheduler.current_job is None
    assert not scheduler.budget.lease_held
    assert scheduler.get_job_status(second.id) is JobStatus.QUEUED
    assert "Processing Paused" in notifier.titles


def test_cancel_active_lets_the_next_job_run(tmp_path, make_scheduler):
    make_recording(tmp_path, "a.m4a", 10)
    make_recording(tmp_path, "b.m4a", 10)

    def cancel_first(path):
        if path.stem == "a":
            scheduler.cancel_active()

    scheduler = make_scheduler(FakeCapability(on_call=cancel_first))
    first = scheduler.enqueue_transcription("a.m4a", "whisper")
    second = scheduler.enqueue_transcription("b.m4a", "whisper")
    scheduler.process_next()

    assert scheduler.jobs[0].error == CANCELLED_MESSAGE
    assert scheduler.get_job_status(first.id) is JobStatus.FAILED
    assert scheduler.get_job_status(second.id) is JobStatus.COMPLETED
    assert not scheduler.transcripts.has_transcript("a.m4a")


def test_cancel_active_without_job(make_scheduler, capability):
    assert make_scheduler(capability).cancel_active() is None


def test_summarization_is_deduplicated(make_scheduler, capability):
    scheduler = make_scheduler(capability)

    first = scheduler.enqueue_summarization("memo.m4a", "local")
    second = scheduler.enqueue_summarization("memo.m4a", "local")

    assert second.id == first.id
    assert len(scheduler.jobs) == 1


def test_transcription_rerun_replaces_previous_job(tmp_path, make_scheduler, capability):
    make_recording(tmp_path, "memo.m4a", 30)
    scheduler = make_scheduler(capability)
    old = scheduler.enqueue_transcription("memo.m4a", "whisper")
    scheduler.process_next()

    new = scheduler.enqueue_transcription("memo.m4a", "whisper")

    assert [j.id for j in scheduler.jobs] == [new.id]
    assert new.id != old.id
    assert new.status is JobStatus.QUEUED
    assert [j.id for j in _store(tmp_path).list_jobs()] == [new.id]


def test_summarization_after_transcription(tmp_path, make_scheduler, notifier):
    make_recording(tmp_path, "memo.m4a", 30)
    text = "We need to ship the release on Friday. Remember to call Bob about the budget."
    capability = FakeCapability(result=TranscriptionResult(
        text=text,
        segments=[TranscriptSegment(text=text, start=0, end=8)],
    ))
    scheduler = make_scheduler(capability)
    scheduler.enqueue_transcription("memo.m4a", "whisper")
    scheduler.process_next()

    job = scheduler.enqueue_summarization("memo.m4a", "local")
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.COMPLETED
    summary = scheduler.transcripts.load_summary("memo.m4a")
    assert len(summary.tasks) == 2
    assert summary.titles
    assert summary.original_length == len(text.split())
    title, body = notifier.sent[-1]
    assert title == "Summarization Complete"
    assert "2 tasks" in body


def test_summarization_without_transcript_fails(make_scheduler, capability):
    scheduler = make_scheduler(capability)

    job = scheduler.enqueue_summarization("memo.m4a", "local")
    scheduler.process_next()

    assert scheduler.get_job_status(job.id) is JobStatus.FAILED
    assert "No transcript found" in scheduler.jobs[0].error


def test_orphaned_processing_jobs_become_interrupted(tmp_path, make_scheduler, capability):
    orphan = _job("a").started()
    _store(tmp_path).create_job(orphan)

    scheduler = make_scheduler(capability)

    job = scheduler.jobs[0]
    assert job.status is JobStatus.FAILED
    assert job.is_interrupted
    assert _store(tmp_path).get_job(orphan.id).is_interrupted


def test_stale_processing_jobs_time_out(tmp_path, make_scheduler, capability):
    stale = _job("a").started()
    stale = stale.model_copy(update={
        "start_time": datetime.now(timezone.utc) - timedelta(hours=2),
    })
    _store(tmp_path).create_job(stale)

    scheduler = make_scheduler(capability)

    assert scheduler.jobs[0].error == "Job timed out after 120 minutes"
    assert not scheduler.jobs[0].is_interrupted


def test_resume_deduplicates_by_recording(tmp_path, make_scheduler, capability):
    store = _store(tmp_path)
    a1 = _job("a").with_progress(0.5).failed(INTERRUPTED_MESSAGE)
    a2 = _job("a").failed(INTERRUPTED_MESSAGE)
    b = _job("b").failed(INTERRUPTED_MESSAGE)
    broken = _job("c").failed("boom")
    for job in (a1, a2, b, broken):
        store.create_job(job)
    scheduler = make_scheduler(capability)

    resumed = scheduler.resume_interrupted_jobs()

    assert [j.id for j in resumed] == [a1.id, b.id]
    assert all(j.status is JobStatus.QUEUED and j.progress == 0.0 for j in resumed)
    assert store.get_job(a2.id) is None
    assert scheduler.get_job_status(broken.id) is JobStatus.FAILED


def test_foreground_resumes_and_processes(tmp_path, make_scheduler, capability):
    make_recording(tmp_path, "a.m4a", 10)
    _store(tmp_path).create_job(_job("a").failed(INTERRUPTED_MESSAGE))
    signals = LifecycleSignals()
    scheduler = make_scheduler(capability, signals=signals)

    signals.emit("foreground")
    scheduler.wait(timeout=10)

    assert scheduler.jobs[0].status is JobStatus.COMPLETED


def test_background_notifications(tmp_path, make_scheduler, notifier):
    make_recording(tmp_path, "a.m4a", 10)
    signals = LifecycleSignals()
    scheduler = make_scheduler(
        FakeCapability(on_call=lambda _p: signals.emit("background")),
        signals=signals,
    )
    scheduler.enqueue_transcription("a.m4a", "whisper")

    signals.emit("background")
    assert notifier.titles == ["Jobs Queued"]

    scheduler.process_next()
    assert "Processing in Background" in notifier.titles


def test_terminate_fails_the_active_job(tmp_path, make_scheduler):
    make_recording(tmp_path, "a.m4a", 10)
    signals = LifecycleSignals()
    scheduler = make_scheduler(
        FakeCapability(on_call=lambda _p: signals.emit("terminate")),
        signals=signals,
    )

    scheduler.enqueue_transcription("a.m4a", "whisper")
    scheduler.process_next()

    job = scheduler.jobs[0]
    assert job.error == TERMINATED_MESSAGE
    assert not job.is_interrupted


def test_queue_maintenance(tmp_path, make_scheduler, capability):
    scheduler = make_scheduler(capability)
    scheduler.enqueue_transcription("a.m4a", "whisper")
    scheduler.enqueue_summarization("b.m4a", "local")

    assert scheduler.cancel_all_jobs() == 2
    assert all(j.error == CANCELLED_MESSAGE for j in scheduler.jobs)

    assert scheduler.remove_completed_jobs() == 2
    assert scheduler.jobs == []

    scheduler.enqueue_transcription("a.m4a", "whisper")
    assert scheduler.clear_all_jobs() == 1
    assert _store(tmp_path).list_jobs() == []


def test_recordings_outside_root_are_rejected(tmp_path, make_scheduler, capability):
    scheduler = make_scheduler(capability)
    with pytest.raises(ValueError):
        scheduler.enqueue_transcription(tmp_path.parent / "elsewhere.m4a", "whisper")


def test_recording_paths_are_stored_relative(tmp_path, make_scheduler, capability):
    scheduler = make_scheduler(capability)

    job = scheduler.enqueue_transcription(tmp_path / "2024" / "memo.m4a", "whisper")

    assert job.recording_path == "2024/memo.m4a"
    assert job.recording_name == "memo"


def test_lease_tag():
    job = _job("a_really_long_recording_name")
    assert lease_tag(job) == "AudioProcessing-Transcription(whisper)-a_really_long_record"
    assert lease_tag(None) == "AudioProcessing-JobQueue"


def test_blank_transcript_keeps_precomputed_chunks(tmp_path, make_scheduler):
    path = make_recording(tmp_path, "quiet.m4a", 185)
    chunks = ChunkingEngine(FakeProbe(), FakeExporter()).chunk(path, ByDuration(max_seconds=100)).chunks
    settings = Settings(processing=ProcessingConfig(no_speech_placeholder=""))
    scheduler = make_scheduler(FakeCapability(result=TranscriptionResult(text="")), settings=settings)

    scheduler.enqueue_transcription("quiet.m4a", "whisper", chunks=chunks)
    scheduler.process_next()

    assert scheduler.jobs[0].error == NO_CONTENT_MESSAGE
    assert all(Path(c.chunk_path).exists() for c in chunks)


def test_job_running_in_another_worker_is_left_alone(tmp_path, make_scheduler):
    make_recording(tmp_path, "a.m4a", 10)
    make_recording(tmp_path, "b.m4a", 10)
    observed = []

    def submit_from_second_worker(_path):
        second = make_scheduler(FakeCapability())
        observed.append(second.get_job_status(first.id))
        try:
            second.enqueue_transcription("b.m4a", "whisper")
        except JobAlreadyRunning as e:
            observed.append(e.job_id)

    scheduler = make_scheduler(FakeCapability(on_call=submit_from_second_worker))
    first = scheduler.enqueue_transcription("a.m4a", "whisper")
    scheduler.process_next()

    assert observed == [JobStatus.PROCESSING, first.id]
    assert scheduler.get_job_status(first.id) is JobStatus.COMPLETED
    assert [j.recording_name for j in _store(tmp_path).list_jobs()] == ["a"]


def test_queue_waits_for_a_live_worker(tmp_path, make_scheduler, capability):
    make_recording(tmp_path, "b.m4a", 10)
    store = _store(tmp_path)
    running = _job("a").started(worker_id())
    store.create_job(running)
    store.create_job(_job("b"))

    scheduler = make_scheduler(capability)
    scheduler.process_next()

    assert scheduler.get_job_status(running.id) is JobStatus.PROCESSING
    assert [j.status for j in store.list_jobs()] == [JobStatus.PROCESSING, JobStatus.QUEUED]
    assert capability.calls == []
    with pytest.raises(JobAlreadyRunning):
        scheduler.enqueue_transcription("b.m4a", "whisper")


def test_lease_follows_the_running_job(tmp_path, make_scheduler):
    make_recording(tmp_path, "a.m4a", 10)
    make_recording(tmp_path, "b.m4a", 10)
    tags = []
    scheduler = make_scheduler(FakeCapability(on_call=lambda _p: tags.append(scheduler.budget.tag)))

    first = scheduler.enqueue_transcription("a.m4a", "whisper")
    second = scheduler.enqueue_transcription("b.m4a", "whisper")
    scheduler.process_next()

    assert tags == [lease_tag(first), lease_tag(second)]
