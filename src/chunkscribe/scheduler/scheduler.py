"""Serial job scheduler: one processing job at a time, FIFO with replacement.

The scheduler owns the in-memory job list and the current-job pointer. All
mutations happen under one re-entrant lock and are mirrored to the job store
before they are considered durable. Job work itself (chunking, transcription,
summarization) runs outside the lock; cancellation and budget suspension are
observed at checkpoints between chunks.
"""

from __future__ import annotations

import os
import socket
import threading
import time
import traceback
from datetime import datetime, timezone
from functools import partial
from pathlib import Path

from chunkscribe.capabilities.registry import CapabilityRegistry
from chunkscribe.chunking.engine import ChunkingEngine
from chunkscribe.errors import (
    Cancelled,
    CapabilityFailure,
    ChunkscribeError,
    FileNotFound,
    JobAlreadyRunning,
)
from chunkscribe.models.chunk import AudioChunk
from chunkscribe.models.config import Settings
from chunkscribe.models.job import (
    CANCELLED_MESSAGE,
    INTERRUPTED_MESSAGE,
    NO_CONTENT_MESSAGE,
    TERMINATED_MESSAGE,
    JobKind,
    JobStatus,
    ProcessingJob,
    TranscriptionEngine,
)
from chunkscribe.models.summary import StoredSummary, TitleItem
from chunkscribe.models.transcript import FinalTranscript, TranscriptChunk
from chunkscribe.notify import NotificationSender, notify_safely
from chunkscribe.processing.content import classify_content, fallback_title
from chunkscribe.processing.processor import ChunkProcessor
from chunkscribe.processing.reassembly import TranscriptReassembler
from chunkscribe.scheduler.budget import ExecutionBudgetMonitor
from chunkscribe.scheduler.lifecycle import LifecycleEvent, LifecycleSignals
from chunkscribe.store.job_store import JobStore
from chunkscribe.store.transcripts import TranscriptRepository
from chunkscribe.utils.io import write_atomic
from chunkscribe.utils.progress import (
    log,
    log_error,
    log_step,
    log_success,
    log_warning,
    show_error_report,
)

QUEUE_LEASE_TAG = "AudioProcessing-JobQueue"


def lease_tag(job: ProcessingJob | None) -> str:
    """Descriptive execution-lease tag for diagnostics."""
    if job is None:
        return QUEUE_LEASE_TAG
    kind = job.kind.display_name.replace(" ", "")
    return f"AudioProcessing-{kind}-{job.recording_name[:20]}"


def worker_id() -> str:
    """Owner token stamped on the jobs this process starts."""
    return f"{socket.gethostname()}:{os.getpid()}"


def owner_alive(owner: str | None) -> bool:
    """Whether the worker that started a job may still be running it.

    Workers on another host cannot be checked and count as alive.
    """
    if not owner:
        return False
    host, _, pid = owner.rpartition(":")
    if host != socket.gethostname():
        return True
    try:
        pid = int(pid)
    except ValueError:
        return False
    if pid == os.getpid() or os.name == "nt":
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class JobScheduler:
    """Queue of transcription and summarization jobs for one recordings root.

    Construct once per process with its collaborators injected. On
    construction the queue is rehydrated from the store and stale jobs are
    timed out. Jobs left in ``processing`` by a worker that has exited are
    marked interrupted so ``resume_interrupted_jobs`` can pick them up;
    jobs a live worker still holds keep blocking new submissions.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        store: JobStore,
        chunking: ChunkingEngine,
        registry: CapabilityRegistry,
        transcripts: TranscriptRepository,
        processor: ChunkProcessor | None = None,
        reassembler: TranscriptReassembler | None = None,
        notifier: NotificationSender | None = None,
        budget: ExecutionBudgetMonitor | None = None,
        signals: LifecycleSignals | None = None,
        settings: Settings | None = None,
        logs_dir: Path | str | None = None,
    ):
        self.root = Path(root).resolve()
        self.settings = settings or Settings()
        self.store = store
        self.chunking = chunking
        self.registry = registry
        self.transcripts = transcripts
        self.processor = processor or ChunkProcessor(self.settings.processing)
        self.reassembler = reassembler or TranscriptReassembler()
        self.notifier = notifier
        self.budget = budget or ExecutionBudgetMonitor(config=self.settings.budget)
        self.budget.on_force_suspend = self.suspend_active
        self.logs_dir = Path(logs_dir) if logs_dir else None
        self.owner = worker_id()

        self._lock = threading.RLock()
        self._jobs: list[ProcessingJob] = []
        self._current_id: str | None = None
        self._draining = False
        self._suspended = False
        self._worker: threading.Thread | None = None

        if signals is not None:
            signals.connect(LifecycleEvent.BACKGROUND, self.on_background)
            signals.connect(LifecycleEvent.FOREGROUND, self.on_foreground)
            signals.connect(LifecycleEvent.TERMINATE, self.on_terminate)

        self._rehydrate()

    # -- queries -------------------------------------------------------------

    @property
    def jobs(self) -> list[ProcessingJob]:
        with self._lock:
            return list(self._jobs)

    @property
    def current_job(self) -> ProcessingJob | None:
        with self._lock:
            if self._current_id is None:
                return None
            return self._find(self._current_id)

    @property
    def queued_jobs(self) -> list[ProcessingJob]:
        with self._lock:
            return [j for j in self._jobs if j.status is JobStatus.QUEUED]

    @property
    def is_draining(self) -> bool:
        return self._draining

    def get_job_status(self, job_id: str) -> JobStatus | None:
        job = self._find(job_id)
        return job.status if job else None

    def get_job_progress(self, job_id: str) -> float | None:
        job = self._find(job_id)
        return job.progress if job else None

    # -- submission ----------------------------------------------------------

    def enqueue_transcription(
        self,
        recording: Path | str,
        engine: TranscriptionEngine | str,
        chunks: list[AudioChunk] | None = None,
    ) -> ProcessingJob:
        """Queue a transcription, replacing any earlier job for the same target.

        Raises:
            JobAlreadyRunning: another job is processing
        """
        relative = self.relative_path(recording)
        job = ProcessingJob(
            kind=JobKind.transcription(engine),
            recording_path=relative,
            recording_name=Path(relative).stem,
            chunks=chunks,
        )

        with self._lock:
            self._ensure_idle()
            for existing in [j for j in self._jobs if j.same_target(job)]:
                log_step(
                    "Queue",
                    f"Replacing {existing.status.value} job {existing.id[:8]} "
                    f"for {existing.recording_name}",
                )
                self._remove(existing.id)
            self._add(job)

        log_step("Queue", f"{job.kind.display_name}: {job.recording_name} queued ({job.id[:8]})")
        return job

    def enqueue_summarization(self, recording: Path | str, engine: str) -> ProcessingJob:
        """Queue a summarization unless one for the same target is pending.

        Returns the existing job when it is already queued or processing.

        Raises:
            JobAlreadyRunning: another job is processing
        """
        relative = self.relative_path(recording)
        job = ProcessingJob(
            kind=JobKind.summarization(engine),
            recording_path=relative,
            recording_name=Path(relative).stem,
        )

        with self._lock:
            self._ensure_idle()
            for existing in self._jobs:
                if existing.same_target(job) and not existing.status.is_terminal:
                    log_step(
                        "Queue",
                        f"{job.kind.display_name} for {job.recording_name} already "
                        f"{existing.status.value}, not adding another",
                    )
                    return existing
            self._add(job)

        log_step("Queue", f"{job.kind.display_name}: {job.recording_name} queued ({job.id[:8]})")
        return job

    # -- processing ----------------------------------------------------------

    def process_next(self) -> None:
        """Drain the queue in FIFO order on the calling thread.

        Each job is marked processing, run to completion or failure, then the
        next queued job is taken. When the queue is empty the current-job
        pointer is cleared and the execution lease released. Returns early
        when the budget monitor asked for a stop or suspended a job, and
        does not start while another worker on the same store holds a
        processing job.
        """
        with self._lock:
            if self._draining:
                log_step("Queue", "Already processing, not starting a second worker")
                return
            self._draining = True
            self._suspended = False

        try:
            while True:
                with self._lock:
                    if self._suspended:
                        log_warning("Execution budget exhausted, remaining jobs stay queued")
                        break
                    if self.budget.lease_held and self.budget.graceful_stop_requested:
                        log_warning("Execution budget nearly exhausted, not starting another job")
                        break
                    self._sync_shared()
                    busy = self._processing_job()
                    if busy is not None:
                        log_warning(
                            f"{busy.recording_name} is being processed by another worker, "
                            "not starting"
                        )
                        break
                    job = self._next_queued()
                    if job is None:
                        break
                    job = job.started(self.owner)
                    self._current_id = job.id
                    self._persist(job)
                    if self.budget.lease_held:
                        self.budget.retag(lease_tag(job))
                    else:
                        self.budget.begin_lease(lease_tag(job))

                self._run(job)

                with self._lock:
                    if self._current_id == job.id:
                        self._current_id = None
        finally:
            with self._lock:
                self._current_id = None
                self._draining = False
            self.budget.end_lease()

    def run_in_background(self) -> threading.Thread | None:
        """Drain the queue on a worker thread. No-op when already draining."""
        with self._lock:
            if self._draining or (self._worker is not None and self._worker.is_alive()):
                return None
            if not self.queued_jobs:
                return None
            self._worker = threading.Thread(
                target=self.process_next,
                name="chunkscribe-worker",
                daemon=True,
            )
            self._worker.start()
            return self._worker

    def wait(self, timeout: float | None = None) -> None:
        """Block until the background worker finishes."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    # -- cancellation --------------------------------------------------------

    def cancel_active(self) -> ProcessingJob | None:
        """Fail the current job as cancelled; the rest of the queue still runs."""
        job = self._stop_current(CANCELLED_MESSAGE)
        if job is None:
            log_step("Queue", "No active job to cancel")
        else:
            log_warning(f"Cancelled {job.kind.display_name} for {job.recording_name}")
        return job

    def suspend_active(self) -> ProcessingJob | None:
        """Budget-forced suspension: the current job fails as interrupted.

        Interrupted jobs are requeued by ``resume_interrupted_jobs``.
        """
        with self._lock:
            self._suspended = True
            job = self._stop_current(INTERRUPTED_MESSAGE)
        if job is not None:
            log_warning(f"Suspended {job.kind.display_name} for {job.recording_name}")
            notify_safely(
                self.notifier,
                "Processing Paused",
                f"{job.recording_name} will resume when the app is active.",
                identifier=f"paused_{job.id}",
            )
        return job

    def cancel_all_jobs(self) -> int:
        """Fail every queued or processing job as cancelled."""
        with self._lock:
            pending = [j for j in self._jobs if not j.status.is_terminal]
            for job in pending:
                self._persist(job.failed(CANCELLED_MESSAGE))
            self._current_id = None
        self.budget.end_lease()
        if pending:
            log_warning(f"Cancelled {len(pending)} jobs")
        return len(pending)

    # -- maintenance ---------------------------------------------------------

    def cleanup_stale_jobs(self, now: datetime | None = None) -> list[ProcessingJob]:
        """Time out jobs that have been processing longer than the threshold."""
        now = now or datetime.now(timezone.utc)
        threshold = self.settings.scheduler.stale_threshold_seconds
        timed_out: list[ProcessingJob] = []

        with self._lock:
            for job in [j for j in self._jobs if j.status is JobStatus.PROCESSING]:
                elapsed = (now - job.start_time).total_seconds()
                if elapsed <= threshold:
                    continue
                failed = job.failed(f"Job timed out after {int(elapsed // 60)} minutes")
                self._persist(failed)
                timed_out.append(failed)
                if self._current_id == job.id:
                    self._current_id = None

        for job in timed_out:
            log_warning(f"{job.recording_name}: {job.error}")
        return timed_out

    def resume_interrupted_jobs(self) -> list[ProcessingJob]:
        """Requeue jobs suspended by the execution budget.

        Only one job per recording survives; duplicates are deleted.
        """
        resumed: list[ProcessingJob] = []
        with self._lock:
            seen: set[str] = set()
            for job in [j for j in self._jobs if j.is_interrupted]:
                if job.recording_path in seen:
                    log_step("Resume", f"Dropping duplicate interrupted job for {job.recording_name}")
                    self._remove(job.id)
                    continue
                seen.add(job.recording_path)
                requeued = job.requeued()
                self._persist(requeued)
                resumed.append(requeued)

        if resumed:
            log_step("Resume", f"Requeued {len(resumed)} interrupted jobs")
        return resumed

    def remove_completed_jobs(self) -> int:
        """Forget every completed or failed job."""
        with self._lock:
            finished = [j for j in self._jobs if j.status.is_terminal]
            for job in finished:
                self._remove(job.id)
        if finished:
            log_step("Queue", f"Removed {len(finished)} completed/failed jobs")
        return len(finished)

    def clear_all_jobs(self) -> int:
        """Delete every job, whatever its state."""
        with self._lock:
            count = len(self._jobs)
            for job in list(self._jobs):
                self._remove(job.id)
            self._current_id = None
        self.budget.end_lease()
        log_step("Queue", f"Cleared {count} jobs")
        return count

    # -- lifecycle -----------------------------------------------------------

    def on_background(self) -> None:
        with self._lock:
            job = self.current_job
            queued = len(self.queued_jobs)
            if job is not None:
                self.budget.begin_lease(lease_tag(job))

        if job is not None:
            notify_safely(
                self.notifier,
                "Processing in Background",
                f"Continuing to process {job.recording_name}",
            )
        elif queued:
            notify_safely(
                self.notifier,
                "Jobs Queued",
                "Your audio processing will continue when you return to the app.",
            )

    def on_foreground(self) -> None:
        self.cleanup_stale_jobs()
        self.resume_interrupted_jobs()
        if not self._draining:
            self.run_in_background()

    def on_terminate(self) -> None:
        job = self._stop_current(TERMINATED_MESSAGE)
        if job is not None:
            log_warning(f"{job.recording_name}: {TERMINATED_MESSAGE}")

    # -- paths ---------------------------------------------------------------

    def relative_path(self, recording: Path | str) -> str:
        """Recording path relative to the root, as stored on jobs."""
        path = Path(recording)
        if not path.is_absolute():
            path = self.root / path
        path = path.resolve()
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            raise ValueError(f"{recording} is outside the recordings root {self.root}") from None

    # -- job execution -------------------------------------------------------

    def _run(self, job: ProcessingJob) -> None:
        log(f"[bold]{job.kind.display_name}[/bold] — {job.recording_name}")
        try:
            if job.kind.type == "transcription":
                self._run_transcription(job)
            else:
                self._run_summarization(job)
        except Cancelled as e:
            log_warning(f"{job.recording_name}: stopped ({e})")
        except Exception as e:
            self._fail(job.id, e)

    def _run_transcription(self, job: ProcessingJob) -> None:
        recording = job.resolve(self.root)
        if not recording.exists():
            raise FileNotFound(f"Recording not found: {recording}")
        capability = self.registry.transcription(job.kind.engine)
        checkpoint = partial(self._checkpoint, job.id)

        self._set_progress(job.id, 0.1)
        precomputed = bool(job.chunks)
        if precomputed:
            chunks = list(job.chunks)
            log_step("Chunk", f"Using {len(chunks)} precomputed chunks")
        else:
            strategy = self.settings.limits_for(job.kind.engine)
            chunks = self.chunking.chunk(recording, strategy, checkpoint=checkpoint).chunks
        self._set_progress(job.id, 0.2)

        try:
            results = self.processor.process_all(
                chunks,
                capability,
                on_progress=partial(self._on_chunk_progress, job.id),
                checkpoint=checkpoint,
                baseline=0.2,
                span=0.7,
            )
        except Exception:
            if not precomputed:
                self.chunking.cleanup_chunks(chunks)
            raise

        transcript = self._assemble(job, results)
        if not any(r.has_content for r in results) or not transcript.text.strip():
            notify_safely(
                self.notifier,
                "Transcription Failed",
                f"No transcript content was generated for {job.recording_name}",
            )
            if not precomputed:
                self.chunking.cleanup_chunks(chunks)
            raise ChunkscribeError(NO_CONTENT_MESSAGE)

        self._checkpoint(job.id)
        path = self.transcripts.save_transcript(transcript)
        log_step("Save", f"Transcript → {path}")
        self.chunking.cleanup_chunks(chunks)

        self._complete(job.id)
        log_success(f"Transcribed {job.recording_name} ({len(transcript.segments)} segments)")
        notify_safely(
            self.notifier,
            "Transcription Complete",
            f"Successfully transcribed {job.recording_name}",
            identifier=f"complete_{job.id}",
        )

    def _assemble(self, job: ProcessingJob, results: list[TranscriptChunk]) -> FinalTranscript:
        if len(results) > 1:
            transcript = self.reassembler.reassemble(
                results,
                recording_path=job.recording_path,
                recording_name=job.recording_name,
                engine=job.kind.engine,
            )
        else:
            single = results[0]
            transcript = FinalTranscript(
                recording_path=job.recording_path,
                recording_name=job.recording_name,
                engine=job.kind.engine,
                duration_seconds=single.end_time,
                segments=single.segments,
                text=single.transcript,
                speakers={s.speaker: s.speaker for s in single.segments},
                chunk_count=1,
            )
        transcript.title = fallback_title(transcript.text, job.recording_path)
        return transcript

    def _run_summarization(self, job: ProcessingJob) -> None:
        capability = self.registry.summarization(job.kind.engine)
        transcript = self.transcripts.load_transcript(job.recording_path)
        self._set_progress(job.id, 0.3)
        self._checkpoint(job.id)

        started = time.monotonic()
        try:
            result = capability.summarize(transcript.text)
        except ChunkscribeError:
            raise
        except Exception as e:
            raise CapabilityFailure(f"Summarization failed for {capability.name}", wrapped=e) from e
        elapsed = time.monotonic() - started

        content_type = result.content_type or classify_content(transcript.text)
        titles = result.titles or [
            TitleItem(text=fallback_title(transcript.text, job.recording_path), confidence=0.5)
        ]
        self._set_progress(job.id, 0.8)

        summary = StoredSummary(
            recording_path=job.recording_path,
            recording_name=job.recording_name,
            engine=capability.name,
            summary=result.summary,
            tasks=result.tasks,
            reminders=result.reminders,
            titles=titles,
            content_type=content_type,
            original_length=len(transcript.text.split()),
            processing_time=elapsed,
        )
        self._checkpoint(job.id)
        path = self.transcripts.save_summary(summary)
        log_step("Save", f"Summary → {path}")

        self._complete(job.id)
        body = f"Successfully summarized {job.recording_name}"
        if summary.tasks:
            body += f" • {len(summary.tasks)} tasks"
        if summary.reminders:
            body += f" • {len(summary.reminders)} reminders"
        log_success(body)
        notify_safely(self.notifier, "Summarization Complete", body, identifier=f"complete_{job.id}")

    # -- state transitions ---------------------------------------------------

    def _checkpoint(self, job_id: str) -> None:
        with self._lock:
            if self._current_id != job_id:
                job = self._find(job_id)
                reason = job.error if job is not None and job.error else "no longer the active job"
                raise Cancelled(reason)

    def _set_progress(self, job_id: str, progress: float) -> ProcessingJob:
        with self._lock:
            self._checkpoint(job_id)
            job = self._find(job_id).with_progress(progress)
            self._persist(job)
            return job

    def _on_chunk_progress(self, job_id: str, progress: float, index: int, total: int) -> None:
        job = self._set_progress(job_id, progress)
        log_step("Progress", f"Chunk {index + 1}/{total} ({job.progress:.0%})")
        if index in {0, total // 2, total - 1}:
            notify_safely(
                self.notifier,
                f"Processing {job.kind.display_name}",
                f"{job.recording_name} - {int(job.progress * 100)}% complete",
                identifier=f"progress_{job.id}",
                metadata={
                    "job_id": job.id,
                    "job_type": job.kind.display_name,
                    "progress": job.progress,
                },
            )

    def _complete(self, job_id: str) -> None:
        with self._lock:
            self._checkpoint(job_id)
            self._persist(self._find(job_id).completed())

    def _fail(self, job_id: str, error: BaseException) -> None:
        with self._lock:
            job = self._find(job_id)
            if job is None or self._current_id != job_id or job.status is not JobStatus.PROCESSING:
                log_step("Queue", f"Job {job_id[:8]} already stopped, keeping its state")
                return
            job = job.failed(str(error))
            self._persist(job)

        log_error(f"{job.kind.display_name} failed for {job.recording_name}: {error}")
        self._report_failure(job, error)
        notify_safely(
            self.notifier,
            "Processing Failed",
            f"Failed to process {job.recording_name}: {error}",
            identifier=f"failed_{job.id}",
        )

    def _stop_current(self, reason: str) -> ProcessingJob | None:
        with self._lock:
            job = self.current_job
            if job is None:
                return None
            job = job.failed(reason)
            self._persist(job)
            self._current_id = None
        self.budget.end_lease()
        return job

    def _report_failure(self, job: ProcessingJob, error: BaseException) -> None:
        recording = job.resolve(self.root)
        details = {
            "Job ID": job.id,
            "Job type": job.kind.display_name,
            "Recording": job.recording_name,
            "Path": str(recording),
            "File exists": recording.exists(),
            "Error type": type(error).__name__,
            "Description": str(error),
        }
        wrapped = getattr(error, "wrapped", None) or error.__cause__
        if wrapped is not None:
            details["Wrapped"] = f"{type(wrapped).__name__}: {wrapped}"

        show_error_report(f"Job failed: {job.recording_name}", details)

        if self.logs_dir is None:
            return
        lines = [f"{key}: {value}" for key, value in details.items()]
        lines.append(f"Date: {datetime.now(timezone.utc).isoformat()}")
        lines.append("")
        lines.extend(traceback.format_exception(type(error), error, error.__traceback__))
        try:
            write_atomic(self.logs_dir / f"{job.id}.log", "\n".join(lines))
        except OSError as e:
            log_warning(f"Could not write error log for {job.id}: {e}")

    # -- bookkeeping ---------------------------------------------------------

    def _rehydrate(self) -> None:
        with self._lock:
            self._jobs = self.store.list_jobs()
        self.cleanup_stale_jobs()

        with self._lock:
            orphans = self._release_orphans()
            running = self._processing_job()

        if self._jobs:
            log_step(
                "Queue",
                f"Loaded {len(self._jobs)} jobs ({len(self.queued_jobs)} queued, "
                f"{len(orphans)} interrupted by a previous run)",
            )
        if running is not None:
            log_step("Queue", f"{running.recording_name} is being processed by {running.owner}")

    def _release_orphans(self) -> list[ProcessingJob]:
        """Mark jobs whose worker has exited as interrupted."""
        orphans = [
            j for j in self._jobs
            if j.status is JobStatus.PROCESSING
            and j.id != self._current_id
            and not owner_alive(j.owner)
        ]
        for job in orphans:
            self._persist(job.failed(INTERRUPTED_MESSAGE))
        return orphans

    def _sync_shared(self) -> None:
        """Refresh jobs other workers on the same store may be running."""
        stored = {j.id: j for j in self.store.list_jobs()}
        for job in list(self._jobs):
            if job.id == self._current_id or job.status.is_terminal:
                continue
            latest = stored.get(job.id)
            if latest is None:
                self._jobs = [j for j in self._jobs if j.id != job.id]
            elif latest != job:
                self._jobs = [latest if j.id == job.id else j for j in self._jobs]
        known = {j.id for j in self._jobs}
        for job in stored.values():
            if job.status is JobStatus.PROCESSING and job.id not in known:
                self._jobs.append(job)
        self._release_orphans()

    def _processing_job(self) -> ProcessingJob | None:
        for job in self._jobs:
            if job.status is JobStatus.PROCESSING:
                return job
        return None

    def _ensure_idle(self) -> None:
        if self._current_id is not None:
            raise JobAlreadyRunning(self._current_id)
        self._sync_shared()
        job = self._processing_job()
        if job is not None:
            raise JobAlreadyRunning(job.id)

    def _next_queued(self) -> ProcessingJob | None:
        for job in self._jobs:
            if job.status is JobStatus.QUEUED:
                return job
        return None

    def _find(self, job_id: str) -> ProcessingJob | None:
        with self._lock:
            for job in self._jobs:
                if job.id == job_id:
                    return job
        return None

    def _add(self, job: ProcessingJob) -> None:
        self._jobs.append(job)
        self.store.create_job(job)

    def _persist(self, job: ProcessingJob) -> None:
        for i, existing in enumerate(self._jobs):
            if existing.id == job.id:
                self._jobs[i] = job
                break
        else:
            self._jobs.append(job)
        self.store.update_job(job)

    def _remove(self, job_id: str) -> None:
        self._jobs = [j for j in self._jobs if j.id != job_id]
        self.store.delete_job(job_id)
