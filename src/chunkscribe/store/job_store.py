"""Job persistence."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol

from chunkscribe.models.job import JobStatus, ProcessingJob
from chunkscribe.utils.io import read_yaml, to_plain, write_yaml

STORE_VERSION = 1


class JobStore(Protocol):
    """Persistence collaborator for processing jobs.

    The scheduler's in-memory list is the source of truth within a process;
    the store mirrors every transition so the queue survives restarts.
    """

    def create_job(self, job: ProcessingJob) -> None: ...
    def update_job(self, job: ProcessingJob) -> None: ...
    def get_job(self, job_id: str) -> ProcessingJob | None: ...
    def list_jobs(self, status: JobStatus | None = None) -> list[ProcessingJob]: ...
    def delete_job(self, job_id: str) -> None: ...


class YamlJobStore:
    """All jobs in one YAML file, rewritten atomically on every change."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def create_job(self, job: ProcessingJob) -> None:
        self.update_job(job)

    def update_job(self, job: ProcessingJob) -> None:
        with self._lock:
            jobs = self._read()
            for i, existing in enumerate(jobs):
                if existing.id == job.id:
                    jobs[i] = job
                    break
            else:
                jobs.append(job)
            self._write(jobs)

    def get_job(self, job_id: str) -> ProcessingJob | None:
        with self._lock:
            for job in self._read():
                if job.id == job_id:
                    return job
        return None

    def list_jobs(self, status: JobStatus | None = None) -> list[ProcessingJob]:
        with self._lock:
            jobs = self._read()
        if status is not None:
            jobs = [j for j in jobs if j.status is status]
        return jobs

    def delete_job(self, job_id: str) -> None:
        with self._lock:
            jobs = self._read()
            remaining = [j for j in jobs if j.id != job_id]
            if len(remaining) != len(jobs):
                self._write(remaining)

    def _read(self) -> list[ProcessingJob]:
        if not self.path.exists():
            return []
        data = to_plain(read_yaml(self.path))
        return [ProcessingJob.model_validate(j) for j in data.get("jobs") or []]

    def _write(self, jobs: list[ProcessingJob]) -> None:
        write_yaml(self.path, {
            "version": STORE_VERSION,
            "jobs": [j.model_dump(mode="json") for j in jobs],
        })
