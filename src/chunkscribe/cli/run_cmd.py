"""chunkscribe run / resume — drain the job queue."""

from __future__ import annotations

from pathlib import Path

import click

from chunkscribe.models.job import JobStatus
from chunkscribe.utils.progress import log, log_warning

BUDGET_OPTION = click.option(
    "--budget", "-b",
    default=None,
    type=click.FloatRange(min=0),
    help="Execution budget in seconds (default: unlimited)",
)


@click.command()
@BUDGET_OPTION
@click.pass_obj
def run_cmd(root: Path, budget: float | None) -> None:
    """Process queued jobs until the queue is empty or the budget runs out."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root, budget_seconds=budget)
    drain(scheduler)


@click.command()
@BUDGET_OPTION
@click.pass_obj
def resume_cmd(root: Path, budget: float | None) -> None:
    """Time out stale jobs, requeue interrupted ones, then process the queue."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root, budget_seconds=budget)
    scheduler.cleanup_stale_jobs()
    scheduler.resume_interrupted_jobs()
    drain(scheduler)


def drain(scheduler) -> None:
    """Process the queue on the worker thread; Ctrl-C terminates the active job."""
    queued = len(scheduler.queued_jobs)
    if not queued:
        log("[dim]No queued jobs[/dim]")
        return

    log(f"Processing {queued} queued job(s)")
    worker = scheduler.run_in_background()
    try:
        while worker is not None and worker.is_alive():
            worker.join(0.5)
    except KeyboardInterrupt:
        scheduler.on_terminate()
        log_warning("Interrupted")
        raise SystemExit(130)

    failed = [j for j in scheduler.jobs if j.status is JobStatus.FAILED]
    remaining = len(scheduler.queued_jobs)
    log(f"Done: {len(failed)} failed, {remaining} still queued")
    if remaining:
        log_warning("Run again (or `chunkscribe resume`) to continue")
