"""chunkscribe cleanup / cancel — queue maintenance."""

from __future__ import annotations

from pathlib import Path

import click

from chunkscribe.utils.progress import log_success


@click.command()
@click.option("--completed", is_flag=True, help="Also remove completed and failed jobs")
@click.option("--all", "clear_all", is_flag=True, help="Delete every job")
@click.pass_obj
def cleanup_cmd(root: Path, completed: bool, clear_all: bool) -> None:
    """Time out stale jobs and optionally forget finished ones."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root)
    if clear_all:
        count = scheduler.clear_all_jobs()
        log_success(f"Deleted {count} jobs")
        return

    stale = scheduler.cleanup_stale_jobs()
    log_success(f"{len(stale)} stale jobs timed out")
    if completed:
        removed = scheduler.remove_completed_jobs()
        log_success(f"Removed {removed} completed/failed jobs")


@click.command()
@click.pass_obj
def cancel_cmd(root: Path) -> None:
    """Cancel every job that has not finished yet."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root)
    count = scheduler.cancel_all_jobs()
    log_success(f"Cancelled {count} jobs")
