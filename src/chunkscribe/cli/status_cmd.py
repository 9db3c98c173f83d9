"""chunkscribe status — show the job queue."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from chunkscribe.models.config import load_settings
from chunkscribe.service import data_dir
from chunkscribe.store.job_store import YamlJobStore

console = Console()

STATUS_ICONS = {
    "queued": "[dim]○[/dim]",
    "processing": "[yellow]◑[/yellow]",
    "completed": "[green]●[/green]",
    "failed": "[red]✗[/red]",
}


@click.command()
@click.pass_obj
def status_cmd(root: Path) -> None:
    """Show every job known for this recordings root."""
    settings = load_settings(root)
    store = YamlJobStore(data_dir(root, settings) / settings.scheduler.jobs_filename)
    jobs = store.list_jobs()

    if not jobs:
        console.print("[dim]No jobs[/dim]")
        return

    table = Table(title="Jobs", show_lines=True)
    table.add_column("ID", style="dim")
    table.add_column("Job", style="bold")
    table.add_column("Recording")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Started")
    table.add_column("Notes")

    for job in jobs:
        icon = STATUS_ICONS.get(job.status.value, "?")
        started = job.start_time.astimezone().strftime("%m-%d %H:%M:%S")
        notes = ""
        if job.error:
            colour = "yellow" if job.is_interrupted else "red"
            notes = f"[{colour}]{job.error[:60]}[/{colour}]"
        table.add_row(
            job.id[:8],
            job.kind.display_name,
            job.recording_path,
            f"{icon} {job.status.value}",
            f"{job.progress:.0%}",
            started,
            notes,
        )

    console.print(table)
