"""chunkscribe transcribe / summarize — queue jobs."""

from __future__ import annotations

from pathlib import Path

import click

from chunkscribe.errors import ChunkscribeError
from chunkscribe.models.job import TranscriptionEngine
from chunkscribe.utils.progress import log_error, log_success

ENGINES = [e.value for e in TranscriptionEngine if e is not TranscriptionEngine.NOT_CONFIGURED]


@click.command()
@click.argument("recording", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--engine", "-e",
    default=TranscriptionEngine.WHISPER.value,
    type=click.Choice(ENGINES),
    help="Transcription engine",
)
@click.option("--run", "run_now", is_flag=True, help="Process the queue right away")
@click.pass_obj
def transcribe_cmd(root: Path, recording: str, engine: str, run_now: bool) -> None:
    """Queue a transcription job for RECORDING."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root)
    try:
        job = scheduler.enqueue_transcription(recording, engine)
    except (ChunkscribeError, ValueError) as e:
        log_error(str(e))
        raise SystemExit(1)

    log_success(f"Queued {job.kind.display_name} for {job.recording_name} ({job.id})")
    if run_now:
        from chunkscribe.cli.run_cmd import drain

        drain(scheduler)


@click.command()
@click.argument("recording", type=click.Path(dir_okay=False))
@click.option(
    "--engine", "-e",
    default="local",
    help="Summarization engine (claude, local)",
)
@click.option("--run", "run_now", is_flag=True, help="Process the queue right away")
@click.pass_obj
def summarize_cmd(root: Path, recording: str, engine: str, run_now: bool) -> None:
    """Queue a summarization job for an already transcribed RECORDING."""
    from chunkscribe.service import build_scheduler

    scheduler = build_scheduler(root)
    if engine not in scheduler.registry.summarization_engines:
        log_error(
            f"Unknown summarization engine '{engine}'. "
            f"Available: {', '.join(scheduler.registry.summarization_engines)}"
        )
        raise SystemExit(1)

    try:
        job = scheduler.enqueue_summarization(recording, engine)
    except (ChunkscribeError, ValueError) as e:
        log_error(str(e))
        raise SystemExit(1)

    log_success(f"Queued {job.kind.display_name} for {job.recording_name} ({job.id})")
    if run_now:
        from chunkscribe.cli.run_cmd import drain

        drain(scheduler)
