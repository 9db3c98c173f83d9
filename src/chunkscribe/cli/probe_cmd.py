"""chunkscribe probe — inspect a recording against an engine's limits."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from chunkscribe.cli.queue_cmd import ENGINES
from chunkscribe.errors import ChunkscribeError
from chunkscribe.models.config import load_settings
from chunkscribe.models.job import TranscriptionEngine
from chunkscribe.utils.progress import log_error

console = Console()


@click.command()
@click.argument("recording", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--engine", "-e",
    default=TranscriptionEngine.WHISPER.value,
    type=click.Choice(ENGINES),
    help="Transcription engine whose limits apply",
)
@click.pass_obj
def probe_cmd(root: Path, recording: str, engine: str) -> None:
    """Report duration, size and whether RECORDING needs chunking."""
    from chunkscribe.chunking.engine import ChunkingEngine
    from chunkscribe.utils.ffmpeg import FFmpegChunkExporter
    from chunkscribe.utils.ffprobe import FFprobeAudioProbe

    settings = load_settings(root)
    probe = FFprobeAudioProbe()
    chunker = ChunkingEngine(probe, FFmpegChunkExporter(), settings.chunking)
    strategy = settings.limits_for(engine)

    try:
        info = probe.probe(recording)
        needs = chunker.should_chunk(recording, strategy)
    except ChunkscribeError as e:
        log_error(str(e))
        raise SystemExit(1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("File", Path(recording).name)
    table.add_row("Format", f"{info.format_short}, {info.sample_rate} Hz, {info.channels} ch")
    table.add_row("Duration", f"{info.duration_seconds:.1f}s")
    table.add_row("Size", f"{info.byte_size:,} bytes")
    table.add_row("Limits", f"{engine}: {strategy.description}")
    table.add_row("Chunking", "[yellow]needed[/yellow]" if needs else "[green]not needed[/green]")
    if needs:
        table.add_row("Seed chunk", f"{chunker.seed_duration(info, strategy):.1f}s")
    console.print(table)
