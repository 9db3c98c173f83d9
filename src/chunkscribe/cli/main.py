"""Root CLI group for chunkscribe."""

from __future__ import annotations

from pathlib import Path

import click

from chunkscribe import __version__


@click.group()
@click.version_option(version=__version__, prog_name="chunkscribe")
@click.option(
    "--root", "-r",
    default=".",
    type=click.Path(file_okay=False),
    help="Recordings root; job data lives in <root>/.chunkscribe",
)
@click.pass_context
def cli(ctx: click.Context, root: str) -> None:
    """chunkscribe — chunked background transcription of long recordings."""
    ctx.obj = Path(root).resolve()


# Import and register subcommands
from chunkscribe.cli.queue_cmd import summarize_cmd, transcribe_cmd  # noqa: E402
from chunkscribe.cli.run_cmd import resume_cmd, run_cmd  # noqa: E402
from chunkscribe.cli.status_cmd import status_cmd  # noqa: E402
from chunkscribe.cli.manage_cmd import cancel_cmd, cleanup_cmd  # noqa: E402
from chunkscribe.cli.probe_cmd import probe_cmd  # noqa: E402

cli.add_command(transcribe_cmd, "transcribe")
cli.add_command(summarize_cmd, "summarize")
cli.add_command(run_cmd, "run")
cli.add_command(resume_cmd, "resume")
cli.add_command(status_cmd, "status")
cli.add_command(cleanup_cmd, "cleanup")
cli.add_command(cancel_cmd, "cancel")
cli.add_command(probe_cmd, "probe")
