"""Standalone video-info entry point.

Equivalent to ``ffbind info FILE`` with the classic analyzer usage:

    video-info <video-file>
"""

from __future__ import annotations

import sys

import click

from ffbind.cli.exit_codes import ExitCode
from ffbind.cli.info import run_info
from ffbind.cli.setup import load_cli_config


@click.command("video-info")
@click.argument("file", required=False)
@click.pass_context
def main(ctx: click.Context, file: str | None) -> None:
    """Analyse a video file: metadata, streams, frame count, first frame."""
    if file is None:
        prog = ctx.info_name or "video-info"
        click.echo(f"Usage: {prog} <video-file>", err=True)
        click.echo(f"\nExample: {prog} sample.mp4", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    config = load_cli_config()
    run_info(file, config)
