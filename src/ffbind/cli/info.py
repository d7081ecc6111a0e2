"""CLI info command: analyse a media file."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from ffbind.cli.exit_codes import ExitCode
from ffbind.cli.output import error_exit
from ffbind.cli.setup import init_native
from ffbind.config import FfbindConfig

logger = logging.getLogger(__name__)


def run_info(
    file: str,
    config: FfbindConfig,
    *,
    output_format: str = "human",
    decode: bool | None = None,
) -> None:
    """Analyse FILE and print the report; exits on failure.

    Args:
        file: Path or URL of the media file.
        config: Effective configuration.
        output_format: "human" or "json".
        decode: Override config.probe.decode_first_frame.
    """
    json_output = output_format == "json"
    file_path = Path(file)

    # URLs and devices are passed through; only plain paths are checked
    if "://" not in file and not file_path.exists():
        error_exit(f"File not found: {file_path}", ExitCode.TARGET_NOT_FOUND, json_output)

    init_native(config, json_output)

    from ffbind.introspect import analyze, format_human, format_json
    from ffbind.util.error import Error

    try:
        report = analyze(file, config, decode=decode)
    except Error as e:
        logger.debug("Analysis of %s failed", file, exc_info=True)
        error_exit(f"Could not parse file: {file}\nReason: {e}", ExitCode.PARSE_ERROR, json_output)

    if json_output:
        click.echo(format_json(report))
    else:
        click.echo(format_human(report))


@click.command("info")
@click.argument("file", type=str)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.option(
    "--no-decode",
    is_flag=True,
    default=False,
    help="Skip the first frame decoding test.",
)
@click.pass_context
def info_command(ctx: click.Context, file: str, output_format: str, no_decode: bool) -> None:
    """Analyse a media file: container, streams, frame estimate, first frame.

    FILE is the path (or URL) of the media file to analyse.
    """
    config: FfbindConfig = ctx.obj["config"]
    run_info(file, config, output_format=output_format, decode=False if no_decode else None)
