"""CLI module for ffbind."""

import logging
from pathlib import Path

import click

from ffbind.cli.setup import load_cli_config

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="ffbind")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--native-log-level",
    type=click.Choice(
        ["quiet", "panic", "fatal", "error", "warning", "info", "verbose", "debug", "trace"],
        case_sensitive=False,
    ),
    default=None,
    help="FFmpeg's own log level (default: error).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    native_log_level: str | None,
) -> None:
    """ffbind - inspect, filter and transcode media with the FFmpeg libraries."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_cli_config(
            log_level=log_level,
            log_file=log_file,
            log_json=log_json,
            native_log_level=native_log_level,
        )
    logger.debug("Running %s", ctx.invoked_subcommand)


# Defer import to avoid circular dependency
def _register_commands():
    from ffbind.cli.catalog import codecs_command, filters_command, formats_command
    from ffbind.cli.info import info_command
    from ffbind.cli.transcode import transcode_command
    from ffbind.cli.version import version_command

    main.add_command(info_command)
    main.add_command(transcode_command)
    main.add_command(codecs_command)
    main.add_command(filters_command)
    main.add_command(formats_command)
    main.add_command(version_command)


_register_commands()
