"""CLI transcode command: re-encode the video stream of a file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from ffbind.cli.exit_codes import ExitCode
from ffbind.cli.output import error_exit
from ffbind.cli.setup import init_native
from ffbind.config import FfbindConfig

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'settings'}: {item['msg']}"
        for item in error.errors()
    )


@click.command("transcode")
@click.argument("input_file", metavar="INPUT", type=click.Path(path_type=Path))
@click.argument("output_file", metavar="OUTPUT", type=click.Path(path_type=Path))
@click.option(
    "--video-codec",
    "-c",
    default="mpeg4",
    show_default=True,
    help="Video encoder name.",
)
@click.option("--bit-rate", "-b", default=None, help="Target bit rate, e.g. 2M or 800k.")
@click.option("--size", "-s", default=None, help="Output size WIDTHxHEIGHT.")
@click.option(
    "--filter",
    "filter_chain",
    default=None,
    help='Linear filter chain, e.g. "hflip,eq=brightness=0.1".',
)
@click.option(
    "--audio",
    type=click.Choice(["copy", "drop"]),
    default="copy",
    show_default=True,
    help="Copy audio streams unchanged or drop them.",
)
@click.option("--overwrite", "-y", is_flag=True, help="Replace OUTPUT if it exists.")
@click.pass_context
def transcode_command(
    ctx: click.Context,
    input_file: Path,
    output_file: Path,
    video_codec: str,
    bit_rate: str | None,
    size: str | None,
    filter_chain: str | None,
    audio: str,
    overwrite: bool,
) -> None:
    """Decode, filter and re-encode the video of INPUT into OUTPUT.

    The output container is chosen from the OUTPUT extension.
    """
    config: FfbindConfig = ctx.obj["config"]

    if not input_file.exists():
        error_exit(f"File not found: {input_file}", ExitCode.TARGET_NOT_FOUND)
    if output_file.exists() and not overwrite:
        error_exit(
            f"Output exists: {output_file} (use --overwrite to replace it)",
            ExitCode.INVALID_ARGUMENTS,
        )

    init_native(config)

    from ffbind.codec import EncoderSettings, find_encoder
    from ffbind.filter import parse_chain
    from ffbind.transcode import transcode
    from ffbind.util.error import Error, StreamNotFound

    try:
        settings = EncoderSettings(codec=video_codec, bit_rate=bit_rate, size=size)
    except ValidationError as e:
        error_exit(_validation_message(e), ExitCode.INVALID_ARGUMENTS)

    if filter_chain is not None:
        try:
            parse_chain(filter_chain)
        except ValueError as e:
            error_exit(f"Invalid filter chain: {e}", ExitCode.INVALID_ARGUMENTS)

    if find_encoder(settings.codec) is None:
        error_exit(f"Encoder not available: {settings.codec}", ExitCode.CODEC_NOT_AVAILABLE)

    try:
        result = transcode(
            input_file,
            output_file,
            settings,
            filter_chain=filter_chain,
            audio=audio,
            config=config,
        )
    except StreamNotFound as e:
        error_exit(str(e), ExitCode.NO_STREAMS_FOUND)
    except KeyboardInterrupt:
        logger.info("Transcode of %s interrupted", input_file)
        click.echo("\nTranscode interrupted; output is incomplete.", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    except Error as e:
        logger.debug("Transcode of %s failed", input_file, exc_info=True)
        error_exit(f"Transcode failed: {e}", ExitCode.OPERATION_FAILED)

    click.echo(
        f"Wrote {output_file}: {result.frames_encoded} frames, "
        f"{result.width}x{result.height} {settings.codec}, "
        f"{result.audio_packets} audio packets"
    )
