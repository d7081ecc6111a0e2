"""CLI commands listing what the linked FFmpeg provides."""

from __future__ import annotations

import json

import click

from ffbind.cli.setup import init_native
from ffbind.config import FfbindConfig


@click.command("codecs")
@click.option("--decoders", "kind", flag_value="decoder", help="List decoders only.")
@click.option("--encoders", "kind", flag_value="encoder", help="List encoders only.")
@click.option(
    "--type",
    "media_type",
    type=click.Choice(["video", "audio", "subtitle", "data"]),
    default=None,
    help="Only list codecs of this media type.",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def codecs_command(
    ctx: click.Context,
    kind: str | None,
    media_type: str | None,
    json_output: bool,
) -> None:
    """List available codecs.

    Each line shows D (decoder) or E (encoder), the media type, the name
    and the description.
    """
    config: FfbindConfig = ctx.obj["config"]
    init_native(config, json_output)

    from ffbind.codec import list_codecs
    from ffbind.util.media import MediaType

    codecs = list_codecs(kind, MediaType(media_type) if media_type else None)

    if json_output:
        data = [
            {
                "name": c.name,
                "long_name": c.long_name,
                "type": c.media_type.value,
                "direction": "decoder" if c.is_decoder else "encoder",
            }
            for c in codecs
        ]
        click.echo(json.dumps(data, indent=2))
        return

    for codec in codecs:
        direction = "D" if codec.is_decoder else "E"
        click.echo(f"{direction} {codec.media_type.value:<9} {codec.name:<24} {codec.long_name}")


@click.command("filters")
@click.argument("name", required=False)
@click.pass_context
def filters_command(ctx: click.Context, name: str | None) -> None:
    """List filters, or describe the filter NAME and its pads."""
    config: FfbindConfig = ctx.obj["config"]
    init_native(config)

    from ffbind.cli.exit_codes import ExitCode
    from ffbind.cli.output import error_exit
    from ffbind.filter import find, list_filters

    if name is None:
        for filter_name in list_filters():
            click.echo(filter_name)
        return

    info = find(name)
    if info is None:
        error_exit(f"Filter not found: {name}", ExitCode.TARGET_NOT_FOUND)
    click.echo(f"{info.name}: {info.description}")
    click.echo(f"  Inputs: {', '.join(info.inputs) or '(dynamic)'}")
    click.echo(f"  Outputs: {', '.join(info.outputs) or '(dynamic)'}")


@click.command("formats")
@click.option(
    "--output",
    "kind",
    flag_value="output",
    help="List muxers instead of demuxers.",
)
@click.pass_context
def formats_command(ctx: click.Context, kind: str | None) -> None:
    """List container formats (demuxers by default)."""
    config: FfbindConfig = ctx.obj["config"]
    init_native(config)

    from ffbind.format import list_formats

    for name in list_formats(kind or "input"):
        click.echo(name)
