"""CLI version command: versions and licenses of the FFmpeg libraries."""

from __future__ import annotations

import json

import click

from ffbind.cli.setup import init_native
from ffbind.config import FfbindConfig


@click.command("version")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.option(
    "--configuration",
    "show_configuration",
    is_flag=True,
    help="Also show the ./configure flags of each library.",
)
@click.pass_context
def version_command(ctx: click.Context, json_output: bool, show_configuration: bool) -> None:
    """Show ffbind, PyAV and FFmpeg library versions."""
    config: FfbindConfig = ctx.obj["config"]
    init_native(config, json_output)

    import ffbind
    from ffbind import versions

    libraries = {}
    for library in versions.LIBRARIES:
        entry = {
            "version": versions.format_version(library),
            "packed": versions.version(library),
            "license": versions.license(library),
        }
        if show_configuration:
            entry["configuration"] = versions.configuration(library)
        libraries[library] = entry

    if json_output:
        data = {
            "ffbind": ffbind.__version__,
            "pyav": versions.pyav_version(),
            "libraries": libraries,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"ffbind {ffbind.__version__} (PyAV {versions.pyav_version()})")
    for library, entry in libraries.items():
        click.echo(f"  {library:<14} {entry['version']:<10} {entry['license']}")
        if show_configuration:
            click.echo(f"    {entry['configuration']}")
