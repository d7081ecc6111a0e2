"""Error and result output shared by CLI commands."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from ffbind.cli.exit_codes import ExitCode


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Print an error and exit.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Emit a JSON error object instead of "Error: ...".
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {
                        "code": code_name,
                        "message": message,
                    },
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)
