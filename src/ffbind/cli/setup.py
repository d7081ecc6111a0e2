"""Shared start-up for the ffbind and video-info entry points."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from ffbind.cli.exit_codes import ExitCode
from ffbind.cli.output import error_exit
from ffbind.config import FfbindConfig, configure_logging_from_cli, get_config

logger = logging.getLogger(__name__)


def load_cli_config(
    *,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_json: bool = False,
    native_log_level: str | None = None,
) -> FfbindConfig:
    """Load configuration, apply CLI overrides and configure logging.

    Exits with CONFIG_ERROR when the merged configuration is invalid.
    """
    try:
        config = get_config(native_log_level=native_log_level, strict=True)
        logging_config = configure_logging_from_cli(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)
    return replace(config, logging=logging_config)


def init_native(config: FfbindConfig, json_output: bool = False) -> None:
    """Load the FFmpeg libraries and apply the native settings.

    Exits with LIBRARY_NOT_AVAILABLE when PyAV or FFmpeg cannot be loaded.
    """
    import ffbind

    if not ffbind.native_available():
        error_exit(
            "The FFmpeg libraries could not be loaded.\n"
            "Install PyAV (pip install av) to use ffbind.",
            ExitCode.LIBRARY_NOT_AVAILABLE,
            json_output,
        )
    ffbind.init(config.native)
