"""configure_logging(): install ffbind's handlers on the root logger.

ffbind and FFmpeg share the root handlers: ffbind modules log under
``ffbind.*`` and PyAV forwards native messages on ``libav.*``. How much
FFmpeg says is decided by the native log level (``ffbind.init``); this
module only decides where the messages go and how they look.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from ffbind.logging.context import MediaContextFilter
from ffbind.logging.handlers import NATIVE_LOGGER_NAME, JSONFormatter, TextFormatter

if TYPE_CHECKING:
    from ffbind.config.models import LoggingConfig


def _rotating_file_handler(config: LoggingConfig) -> logging.Handler | None:
    """Open the configured log file, or return None if it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root handlers according to config.

    Output goes to the log file when one is set and can be opened, and to
    stderr otherwise or when ``include_stderr`` is set.
    """
    level = logging.getLevelName(config.level.upper())
    if config.format.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _rotating_file_handler(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.setLevel(level)

    context_filter = MediaContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    # Native records must reach the root handlers whatever PyAV configured
    native = logging.getLogger(NATIVE_LOGGER_NAME)
    native.setLevel(logging.NOTSET)
    native.propagate = True
