"""Native FFmpeg log level control.

PyAV forwards libav* log messages to the Python logger named ``libav``
once a level is set, so native output goes through whatever handlers
ffbind.logging configured.
"""

from __future__ import annotations

import logging
from enum import IntEnum

import av.logging

logger = logging.getLogger(__name__)


class Level(IntEnum):
    """libav log levels (AV_LOG_*)."""

    QUIET = -8
    PANIC = 0
    FATAL = 8
    ERROR = 16
    WARNING = 24
    INFO = 32
    VERBOSE = 40
    DEBUG = 48
    TRACE = 56


def level_from_name(name: str) -> Level:
    """Parse a level name such as "warning" (case-insensitive).

    Raises:
        ValueError: If the name is not a known level.
    """
    try:
        return Level[name.strip().upper()]
    except KeyError:
        valid = ", ".join(level.name.lower() for level in Level)
        raise ValueError(f"Unknown log level '{name}' (expected one of: {valid})") from None


def set_level(level: Level | int) -> None:
    """Set the native log level."""
    level = Level(level)
    av.logging.set_level(int(level))
    logger.debug("Native log level set to %s", level.name.lower())


def get_level() -> Level | None:
    """Return the current native log level, or None when logging is off."""
    value = av.logging.get_level()
    if value is None:
        return None
    return Level(value)
