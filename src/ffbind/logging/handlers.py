"""Log formatters for ffbind.

FFmpeg's own messages reach Python logging through PyAV's bridge, on the
``libav`` logger and its children (``libav.h264``, ``libav.mov,mp4,...``).
Both formatters label those records with the FFmpeg component that emitted
them, so native output can be told apart from ffbind's.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

NATIVE_LOGGER_NAME = "libav"

# Attributes set by MediaContextFilter; rendered under "media", not "extra"
_MEDIA_ATTRS = frozenset({"media_path", "stream_index", "media_tag"})

_RECORD_ATTRS = (
    frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None)))
    | {"message", "asctime", "taskName", "source"}
    | _MEDIA_ATTRS
)


def native_component(logger_name: str) -> str | None:
    """Return the FFmpeg component of a native logger name.

    "libav.h264" gives "h264", "libav" gives "libav"; loggers outside the
    native tree give None.
    """
    if logger_name == NATIVE_LOGGER_NAME:
        return NATIVE_LOGGER_NAME
    prefix = NATIVE_LOGGER_NAME + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix) :]
    return None


class TextFormatter(logging.Formatter):
    """Single-line text output.

    ``%(source)s`` is the logger name, or "ffmpeg:<component>" for native
    records. ``%(media_tag)s`` comes from MediaContextFilter.
    """

    default_format = "%(asctime)s %(levelname)-7s %(media_tag)s%(source)s: %(message)s"

    def __init__(self, fmt: str | None = None) -> None:
        super().__init__(fmt or self.default_format, datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        component = native_component(record.name)
        record.source = f"ffmpeg:{component}" if component else record.name
        if not hasattr(record, "media_tag"):
            record.media_tag = ""
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: timestamp (ISO-8601 UTC), level, logger, message; "native" with
    the FFmpeg component for native records; "media" with path and stream
    inside a media context; "extra" with fields passed via ``extra=``;
    "exception" when exc_info is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        component = native_component(record.name)
        if component is not None:
            entry["native"] = component

        media: dict[str, Any] = {}
        if getattr(record, "media_path", None):
            media["path"] = record.media_path
        if getattr(record, "stream_index", None) is not None:
            media["stream"] = record.stream_index
        if media:
            entry["media"] = media

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
