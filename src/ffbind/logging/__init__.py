"""Structured logging module for ffbind.

Routes ffbind and native FFmpeg messages to stderr or a rotating file, as
text or JSON, tagged with the file and stream being processed.
"""

from ffbind.logging.config import configure_logging
from ffbind.logging.context import (
    MediaContextFilter,
    clear_media_context,
    get_media_context,
    media_context,
    set_media_context,
)
from ffbind.logging.handlers import JSONFormatter, TextFormatter, native_component

__all__ = [
    "JSONFormatter",
    "MediaContextFilter",
    "TextFormatter",
    "clear_media_context",
    "configure_logging",
    "get_media_context",
    "media_context",
    "native_component",
    "set_media_context",
]
