"""Media context for structured logging.

Uses contextvars to inject the file and stream being processed into log
records, so messages from nested library calls (including native FFmpeg
messages) can be attributed to their input.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_media_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "media_path", default=None
)
_stream_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "stream_index", default=None
)


def set_media_context(path: Path | str | None, stream_index: int | None = None) -> None:
    """Set the file (and optionally stream) being processed."""
    _media_path.set(str(path) if path is not None else None)
    _stream_index.set(stream_index)


def clear_media_context() -> None:
    """Clear the current media context."""
    _media_path.set(None)
    _stream_index.set(None)


def get_media_context() -> tuple[str | None, int | None]:
    """Return (media_path, stream_index); either may be None."""
    return _media_path.get(), _stream_index.get()


@contextmanager
def media_context(
    path: Path | str | None, stream_index: int | None = None
) -> Generator[None, None, None]:
    """Set the media context for the duration of a block.

    The previous context is restored on exit, so blocks can nest.

    Example:
        with media_context("/videos/in.mp4", 0):
            logger.info("Decoding")  # carries media_path and stream_index
    """
    old_path = _media_path.get()
    old_stream = _stream_index.get()
    try:
        set_media_context(path, stream_index)
        yield
    finally:
        _media_path.set(old_path)
        _stream_index.set(old_stream)


class MediaContextFilter(logging.Filter):
    """Logging filter that injects the media context into records.

    Adds ``media_path`` and ``stream_index`` attributes, plus a compact
    ``media_tag`` such as "[in.mp4#0] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        path, stream_index = get_media_context()

        record.media_path = path
        record.stream_index = stream_index

        if path:
            name = Path(path).name
            if stream_index is not None:
                record.media_tag = f"[{name}#{stream_index}] "
            else:
                record.media_tag = f"[{name}] "
        else:
            record.media_tag = ""

        return True  # Never filter out records
