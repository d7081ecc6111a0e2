"""Container formats: opening files for demuxing and muxing.

Wraps libavformat through PyAV:

- input / input_with_dictionary: open a media file for reading
- output / output_as: create a media file for writing
- InputContext / OutputContext: owned format contexts
- StreamInfo: per-stream view (codec, time base, rates, metadata)
- ChapterInfo: container chapters
"""

from __future__ import annotations

import logging
from os import PathLike
from typing import Literal

import av

from ffbind.format.context import InputContext, OutputContext
from ffbind.format.stream import ChapterInfo, StreamInfo
from ffbind.util.error import DemuxerNotFound, MuxerNotFound, translate_errors

logger = logging.getLogger(__name__)


def input(
    path: str | PathLike[str],
    *,
    format: str | None = None,
    options: dict[str, str] | None = None,
    timeout: float | None = None,
) -> InputContext:
    """Open a media file for reading and probe its streams.

    Args:
        path: File path or URL (any protocol FFmpeg supports).
        format: Force a demuxer instead of probing, e.g. "mpegts".
        options: Demuxer/protocol options, e.g. {"probesize": "5000000"}.
        timeout: Open/read timeout in seconds for network inputs.

    Returns:
        An InputContext; close it or use it as a context manager.

    Raises:
        DemuxerNotFound: If a forced format is not a known demuxer.
        ffbind.util.error.Error: If the file cannot be opened or probed.
    """
    if format is not None and not _is_format(format, "input"):
        raise DemuxerNotFound(f"Demuxer not found: {format}")
    location = str(path)
    with translate_errors():
        container = av.open(
            location,
            mode="r",
            format=format,
            options=dict(options) if options else None,
            timeout=timeout,
        )
    logger.debug("Opened input %s (%s)", location, container.format.name)
    return InputContext(container, location)


def input_with_dictionary(
    path: str | PathLike[str], options: dict[str, str]
) -> InputContext:
    """Open a media file for reading with demuxer/protocol options."""
    return input(path, options=options)


def output(
    path: str | PathLike[str],
    *,
    options: dict[str, str] | None = None,
) -> OutputContext:
    """Create a media file, guessing the muxer from the file extension.

    Raises:
        ffbind.util.error.Error: If no muxer matches or the file cannot
            be created.
    """
    return output_as(path, None, options=options)


def output_as(
    path: str | PathLike[str],
    format: str | None,
    *,
    options: dict[str, str] | None = None,
) -> OutputContext:
    """Create a media file with an explicit muxer, e.g. "mp4" or "matroska"."""
    if format is not None and not _is_format(format, "output"):
        raise MuxerNotFound(f"Muxer not found: {format}")
    location = str(path)
    with translate_errors():
        container = av.open(
            location,
            mode="w",
            format=format,
            options=dict(options) if options else None,
        )
    logger.debug("Opened output %s (%s)", location, container.format.name)
    return OutputContext(container, location)


def list_formats(kind: Literal["input", "output"] = "input") -> list[str]:
    """Return the names of available demuxers ("input") or muxers ("output")."""
    return sorted(name for name in av.formats_available if _is_format(name, kind))


def _is_format(name: str, kind: Literal["input", "output"]) -> bool:
    if name not in av.formats_available:
        return False
    fmt = av.ContainerFormat(name)
    return fmt.is_input if kind == "input" else fmt.is_output


__all__ = [
    "InputContext",
    "OutputContext",
    "ChapterInfo",
    "StreamInfo",
    "input",
    "input_with_dictionary",
    "list_formats",
    "output",
    "output_as",
]
