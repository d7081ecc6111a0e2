"""Structured errors for native FFmpeg failures.

FFmpeg reports failures as negative integers. Some are negated POSIX errno
values (``AVERROR(EAGAIN)``), the rest are negated four character tags
(``AVERROR_EOF``). This module maps both families onto an exception
hierarchy so callers can branch on the failure kind:

- Error: base class, carries the native ``code`` and a message
- Eof / Again: the two "not really a failure" results of send/receive loops
- Other: POSIX errno values, exposes ``errno``
- One class per FFmpeg tag error (DecoderNotFound, InvalidData, ...)

PyAV raises its own ``av.error.FFmpegError`` subclasses; ``from_av`` and the
``translate_errors`` context manager convert those at every native call site.
"""

from __future__ import annotations

import errno as _errno
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING

import av.error

if TYPE_CHECKING:
    from collections.abc import Generator


def tag(a: int | str, b: int | str, c: int | str, d: int | str) -> int:
    """Pack four bytes into a little-endian tag (MKTAG)."""
    parts = [ord(x) if isinstance(x, str) else x for x in (a, b, c, d)]
    return parts[0] | (parts[1] << 8) | (parts[2] << 16) | (parts[3] << 24)


def error_tag(a: int | str, b: int | str, c: int | str, d: int | str) -> int:
    """Return the negated tag used as an FFmpeg error code (FFERRTAG)."""
    return -tag(a, b, c, d)


AVERROR_BSF_NOT_FOUND = error_tag(0xF8, "B", "S", "F")
AVERROR_BUG = error_tag("B", "U", "G", "!")
AVERROR_BUFFER_TOO_SMALL = error_tag("B", "U", "F", "S")
AVERROR_DECODER_NOT_FOUND = error_tag(0xF8, "D", "E", "C")
AVERROR_DEMUXER_NOT_FOUND = error_tag(0xF8, "D", "E", "M")
AVERROR_ENCODER_NOT_FOUND = error_tag(0xF8, "E", "N", "C")
AVERROR_EOF = error_tag("E", "O", "F", " ")
AVERROR_EXIT = error_tag("E", "X", "I", "T")
AVERROR_EXTERNAL = error_tag("E", "X", "T", " ")
AVERROR_FILTER_NOT_FOUND = error_tag(0xF8, "F", "I", "L")
AVERROR_INVALIDDATA = error_tag("I", "N", "D", "A")
AVERROR_MUXER_NOT_FOUND = error_tag(0xF8, "M", "U", "X")
AVERROR_OPTION_NOT_FOUND = error_tag(0xF8, "O", "P", "T")
AVERROR_PATCHWELCOME = error_tag("P", "A", "W", "E")
AVERROR_PROTOCOL_NOT_FOUND = error_tag(0xF8, "P", "R", "O")
AVERROR_STREAM_NOT_FOUND = error_tag(0xF8, "S", "T", "R")
AVERROR_BUG2 = error_tag("B", "U", "G", " ")
AVERROR_UNKNOWN = error_tag("U", "N", "K", "N")
AVERROR_EXPERIMENTAL = -0x2BB2AFA8
AVERROR_INPUT_CHANGED = -0x636E6701
AVERROR_OUTPUT_CHANGED = -0x636E6702
AVERROR_HTTP_BAD_REQUEST = error_tag(0xF8, "4", "0", "0")
AVERROR_HTTP_UNAUTHORIZED = error_tag(0xF8, "4", "0", "1")
AVERROR_HTTP_FORBIDDEN = error_tag(0xF8, "4", "0", "3")
AVERROR_HTTP_NOT_FOUND = error_tag(0xF8, "4", "0", "4")
AVERROR_HTTP_OTHER_4XX = error_tag(0xF8, "4", "X", "X")
AVERROR_HTTP_SERVER_ERROR = error_tag(0xF8, "5", "X", "X")

# Largest errno value treated as POSIX; tag codes are far outside this range.
_MAX_POSIX_ERRNO = 4095


class Error(Exception):
    """Base class for native FFmpeg errors.

    Attributes:
        code: Negative native error code.
        message: Human readable description.
        filename: File the failing operation referred to, if known.
    """

    code: int = AVERROR_UNKNOWN
    default_message: str = "Unknown error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: int | None = None,
        filename: str | None = None,
    ) -> None:
        if code is not None:
            self.code = code
        self.message = message or self.default_message
        self.filename = filename
        super().__init__(self.message)

    def __int__(self) -> int:
        return self.code

    def __str__(self) -> str:
        if self.filename:
            return f"{self.message}: '{self.filename}'"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class BsfNotFound(Error):
    code = AVERROR_BSF_NOT_FOUND
    default_message = "Bitstream filter not found"


class Bug(Error):
    code = AVERROR_BUG
    default_message = "Internal bug, should not have happened"


class BufferTooSmall(Error):
    code = AVERROR_BUFFER_TOO_SMALL
    default_message = "Buffer too small"


class DecoderNotFound(Error):
    code = AVERROR_DECODER_NOT_FOUND
    default_message = "Decoder not found"


class DemuxerNotFound(Error):
    code = AVERROR_DEMUXER_NOT_FOUND
    default_message = "Demuxer not found"


class EncoderNotFound(Error):
    code = AVERROR_ENCODER_NOT_FOUND
    default_message = "Encoder not found"


class Eof(Error):
    """End of stream reached; no more data will be produced."""

    code = AVERROR_EOF
    default_message = "End of file"


class Exit(Error):
    code = AVERROR_EXIT
    default_message = "Immediate exit requested"


class External(Error):
    code = AVERROR_EXTERNAL
    default_message = "Generic error in an external library"


class FilterNotFound(Error):
    code = AVERROR_FILTER_NOT_FOUND
    default_message = "Filter not found"


class InvalidData(Error):
    code = AVERROR_INVALIDDATA
    default_message = "Invalid data found when processing input"


class MuxerNotFound(Error):
    code = AVERROR_MUXER_NOT_FOUND
    default_message = "Muxer not found"


class OptionNotFound(Error):
    code = AVERROR_OPTION_NOT_FOUND
    default_message = "Option not found"


class PatchWelcome(Error):
    code = AVERROR_PATCHWELCOME
    default_message = "Not yet implemented in FFmpeg, patches welcome"


class ProtocolNotFound(Error):
    code = AVERROR_PROTOCOL_NOT_FOUND
    default_message = "Protocol not found"


class StreamNotFound(Error):
    code = AVERROR_STREAM_NOT_FOUND
    default_message = "Stream not found"


class Bug2(Error):
    code = AVERROR_BUG2
    default_message = "Internal bug, should not have happened"


class Unknown(Error):
    code = AVERROR_UNKNOWN
    default_message = "Unknown error occurred"


class Experimental(Error):
    code = AVERROR_EXPERIMENTAL
    default_message = "Experimental feature"


class InputChanged(Error):
    """Input parameters changed between calls (scaler, resampler, graph)."""

    code = AVERROR_INPUT_CHANGED
    default_message = "Input changed"


class OutputChanged(Error):
    code = AVERROR_OUTPUT_CHANGED
    default_message = "Output changed"


class HttpBadRequest(Error):
    code = AVERROR_HTTP_BAD_REQUEST
    default_message = "Server returned 400 Bad Request"


class HttpUnauthorized(Error):
    code = AVERROR_HTTP_UNAUTHORIZED
    default_message = "Server returned 401 Unauthorized (authorization failed)"


class HttpForbidden(Error):
    code = AVERROR_HTTP_FORBIDDEN
    default_message = "Server returned 403 Forbidden (access denied)"


class HttpNotFound(Error):
    code = AVERROR_HTTP_NOT_FOUND
    default_message = "Server returned 404 Not Found"


class HttpOther4xx(Error):
    code = AVERROR_HTTP_OTHER_4XX
    default_message = "Server returned 4XX Client Error, but not one of 40{0,1,3,4}"


class HttpServerError(Error):
    code = AVERROR_HTTP_SERVER_ERROR
    default_message = "Server returned 5XX Server Error reply"


class Other(Error):
    """A POSIX errno reported by the native library.

    Attributes:
        errno: Positive POSIX error number.
    """

    def __init__(
        self,
        errno: int,
        message: str | None = None,
        *,
        filename: str | None = None,
    ) -> None:
        self.errno = errno
        super().__init__(
            message or os.strerror(errno), code=-errno, filename=filename
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(errno={self.errno}, message={self.message!r})"


class Again(Other):
    """EAGAIN: output is not available yet, send more input first."""

    def __init__(self, message: str | None = None, *, filename: str | None = None):
        super().__init__(_errno.EAGAIN, message, filename=filename)


_TAG_CLASSES: dict[int, type[Error]] = {
    cls.code: cls
    for cls in (
        BsfNotFound,
        Bug,
        BufferTooSmall,
        DecoderNotFound,
        DemuxerNotFound,
        EncoderNotFound,
        Eof,
        Exit,
        External,
        FilterNotFound,
        InvalidData,
        MuxerNotFound,
        OptionNotFound,
        PatchWelcome,
        ProtocolNotFound,
        StreamNotFound,
        Bug2,
        Unknown,
        Experimental,
        InputChanged,
        OutputChanged,
        HttpBadRequest,
        HttpUnauthorized,
        HttpForbidden,
        HttpNotFound,
        HttpOther4xx,
        HttpServerError,
    )
}


def from_code(
    code: int,
    message: str | None = None,
    *,
    filename: str | None = None,
) -> Error:
    """Build the exception matching a native error code.

    Args:
        code: Negative FFmpeg return value.
        message: Optional message overriding the default text.
        filename: Optional file the error refers to.

    Returns:
        An Error instance (not raised).

    Raises:
        ValueError: If code is not negative (not an error).
    """
    if code >= 0:
        raise ValueError(f"Not an error code: {code}")

    cls = _TAG_CLASSES.get(code)
    if cls is not None:
        return cls(message, filename=filename)

    if -code <= _MAX_POSIX_ERRNO:
        if -code == _errno.EAGAIN:
            return Again(message, filename=filename)
        return Other(-code, message, filename=filename)

    return Unknown(message, code=code, filename=filename)


def strerror(code: int) -> str:
    """Return the description of a native error code."""
    cls = _TAG_CLASSES.get(code)
    if cls is not None:
        return cls.default_message
    if 0 < -code <= _MAX_POSIX_ERRNO:
        return os.strerror(-code)
    return f"Error number {code} occurred"


def from_av(exc: av.error.FFmpegError) -> Error:
    """Translate a PyAV exception into the ffbind hierarchy.

    PyAV stores the positive form of the native code in ``errno``.
    """
    raw = getattr(exc, "errno", None)
    code = -raw if isinstance(raw, int) and raw > 0 else AVERROR_UNKNOWN
    message = getattr(exc, "strerror", None) or None
    filename = getattr(exc, "filename", None)
    return from_code(code, message, filename=filename)


@contextmanager
def translate_errors() -> Generator[None, None, None]:
    """Re-raise PyAV errors raised inside the block as ffbind errors."""
    try:
        yield
    except av.error.FFmpegError as e:
        raise from_av(e) from e
