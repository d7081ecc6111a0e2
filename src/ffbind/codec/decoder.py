"""Decoders: compressed packets in, raw frames out.

A Decoder follows FFmpeg's send/receive model:

1. ``send_packet()`` feeds compressed data
2. ``receive_frame()`` returns decoded frames one at a time, raising
   ``Again`` when more input is needed
3. ``send_eof()`` enters draining mode; ``receive_frame()`` then returns the
   buffered frames and raises ``Eof`` once everything was delivered
4. ``flush()`` resets the decoder so it accepts input again

PyAV decodes a packet into a list of frames in one call; the decoder keeps
those frames queued and hands them out through ``receive_frame()``.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any

import av

from ffbind.codec.codec import find_decoder
from ffbind.util.error import (
    Again,
    DecoderNotFound,
    Eof,
    InvalidData,
    translate_errors,
)
from ffbind.util.media import MediaType

if TYPE_CHECKING:
    from ffbind.format.stream import StreamInfo

logger = logging.getLogger(__name__)


class Discard(Enum):
    """Which frames a decoder may skip (AVDiscard)."""

    NONE = "NONE"
    DEFAULT = "DEFAULT"
    NONREF = "NONREF"
    BIDIR = "BIDIR"
    NONINTRA = "NONINTRA"
    NONKEY = "NONKEY"
    ALL = "ALL"


class Decoder:
    """A decoding codec context."""

    def __init__(self, context: Any, *, stream_index: int | None = None) -> None:
        self._context = context
        self._stream_index = stream_index
        self._pending: deque[Any] = deque()
        self._draining = False
        self._packet_time_base: Fraction | None = None

    @classmethod
    def from_stream(cls, stream: StreamInfo) -> Decoder:
        """Create a decoder for an input stream from its codec parameters.

        Raises:
            DecoderNotFound: If FFmpeg has no decoder for the stream's codec.
        """
        context = stream.parameters
        if context is None:
            raise DecoderNotFound(
                f"No decoder for stream #{stream.index} ({stream.codec_name or 'unknown codec'})"
            )
        decoder = cls(context, stream_index=stream.index)
        decoder._packet_time_base = stream.time_base
        return decoder

    @classmethod
    def from_name(cls, name: str) -> Decoder:
        """Create a standalone decoder, e.g. ``Decoder.from_name("h264")``.

        Raises:
            DecoderNotFound: If no decoder with that name exists.
        """
        codec = find_decoder(name)
        if codec is None:
            raise DecoderNotFound(f"Decoder not found: {name}")
        with translate_errors():
            context = av.CodecContext.create(codec.name, "r")
        return cls(context)

    @property
    def native(self) -> Any:
        """The underlying PyAV codec context."""
        return self._context

    @property
    def codec_name(self) -> str:
        return self._context.name

    @property
    def media_type(self) -> MediaType:
        return MediaType.from_name(self._context.type)

    def video(self) -> Decoder:
        """Open as a video decoder.

        Raises:
            InvalidData: If the codec does not decode video.
        """
        return self._open_as(MediaType.VIDEO)

    def audio(self) -> Decoder:
        """Open as an audio decoder."""
        return self._open_as(MediaType.AUDIO)

    def subtitle(self) -> Decoder:
        """Open as a subtitle decoder."""
        return self._open_as(MediaType.SUBTITLE)

    def open(self, options: dict[str, str] | None = None) -> Decoder:
        """Open the codec context with optional codec options."""
        if options:
            self._context.options = {**self._context.options, **options}
        if not self._context.is_open:
            with translate_errors():
                self._context.open()
        return self

    def _open_as(self, media_type: MediaType) -> Decoder:
        if self.media_type != media_type:
            raise InvalidData(
                f"{self.codec_name} decodes {self.media_type.value}, not {media_type.value}"
            )
        return self.open()

    # Configuration

    def skip_frame(self, value: Discard) -> None:
        """Skip frames during decoding, e.g. Discard.NONKEY for keyframes only."""
        self._context.skip_frame = value.value

    def threads(self, count: int = 0, kind: str = "AUTO") -> None:
        """Configure threaded decoding (count 0 lets FFmpeg decide)."""
        if count < 0:
            raise ValueError(f"Thread count must be >= 0, got {count}")
        self._context.thread_count = count
        self._context.thread_type = kind

    @property
    def packet_time_base(self) -> Fraction | None:
        """Time base of incoming packet timestamps; stamped on output frames."""
        return self._packet_time_base

    @packet_time_base.setter
    def packet_time_base(self, value: Fraction | None) -> None:
        self._packet_time_base = value

    # Video parameters

    @property
    def width(self) -> int:
        return self._context.width

    @property
    def height(self) -> int:
        return self._context.height

    @property
    def format_name(self) -> str | None:
        """Pixel format (video) or sample format (audio) name."""
        fmt = getattr(self._context, "format", None)
        return fmt.name if fmt is not None else None

    @property
    def aspect_ratio(self) -> Fraction | None:
        """Sample aspect ratio, None when undefined."""
        value = getattr(self._context, "sample_aspect_ratio", None)
        if value is None or value.numerator == 0:
            return None
        return value

    # Audio parameters

    @property
    def rate(self) -> int:
        return getattr(self._context, "sample_rate", 0) or 0

    @property
    def channels(self) -> int:
        return getattr(self._context, "channels", 0) or 0

    @property
    def layout_name(self) -> str | None:
        layout = getattr(self._context, "layout", None)
        return layout.name if layout is not None else None

    # Send/receive

    def send_packet(self, packet: av.Packet) -> None:
        """Feed one compressed packet.

        An empty packet is the end-of-stream marker and behaves like
        send_eof().

        Raises:
            Eof: If the decoder is draining (flush() first).
            ffbind.util.error.Error: If decoding fails.
        """
        if packet is None or packet.size == 0:
            self.send_eof()
            return
        if self._draining:
            raise Eof("Decoder is draining; flush() before sending more packets")
        with translate_errors():
            frames = self._context.decode(packet)
        self._queue(frames)

    def send_eof(self) -> None:
        """Signal end of stream and collect the frames still buffered.

        Raises:
            Eof: If end of stream was already signalled.
        """
        if self._draining:
            raise Eof("Decoder already received end of stream")
        with translate_errors():
            frames = self._context.decode(None)
        self._draining = True
        self._queue(frames)
        logger.debug("%s decoder draining, %d frames buffered", self.codec_name, len(self._pending))

    def receive_frame(self) -> Any:
        """Return the next decoded frame.

        Raises:
            Again: If more packets are needed before a frame is available.
            Eof: If the decoder is drained.
        """
        if self._pending:
            return self._pending.popleft()
        if self._draining:
            raise Eof()
        raise Again()

    def flush(self) -> None:
        """Drop buffered data and leave draining mode."""
        self._context.flush_buffers()
        self._pending.clear()
        self._draining = False

    def decode(self, packet: av.Packet | None) -> Iterator[Any]:
        """Send a packet (None for end of stream) and yield available frames."""
        if packet is None:
            self.send_eof()
        else:
            self.send_packet(packet)
        while self._pending:
            yield self._pending.popleft()

    def _queue(self, frames: list[Any]) -> None:
        for frame in frames:
            if frame.time_base is None and self._packet_time_base is not None:
                frame.time_base = self._packet_time_base
            self._pending.append(frame)
