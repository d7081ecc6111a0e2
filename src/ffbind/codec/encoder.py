"""Encoders: raw frames in, compressed packets out.

Mirrors the decoder's send/receive model: ``send_frame()`` feeds frames,
``receive_packet()`` hands out packets and raises ``Again`` or ``Eof``.
"""

from __future__ import annotations

import logging
from collections import deque
from fractions import Fraction
from typing import Any

import av

from ffbind.codec.codec import find_encoder
from ffbind.util.error import (
    Again,
    EncoderNotFound,
    Eof,
    InvalidData,
    translate_errors,
)
from ffbind.util.media import MediaType
from ffbind.util.rational import RationalLike, to_rational

logger = logging.getLogger(__name__)


class Encoder:
    """An encoding codec context."""

    def __init__(self, context: Any) -> None:
        self._context = context
        self._pending: deque[av.Packet] = deque()
        self._draining = False

    @classmethod
    def from_name(cls, name: str) -> Encoder:
        """Create a standalone encoder, e.g. ``Encoder.from_name("mpeg4")``.

        Raises:
            EncoderNotFound: If no encoder with that name exists.
        """
        codec = find_encoder(name)
        if codec is None:
            raise EncoderNotFound(f"Encoder not found: {name}")
        with translate_errors():
            context = av.CodecContext.create(codec.name, "w")
        return cls(context)

    @classmethod
    def for_stream(cls, stream: Any) -> Encoder:
        """Wrap the codec context of an output stream created by add_stream."""
        return cls(stream.codec_context)

    @property
    def native(self) -> Any:
        return self._context

    @property
    def codec_name(self) -> str:
        return self._context.name

    @property
    def media_type(self) -> MediaType:
        return MediaType.from_name(self._context.type)

    @property
    def is_open(self) -> bool:
        return bool(self._context.is_open)

    def video(self) -> Encoder:
        """Check that this is a video encoder.

        Raises:
            InvalidData: If the codec encodes another media type.
        """
        return self._expect(MediaType.VIDEO)

    def audio(self) -> Encoder:
        return self._expect(MediaType.AUDIO)

    def subtitle(self) -> Encoder:
        return self._expect(MediaType.SUBTITLE)

    def _expect(self, media_type: MediaType) -> Encoder:
        if self.media_type != media_type:
            raise InvalidData(
                f"{self.codec_name} encodes {self.media_type.value}, not {media_type.value}"
            )
        return self

    # Rate control

    def set_bit_rate(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Bit rate must be >= 0, got {value}")
        self._context.bit_rate = value

    def set_max_bit_rate(self, value: int) -> None:
        """Cap the bit rate.

        Rate capping needs a VBV buffer; one second at the cap is used
        unless a "bufsize" option is already set.
        """
        if value < 0:
            raise ValueError(f"Max bit rate must be >= 0, got {value}")
        options = {**self._context.options, "maxrate": str(value)}
        options.setdefault("bufsize", str(value))
        self._context.options = options

    def set_tolerance(self, value: int) -> None:
        self._context.bit_rate_tolerance = value

    def set_quality(self, value: int) -> None:
        """Set a constant quantizer (qscale) for codecs that support it."""
        self._context.qscale = value

    def set_compression(self, value: int | None) -> None:
        """Set the compression level; None restores the codec default."""
        options = dict(self._context.options)
        if value is None:
            options.pop("compression_level", None)
        else:
            options["compression_level"] = str(value)
        self._context.options = options

    # Stream parameters

    def configure_video(
        self,
        width: int,
        height: int,
        pix_fmt: str,
        *,
        time_base: RationalLike = None,
        frame_rate: RationalLike = None,
        gop_size: int | None = None,
    ) -> None:
        """Set the picture parameters required before open().

        When only a frame rate is given, the time base is its inverse.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid size {width}x{height}")
        self.video()
        self._context.width = width
        self._context.height = height
        self._context.pix_fmt = pix_fmt

        rate = to_rational(frame_rate)
        base = to_rational(time_base)
        if base is None and rate is not None:
            base = Fraction(rate.denominator, rate.numerator)
        if rate is not None:
            self._context.framerate = rate
        if base is not None:
            self._context.time_base = base
        if gop_size is not None:
            self._context.gop_size = gop_size

    def configure_audio(self, rate: int, layout: str = "stereo", format: str | None = None) -> None:
        """Set the sample parameters required before open().

        Without a format the encoder's first supported sample format is used.
        """
        if rate <= 0:
            raise ValueError(f"Sample rate must be > 0, got {rate}")
        self.audio()
        self._context.sample_rate = rate
        self._context.layout = layout
        if format is None:
            formats = self._context.codec.audio_formats
            if formats:
                format = formats[0].name
        if format is not None:
            self._context.format = format
        self._context.time_base = Fraction(1, rate)

    def open(self, options: dict[str, str] | None = None) -> Encoder:
        """Open the encoder. Later calls are no-ops."""
        if options:
            self._context.options = {**self._context.options, **options}
        if not self._context.is_open:
            with translate_errors():
                self._context.open()
            logger.debug("Opened %s encoder", self.codec_name)
        return self

    # Send/receive

    def send_frame(self, frame: Any) -> None:
        """Feed one raw frame; None behaves like send_eof().

        Raises:
            Eof: If the encoder is draining.
            ffbind.util.error.Error: If encoding fails.
        """
        if frame is None:
            self.send_eof()
            return
        if self._draining:
            raise Eof("Encoder is draining; no more frames accepted")
        with translate_errors():
            packets = self._context.encode(frame)
        self._pending.extend(packets)

    def send_eof(self) -> None:
        """Signal end of stream and collect the remaining packets."""
        if self._draining:
            raise Eof("Encoder already received end of stream")
        with translate_errors():
            packets = self._context.encode(None)
        self._draining = True
        self._pending.extend(packets)

    def receive_packet(self) -> av.Packet:
        """Return the next encoded packet.

        Raises:
            Again: If more frames are needed.
            Eof: If the encoder is drained.
        """
        if self._pending:
            return self._pending.popleft()
        if self._draining:
            raise Eof()
        raise Again()

    def flush(self) -> None:
        self._context.flush_buffers()
        self._pending.clear()
        self._draining = False
