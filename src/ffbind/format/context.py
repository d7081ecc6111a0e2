"""Input and output format contexts.

Both contexts own a PyAV container. They are context managers; ``close()``
is idempotent and releases the native AVFormatContext.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from ffbind.format.stream import ChapterInfo, StreamInfo
from ffbind.util.error import StreamNotFound, translate_errors
from ffbind.util.media import MediaType
from ffbind.util.time import TIME_BASE

if TYPE_CHECKING:
    import av

logger = logging.getLogger(__name__)


class InputContext:
    """An opened media file for reading (demuxing)."""

    def __init__(self, container: av.container.InputContainer, path: str) -> None:
        self._container = container
        self._path = path
        self._closed = False
        self._streams = [StreamInfo.from_native(s) for s in container.streams]

    def __enter__(self) -> InputContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the container. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._container.close()
        logger.debug("Closed input %s", self._path)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def path(self) -> str:
        return self._path

    @property
    def native(self) -> av.container.InputContainer:
        """The underlying PyAV container."""
        return self._container

    @property
    def format_name(self) -> str:
        """Short demuxer name, e.g. "mov,mp4,m4a,3gp,3g2,mj2"."""
        return self._container.format.name

    @property
    def format_description(self) -> str:
        """Long demuxer name, e.g. "QuickTime / MOV"."""
        return self._container.format.long_name

    @property
    def duration(self) -> int:
        """Container duration in TIME_BASE (microsecond) units, 0 if unknown."""
        return self._container.duration or 0

    @property
    def duration_seconds(self) -> float | None:
        """Container duration in seconds, None if unknown."""
        if self.duration <= 0:
            return None
        return self.duration / TIME_BASE

    @property
    def bit_rate(self) -> int:
        """Total bit rate in bits per second, 0 if unknown."""
        return self._container.bit_rate or 0

    @property
    def start_time(self) -> int | None:
        return self._container.start_time

    @property
    def metadata(self) -> dict[str, str]:
        return dict(self._container.metadata or {})

    @property
    def nb_streams(self) -> int:
        return len(self._streams)

    def streams(self) -> list[StreamInfo]:
        """Return all streams in container order."""
        return list(self._streams)

    def stream(self, index: int) -> StreamInfo | None:
        """Return the stream at index, or None if out of range."""
        if 0 <= index < len(self._streams):
            return self._streams[index]
        return None

    def chapters(self) -> list[ChapterInfo]:
        """Return the container chapters in file order (empty if none)."""
        with translate_errors():
            return [ChapterInfo.from_native(c) for c in self._container.chapters()]

    def best(self, media_type: MediaType) -> StreamInfo | None:
        """Pick the preferred stream of a type.

        A stream flagged as default wins; otherwise the first stream of
        the type. Returns None if the container has no such stream.
        """
        candidates = [s for s in self._streams if s.media_type == media_type]
        if not candidates:
            return None
        for candidate in candidates:
            if candidate.is_default:
                return candidate
        return candidates[0]

    def demux(self, *indices: int) -> Iterator[av.Packet]:
        """Yield raw packets for the given streams (all when none given).

        The demuxer ends with one empty packet per stream; those are
        passed through so decoders can be flushed.
        """
        native_streams = [self._stream_or_raise(i).native for i in indices]
        with translate_errors():
            yield from self._container.demux(*native_streams)

    def packets(self) -> Iterator[tuple[StreamInfo, av.Packet]]:
        """Yield (stream, packet) pairs for every stream until end of file.

        Empty flush packets are skipped.
        """
        for packet in self.demux():
            if packet.size == 0:
                continue
            yield self._streams[packet.stream.index], packet

    def seek(
        self,
        timestamp: int,
        *,
        stream: int | None = None,
        backward: bool = True,
        any_frame: bool = False,
    ) -> None:
        """Seek to a timestamp.

        Args:
            timestamp: Target in the stream's time base, or TIME_BASE units
                when no stream is given.
            stream: Optional stream index the timestamp refers to.
            backward: Seek to the nearest keyframe before the timestamp.
            any_frame: Allow seeking to non-keyframes.
        """
        native_stream = self._stream_or_raise(stream).native if stream is not None else None
        with translate_errors():
            self._container.seek(
                timestamp,
                backward=backward,
                any_frame=any_frame,
                stream=native_stream,
            )

    def _stream_or_raise(self, index: int) -> StreamInfo:
        info = self.stream(index)
        if info is None:
            raise StreamNotFound(f"Stream #{index} not found")
        return info


class OutputContext:
    """A media file opened for writing (muxing)."""

    def __init__(self, container: av.container.OutputContainer, path: str) -> None:
        self._container = container
        self._path = path
        self._closed = False
        self._header_written = False

    def __enter__(self) -> OutputContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def path(self) -> str:
        return self._path

    @property
    def native(self) -> av.container.OutputContainer:
        return self._container

    @property
    def format_name(self) -> str:
        return self._container.format.name

    @property
    def metadata(self) -> dict[str, str]:
        """Container tags; mutate before write_header()."""
        return self._container.metadata

    def streams(self) -> list[StreamInfo]:
        return [StreamInfo.from_native(s) for s in self._container.streams]

    def set_chapters(self, chapters: list[ChapterInfo]) -> None:
        """Replace the chapters to write; call before write_header()."""
        self._check_writable("set chapters")
        if self._header_written:
            raise RuntimeError(f"Cannot set chapters: header of {self._path} already written")
        with translate_errors():
            self._container.set_chapters([c.to_native() for c in chapters])

    def add_stream(
        self,
        codec_name: str,
        *,
        rate: Fraction | int | None = None,
        options: dict[str, str] | None = None,
    ) -> Any:
        """Add an encoded stream and return the native output stream."""
        self._check_writable("add a stream")
        with translate_errors():
            stream = self._container.add_stream(codec_name, rate=rate, options=options)
        logger.debug("Added %s stream #%d to %s", codec_name, stream.index, self._path)
        return stream

    def add_stream_from(self, source: StreamInfo) -> Any:
        """Add a stream copying the codec parameters of an input stream."""
        self._check_writable("add a stream")
        with translate_errors():
            stream = self._container.add_stream_from_template(source.native)
        logger.debug(
            "Added copy of input stream #%d as #%d to %s",
            source.index,
            stream.index,
            self._path,
        )
        return stream

    def write_header(self) -> None:
        """Write the container header. Later calls are no-ops."""
        self._check_writable("write the header")
        if self._header_written:
            return
        with translate_errors():
            self._container.start_encoding()
        self._header_written = True

    def write_packet(self, packet: av.Packet, stream: Any | None = None) -> None:
        """Write one packet, interleaved with the others.

        Args:
            packet: Encoded packet.
            stream: Output stream the packet belongs to; when given, the
                packet is reassigned and its timestamps are rescaled.
        """
        self._check_writable("write a packet")
        if stream is not None:
            packet.stream = stream
        with translate_errors():
            self._container.mux(packet)
        self._header_written = True

    def write_trailer(self) -> None:
        """Finish the file: write the trailer and close the output."""
        self.close()

    def close(self) -> None:
        """Close the output, writing the trailer if the header was written."""
        if self._closed:
            return
        self._closed = True
        with translate_errors():
            self._container.close()
        logger.debug("Closed output %s", self._path)

    def _check_writable(self, action: str) -> None:
        if self._closed:
            raise RuntimeError(f"Cannot {action}: output {self._path} is closed")
