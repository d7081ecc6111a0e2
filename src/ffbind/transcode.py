"""Decode, filter, encode and mux one video stream.

The best video stream of the input is decoded, optionally run through a
linear filter chain, converted to the encoder's size and pixel format and
re-encoded. Audio streams are either copied packet for packet or dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from fractions import Fraction
from os import PathLike
from typing import Any, Literal

import av

from ffbind import format as _format
from ffbind.codec.decoder import Decoder
from ffbind.codec.encoder import Encoder
from ffbind.codec.settings import EncoderSettings
from ffbind.config.models import FfbindConfig
from ffbind.filter.graph import Graph, video_graph
from ffbind.format.context import InputContext, OutputContext
from ffbind.logging.context import media_context
from ffbind.software.scaling import Scaler, ScalingFlags
from ffbind.util.error import Again, Eof, InvalidData, StreamNotFound
from ffbind.util.media import MediaType

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = Fraction(25)

AudioMode = Literal["copy", "drop"]


@dataclass
class TranscodeResult:
    """Counters describing a finished transcode."""

    frames_decoded: int = 0
    frames_encoded: int = 0
    video_packets: int = 0
    audio_packets: int = 0
    width: int = 0
    height: int = 0


class Transcoder:
    """Runs one input file through the decode/filter/encode pipeline.

    The encoder is created lazily from the first frame leaving the filter
    graph, because filters may change the frame size. Copied audio packets
    that arrive before the container header is written are held back.
    """

    def __init__(
        self,
        ictx: InputContext,
        octx: OutputContext,
        settings: EncoderSettings,
        *,
        filter_chain: str | None = None,
        audio: AudioMode = "copy",
        config: FfbindConfig | None = None,
    ) -> None:
        self._ictx = ictx
        self._octx = octx
        self._settings = settings
        self._filter_chain = filter_chain
        self._config = config or FfbindConfig()

        video = ictx.best(MediaType.VIDEO)
        if video is None:
            raise StreamNotFound(f"No video stream in {ictx.path}")
        self._video = video
        self._rate = video.avg_frame_rate or DEFAULT_FRAME_RATE

        self._decoder = Decoder.from_stream(video)
        self._decoder.threads(
            self._config.native.thread_count, self._config.native.thread_type.upper()
        )
        self._decoder.video()

        self._audio_map: dict[int, Any] = {}
        if audio == "copy":
            for info in ictx.streams():
                if info.media_type == MediaType.AUDIO:
                    self._audio_map[info.index] = octx.add_stream_from(info)

        self._graph: Graph | None = None
        self._encoder: Encoder | None = None
        self._out_stream: Any = None
        self._scaler: Scaler | None = None
        self._held_packets: list[tuple[av.Packet, Any]] = []
        self._next_pts = 0
        self.result = TranscodeResult()

    def run(self) -> TranscodeResult:
        """Process the whole input and finalise the output."""
        for info, packet in self._ictx.packets():
            if info.index == self._video.index:
                self._decoder.send_packet(packet)
                self._drain_decoder()
            elif info.index in self._audio_map:
                self._write_audio(packet, self._audio_map[info.index])

        self._decoder.send_eof()
        self._drain_decoder()
        if self._graph is not None:
            self._graph.push(None)
            self._drain_graph(self._graph)

        if self._encoder is None:
            raise InvalidData(f"No frames decoded from video stream #{self._video.index}")
        self._encoder.send_eof()
        self._drain_encoder(self._encoder)
        self._flush_held_packets()
        self._octx.write_trailer()
        logger.info(
            "Transcoded %d frames to %dx%d (%d video, %d audio packets)",
            self.result.frames_encoded,
            self.result.width,
            self.result.height,
            self.result.video_packets,
            self.result.audio_packets,
        )
        return self.result

    def _drain_decoder(self) -> None:
        for frame in _receive_all(self._decoder.receive_frame):
            self.result.frames_decoded += 1
            if self._filter_chain:
                if self._graph is None:
                    self._graph = video_graph(frame, self._filter_chain)
                self._graph.push(frame)
                self._drain_graph(self._graph)
            else:
                self._encode(frame)

    def _drain_graph(self, graph: Graph) -> None:
        for frame in _receive_all(graph.pull):
            self._encode(frame)

    def _encode(self, frame: av.VideoFrame) -> None:
        encoder = self._encoder if self._encoder is not None else self._open_encoder(frame)

        if self._needs_conversion(frame):
            if self._scaler is None:
                self._scaler = Scaler(
                    frame.format.name,
                    frame.width,
                    frame.height,
                    self._settings.pix_fmt,
                    self.result.width,
                    self.result.height,
                    ScalingFlags.BICUBIC,
                )
            frame = self._scaler.run(frame)

        frame.pts = self._next_pts
        frame.time_base = encoder.native.time_base
        self._next_pts += 1
        encoder.send_frame(frame)
        self.result.frames_encoded += 1
        self._drain_encoder(encoder)

    def _needs_conversion(self, frame: av.VideoFrame) -> bool:
        return (
            frame.width != self.result.width
            or frame.height != self.result.height
            or frame.format.name != self._settings.pix_fmt
        )

    def _open_encoder(self, frame: av.VideoFrame) -> Encoder:
        rate = self._settings.rate or self._rate
        self._out_stream = self._octx.add_stream(self._settings.codec, rate=rate)
        encoder = Encoder.for_stream(self._out_stream).video()
        self._settings.apply(encoder, width=frame.width, height=frame.height, frame_rate=rate)
        encoder.open()
        self._encoder = encoder
        self.result.width = encoder.native.width
        self.result.height = encoder.native.height
        self._octx.write_header()
        logger.debug(
            "Opened %s encoder %dx%d @ %s fps",
            self._settings.codec,
            self.result.width,
            self.result.height,
            rate,
        )
        self._flush_held_packets()
        return encoder

    def _drain_encoder(self, encoder: Encoder) -> None:
        for packet in _receive_all(encoder.receive_packet):
            self._octx.write_packet(packet, self._out_stream)
            self.result.video_packets += 1

    def _write_audio(self, packet: av.Packet, stream: Any) -> None:
        if self._encoder is None:
            self._held_packets.append((packet, stream))
            return
        self._octx.write_packet(packet, stream)
        self.result.audio_packets += 1

    def _flush_held_packets(self) -> None:
        held, self._held_packets = self._held_packets, []
        for packet, stream in held:
            self._octx.write_packet(packet, stream)
            self.result.audio_packets += 1


def _receive_all(receive) -> Iterator[Any]:
    """Call a receive function until it reports Again or Eof."""
    while True:
        try:
            yield receive()
        except (Again, Eof):
            return


def transcode(
    input_path: str | PathLike[str],
    output_path: str | PathLike[str],
    settings: EncoderSettings | None = None,
    *,
    filter_chain: str | None = None,
    audio: AudioMode = "copy",
    config: FfbindConfig | None = None,
) -> TranscodeResult:
    """Transcode the video stream of a file and copy or drop its audio.

    Args:
        input_path: Media file to read.
        output_path: File to create; the muxer is chosen by extension.
        settings: Video encoder settings; defaults to EncoderSettings().
        filter_chain: Optional linear filter chain, e.g. "scale=320:-2".
        audio: "copy" to remux audio streams unchanged, "drop" to omit them.
        config: Probe and threading settings.

    Raises:
        StreamNotFound: If the input has no video stream.
        ffbind.util.error.Error: If any native step fails.
    """
    settings = settings or EncoderSettings()
    config = config or FfbindConfig()
    with media_context(input_path):
        with _format.input(
            input_path,
            options=config.probe.demuxer_options() or None,
            timeout=config.probe.timeout,
        ) as ictx, _format.output(output_path) as octx:
            transcoder = Transcoder(
                ictx,
                octx,
                settings,
                filter_chain=filter_chain,
                audio=audio,
                config=config,
            )
            return transcoder.run()
