"""Media file analysis.

probe() reads container and stream metadata; decode_first_frame() reopens
the file and decodes until the first frame of a video stream comes out.
analyze() combines both into one FileReport.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from os import PathLike

from ffbind import format as _format
from ffbind.codec.decoder import Decoder
from ffbind.config.models import FfbindConfig
from ffbind.format.stream import StreamInfo
from ffbind.introspect.models import FileReport, FirstFrameReport, StreamReport
from ffbind.logging.context import media_context
from ffbind.util.error import Again, Eof, Error, StreamNotFound
from ffbind.util.frame import plane_info
from ffbind.util.media import MediaType

logger = logging.getLogger(__name__)


def estimate_frame_count(
    duration: int,
    time_base: Fraction | None,
    avg_frame_rate: Fraction | None,
) -> int | None:
    """Estimate a stream's frame count as duration x frame rate, truncated.

    Args:
        duration: Stream duration in time_base units.
        time_base: Stream time base.
        avg_frame_rate: Average frame rate.

    Returns:
        Estimated frame count, or None when the duration or frame rate is
        unknown.
    """
    if duration <= 0 or time_base is None or avg_frame_rate is None:
        return None
    if avg_frame_rate.numerator <= 0 or avg_frame_rate.denominator <= 0:
        return None
    return int(duration * time_base * avg_frame_rate)


def _open(path: str | PathLike[str], config: FfbindConfig) -> _format.InputContext:
    return _format.input(
        path,
        options=config.probe.demuxer_options() or None,
        timeout=config.probe.timeout,
    )


def _stream_report(info: StreamInfo) -> StreamReport:
    report = StreamReport(
        index=info.index,
        media_type=info.media_type,
        codec=info.codec_name,
        codec_long_name=info.codec_long_name,
        time_base=info.time_base,
        avg_frame_rate=info.avg_frame_rate,
        duration=info.duration,
        metadata=dict(info.metadata),
    )
    if info.parameters is None:
        return report

    decoder = Decoder.from_stream(info)
    if info.media_type == MediaType.VIDEO:
        report.width = decoder.width
        report.height = decoder.height
        report.pixel_format = decoder.format_name
        report.aspect_ratio = decoder.aspect_ratio
    elif info.media_type == MediaType.AUDIO:
        report.sample_rate = decoder.rate
        report.channels = decoder.channels
        report.sample_format = decoder.format_name
    return report


def probe(path: str | PathLike[str], config: FfbindConfig | None = None) -> FileReport:
    """Read container and stream metadata.

    Args:
        path: Media file to analyse.
        config: Settings for opening the file; defaults to FfbindConfig().

    Returns:
        FileReport without a first-frame result.

    Raises:
        ffbind.util.error.Error: If the file cannot be opened or probed.
    """
    config = config or FfbindConfig()
    with media_context(path), _open(path, config) as ictx:
        report = FileReport(
            path=str(path),
            format_name=ictx.format_name,
            format_long_name=ictx.format_description,
            duration_seconds=ictx.duration_seconds,
            bit_rate=ictx.bit_rate or None,
            tags=ictx.metadata,
            streams=[_stream_report(info) for info in ictx.streams()],
        )
        logger.debug("Probed %s: %s, %d streams", path, report.format_name, len(report.streams))

    video = report.video_stream
    if video is not None:
        report.estimated_frames = estimate_frame_count(
            video.duration, video.time_base, video.avg_frame_rate
        )
    return report


def decode_first_frame(
    path: str | PathLike[str],
    stream_index: int,
    config: FfbindConfig | None = None,
) -> FirstFrameReport:
    """Decode the first frame of a video stream.

    Only packets of the requested stream reach the decoder. When the
    packets run out before a frame appears, the decoder is drained so
    codecs with frame delay still produce their first picture.

    Raises:
        StreamNotFound: If the file has no stream at stream_index.
        ffbind.util.error.Error: If the file cannot be opened or no
            decoder exists for the stream.
    """
    config = config or FfbindConfig()
    with media_context(path, stream_index), _open(path, config) as ictx:
        info = ictx.stream(stream_index)
        if info is None:
            raise StreamNotFound(f"Stream #{stream_index} not found in {path}")

        decoder = Decoder.from_stream(info)
        decoder.threads(config.native.thread_count, config.native.thread_type.upper())
        decoder.video()

        try:
            for packet in ictx.demux(stream_index):
                if packet.size == 0:
                    continue
                decoder.send_packet(packet)
                try:
                    frame = decoder.receive_frame()
                except Again:
                    continue
                return _frame_report(stream_index, frame)

            decoder.send_eof()
            try:
                frame = decoder.receive_frame()
            except Eof:
                logger.info("No frame decoded from stream #%d of %s", stream_index, path)
                return FirstFrameReport(decoded=False, stream_index=stream_index)
            return _frame_report(stream_index, frame)
        except Error as e:
            logger.warning("Decoding stream #%d of %s failed: %s", stream_index, path, e)
            return FirstFrameReport(decoded=False, stream_index=stream_index, error=str(e))


def _frame_report(stream_index: int, frame) -> FirstFrameReport:
    return FirstFrameReport(
        decoded=True,
        stream_index=stream_index,
        width=frame.width,
        height=frame.height,
        format=frame.format.name,
        pts=frame.pts,
        planes=plane_info(frame),
    )


def analyze(
    path: str | PathLike[str],
    config: FfbindConfig | None = None,
    *,
    decode: bool | None = None,
) -> FileReport:
    """Probe a file and, if it has video, test-decode its first frame.

    Args:
        path: Media file to analyse.
        config: Settings; defaults to FfbindConfig().
        decode: Override config.probe.decode_first_frame.
    """
    config = config or FfbindConfig()
    report = probe(path, config)
    if decode is None:
        decode = config.probe.decode_first_frame

    video = report.video_stream
    if decode and video is not None:
        report.first_frame = decode_first_frame(path, video.index, config)
    return report
