"""Data models for media analysis reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any

from ffbind.util.frame import PlaneInfo
from ffbind.util.media import MediaType
from ffbind.util.rational import format_rational


@dataclass
class StreamReport:
    """What the analyzer learned about one stream."""

    index: int
    media_type: MediaType
    codec: str | None = None
    codec_long_name: str | None = None
    time_base: Fraction | None = None
    avg_frame_rate: Fraction | None = None
    duration: int = 0  # in time_base units
    # Video
    width: int | None = None
    height: int | None = None
    pixel_format: str | None = None
    aspect_ratio: Fraction | None = None
    # Audio
    sample_rate: int | None = None
    channels: int | None = None
    sample_format: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def fps(self) -> float | None:
        """Average frame rate as float, None when unknown."""
        rate = self.avg_frame_rate
        if rate is None or rate.numerator <= 0:
            return None
        return float(rate)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "index": self.index,
            "type": self.media_type.value,
            "codec": self.codec,
            "codec_long_name": self.codec_long_name,
            "time_base": format_rational(self.time_base),
            "duration": self.duration,
        }
        if self.fps is not None:
            d["fps"] = round(self.fps, 3)
            d["avg_frame_rate"] = format_rational(self.avg_frame_rate)

        optional_fields = (
            "width",
            "height",
            "pixel_format",
            "sample_rate",
            "channels",
            "sample_format",
        )
        for name in optional_fields:
            if (value := getattr(self, name)) is not None:
                d[name] = value
        if self.aspect_ratio is not None:
            d["aspect_ratio"] = format_rational(self.aspect_ratio)
        d["metadata"] = dict(self.metadata)
        return d


@dataclass
class FirstFrameReport:
    """Outcome of decoding the first frame of a video stream."""

    decoded: bool
    stream_index: int
    width: int | None = None
    height: int | None = None
    format: str | None = None
    pts: int | None = None
    planes: list[PlaneInfo] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"decoded": self.decoded, "stream_index": self.stream_index}
        if self.decoded:
            d.update(
                width=self.width,
                height=self.height,
                format=self.format,
                pts=self.pts,
                planes=[
                    {
                        "index": p.index,
                        "stride": p.line_size,
                        "size": p.buffer_size,
                    }
                    for p in self.planes
                ],
            )
        if self.error:
            d["error"] = self.error
        return d


@dataclass
class FileReport:
    """Everything the analyzer reports about one media file."""

    path: str
    format_name: str
    format_long_name: str
    duration_seconds: float | None = None
    bit_rate: int | None = None
    tags: dict[str, str] = field(default_factory=dict)
    streams: list[StreamReport] = field(default_factory=list)
    estimated_frames: int | None = None
    first_frame: FirstFrameReport | None = None

    @property
    def video_stream(self) -> StreamReport | None:
        """The video stream the frame estimate and decode test refer to.

        This is the last video stream in container order.
        """
        video = [s for s in self.streams if s.media_type == MediaType.VIDEO]
        return video[-1] if video else None

    def to_dict(self) -> dict[str, Any]:
        video = self.video_stream
        return {
            "file": self.path,
            "format": self.format_name,
            "format_long_name": self.format_long_name,
            "duration_seconds": self.duration_seconds,
            "bit_rate": self.bit_rate,
            "tags": dict(self.tags),
            "streams": [s.to_dict() for s in self.streams],
            "video_stream_index": video.index if video else None,
            "estimated_frames": self.estimated_frames,
            "first_frame": self.first_frame.to_dict() if self.first_frame else None,
        }
