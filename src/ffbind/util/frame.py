"""Helpers for decoded (raw) frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import av


@dataclass(frozen=True)
class PlaneInfo:
    """Layout of one data plane of a frame."""

    index: int
    line_size: int  # stride in bytes, 0 for audio planes
    buffer_size: int


def plane_info(frame: av.VideoFrame | av.AudioFrame) -> list[PlaneInfo]:
    """Describe the data planes of a frame."""
    planes: list[PlaneInfo] = []
    for index, plane in enumerate(frame.planes):
        planes.append(
            PlaneInfo(
                index=index,
                line_size=getattr(plane, "line_size", 0),
                buffer_size=plane.buffer_size,
            )
        )
    return planes


def video_frame(width: int, height: int, format: str = "yuv420p") -> av.VideoFrame:
    """Allocate a video frame (contents are uninitialised)."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid frame size {width}x{height}")
    return av.VideoFrame(width, height, format)


def audio_frame(
    format: str = "s16",
    layout: str = "stereo",
    samples: int = 1024,
    rate: int = 48000,
) -> av.AudioFrame:
    """Allocate an audio frame (contents are uninitialised)."""
    if samples <= 0:
        raise ValueError(f"Invalid sample count: {samples}")
    frame = av.AudioFrame(format=format, layout=layout, samples=samples)
    frame.sample_rate = rate
    return frame


def describe_video_frame(frame: av.VideoFrame) -> dict[str, Any]:
    """Summarise a decoded video frame for reporting."""
    return {
        "width": frame.width,
        "height": frame.height,
        "format": frame.format.name,
        "pts": frame.pts,
        "planes": plane_info(frame),
    }
