"""Video scaling and pixel format conversion (libswscale)."""

from __future__ import annotations

import logging
from enum import IntFlag

import av
from av.video.reformatter import VideoReformatter

from ffbind.util.error import InputChanged, translate_errors

logger = logging.getLogger(__name__)


class ScalingFlags(IntFlag):
    """Scaling algorithm (SWS_* values). One algorithm is used per scaler."""

    FAST_BILINEAR = 0x1
    BILINEAR = 0x2
    BICUBIC = 0x4
    X = 0x8
    POINT = 0x10
    AREA = 0x20
    BICUBLIN = 0x40
    GAUSS = 0x80
    SINC = 0x100
    LANCZOS = 0x200
    SPLINE = 0x400

    @property
    def interpolation(self) -> str:
        """Name of the lowest set algorithm bit, as PyAV expects it."""
        for flag in type(self):
            if self & flag:
                return flag.name
        raise ValueError("No scaling algorithm selected")


def _pixel_format(name: str) -> str:
    try:
        return av.VideoFormat(name).name
    except ValueError as e:
        raise ValueError(f"Unknown pixel format: {name}") from e


class Scaler:
    """A scaling context converting frames of one shape into another.

    The source shape is fixed at construction; frames that do not match it
    are rejected with InputChanged instead of being silently reconfigured.
    """

    def __init__(
        self,
        src_format: str,
        src_width: int,
        src_height: int,
        dst_format: str,
        dst_width: int,
        dst_height: int,
        flags: ScalingFlags = ScalingFlags.BILINEAR,
    ) -> None:
        for label, width, height in (
            ("source", src_width, src_height),
            ("destination", dst_width, dst_height),
        ):
            if width <= 0 or height <= 0:
                raise ValueError(f"Invalid {label} size {width}x{height}")
        self.src_format = _pixel_format(src_format)
        self.src_width = src_width
        self.src_height = src_height
        self.dst_format = _pixel_format(dst_format)
        self.dst_width = dst_width
        self.dst_height = dst_height
        self.flags = flags
        self._interpolation = flags.interpolation
        self._reformatter = VideoReformatter()
        logger.debug("Created %r", self)

    def __repr__(self) -> str:
        return (
            f"Scaler({self.src_format} {self.src_width}x{self.src_height} -> "
            f"{self.dst_format} {self.dst_width}x{self.dst_height}, {self._interpolation})"
        )

    def run(self, frame: av.VideoFrame) -> av.VideoFrame:
        """Scale one frame into a newly allocated output frame.

        Raises:
            InputChanged: If the frame's size or format differs from the
                scaler's source.
        """
        if (
            frame.width != self.src_width
            or frame.height != self.src_height
            or frame.format.name != self.src_format
        ):
            raise InputChanged(
                f"Expected {self.src_format} {self.src_width}x{self.src_height}, got "
                f"{frame.format.name} {frame.width}x{frame.height}"
            )
        with translate_errors():
            output = self._reformatter.reformat(
                frame,
                width=self.dst_width,
                height=self.dst_height,
                format=self.dst_format,
                interpolation=self._interpolation,
            )
        output.pts = frame.pts
        output.time_base = frame.time_base
        return output


def scaler(
    format: str,
    flags: ScalingFlags,
    in_size: tuple[int, int],
    out_size: tuple[int, int],
) -> Scaler:
    """Create a scaler that resizes but keeps the pixel format."""
    return Scaler(format, in_size[0], in_size[1], format, out_size[0], out_size[1], flags)


def converter(size: tuple[int, int], input: str, output: str) -> Scaler:
    """Create a pixel format converter that keeps the frame size."""
    width, height = size
    return Scaler(input, width, height, output, width, height, ScalingFlags.FAST_BILINEAR)
