"""Pydantic models for user-facing encoder settings.

- parse_bitrate / parse_size: helpers for CLI style values ("2M", "640x360")
- EncoderSettings: validated video encoder choices, applied to an Encoder
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from ffbind.codec.encoder import Encoder

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")
_RATE_PATTERN = re.compile(r"^\s*(\d+)\s*(?:/\s*(\d+)\s*)?$")


def parse_bitrate(bitrate_str: str) -> int | None:
    """Parse a bitrate string like '10M' or '5000k' to bits per second.

    Args:
        bitrate_str: Bitrate with M/m (megabits) or K/k (kilobits) suffix,
            or a plain number of bits per second.

    Returns:
        Bitrate in bits per second, or None if parsing fails.

    Examples:
        parse_bitrate("10M") -> 10_000_000
        parse_bitrate("5000k") -> 5_000_000
        parse_bitrate("1.5M") -> 1_500_000
    """
    if not bitrate_str:
        return None

    bitrate_str = bitrate_str.strip()
    try:
        if bitrate_str[-1].casefold() == "m":
            value = int(float(bitrate_str[:-1]) * 1_000_000)
        elif bitrate_str[-1].casefold() == "k":
            value = int(float(bitrate_str[:-1]) * 1_000)
        else:
            value = int(bitrate_str)
    except (ValueError, IndexError):
        return None
    return value if value > 0 else None


def parse_size(size_str: str) -> tuple[int, int] | None:
    """Parse 'WIDTHxHEIGHT' into a tuple, None if malformed or zero."""
    match = _SIZE_PATTERN.match(size_str or "")
    if not match:
        return None
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        return None
    return width, height


class EncoderSettings(BaseModel):
    """Validated video encoder configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    codec: str = "mpeg4"
    bit_rate: str | None = None
    max_bit_rate: str | None = None
    size: str | None = None
    pix_fmt: str = "yuv420p"
    frame_rate: str | None = None
    gop_size: int | None = Field(default=None, ge=1)
    options: dict[str, str] = Field(default_factory=dict)

    @field_validator("codec")
    @classmethod
    def validate_codec(cls, v: str) -> str:
        """Codec names are non-empty identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("codec must not be empty")
        return v

    @field_validator("bit_rate", "max_bit_rate")
    @classmethod
    def validate_bitrate(cls, v: str | None) -> str | None:
        """Validate bitrate format."""
        if v is not None and parse_bitrate(v) is None:
            raise ValueError(
                f"Invalid bitrate '{v}'. "
                "Must be a number optionally followed by M or k (e.g., '2M', '800k')."
            )
        return v

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: str | None) -> str | None:
        """Validate WIDTHxHEIGHT format."""
        if v is not None and parse_size(v) is None:
            raise ValueError(f"Invalid size '{v}'. Must be WIDTHxHEIGHT (e.g., '640x360').")
        return v

    @field_validator("frame_rate")
    @classmethod
    def validate_frame_rate(cls, v: str | None) -> str | None:
        """Validate 'N' or 'N/D' with positive terms."""
        if v is None:
            return v
        match = _RATE_PATTERN.match(v)
        if not match or int(match.group(1)) == 0 or match.group(2) == "0":
            raise ValueError(f"Invalid frame rate '{v}'. Must be N or N/D (e.g., '25', '30000/1001').")
        return v

    @model_validator(mode="after")
    def validate_rate_control(self) -> EncoderSettings:
        """A max bit rate below the target bit rate is a user error."""
        if self.bit_rate is not None and self.max_bit_rate is not None:
            if parse_bitrate(self.max_bit_rate) < parse_bitrate(self.bit_rate):
                raise ValueError(
                    f"max_bit_rate ({self.max_bit_rate}) must not be lower than "
                    f"bit_rate ({self.bit_rate})"
                )
        return self

    @property
    def bit_rate_bps(self) -> int | None:
        return parse_bitrate(self.bit_rate) if self.bit_rate else None

    @property
    def dimensions(self) -> tuple[int, int] | None:
        return parse_size(self.size) if self.size else None

    @property
    def rate(self) -> Fraction | None:
        if self.frame_rate is None:
            return None
        return Fraction(self.frame_rate.replace(" ", ""))

    def apply(
        self,
        encoder: Encoder,
        *,
        width: int,
        height: int,
        frame_rate: Fraction | None = None,
    ) -> None:
        """Configure a video encoder; explicit size and rate override the source."""
        dimensions = self.dimensions or (width, height)
        encoder.configure_video(
            dimensions[0],
            dimensions[1],
            self.pix_fmt,
            frame_rate=self.rate or frame_rate,
            gop_size=self.gop_size,
        )
        if self.bit_rate is not None:
            encoder.set_bit_rate(parse_bitrate(self.bit_rate))
        if self.max_bit_rate is not None:
            encoder.set_max_bit_rate(parse_bitrate(self.max_bit_rate))
        if self.options:
            encoder.native.options = {**encoder.native.options, **self.options}
