"""Read-only views of container streams and chapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any

from ffbind.util.media import MediaType

# AV_DISPOSITION_DEFAULT
_DISPOSITION_DEFAULT = 0x0001


@dataclass
class StreamInfo:
    """A stream of an input or output container.

    Values are copied from the native stream when the view is built;
    ``native`` keeps the underlying PyAV stream for codec access.
    """

    index: int
    media_type: MediaType
    codec_name: str | None = None
    codec_long_name: str | None = None
    time_base: Fraction | None = None
    avg_frame_rate: Fraction | None = None
    duration: int = 0  # in time_base units, 0 when unknown
    frames: int = 0  # 0 when the container does not record it
    start_time: int | None = None
    is_default: bool = False
    language: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    native: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_native(cls, stream: Any) -> StreamInfo:
        """Build a StreamInfo from a PyAV stream."""
        codec_context = getattr(stream, "codec_context", None)
        codec_name = None
        codec_long_name = None
        if codec_context is not None:
            codec_name = codec_context.name
            codec = getattr(codec_context, "codec", None)
            codec_long_name = getattr(codec, "long_name", None)

        avg_rate = getattr(stream, "average_rate", None)
        if avg_rate is not None and avg_rate.denominator == 0:
            avg_rate = None

        metadata = dict(stream.metadata or {})
        return cls(
            index=stream.index,
            media_type=MediaType.from_name(stream.type),
            codec_name=codec_name,
            codec_long_name=codec_long_name,
            time_base=stream.time_base,
            avg_frame_rate=avg_rate,
            duration=stream.duration or 0,
            frames=stream.frames or 0,
            start_time=stream.start_time,
            is_default=bool(int(getattr(stream, "disposition", 0)) & _DISPOSITION_DEFAULT),
            language=metadata.get("language"),
            metadata=metadata,
            native=stream,
        )

    @property
    def parameters(self) -> Any:
        """Codec context of the stream (its codec parameters)."""
        if self.native is None:
            return None
        return self.native.codec_context

    @property
    def duration_seconds(self) -> float | None:
        """Stream duration in seconds, None when unknown."""
        if self.duration <= 0 or self.time_base is None:
            return None
        return float(self.duration * self.time_base)


@dataclass(frozen=True)
class ChapterInfo:
    """A container chapter; start and end are in time_base units."""

    id: int
    start: int
    end: int
    time_base: Fraction | None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_native(cls, chapter: dict[str, Any]) -> ChapterInfo:
        """Build a ChapterInfo from one entry of PyAV's ``chapters()``."""
        return cls(
            id=chapter["id"],
            start=chapter["start"],
            end=chapter["end"],
            time_base=chapter["time_base"],
            metadata=dict(chapter.get("metadata") or {}),
        )

    def to_native(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "time_base": self.time_base,
            "metadata": dict(self.metadata),
        }

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")

    @property
    def start_seconds(self) -> float | None:
        if self.time_base is None:
            return None
        return float(self.start * self.time_base)

    @property
    def end_seconds(self) -> float | None:
        if self.time_base is None:
            return None
        return float(self.end * self.time_base)
