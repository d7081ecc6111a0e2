"""Media type enumeration."""

from enum import Enum


class MediaType(Enum):
    """Kind of data carried by a stream or codec (AVMediaType)."""

    UNKNOWN = "unknown"
    VIDEO = "video"
    AUDIO = "audio"
    DATA = "data"
    SUBTITLE = "subtitle"
    ATTACHMENT = "attachment"

    @classmethod
    def from_name(cls, name: str | None) -> "MediaType":
        """Map PyAV's type string ("video", "audio", ...) to a MediaType."""
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name.casefold())
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        """Display label, e.g. "Video"."""
        return self.value.capitalize()
