"""Media file analysis: the engine behind ``ffbind info`` and ``video-info``."""

from ffbind.introspect.formatters import format_human, format_json
from ffbind.introspect.models import FileReport, FirstFrameReport, StreamReport
from ffbind.introspect.probe import (
    analyze,
    decode_first_frame,
    estimate_frame_count,
    probe,
)

__all__ = [
    "FileReport",
    "FirstFrameReport",
    "StreamReport",
    "analyze",
    "decode_first_frame",
    "estimate_frame_count",
    "format_human",
    "format_json",
    "probe",
]
