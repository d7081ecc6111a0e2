"""Formatters for analysis reports.

format_human() renders the classic analyzer report for terminals;
format_json() renders the same data for scripts.
"""

import json

from ffbind.introspect.models import FileReport, FirstFrameReport, StreamReport
from ffbind.util.media import MediaType
from ffbind.util.rational import format_rational


def format_human(report: FileReport) -> str:
    """Format a report for human-readable output.

    Args:
        report: The report to format.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = ["=== FFmpeg Video Analyzer ===", "", f"File: {report.path}", ""]

    lines.append("📄 FILE METADATA")
    lines.append(f"  Format: {report.format_name}")
    lines.append(f"  Format (long): {report.format_long_name}")
    if report.duration_seconds is not None and report.duration_seconds > 0:
        secs = report.duration_seconds
        lines.append(f"  Duration: {secs:.2f}s ({secs / 60.0:.2f} min)")
    if report.bit_rate is not None and report.bit_rate > 0:
        lines.append(f"  Bitrate: {report.bit_rate / 1_000_000:.2f} Mbps")

    if report.tags:
        lines.append("")
        lines.append("  Tags:")
        for key, value in report.tags.items():
            lines.append(f"    {key}: {value}")

    lines.append("")
    lines.append(f"📺 STREAMS ({len(report.streams)} total)")
    for stream in report.streams:
        lines.append("")
        lines.extend(format_stream_lines(stream))

    video = report.video_stream
    if video is not None and report.estimated_frames is not None:
        lines.append("")
        lines.append("📊 FRAME INFO")
        lines.append(f"  Estimated frames: ~{report.estimated_frames}")

    if video is not None:
        lines.append("")
        lines.append("🎬 FIRST FRAME TEST")
        lines.extend(format_first_frame_lines(report.first_frame))
    else:
        lines.append("")
        lines.append("⚠ No video stream found")

    lines.append("")
    lines.append("✅ Analysis complete!")
    return "\n".join(lines)


def format_stream_lines(stream: StreamReport) -> list[str]:
    """Format one stream block.

    Args:
        stream: The stream to format.

    Returns:
        Indented lines, starting with the "Stream #N" header.
    """
    lines = [
        f"  Stream #{stream.index}",
        f"    Type: {stream.media_type.label}",
        f"    Codec: {stream.codec or 'unknown'}",
        f"    Time base: {format_rational(stream.time_base)}",
    ]
    if stream.fps is not None:
        lines.append(f"    FPS: {stream.fps:.2f}")

    if stream.media_type == MediaType.VIDEO:
        if stream.width is not None and stream.height is not None:
            lines.append(f"    Resolution: {stream.width}x{stream.height}")
        if stream.pixel_format is not None:
            lines.append(f"    Pixel format: {stream.pixel_format}")
        aspect = stream.aspect_ratio
        if aspect is not None and aspect.numerator > 0:
            lines.append(
                f"    Aspect ratio: {aspect.numerator}/{aspect.denominator} ({float(aspect):.2f})"
            )
    elif stream.media_type == MediaType.AUDIO:
        if stream.sample_rate is not None:
            lines.append(f"    Sample rate: {stream.sample_rate} Hz")
        if stream.channels is not None:
            lines.append(f"    Channels: {stream.channels}")
        if stream.sample_format is not None:
            lines.append(f"    Format: {stream.sample_format}")
    elif stream.media_type == MediaType.SUBTITLE:
        lines.append("    (Subtitle stream)")

    if stream.metadata:
        lines.append("    Metadata:")
        for key, value in stream.metadata.items():
            lines.append(f"      {key}: {value}")
    return lines


def format_first_frame_lines(first_frame: FirstFrameReport | None) -> list[str]:
    """Format the first-frame test result."""
    if first_frame is None:
        return ["  (skipped)"]
    if not first_frame.decoded:
        lines = ["  ✗ Failed to decode first frame"]
        if first_frame.error:
            lines.append(f"    Reason: {first_frame.error}")
        return lines

    lines = [
        "  ✓ Successfully decoded first frame!",
        f"    Width: {first_frame.width}",
        f"    Height: {first_frame.height}",
        f"    Format: {first_frame.format}",
        f"    PTS: {first_frame.pts}",
        f"    Plane count: {len(first_frame.planes)}",
    ]
    for plane in first_frame.planes:
        lines.append(
            f"    Plane {plane.index}: stride = {plane.line_size}, size = {plane.buffer_size} bytes"
        )
    return lines


def format_json(report: FileReport) -> str:
    """Format a report as JSON.

    Args:
        report: The report to format.

    Returns:
        JSON string.
    """
    return json.dumps(report.to_dict(), indent=2)
