"""Tests for introspect/formatters.py and the report models."""

import json
from fractions import Fraction

import pytest

from ffbind.introspect.formatters import (
    format_first_frame_lines,
    format_human,
    format_json,
    format_stream_lines,
)
from ffbind.introspect.models import FileReport, FirstFrameReport, StreamReport
from ffbind.introspect.probe import estimate_frame_count
from ffbind.util.frame import PlaneInfo
from ffbind.util.media import MediaType


@pytest.fixture
def video_stream() -> StreamReport:
    return StreamReport(
        index=0,
        media_type=MediaType.VIDEO,
        codec="h264",
        codec_long_name="H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10",
        time_base=Fraction(1, 12800),
        avg_frame_rate=Fraction(25),
        duration=128000,
        width=1920,
        height=1080,
        pixel_format="yuv420p",
        aspect_ratio=Fraction(1, 1),
        metadata={"language": "und"},
    )


@pytest.fixture
def audio_stream() -> StreamReport:
    return StreamReport(
        index=1,
        media_type=MediaType.AUDIO,
        codec="aac",
        time_base=Fraction(1, 48000),
        sample_rate=48000,
        channels=2,
        sample_format="fltp",
    )


@pytest.fixture
def decoded_frame() -> FirstFrameReport:
    return FirstFrameReport(
        decoded=True,
        stream_index=0,
        width=1920,
        height=1080,
        format="yuv420p",
        pts=0,
        planes=[
            PlaneInfo(0, 1920, 2073600),
            PlaneInfo(1, 960, 518400),
            PlaneInfo(2, 960, 518400),
        ],
    )


@pytest.fixture
def report(video_stream, audio_stream, decoded_frame) -> FileReport:
    return FileReport(
        path="movie.mp4",
        format_name="mov,mp4,m4a,3gp,3g2,mj2",
        format_long_name="QuickTime / MOV",
        duration_seconds=10.0,
        bit_rate=5_000_000,
        tags={"title": "Sample"},
        streams=[video_stream, audio_stream],
        estimated_frames=250,
        first_frame=decoded_frame,
    )


class TestEstimateFrameCount:
    """Tests for estimate_frame_count()."""

    def test_duration_times_rate(self) -> None:
        # 10 s at 25 fps
        assert estimate_frame_count(128000, Fraction(1, 12800), Fraction(25)) == 250

    def test_truncates(self) -> None:
        # 1000 ticks of 1/30000 at 29.97 fps is just under one frame
        assert estimate_frame_count(1000, Fraction(1, 30000), Fraction(30000, 1001)) == 0

    def test_ntsc_rate_is_exact(self) -> None:
        assert estimate_frame_count(1001 * 300, Fraction(1, 30000), Fraction(30000, 1001)) == 300

    @pytest.mark.parametrize(
        ("duration", "time_base", "rate"),
        [
            (0, Fraction(1, 25), Fraction(25)),
            (-1, Fraction(1, 25), Fraction(25)),
            (100, None, Fraction(25)),
            (100, Fraction(1, 25), None),
            (100, Fraction(1, 25), Fraction(0)),
        ],
    )
    def test_unknown(self, duration, time_base, rate) -> None:
        assert estimate_frame_count(duration, time_base, rate) is None


class TestFormatStreamLines:
    """Tests for format_stream_lines()."""

    def test_video_stream(self, video_stream: StreamReport) -> None:
        lines = format_stream_lines(video_stream)

        assert lines[0] == "  Stream #0"
        assert "    Type: Video" in lines
        assert "    Codec: h264" in lines
        assert "    Time base: 1/12800" in lines
        assert "    FPS: 25.00" in lines
        assert "    Resolution: 1920x1080" in lines
        assert "    Pixel format: yuv420p" in lines
        assert "    Aspect ratio: 1/1 (1.00)" in lines
        assert lines[-2:] == ["    Metadata:", "      language: und"]

    def test_audio_stream(self, audio_stream: StreamReport) -> None:
        lines = format_stream_lines(audio_stream)

        assert "    Type: Audio" in lines
        assert "    Sample rate: 48000 Hz" in lines
        assert "    Channels: 2" in lines
        assert "    Format: fltp" in lines
        assert not any(line.startswith("    FPS") for line in lines)

    def test_subtitle_stream(self) -> None:
        stream = StreamReport(index=2, media_type=MediaType.SUBTITLE, codec="mov_text")
        lines = format_stream_lines(stream)

        assert "    (Subtitle stream)" in lines
        assert "    Time base: 0/0" in lines

    def test_unknown_codec(self) -> None:
        stream = StreamReport(index=3, media_type=MediaType.DATA)
        assert "    Codec: unknown" in format_stream_lines(stream)


class TestFormatFirstFrameLines:
    """Tests for format_first_frame_lines()."""

    def test_skipped(self) -> None:
        assert format_first_frame_lines(None) == ["  (skipped)"]

    def test_success(self, decoded_frame: FirstFrameReport) -> None:
        lines = format_first_frame_lines(decoded_frame)

        assert lines[0] == "  ✓ Successfully decoded first frame!"
        assert "    Plane count: 3" in lines
        assert "    Plane 0: stride = 1920, size = 2073600 bytes" in lines

    def test_failure_with_reason(self) -> None:
        failed = FirstFrameReport(decoded=False, stream_index=0, error="Invalid data")
        assert format_first_frame_lines(failed) == [
            "  ✗ Failed to decode first frame",
            "    Reason: Invalid data",
        ]


class TestFormatHuman:
    """Tests for format_human()."""

    def test_full_report(self, report: FileReport) -> None:
        output = format_human(report)

        assert output.startswith("=== FFmpeg Video Analyzer ===\n\nFile: movie.mp4")
        assert "  Format: mov,mp4,m4a,3gp,3g2,mj2" in output
        assert "  Duration: 10.00s (0.17 min)" in output
        assert "  Bitrate: 5.00 Mbps" in output
        assert "    title: Sample" in output
        assert "📺 STREAMS (2 total)" in output
        assert "  Estimated frames: ~250" in output
        assert "🎬 FIRST FRAME TEST" in output
        assert output.endswith("✅ Analysis complete!")

    def test_unknown_duration_and_bitrate_omitted(self, report: FileReport) -> None:
        report.duration_seconds = None
        report.bit_rate = 0
        output = format_human(report)

        assert "Duration:" not in output
        assert "Bitrate:" not in output

    def test_no_video_stream(self, audio_stream: StreamReport) -> None:
        report = FileReport(
            path="song.m4a",
            format_name="mov,mp4,m4a,3gp,3g2,mj2",
            format_long_name="QuickTime / MOV",
            streams=[audio_stream],
        )
        output = format_human(report)

        assert "⚠ No video stream found" in output
        assert "FRAME INFO" not in output
        assert "FIRST FRAME TEST" not in output

    def test_missing_estimate_omits_frame_info(self, report: FileReport) -> None:
        report.estimated_frames = None
        assert "FRAME INFO" not in format_human(report)


class TestFormatJson:
    """Tests for format_json() and to_dict()."""

    def test_round_trips_through_json(self, report: FileReport) -> None:
        data = json.loads(format_json(report))

        assert data["file"] == "movie.mp4"
        assert data["video_stream_index"] == 0
        assert data["estimated_frames"] == 250
        assert data["streams"][0]["time_base"] == "1/12800"
        assert data["streams"][0]["fps"] == 25.0
        assert data["streams"][1]["sample_rate"] == 48000
        assert "width" not in data["streams"][1]
        assert data["first_frame"]["planes"][1] == {"index": 1, "stride": 960, "size": 518400}

    def test_failed_first_frame_has_error_only(self) -> None:
        failed = FirstFrameReport(decoded=False, stream_index=2, error="boom")
        assert failed.to_dict() == {"decoded": False, "stream_index": 2, "error": "boom"}

    def test_last_video_stream_is_reported(self, video_stream: StreamReport) -> None:
        second = StreamReport(index=1, media_type=MediaType.VIDEO, codec="mjpeg")
        report = FileReport(
            path="x.mkv",
            format_name="matroska,webm",
            format_long_name="Matroska / WebM",
            streams=[video_stream, second],
        )
        assert report.video_stream is second
        assert report.to_dict()["video_stream_index"] == 1
