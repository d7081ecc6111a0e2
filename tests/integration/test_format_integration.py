"""Integration tests for demuxing and muxing with real files."""

from fractions import Fraction
from pathlib import Path

import pytest

from ffbind import format as ffformat
from ffbind.util.error import DemuxerNotFound, InvalidData, MuxerNotFound, Other, StreamNotFound
from ffbind.util.media import MediaType


pytestmark = pytest.mark.integration

# Frames in the generated test video
VIDEO_FRAMES = 10


class TestInput:
    """Tests for opening and reading input files."""

    def test_container_properties(self, video_file: Path) -> None:
        with ffformat.input(video_file) as ictx:
            assert "mp4" in ictx.format_name
            assert ictx.format_description
            assert ictx.nb_streams == 1
            assert ictx.duration_seconds == pytest.approx(VIDEO_FRAMES / 25, abs=0.1)
            assert ictx.metadata.get("title") == "ffbind test"
        assert ictx.closed

    def test_stream_info(self, av_file: Path) -> None:
        with ffformat.input(av_file) as ictx:
            video, audio = ictx.streams()

            assert video.media_type is MediaType.VIDEO
            assert video.codec_name == "mpeg4"
            assert video.avg_frame_rate == 25
            assert video.time_base is not None
            assert audio.media_type is MediaType.AUDIO
            assert audio.codec_name == "aac"
            assert ictx.stream(5) is None

    def test_best_stream(self, av_file: Path) -> None:
        with ffformat.input(av_file) as ictx:
            assert ictx.best(MediaType.VIDEO).index == 0
            assert ictx.best(MediaType.AUDIO).index == 1
            assert ictx.best(MediaType.SUBTITLE) is None

    def test_packets_cover_all_streams(self, av_file: Path) -> None:
        with ffformat.input(av_file) as ictx:
            indices = {info.index for info, packet in ictx.packets()}
        assert indices == {0, 1}

    def test_demux_single_stream(self, av_file: Path) -> None:
        with ffformat.input(av_file) as ictx:
            packets = [p for p in ictx.demux(0) if p.size > 0]
        assert len(packets) == VIDEO_FRAMES
        assert all(p.stream.index == 0 for p in packets)

    def test_demux_unknown_stream(self, video_file: Path) -> None:
        with ffformat.input(video_file) as ictx:
            with pytest.raises(StreamNotFound):
                list(ictx.demux(3))

    def test_no_chapters(self, video_file: Path) -> None:
        with ffformat.input(video_file) as ctx:
            assert ctx.chapters() == []

    def test_seek_to_start(self, video_file: Path) -> None:
        with ffformat.input(video_file) as ictx:
            first = [p for p in ictx.demux(0) if p.size > 0]
            ictx.seek(0, stream=0)
            again = [p for p in ictx.demux(0) if p.size > 0]
        assert len(again) == len(first)

    def test_input_with_dictionary(self, video_file: Path) -> None:
        with ffformat.input_with_dictionary(video_file, {"probesize": "32768"}) as ictx:
            assert ictx.nb_streams == 1

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(Other) as exc_info:
            ffformat.input(temp_dir / "missing.mp4")
        assert exc_info.value.errno == 2

    def test_garbage_file(self, temp_dir: Path) -> None:
        path = temp_dir / "garbage.mp4"
        path.write_bytes(b"this is not a media file" * 64)
        with pytest.raises(InvalidData):
            ffformat.input(path)


class TestOutput:
    """Tests for writing files."""

    def test_remux(self, av_file: Path, temp_dir: Path) -> None:
        target = temp_dir / "remux.mkv"
        with ffformat.input(av_file) as ictx, ffformat.output(target) as octx:
            mapping = {info.index: octx.add_stream_from(info) for info in ictx.streams()}
            octx.write_header()
            for info, packet in ictx.packets():
                octx.write_packet(packet, mapping[info.index])
            octx.write_trailer()

        with ffformat.input(target) as result:
            assert result.format_name.startswith("matroska")
            assert [s.codec_name for s in result.streams()] == ["mpeg4", "aac"]

    def test_chapters_survive_remux(self, video_file: Path, temp_dir: Path) -> None:
        target = temp_dir / "chapters.mkv"
        written = [
            ffformat.ChapterInfo(1, 0, 200, Fraction(1, 1000), {"title": "Opening"}),
            ffformat.ChapterInfo(2, 200, 400, Fraction(1, 1000), {"title": "Closing"}),
        ]
        with ffformat.input(video_file) as ictx, ffformat.output(target) as octx:
            stream = octx.add_stream_from(ictx.best(MediaType.VIDEO))
            octx.set_chapters(written)
            octx.write_header()
            for _, packet in ictx.packets():
                octx.write_packet(packet, stream)
            with pytest.raises(RuntimeError, match="already written"):
                octx.set_chapters([])
            octx.write_trailer()

        with ffformat.input(target) as result:
            chapters = result.chapters()
        assert [c.title for c in chapters] == ["Opening", "Closing"]
        assert chapters[0].start_seconds == pytest.approx(0.0)
        assert chapters[1].start_seconds == pytest.approx(0.2)
        assert chapters[1].end_seconds == pytest.approx(0.4)

    def test_output_as_explicit_format(self, temp_dir: Path) -> None:
        with ffformat.output_as(temp_dir / "out.bin", "matroska") as octx:
            assert octx.format_name == "matroska"

    def test_closed_output_rejects_writes(self, temp_dir: Path) -> None:
        octx = ffformat.output(temp_dir / "closed.mkv")
        octx.close()
        octx.close()
        with pytest.raises(RuntimeError, match="closed"):
            octx.add_stream("mpeg4")

    def test_unknown_muxer(self, temp_dir: Path) -> None:
        with pytest.raises(MuxerNotFound):
            ffformat.output_as(temp_dir / "x.out", "no_such_muxer")

    def test_unknown_demuxer(self, video_file: Path) -> None:
        with pytest.raises(DemuxerNotFound):
            ffformat.input(video_file, format="no_such_demuxer")


class TestListFormats:
    def test_demuxers_and_muxers(self) -> None:
        demuxers = ffformat.list_formats("input")
        muxers = ffformat.list_formats("output")
        assert "matroska,webm" in demuxers
        assert "mp4" in muxers
        assert demuxers == sorted(demuxers)
