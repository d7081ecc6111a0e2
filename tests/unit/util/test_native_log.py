"""Tests for util/log.py and util/frame.py."""

from unittest import mock

import pytest

from ffbind.util import log as native_log
from ffbind.util.frame import PlaneInfo, audio_frame, describe_video_frame, plane_info, video_frame
from ffbind.util.log import Level, level_from_name


class TestLevelFromName:
    """Tests for level_from_name()."""

    def test_known_names(self) -> None:
        assert level_from_name("error") is Level.ERROR
        assert level_from_name("QUIET") is Level.QUIET
        assert level_from_name(" trace ") is Level.TRACE

    def test_values_match_libav(self) -> None:
        assert Level.QUIET == -8
        assert Level.WARNING == 24
        assert Level.TRACE == 56

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level 'loud'"):
            level_from_name("loud")


class TestSetLevel:
    """Tests for set_level() and get_level()."""

    def test_set_level_calls_pyav(self) -> None:
        with mock.patch.object(native_log.av.logging, "set_level") as set_level:
            native_log.set_level(Level.WARNING)
        set_level.assert_called_once_with(24)

    def test_set_level_rejects_unknown_value(self) -> None:
        with pytest.raises(ValueError):
            native_log.set_level(17)

    def test_get_level_none_when_disabled(self) -> None:
        with mock.patch.object(native_log.av.logging, "get_level", return_value=None):
            assert native_log.get_level() is None

    def test_get_level(self) -> None:
        with mock.patch.object(native_log.av.logging, "get_level", return_value=16):
            assert native_log.get_level() is Level.ERROR


class TestFrames:
    """Tests for frame allocation and plane description."""

    def test_video_frame_planes(self) -> None:
        frame = video_frame(64, 48, "yuv420p")
        planes = plane_info(frame)

        assert len(planes) == 3
        assert planes[0].index == 0
        assert planes[0].line_size >= 64
        assert planes[1].line_size >= 32
        assert all(p.buffer_size > 0 for p in planes)

    def test_video_frame_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            video_frame(0, 48)

    def test_describe_video_frame(self) -> None:
        frame = video_frame(32, 16, "gray")
        info = describe_video_frame(frame)

        assert info["width"] == 32
        assert info["height"] == 16
        assert info["format"] == "gray"
        assert len(info["planes"]) == 1
        assert isinstance(info["planes"][0], PlaneInfo)

    def test_audio_frame(self) -> None:
        frame = audio_frame("fltp", "stereo", samples=512, rate=44100)

        assert frame.samples == 512
        assert frame.sample_rate == 44100
        assert len(plane_info(frame)) == 2

    def test_audio_frame_invalid_samples(self) -> None:
        with pytest.raises(ValueError):
            audio_frame(samples=0)
