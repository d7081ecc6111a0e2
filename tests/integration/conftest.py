"""Integration test fixtures: small media files generated with PyAV.

Files are encoded once per session with the mpeg4 and aac encoders that
ship with every FFmpeg build, so no external tools or fixture files are
needed.
"""

from __future__ import annotations

from collections.abc import Callable
from fractions import Fraction
from pathlib import Path

import pytest

av = pytest.importorskip("av")

VIDEO_WIDTH = 64
VIDEO_HEIGHT = 48
VIDEO_FRAMES = 10
VIDEO_RATE = 25


def _fill(frame, value: int) -> None:
    for plane in frame.planes:
        plane.update(bytes([value]) * plane.buffer_size)


def generate_media(
    path: Path,
    *,
    width: int = VIDEO_WIDTH,
    height: int = VIDEO_HEIGHT,
    frames: int = VIDEO_FRAMES,
    rate: int = VIDEO_RATE,
    audio: bool = False,
    video: bool = True,
    title: str | None = None,
) -> Path:
    """Encode a short test file.

    Args:
        path: Output file; the muxer is chosen from the extension.
        width: Picture width.
        height: Picture height.
        frames: Number of video frames.
        rate: Frame rate.
        audio: Add a silent stereo aac stream of the same duration.
        video: Add the mpeg4 video stream.
        title: Optional container title tag.

    Returns:
        The path that was written.
    """
    container = av.open(str(path), mode="w")
    if title:
        container.metadata["title"] = title

    video_stream = None
    if video:
        video_stream = container.add_stream("mpeg4", rate=rate)
        video_stream.width = width
        video_stream.height = height
        video_stream.pix_fmt = "yuv420p"

    audio_stream = None
    if audio:
        audio_stream = container.add_stream("aac", rate=48000)
        audio_stream.codec_context.layout = "stereo"
        audio_stream.codec_context.format = "fltp"

    if video_stream is not None:
        for i in range(frames):
            frame = av.VideoFrame(width, height, "yuv420p")
            _fill(frame, (i * 20) % 256)
            frame.pts = i
            frame.time_base = Fraction(1, rate)
            for packet in video_stream.encode(frame):
                container.mux(packet)
        for packet in video_stream.encode(None):
            container.mux(packet)

    if audio_stream is not None:
        samples = 1024
        total = int(48000 * frames / rate)
        pts = 0
        while pts < total:
            frame = av.AudioFrame(format="fltp", layout="stereo", samples=samples)
            frame.sample_rate = 48000
            _fill(frame, 0)
            frame.pts = pts
            frame.time_base = Fraction(1, 48000)
            pts += samples
            for packet in audio_stream.encode(frame):
                container.mux(packet)
        for packet in audio_stream.encode(None):
            container.mux(packet)

    container.close()
    return path


@pytest.fixture(scope="session")
def media_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("media")


@pytest.fixture(scope="session")
def video_file(media_dir: Path) -> Path:
    """A 10 frame 64x48 mpeg4 video in an mp4 container."""
    return generate_media(media_dir / "video.mp4", title="ffbind test")


@pytest.fixture(scope="session")
def av_file(media_dir: Path) -> Path:
    """Video plus a silent stereo aac stream."""
    return generate_media(media_dir / "video_audio.mp4", audio=True)


@pytest.fixture(scope="session")
def audio_only_file(media_dir: Path) -> Path:
    """A file without any video stream."""
    return generate_media(media_dir / "audio_only.mp4", audio=True, video=False)


@pytest.fixture
def media_factory(temp_dir: Path) -> Callable[..., Path]:
    """Generate a custom test file inside temp_dir."""

    def factory(name: str = "custom.mp4", **kwargs) -> Path:
        return generate_media(temp_dir / name, **kwargs)

    return factory
