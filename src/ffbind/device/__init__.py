"""Capture and playback devices (libavdevice).

Devices are demuxers and muxers that talk to hardware or the desktop
instead of files. Which ones exist depends on the platform and on how the
linked FFmpeg was built:

- Linux: v4l2 (video), alsa / pulse (audio), x11grab / xcbgrab (screen)
- Windows: dshow, gdigrab
- macOS: avfoundation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import av

from ffbind import format as _format
from ffbind.format import InputContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceFormat:
    """A known device (de)muxer."""

    name: str
    description: str
    capture: bool
    playback: bool


DEVICE_FORMATS: dict[str, DeviceFormat] = {
    d.name: d
    for d in (
        DeviceFormat("v4l2", "Video4Linux2 video capture", True, True),
        DeviceFormat("alsa", "ALSA audio", True, True),
        DeviceFormat("pulse", "PulseAudio", True, True),
        DeviceFormat("oss", "OSS audio", True, True),
        DeviceFormat("jack", "JACK audio", True, False),
        DeviceFormat("x11grab", "X11 screen capture", True, False),
        DeviceFormat("xcbgrab", "X11 screen capture (XCB)", True, False),
        DeviceFormat("kmsgrab", "KMS screen capture", True, False),
        DeviceFormat("fbdev", "Linux framebuffer", True, True),
        DeviceFormat("dshow", "DirectShow capture", True, False),
        DeviceFormat("gdigrab", "GDI screen capture", True, False),
        DeviceFormat("vfwcap", "Video for Windows capture", True, False),
        DeviceFormat("avfoundation", "AVFoundation capture", True, False),
        DeviceFormat("audiotoolbox", "AudioToolbox output", False, True),
        DeviceFormat("lavfi", "Libavfilter virtual input", True, False),
        DeviceFormat("sdl", "SDL output", False, True),
        DeviceFormat("sdl2", "SDL2 output", False, True),
        DeviceFormat("xv", "XVideo output", False, True),
        DeviceFormat("opengl", "OpenGL output", False, True),
        DeviceFormat("caca", "libcaca text output", False, True),
    )
}


def _available(capture: bool) -> list[DeviceFormat]:
    found = []
    for device in DEVICE_FORMATS.values():
        wanted = device.capture if capture else device.playback
        if not wanted or device.name not in av.formats_available:
            continue
        native = av.ContainerFormat(device.name)
        if (native.is_input if capture else native.is_output):
            found.append(device)
    return found


def input_devices() -> list[DeviceFormat]:
    """Capture devices provided by the linked FFmpeg."""
    return _available(capture=True)


def output_devices() -> list[DeviceFormat]:
    """Playback devices provided by the linked FFmpeg."""
    return _available(capture=False)


def open_device(
    format: str,
    device: str,
    options: dict[str, str] | None = None,
) -> InputContext:
    """Open a capture device, e.g. ``open_device("v4l2", "/dev/video0")``.

    Args:
        format: Device demuxer name.
        device: Device identifier understood by that demuxer.
        options: Device options such as {"video_size": "640x480"}.

    Raises:
        ValueError: If the format is not a capture device of this FFmpeg.
        ffbind.util.error.Error: If the device cannot be opened.
    """
    if format not in {d.name for d in input_devices()}:
        raise ValueError(f"Capture device format not available: {format}")
    logger.info("Opening %s device %s", format, device)
    return _format.input(device, format=format, options=options)


__all__ = [
    "DEVICE_FORMATS",
    "DeviceFormat",
    "input_devices",
    "open_device",
    "output_devices",
]
