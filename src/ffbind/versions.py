"""Version, build configuration and license of the linked FFmpeg libraries."""

from __future__ import annotations

import av
import av._core

LIBRARIES = (
    "libavutil",
    "libavcodec",
    "libavformat",
    "libavdevice",
    "libavfilter",
    "libswscale",
    "libswresample",
)


def _check(library: str) -> None:
    if library not in LIBRARIES:
        raise KeyError(f"Unknown library '{library}' (expected one of: {', '.join(LIBRARIES)})")
    if library not in av.library_versions:
        raise KeyError(f"Library '{library}' is not linked into this PyAV build")


def _meta(library: str) -> dict:
    _check(library)
    # PyAV only exposes configuration and license through its private core module
    return av._core.library_meta[library]


def _text(value: str | bytes) -> str:
    return value.decode("utf-8", "replace") if isinstance(value, bytes) else value


def version_tuple(library: str) -> tuple[int, int, int]:
    """Return (major, minor, micro), e.g. (61, 3, 100) for libavcodec."""
    _check(library)
    major, minor, micro = av.library_versions[library]
    return major, minor, micro


def version(library: str) -> int:
    """Return the packed version ``(major << 16) | (minor << 8) | micro``."""
    major, minor, micro = version_tuple(library)
    return (major << 16) | (minor << 8) | micro


def configuration(library: str) -> str:
    """Return the ./configure flags the library was built with."""
    return _text(_meta(library)["configuration"])


def license(library: str) -> str:
    """Return the license the library was built under, e.g. "LGPL version 2.1 or later"."""
    return _text(_meta(library)["license"])


def format_version(library: str) -> str:
    """Return "major.minor.micro"."""
    return ".".join(str(part) for part in version_tuple(library))


def pyav_version() -> str:
    return av.__version__
