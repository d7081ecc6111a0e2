"""Codec lookup and descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import av

from ffbind.util.media import MediaType


@dataclass(frozen=True)
class Codec:
    """Description of an FFmpeg codec implementation."""

    name: str
    long_name: str
    media_type: MediaType
    is_decoder: bool
    is_encoder: bool

    @classmethod
    def from_native(cls, codec: av.Codec) -> Codec:
        return cls(
            name=codec.name,
            long_name=codec.long_name or "",
            media_type=MediaType.from_name(codec.type),
            is_decoder=codec.is_decoder,
            is_encoder=codec.is_encoder,
        )


def _find(name: str, mode: Literal["r", "w"]) -> Codec | None:
    try:
        native = av.Codec(name, mode)
    except ValueError:
        # UnknownCodecError: no implementation with this name and mode
        return None
    return Codec.from_native(native)


def find_decoder(name: str) -> Codec | None:
    """Find a decoder by name, e.g. "h264". Returns None if unavailable."""
    return _find(name, "r")


def find_encoder(name: str) -> Codec | None:
    """Find an encoder by name, e.g. "libx264". Returns None if unavailable."""
    return _find(name, "w")


def list_codecs(
    kind: Literal["decoder", "encoder"] | None = None,
    media_type: MediaType | None = None,
) -> list[Codec]:
    """List available codecs, optionally filtered by direction and media type.

    A name that has both a decoder and an encoder appears once per
    direction when kind is None.
    """
    modes: tuple[Literal["r", "w"], ...]
    if kind == "decoder":
        modes = ("r",)
    elif kind == "encoder":
        modes = ("w",)
    else:
        modes = ("r", "w")

    codecs: list[Codec] = []
    for name in sorted(av.codecs_available):
        for mode in modes:
            codec = _find(name, mode)
            if codec is None:
                continue
            if media_type is not None and codec.media_type != media_type:
                continue
            codecs.append(codec)
    return codecs
