"""Codecs: lookup, decoding and encoding.

- Codec / find_decoder / find_encoder / list_codecs: what the linked
  FFmpeg provides
- Decoder / Encoder: send/receive codec contexts
- EncoderSettings: validated user-facing encoder configuration
"""

from ffbind.codec.codec import Codec, find_decoder, find_encoder, list_codecs
from ffbind.codec.decoder import Decoder, Discard
from ffbind.codec.encoder import Encoder
from ffbind.codec.settings import EncoderSettings, parse_bitrate, parse_size

__all__ = [
    "Codec",
    "Decoder",
    "Discard",
    "Encoder",
    "EncoderSettings",
    "find_decoder",
    "find_encoder",
    "list_codecs",
    "parse_bitrate",
    "parse_size",
]
