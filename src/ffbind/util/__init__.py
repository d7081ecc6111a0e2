"""Core utilities wrapping libavutil concepts.

- error: native error taxonomy
- mathematics / rational / time: timestamp arithmetic
- media: stream media types
- log: native log level control
- frame: raw frame helpers
"""

from ffbind.util.error import Error, from_code, translate_errors
from ffbind.util.mathematics import Rounding, rescale, rescale_rnd
from ffbind.util.media import MediaType
from ffbind.util.rational import Rational, q2d, to_rational

__all__ = [
    "Error",
    "MediaType",
    "Rational",
    "Rounding",
    "from_code",
    "q2d",
    "rescale",
    "rescale_rnd",
    "to_rational",
    "translate_errors",
]
