"""ffbind: Pythonic access to the FFmpeg libraries.

Packages:
- ffbind.format: open, demux and mux container files
- ffbind.codec: decoders and encoders with send/receive semantics
- ffbind.filter: libavfilter graphs
- ffbind.software: scaling (libswscale) and resampling (libswresample)
- ffbind.device: capture and playback devices
- ffbind.util: errors, rationals, rescaling, media types, native logging
- ffbind.introspect: the media analyzer behind ``ffbind info``

Call ``ffbind.init()`` once before use to apply the native log level.
The native libraries are imported on first use, so ``native_available()``
can report a broken installation without raising.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ffbind.config.models import NativeConfig

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()
_initialized = False


def native_available() -> bool:
    """Return True if PyAV and the FFmpeg libraries it links can be loaded."""
    try:
        import av  # noqa: F401
    except ImportError as e:
        logger.debug("Native FFmpeg libraries unavailable: %s", e)
        return False
    return True


def init(config: NativeConfig | None = None) -> None:
    """Initialise the FFmpeg bindings.

    Registration of formats, codecs, devices and filters is automatic in
    current FFmpeg; this applies the configured native log level. Only the
    first call has an effect unless ``config`` is given, in which case the
    level is applied again. Thread-safe.

    Args:
        config: Native library settings; defaults to NativeConfig().

    Raises:
        ValueError: If the configured log level is unknown.
        ImportError: If the native libraries cannot be loaded.
    """
    global _initialized

    from ffbind.config.models import NativeConfig
    from ffbind.util import log as native_log

    with _init_lock:
        if _initialized and config is None:
            return
        level = native_log.level_from_name((config or NativeConfig()).log_level)
        native_log.set_level(level)
        _initialized = True
        logger.debug("ffbind initialised (native log level %s)", level.name.lower())


def is_initialized() -> bool:
    return _initialized


__all__ = ["__version__", "init", "is_initialized", "native_available"]
