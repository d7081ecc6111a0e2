"""Configuration data models for ffbind.

Each section is a dataclass validated in ``__post_init__``:
- LoggingConfig: Python logging output (level, file, text/json format)
- NativeConfig: FFmpeg's own log level and decoder threading
- ProbeConfig: how media files are opened and analysed
- FfbindConfig: the assembled configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})
VALID_THREAD_TYPES = frozenset({"NONE", "FRAME", "SLICE", "AUTO"})
# libav log level names, see ffbind.util.log.Level
VALID_NATIVE_LOG_LEVELS = frozenset(
    {"quiet", "panic", "fatal", "error", "warning", "info", "verbose", "debug", "trace"}
)


def _require_type(name: str, value: object, expected: type | tuple[type, ...]) -> None:
    """Raise ValueError when a field holds a value of the wrong type.

    TOML can supply any type; bool is only accepted where bool is expected.
    """
    allowed = expected if isinstance(expected, tuple) else (expected,)
    if not isinstance(value, allowed) or (isinstance(value, bool) and bool not in allowed):
        names = " or ".join(t.__name__ for t in allowed)
        raise ValueError(f"{name} must be {names}, got {type(value).__name__} {value!r}")


@dataclass
class LoggingConfig:
    """Configuration for Python logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require_type("level", self.level, str)
        _require_type("format", self.format, str)
        _require_type("file", self.file, (Path, type(None)))
        _require_type("include_stderr", self.include_stderr, bool)
        _require_type("max_bytes", self.max_bytes, int)
        _require_type("backup_count", self.backup_count, int)
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(f"backup_count must be >= 0, got {self.backup_count}")


@dataclass
class NativeConfig:
    """Configuration for the native FFmpeg libraries."""

    # FFmpeg log level name (quiet, panic, fatal, error, warning, info, verbose, debug, trace)
    log_level: str = "error"

    # Decoder threads, 0 = let FFmpeg decide
    thread_count: int = 0

    # Decoder threading: NONE, FRAME, SLICE or AUTO
    thread_type: str = "AUTO"

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require_type("log_level", self.log_level, str)
        _require_type("thread_count", self.thread_count, int)
        _require_type("thread_type", self.thread_type, str)
        if self.log_level.lower() not in VALID_NATIVE_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_NATIVE_LOG_LEVELS)}, got {self.log_level}"
            )
        if self.thread_count < 0:
            raise ValueError(f"thread_count must be >= 0, got {self.thread_count}")
        if self.thread_type.upper() not in VALID_THREAD_TYPES:
            raise ValueError(
                f"thread_type must be one of {sorted(VALID_THREAD_TYPES)}, got {self.thread_type}"
            )


@dataclass
class ProbeConfig:
    """Configuration for opening and analysing media files."""

    # Try decoding the first video frame in reports
    decode_first_frame: bool = True

    # Demuxer probe size in bytes (None = FFmpeg default)
    probesize: int | None = None

    # Demuxer analysis duration in microseconds (None = FFmpeg default)
    analyzeduration: int | None = None

    # Open/read timeout in seconds for network inputs (None = no timeout)
    timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require_type("decode_first_frame", self.decode_first_frame, bool)
        _require_type("probesize", self.probesize, (int, type(None)))
        _require_type("analyzeduration", self.analyzeduration, (int, type(None)))
        _require_type("timeout", self.timeout, (int, float, type(None)))
        if self.probesize is not None and self.probesize < 32:
            raise ValueError(f"probesize must be >= 32, got {self.probesize}")
        if self.analyzeduration is not None and self.analyzeduration < 0:
            raise ValueError(
                f"analyzeduration must be >= 0, got {self.analyzeduration}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def demuxer_options(self) -> dict[str, str]:
        """Options passed to the demuxer when opening an input."""
        options: dict[str, str] = {}
        if self.probesize is not None:
            options["probesize"] = str(self.probesize)
        if self.analyzeduration is not None:
            options["analyzeduration"] = str(self.analyzeduration)
        return options


@dataclass
class FfbindConfig:
    """Main configuration for ffbind."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    native: NativeConfig = field(default_factory=NativeConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
