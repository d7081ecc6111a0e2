"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (FFBIND_*)
3. Config file (~/.ffbind/config.toml)
4. Default values

Environment variables:
- FFBIND_CONFIG_PATH: Path to config file (overrides default location)
- FFBIND_LOG_LEVEL: Python log level (debug, info, warning, error)
- FFBIND_LOG_FILE: Log file path
- FFBIND_LOG_FORMAT: Log format (text, json)
- FFBIND_NATIVE_LOG_LEVEL: FFmpeg log level (quiet ... trace)
- FFBIND_THREADS: Decoder thread count (0 = auto)
- FFBIND_PROBESIZE: Demuxer probe size in bytes
- FFBIND_ANALYZEDURATION: Demuxer analysis duration in microseconds
- FFBIND_TIMEOUT: Open/read timeout in seconds
- FFBIND_DECODE_FIRST_FRAME: Decode the first video frame in reports
"""

from __future__ import annotations

import logging
import threading
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from ffbind.config.env import EnvReader
from ffbind.config.models import FfbindConfig, LoggingConfig, NativeConfig, ProbeConfig

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".ffbind"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


class TomlParseError(ValueError):
    """Raised when a config file exists but is not valid TOML."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config file {path}: {reason}")


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by the FFBIND_CONFIG_PATH environment variable.
    """
    reader = env_reader or EnvReader()
    return reader.get_path("FFBIND_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Parse a TOML file.

    Args:
        path: File to read.
        strict: Raise TomlParseError instead of returning {} on errors.

    Returns:
        Parsed dict, empty if the file does not exist.
    """
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise TomlParseError(path, str(e)) from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Results are cached with mtime-based invalidation. The cache reloads the
    file if it has been modified since the last read. Thread-safe.

    Raises:
        TomlParseError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def _section(file_config: dict, name: str, model: type) -> dict[str, Any]:
    """Pick the known keys of one [section], warning about the rest."""
    raw = file_config.get(name, {})
    if not isinstance(raw, dict):
        logger.warning("Config section [%s] is not a table, ignoring", name)
        return {}
    known = {f.name for f in fields(model)}
    unknown = sorted(set(raw) - known)
    if unknown:
        logger.warning("Unknown keys in config section [%s]: %s", name, ", ".join(unknown))
    return {key: value for key, value in raw.items() if key in known}


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def get_config(
    config_path: Path | None = None,
    *,
    native_log_level: str | None = None,
    env_reader: EnvReader | None = None,
    strict: bool = False,
) -> FfbindConfig:
    """Get ffbind configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides FFBIND_CONFIG_PATH).
        native_log_level: CLI override for the FFmpeg log level.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: Raise TomlParseError on config file parse failures.

    Returns:
        FfbindConfig with merged configuration.

    Raises:
        TomlParseError: When strict=True and the config file cannot be parsed.
        ValueError: If a merged value fails validation.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    logging_values = _section(file_config, "logging", LoggingConfig)
    if isinstance(logging_values.get("file"), str):
        logging_values["file"] = Path(logging_values["file"]).expanduser()
    logging_values.update(
        _without_none(
            {
                "level": reader.get_str("FFBIND_LOG_LEVEL"),
                "file": reader.get_path("FFBIND_LOG_FILE"),
                "format": reader.get_str("FFBIND_LOG_FORMAT"),
            }
        )
    )

    native_values = _section(file_config, "native", NativeConfig)
    native_values.update(
        _without_none(
            {
                "log_level": reader.get_str("FFBIND_NATIVE_LOG_LEVEL"),
                "thread_count": reader.get_int("FFBIND_THREADS"),
            }
        )
    )
    native_values.update(_without_none({"log_level": native_log_level}))

    probe_values = _section(file_config, "probe", ProbeConfig)
    probe_values.update(
        _without_none(
            {
                "probesize": reader.get_int("FFBIND_PROBESIZE"),
                "analyzeduration": reader.get_int("FFBIND_ANALYZEDURATION"),
                "timeout": reader.get_float("FFBIND_TIMEOUT"),
                "decode_first_frame": reader.get_bool("FFBIND_DECODE_FIRST_FRAME"),
            }
        )
    )

    return FfbindConfig(
        logging=LoggingConfig(**logging_values),
        native=NativeConfig(**native_values),
        probe=ProbeConfig(**probe_values),
    )
