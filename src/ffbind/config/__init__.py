"""Configuration for ffbind.

Loads settings with precedence CLI > environment (FFBIND_*) > config file
(~/.ffbind/config.toml) > defaults.
"""

from ffbind.config.env import EnvReader
from ffbind.config.loader import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    TomlParseError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from ffbind.config.logging_factory import build_logging_config, configure_logging_from_cli
from ffbind.config.models import FfbindConfig, LoggingConfig, NativeConfig, ProbeConfig

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_CONFIG_FILE",
    "EnvReader",
    "FfbindConfig",
    "LoggingConfig",
    "NativeConfig",
    "ProbeConfig",
    "TomlParseError",
    "build_logging_config",
    "clear_config_cache",
    "configure_logging_from_cli",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
