"""Tests for config/loader.py and config/logging_factory.py."""

import os
import time
from pathlib import Path
from unittest import mock

import pytest

from ffbind.config.env import EnvReader
from ffbind.config.loader import (
    DEFAULT_CONFIG_FILE,
    TomlParseError,
    get_config,
    get_default_config_path,
    load_config_file,
    load_toml_file,
)
from ffbind.config.logging_factory import build_logging_config, configure_logging_from_cli
from ffbind.config.models import LoggingConfig


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    path = temp_dir / "config.toml"
    path.write_text(
        """
[logging]
level = "warning"
file = "~/ffbind.log"

[native]
log_level = "info"
thread_count = 2

[probe]
probesize = 1000000
decode_first_frame = false
"""
    )
    return path


class TestDefaultConfigPath:
    """Tests for get_default_config_path()."""

    def test_default(self) -> None:
        assert get_default_config_path(EnvReader(env={})) == DEFAULT_CONFIG_FILE

    def test_env_override(self, temp_dir: Path) -> None:
        custom = temp_dir / "custom.toml"
        reader = EnvReader(env={"FFBIND_CONFIG_PATH": str(custom)})
        assert get_default_config_path(reader) == custom


class TestLoadToml:
    """Tests for load_toml_file() and load_config_file()."""

    def test_missing_file_is_empty(self, temp_dir: Path) -> None:
        assert load_toml_file(temp_dir / "missing.toml") == {}

    def test_invalid_file_lenient(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = temp_dir / "bad.toml"
        path.write_text("[logging\nlevel = ")
        assert load_toml_file(path) == {}
        assert "Ignoring unreadable config file" in caplog.text

    def test_invalid_file_strict(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.toml"
        path.write_text("[logging\nlevel = ")
        with pytest.raises(TomlParseError) as exc_info:
            load_toml_file(path, strict=True)
        assert exc_info.value.path == path
        assert isinstance(exc_info.value, ValueError)

    def test_cache_reloads_on_mtime_change(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text('[logging]\nlevel = "debug"\n')
        assert load_config_file(path)["logging"]["level"] == "debug"

        path.write_text('[logging]\nlevel = "error"\n')
        future = time.time() + 10
        os.utime(path, (future, future))
        assert load_config_file(path)["logging"]["level"] == "error"

    def test_cache_hit_skips_parse(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text('[native]\nthread_count = 1\n')
        load_config_file(path)
        with mock.patch("ffbind.config.loader.load_toml_file") as loader:
            load_config_file(path)
        loader.assert_not_called()


class TestGetConfig:
    """Tests for get_config() precedence."""

    def test_defaults_without_file(self, temp_dir: Path) -> None:
        config = get_config(temp_dir / "missing.toml", env_reader=EnvReader(env={}))
        assert config.logging.level == "info"
        assert config.native.log_level == "error"
        assert config.probe.decode_first_frame is True

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_file, env_reader=EnvReader(env={}))

        assert config.logging.level == "warning"
        assert config.logging.file == Path.home() / "ffbind.log"
        assert config.native.log_level == "info"
        assert config.native.thread_count == 2
        assert config.probe.probesize == 1_000_000
        assert config.probe.decode_first_frame is False

    def test_env_overrides_file(self, config_file: Path) -> None:
        reader = EnvReader(
            env={
                "FFBIND_LOG_LEVEL": "debug",
                "FFBIND_NATIVE_LOG_LEVEL": "quiet",
                "FFBIND_THREADS": "8",
                "FFBIND_PROBESIZE": "2048",
                "FFBIND_ANALYZEDURATION": "500000",
                "FFBIND_TIMEOUT": "5",
                "FFBIND_DECODE_FIRST_FRAME": "yes",
            }
        )
        config = get_config(config_file, env_reader=reader)

        assert config.logging.level == "debug"
        assert config.native.log_level == "quiet"
        assert config.native.thread_count == 8
        assert config.probe.probesize == 2048
        assert config.probe.analyzeduration == 500_000
        assert config.probe.timeout == 5.0
        assert config.probe.decode_first_frame is True

    def test_cli_overrides_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"FFBIND_NATIVE_LOG_LEVEL": "quiet"})
        config = get_config(config_file, native_log_level="debug", env_reader=reader)
        assert config.native.log_level == "debug"

    def test_config_path_from_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"FFBIND_CONFIG_PATH": str(config_file)})
        assert get_config(env_reader=reader).native.thread_count == 2

    def test_unknown_keys_warn(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = temp_dir / "config.toml"
        path.write_text('[native]\nthreads = 4\n')
        config = get_config(path, env_reader=EnvReader(env={}))

        assert config.native.thread_count == 0
        assert "Unknown keys in config section [native]: threads" in caplog.text

    def test_section_not_a_table(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = temp_dir / "config.toml"
        path.write_text('logging = "loud"\n')
        config = get_config(path, env_reader=EnvReader(env={}))

        assert config.logging.level == "info"
        assert "is not a table" in caplog.text

    def test_invalid_value_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text('[native]\nthread_type = "GPU"\n')
        with pytest.raises(ValueError, match="thread_type"):
            get_config(path, env_reader=EnvReader(env={}))

    @pytest.mark.parametrize(
        ("toml", "field"),
        [
            ("[logging]\nlevel = 5\n", "level"),
            ("[logging]\nfile = 3\n", "file"),
            ("[native]\nthread_count = \"4\"\n", "thread_count"),
            ("[native]\nthread_count = true\n", "thread_count"),
            ("[probe]\ntimeout = \"soon\"\n", "timeout"),
            ("[probe]\ndecode_first_frame = \"no\"\n", "decode_first_frame"),
        ],
    )
    def test_wrong_type_raises_value_error(self, temp_dir: Path, toml: str, field: str) -> None:
        path = temp_dir / "config.toml"
        path.write_text(toml)
        with pytest.raises(ValueError, match=field):
            get_config(path, env_reader=EnvReader(env={}))

    def test_strict_parse_error(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text("not toml [")
        with pytest.raises(TomlParseError):
            get_config(path, env_reader=EnvReader(env={}), strict=True)


class TestLoggingFactory:
    """Tests for build_logging_config() and configure_logging_from_cli()."""

    def test_overrides_applied(self) -> None:
        base = LoggingConfig(level="warning", max_bytes=1024, backup_count=2)
        result = build_logging_config(base, level="debug", format="json")

        assert result.level == "debug"
        assert result.format == "json"
        assert result.max_bytes == 1024
        assert result.backup_count == 2

    def test_none_keeps_base(self, temp_dir: Path) -> None:
        base = LoggingConfig(file=temp_dir / "a.log", include_stderr=True)
        result = build_logging_config(base)
        assert result == base

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ValueError):
            build_logging_config(LoggingConfig(), level="chatty")

    def test_configure_from_cli(self) -> None:
        with mock.patch("ffbind.logging.configure_logging") as configure:
            result = configure_logging_from_cli(LoggingConfig(), level="error")
        configure.assert_called_once_with(result)
        assert result.level == "error"
