"""Shared test fixtures for ffbind."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from ffbind.config import FfbindConfig
from ffbind.config.loader import clear_config_cache
from ffbind.logging.context import clear_media_context


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def default_config() -> FfbindConfig:
    """Return a configuration built from defaults only."""
    return FfbindConfig()


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Clear the config file cache and media context after each test."""
    yield
    clear_config_cache()
    clear_media_context()
