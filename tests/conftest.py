"""Test configuration and fixtures."""
import io
import logging
import tempfile

import pytest

from shellpiper.runner import RunnerConfig


@pytest.fixture(autouse=True)
def configure_logging():
    """Log everything from the package while a test runs."""
    package_logger = logging.getLogger("shellpiper")
    original_level = package_logger.level
    package_logger.setLevel(logging.DEBUG)

    yield

    package_logger.setLevel(original_level)


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def fast_config():
    return RunnerConfig(poll_interval=0.01)


@pytest.fixture
def sink_dir(tmp_path, monkeypatch):
    """Point temporary capture files at a directory the test can inspect."""
    directory = tmp_path / "sinks"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory
