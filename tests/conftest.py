"""Pytest fixtures for pocket tests."""

import subprocess
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from pocket.applescript import base
from pocket.logging import reset_logging


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch) -> Iterator[None]:
    """Keep logs and config out of the real home directory."""
    monkeypatch.setenv("POCKET_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("POCKET_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setattr(base, "_runner", None)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def completed_process():
    """Factory for fake subprocess results."""

    def make(stdout: str = "", stderr: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(["osascript"], returncode, stdout=stdout, stderr=stderr)

    return make


@pytest.fixture
def mock_subprocess() -> Iterator:
    """Patch the subprocess call made by the AppleScript runner."""
    with patch("pocket.applescript.base.subprocess.run") as mock_run:
        yield mock_run
