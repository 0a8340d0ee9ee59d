"""Shared pytest fixtures for devlog tests."""

import os
import stat
import tempfile
from pathlib import Path

import pytest

from devlog.config import DevlogConfig
from devlog.engine import DevlogEngine
from devlog.hooks import HookType, hook_dir


@pytest.fixture
def temp_project():
    """Create a temporary directory to hold the repository."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def repo_dir(temp_project):
    return temp_project / "devlogs"


@pytest.fixture
def config(repo_dir):
    """Create a test configuration with a no-op editor."""
    return DevlogConfig(repo_dir=repo_dir, editor="true")


@pytest.fixture
def engine(config):
    """Create an engine over an initialized repository."""
    eng = DevlogEngine(config)
    eng.init()
    return eng


@pytest.fixture
def write_hook(repo_dir):
    """Factory fixture that installs an executable hook script.

    Usage:
        def test_example(write_hook):
            path = write_hook(HookType.BEFORE_EDIT, "exit 0")
    """

    def _write(hook_type: HookType, script: str, executable: bool = True) -> Path:
        directory = hook_dir(repo_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / hook_type.value
        path.write_text(f"#!/bin/sh\n{script}\n", encoding="utf-8")
        mode = stat.S_IRUSR | stat.S_IWUSR
        if executable:
            mode |= stat.S_IXUSR
        os.chmod(path, mode)
        return path

    return _write
