"""Lifecycle hooks.

A hook is an executable file in the ``hooks`` subdirectory of the
repository, run synchronously at a fixed point of a command. Missing or
non-executable hook files are skipped, so a freshly initialized
repository has every hook disabled.
"""

from __future__ import annotations

import logging
import os
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import HookRejected, IoFailure

logger = logging.getLogger(__name__)

HOOK_DIR_NAME = "hooks"

HOOK_TEMPLATE = """#!/usr/bin/env sh
# To enable this hook, make this file executable.
echo "$0 $@"
"""


class HookType(Enum):
    """Hook points, named after the hook file."""
    BEFORE_EDIT = "before-edit"          # args: entry path
    AFTER_EDIT = "after-edit"            # args: entry path
    BEFORE_ROLLOVER = "before-rollover"  # args: latest entry path
    AFTER_ROLLOVER = "after-rollover"    # args: old entry path, new entry path

    @property
    def is_gate(self) -> bool:
        """A non-zero exit from a before-* hook aborts the operation."""
        return self.value.startswith("before-")


def hook_dir(repo_dir: Path) -> Path:
    return repo_dir / HOOK_DIR_NAME


def init_hooks(repo_dir: Path) -> list[Path]:
    """Create disabled template hooks, leaving existing files alone.

    Returns:
        Paths of the hook files that were created
    """
    directory = hook_dir(repo_dir)
    created = []
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for hook_type in HookType:
            path = directory / hook_type.value
            if path.exists():
                continue
            path.write_text(HOOK_TEMPLATE, encoding="utf-8")
            created.append(path)
    except OSError as e:
        raise IoFailure(directory, e) from e
    return created


def hook_command(repo_dir: Path, hook_type: HookType) -> Optional[Path]:
    """Get the executable hook file for ``hook_type``, if enabled."""
    path = hook_dir(repo_dir) / hook_type.value
    if path.is_file() and os.access(path, os.X_OK):
        return path.resolve()
    return None


def run_hook(repo_dir: Path, hook_type: HookType, *args: Path) -> Optional[int]:
    """Run a hook and wait for it to exit.

    The hook inherits the standard streams and receives each argument as
    an absolute path.

    Returns:
        The hook's exit code, or None if the hook is not enabled

    Raises:
        HookRejected: If a before-* hook exits non-zero
        IoFailure: If the hook cannot be executed
    """
    path = hook_command(repo_dir, hook_type)
    if path is None:
        logger.debug("Hook %s not enabled, skipping", hook_type.value)
        return None

    argv = [str(path), *(str(Path(arg).resolve()) for arg in args)]
    logger.debug("Running hook: %s", argv)
    try:
        result = subprocess.run(argv)
    except OSError as e:
        raise IoFailure(path, e) from e

    if result.returncode != 0:
        if hook_type.is_gate:
            raise HookRejected(hook_type.value, result.returncode)
        logger.warning("%s hook exited with status %d", hook_type.value, result.returncode)
    return result.returncode
