"""Exceptions raised by devlog operations."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DevlogError(Exception):
    """Base exception for devlog operations."""
    pass


class NotInitialized(DevlogError):
    """Raised when a command needs a repository that does not exist yet."""

    def __init__(self, repo_dir: Path):
        self.repo_dir = repo_dir
        super().__init__(
            f"Repository at {repo_dir} has not been initialized.\n"
            "Please run `devlog init` to initialize the repository."
        )


class SequenceExhausted(DevlogError):
    """Raised when the next sequence number does not fit in 9 digits."""
    pass


class HookRejected(DevlogError):
    """Raised when a before-* hook exits with a non-zero status."""

    def __init__(self, hook: str, exit_code: int):
        self.hook = hook
        self.exit_code = exit_code
        super().__init__(f"{hook} hook exited with status {exit_code}")


class IoFailure(DevlogError):
    """Raised when reading, writing, or executing a file fails."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        if isinstance(cause, OSError):
            reason = cause.strerror or str(cause)
        elif cause is not None:
            reason = str(cause) or type(cause).__name__
        else:
            reason = ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"I/O failure on {path}{detail}")


class ConfigError(DevlogError):
    """Raised when a configuration file cannot be loaded."""
    pass
