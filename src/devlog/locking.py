"""File locking and atomic writes for entry creation."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import portalocker

from .errors import IoFailure

LOCK_NAME = ".devlog.lock"


@contextmanager
def repository_lock(repo_dir: Path, timeout: float = 10.0) -> Generator[None, None, None]:
    """Acquire the repository's exclusive lock.

    Args:
        repo_dir: Repository directory; the lock file lives inside it
        timeout: Seconds to wait for lock

    Raises:
        IoFailure: If the lock file cannot be created or the lock cannot
            be acquired within the timeout
    """
    lock_path = repo_dir / LOCK_NAME
    lock = portalocker.Lock(lock_path, timeout=timeout)
    try:
        repo_dir.mkdir(parents=True, exist_ok=True)
        if not lock_path.exists():
            lock_path.touch()
        lock.acquire()
    except (OSError, portalocker.LockException) as e:
        raise IoFailure(lock_path, e) from e

    try:
        yield
    finally:
        lock.release()


@contextmanager
def atomic_create(path: Path, encoding: str = "utf-8") -> Generator:
    """Create a new file atomically.

    Writes to a temporary file then renames it to ``path``. Text is
    written without newline translation.

    Raises:
        FileExistsError: If ``path`` already exists

    Yields:
        File handle for writing
    """
    if path.exists():
        raise FileExistsError(f"Refusing to overwrite {path}")
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        tmp_path.rename(path)

    except Exception:
        # Clean up temp file on failure
        if tmp_path.exists():
            tmp_path.unlink()
        raise
