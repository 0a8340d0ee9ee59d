"""Open an entry in a text editor program (e.g. vim or nano)."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import IoFailure

logger = logging.getLogger(__name__)


@dataclass
class EditorResult:
    """Outcome of one editor session."""
    command: list[str]
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def describe(self) -> str:
        if self.exit_code < 0:
            return "Process terminated by signal"
        return f"Command `{shlex.join(self.command)}` exited with status {self.exit_code}"


def editor_command(editor: str, path: Path) -> list[str]:
    """Build the editor argv; ``editor`` may carry its own arguments."""
    return [*shlex.split(editor), str(path)]


def open_in_editor(editor: str, path: Path) -> EditorResult:
    """Run the editor on ``path`` and wait for it to exit.

    Raises:
        IoFailure: If the editor program cannot be started
    """
    command = editor_command(editor, path)
    logger.debug("Launching editor: %s", command)
    try:
        result = subprocess.run(command)
    except OSError as e:
        raise IoFailure(Path(command[0]), e) from e
    return EditorResult(command=command, exit_code=result.returncode)
