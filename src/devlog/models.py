"""Data models for devlog entries, tasks, and free-text blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

ENTRY_SUFFIX = ".devlog"
SEQUENCE_WIDTH = 9
MAX_SEQUENCE = 10 ** SEQUENCE_WIDTH - 1


class Status(Enum):
    """Status of a task, keyed by its marker character."""
    TODO = "*"
    IN_PROGRESS = "^"
    DONE = "+"
    BLOCKED = "-"

    @property
    def marker(self) -> str:
        return self.value

    @property
    def cli_name(self) -> str:
        return _CLI_NAMES[self]

    @property
    def title(self) -> str:
        return _TITLES[self]

    @classmethod
    def from_marker(cls, char: str) -> Optional["Status"]:
        """Return the status for a marker character, or None."""
        for status in cls:
            if status.value == char:
                return status
        return None

    @classmethod
    def from_cli_name(cls, name: str) -> "Status":
        for status, cli_name in _CLI_NAMES.items():
            if cli_name == name:
                return status
        raise ValueError(f"Unknown status: {name}")


_CLI_NAMES = {
    Status.TODO: "todo",
    Status.IN_PROGRESS: "started",
    Status.DONE: "done",
    Status.BLOCKED: "blocked",
}

_TITLES = {
    Status.TODO: "To Do",
    Status.IN_PROGRESS: "In Progress",
    Status.DONE: "Done",
    Status.BLOCKED: "Blocked",
}

ALL_STATUSES = frozenset(Status)


def format_sequence(sequence: int) -> str:
    """Format a sequence number as a 9-digit zero-padded string."""
    return f"{sequence:0{SEQUENCE_WIDTH}d}"


def entry_filename(sequence: int) -> str:
    return format_sequence(sequence) + ENTRY_SUFFIX


@dataclass
class TaskBlock:
    """A task opened by a marker line, with its indented body lines."""
    status: Status
    headline: str
    body: list[str] = field(default_factory=list)

    # Marker line exactly as read; None for tasks built in memory
    source_line: Optional[str] = field(default=None, compare=False, repr=False)

    def marker_line(self) -> str:
        """Canonical marker line: marker, one space, headline."""
        return f"{self.status.marker} {self.headline}"

    def raw_lines(self) -> list[str]:
        first = self.source_line if self.source_line is not None else self.marker_line()
        return [first, *self.body]

    def to_dict(self) -> dict:
        return {
            "type": "task",
            "status": self.status.cli_name,
            "marker": self.status.marker,
            "headline": self.headline,
            "body": list(self.body),
        }


@dataclass
class FreeTextBlock:
    """A run of lines that belong to no task."""
    lines: list[str] = field(default_factory=list)

    def raw_lines(self) -> list[str]:
        return list(self.lines)

    def to_dict(self) -> dict:
        return {
            "type": "text",
            "lines": list(self.lines),
        }


Block = Union[TaskBlock, FreeTextBlock]


@dataclass
class Entry:
    """One devlog entry file."""
    sequence: int
    path: Path
    text: str

    @property
    def name(self) -> str:
        return format_sequence(self.sequence)

    @property
    def blocks(self) -> list[Block]:
        # Parsed on every access; entries are not cached across commands
        from .parser import parse
        return parse(self.text)

    def tasks(self) -> Iterator[TaskBlock]:
        for block in self.blocks:
            if isinstance(block, TaskBlock):
                yield block

    def to_dict(self) -> dict:
        return {
            "sequence": self.name,
            "path": str(self.path),
            "blocks": [block.to_dict() for block in self.blocks],
        }
