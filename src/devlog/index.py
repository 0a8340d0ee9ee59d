"""Sequence index over the entry files in a repository directory.

Entry files are named with a 9-digit zero-padded sequence number and the
``.devlog`` suffix (``000000001.devlog``). The files on disk are the only
source of truth; the index is rebuilt by scanning the directory on every
query.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from .errors import IoFailure, SequenceExhausted
from .models import (
    ENTRY_SUFFIX,
    MAX_SEQUENCE,
    SEQUENCE_WIDTH,
    Entry,
    entry_filename,
    format_sequence,
)

ENTRY_PATTERN = re.compile(rf"^(\d{{{SEQUENCE_WIDTH}}}){re.escape(ENTRY_SUFFIX)}$")


def read_entry_text(path: Path) -> str:
    """Read an entry file without newline translation."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailure(path, e) from e


class SequenceIndex:
    """Maps sequence numbers to entry files in one repository directory."""

    def __init__(self, repo_dir: Path):
        """Initialize the index.

        Args:
            repo_dir: Path to the repository directory
        """
        self.repo_dir = repo_dir

    def path_for(self, sequence: int) -> Path:
        """Get the path of the entry file for a sequence number."""
        return self.repo_dir / entry_filename(sequence)

    def sequences(self) -> list[int]:
        """List existing sequence numbers in ascending order."""
        if not self.repo_dir.is_dir():
            return []
        try:
            names = [p.name for p in self.repo_dir.iterdir() if p.is_file()]
        except OSError as e:
            raise IoFailure(self.repo_dir, e) from e

        found = []
        for name in names:
            match = ENTRY_PATTERN.match(name)
            if match:
                found.append(int(match.group(1)))
        return sorted(found)

    def load(self, sequence: int) -> Entry:
        path = self.path_for(sequence)
        return Entry(sequence=sequence, path=path, text=read_entry_text(path))

    def latest(self) -> Optional[Entry]:
        """Get the entry with the highest sequence number, if any."""
        return self.nth_back(0)

    def nth_back(self, n: int) -> Optional[Entry]:
        """Get the entry ``n`` places before the latest (0 is the latest).

        Returns:
            The entry, or None if the repository has fewer than n + 1 entries.

        Raises:
            ValueError: If n is negative
        """
        if n < 0:
            raise ValueError(f"Offset must be non-negative, got {n}")
        seqs = self.sequences()
        if n >= len(seqs):
            return None
        return self.load(seqs[-1 - n])

    def tail(self, limit: int) -> list[Entry]:
        """Get up to ``limit`` most recent entries, oldest first."""
        if limit < 1:
            return []
        return [self.load(seq) for seq in self.sequences()[-limit:]]

    def next_sequence(self) -> int:
        """Get the sequence number for a new entry.

        Raises:
            SequenceExhausted: If the next number does not fit in 9 digits
        """
        seqs = self.sequences()
        current = seqs[-1] if seqs else 0
        if current >= MAX_SEQUENCE:
            raise SequenceExhausted(
                f"Cannot create entry after {format_sequence(current)}: "
                f"sequence numbers are limited to {SEQUENCE_WIDTH} digits"
            )
        return current + 1
