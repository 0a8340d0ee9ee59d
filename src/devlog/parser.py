"""Entry parser: raw entry text to an ordered list of blocks, and back.

Markup, one task per marker line at column 0::

    * todo          ^ in progress
    + done          - blocked

A marker is one of ``*^+-`` followed by a space. Indented lines after a
marker line are the task's body. Blank lines inside a body are kept as
body lines when the next non-blank line is indented; otherwise they fall
between blocks. Everything else is free text. Lines inside a fenced code
block (opened and closed by a line starting with three backticks) are
never marker lines.

Parsing never fails, and ``serialize(parse(text)) == text`` for any text.
"""

from __future__ import annotations

from typing import Optional

from .models import Block, FreeTextBlock, Status, TaskBlock

FENCE = "```"


def marker_status(line: str) -> Optional[Status]:
    """Return the status if ``line`` is a marker line, else None."""
    if len(line) < 2 or line[1] != " ":
        return None
    return Status.from_marker(line[0])


def is_blank(line: str) -> bool:
    """Only an empty line is blank; a lone carriage return counts as empty."""
    return line.rstrip("\r") == ""


def is_indented(line: str) -> bool:
    return line[:1].isspace()


def parse(raw: str) -> list[Block]:
    """Parse entry text into blocks."""
    if raw == "":
        return []

    blocks: list[Block] = []
    task: Optional[TaskBlock] = None
    text: Optional[FreeTextBlock] = None
    pending: list[str] = []
    in_fence = False

    def add_text(lines: list[str]) -> None:
        nonlocal text
        if text is None:
            text = FreeTextBlock()
            blocks.append(text)
        text.lines.extend(lines)

    for line in raw.split("\n"):
        status = None if in_fence else marker_status(line)
        if line.startswith(FENCE):
            in_fence = not in_fence

        if status is not None:
            if pending:
                add_text(pending)
                pending = []
            task = TaskBlock(
                status=status,
                headline=line[2:].strip(),
                source_line=line,
            )
            blocks.append(task)
            text = None
        elif task is not None and is_blank(line):
            pending.append(line)
        elif task is not None and is_indented(line):
            task.body.extend(pending)
            task.body.append(line)
            pending = []
        else:
            # Unindented text closes the open task
            task = None
            add_text(pending + [line])
            pending = []

    if pending and task is not None:
        task.body.extend(pending)

    return blocks


def serialize(blocks: list[Block]) -> str:
    """Render blocks back to entry text."""
    lines: list[str] = []
    for block in blocks:
        lines.extend(block.raw_lines())
    return "\n".join(lines)
