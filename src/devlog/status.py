"""Status aggregation across parsed entries."""

from __future__ import annotations

import json
from typing import Iterable

from .models import ALL_STATUSES, Entry, Status, TaskBlock

# Section order used when printing status
DISPLAY_ORDER = (Status.IN_PROGRESS, Status.TODO, Status.BLOCKED, Status.DONE)


def select(
    entries: Iterable[Entry],
    statuses: Iterable[Status] = ALL_STATUSES,
) -> list[tuple[Entry, TaskBlock]]:
    """Select tasks whose status is in ``statuses``.

    Tasks are returned in entry order, then in the order they appear in
    each entry. Free text is never selected.
    """
    wanted = frozenset(statuses)
    if not wanted:
        return []

    selected = []
    for entry in entries:
        for task in entry.tasks():
            if task.status in wanted:
                selected.append((entry, task))
    return selected


def group_by_status(
    selected: Iterable[tuple[Entry, TaskBlock]],
) -> dict[Status, list[TaskBlock]]:
    """Group selected tasks by status, preserving their order."""
    groups: dict[Status, list[TaskBlock]] = {status: [] for status in DISPLAY_ORDER}
    for _, task in selected:
        groups[task.status].append(task)
    return groups


def render_status(selected: Iterable[tuple[Entry, TaskBlock]]) -> str:
    """Render selected tasks as titled sections.

    Sections follow DISPLAY_ORDER and empty sections are omitted, so no
    selected tasks renders as an empty string.
    """
    sections = []
    for status, tasks in group_by_status(selected).items():
        if not tasks:
            continue
        lines = [f"{status.title}:"]
        lines.extend(task.marker_line() for task in tasks)
        sections.append("\n".join(lines))
    if not sections:
        return ""
    return "\n\n".join(sections) + "\n"


def render_json(selected: Iterable[tuple[Entry, TaskBlock]]) -> str:
    """Render selected tasks as a JSON array, one object per task."""
    records = []
    for entry, task in selected:
        record = task.to_dict()
        record["entry"] = entry.name
        records.append(record)
    return json.dumps(records, indent=2)
