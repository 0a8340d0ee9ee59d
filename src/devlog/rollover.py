"""Rollover: compute the successor of the latest entry.

Unfinished tasks (every status except done) carry forward into the new
entry in their original order. The latest entry's text is never
rewritten; it simply stops being the latest.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .index import SequenceIndex
from .models import Entry, Status, TaskBlock


@dataclass
class RolloverPlan:
    """Result of a rollover computation, before anything is written."""
    archived_text: str
    new_text: str
    new_sequence: int
    carried: list[TaskBlock] = field(default_factory=list)


def carries_forward(task: TaskBlock) -> bool:
    return task.status != Status.DONE


def render_task(task: TaskBlock) -> str:
    """Render a carried task: canonical marker line plus its body."""
    body = list(task.body)
    while body and body[-1].strip() == "":
        body.pop()
    return "\n".join([task.marker_line(), *body])


def render_carried(tasks: list[TaskBlock]) -> str:
    """Render carried tasks separated by one blank line."""
    if not tasks:
        return ""
    return "\n\n".join(render_task(task) for task in tasks) + "\n"


def plan_rollover(latest: Entry, new_sequence: int) -> RolloverPlan:
    """Compute the rollover of ``latest`` into entry ``new_sequence``."""
    carried = [task for task in latest.tasks() if carries_forward(task)]
    return RolloverPlan(
        archived_text=latest.text,
        new_text=render_carried(carried),
        new_sequence=new_sequence,
        carried=carried,
    )


def rollover(latest: Entry, index: SequenceIndex) -> RolloverPlan:
    """Compute the rollover of ``latest`` using the index's next sequence.

    Raises:
        SequenceExhausted: If no further sequence number is available
    """
    return plan_rollover(latest, index.next_sequence())
