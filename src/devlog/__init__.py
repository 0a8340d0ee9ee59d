"""devlog - track daily development work in plain-text entries."""

from .models import Entry, FreeTextBlock, Status, TaskBlock
from .parser import parse, serialize

__version__ = "0.1.0"

__all__ = [
    "Entry",
    "FreeTextBlock",
    "Status",
    "TaskBlock",
    "parse",
    "serialize",
    "__version__",
]
