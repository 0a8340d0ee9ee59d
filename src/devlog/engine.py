"""Core devlog engine - repository operations with all-or-nothing rollover."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .config import DevlogConfig
from .editor import EditorResult, open_in_editor
from .errors import IoFailure, NotInitialized
from .hooks import HookType, init_hooks, run_hook
from .index import SequenceIndex
from .locking import atomic_create, repository_lock
from .models import ALL_STATUSES, Entry, Status, TaskBlock
from .rollover import RolloverPlan, rollover
from .status import select

logger = logging.getLogger(__name__)

FIRST_SEQUENCE = 1
LOCK_TIMEOUT = 10.0


@dataclass
class RolloverResult:
    """A committed rollover."""
    old_path: Path
    new_path: Path
    plan: RolloverPlan
    after_hook_status: Optional[int] = None

    @property
    def imported(self) -> int:
        return len(self.plan.carried)


@dataclass
class EditResult:
    """Outcome of editing the latest entry."""
    path: Path
    editor: EditorResult
    after_hook_status: Optional[int] = None
    messages: list[str] = field(default_factory=list)


class DevlogEngine:
    """Core engine managing one devlog repository."""

    def __init__(self, config: DevlogConfig):
        self.config = config
        self.index = SequenceIndex(config.repo_dir)

    @property
    def repo_dir(self) -> Path:
        return self.config.repo_dir

    def initialized(self) -> bool:
        """A repository is initialized once it holds at least one entry."""
        return bool(self.index.sequences())

    def require_initialized(self) -> None:
        if not self.initialized():
            raise NotInitialized(self.repo_dir)

    # ========== Repository Operations ==========

    def init(self) -> bool:
        """Initialize the repository if it does not already exist.

        Creates the first entry and disabled template hooks.

        Returns:
            True if the repository was created, False if it already existed
        """
        if self.initialized():
            return False
        self._create_entry(FIRST_SEQUENCE, "")
        init_hooks(self.repo_dir)
        logger.info("Initialized devlog repository at %s", self.repo_dir)
        return True

    def _create_entry(self, sequence: int, text: str) -> Path:
        path = self.index.path_for(sequence)
        try:
            with atomic_create(path) as f:
                f.write(text)
        except OSError as e:
            raise IoFailure(path, e) from e
        logger.info("Created entry %s", path)
        return path

    def latest_path(self) -> Path:
        """Get the absolute path of the latest entry."""
        self.require_initialized()
        return self.index.path_for(self.index.sequences()[-1]).resolve()

    # ========== Editing ==========

    def edit(self) -> EditResult:
        """Open the latest entry in the configured editor.

        Runs before-edit first; after-edit runs only when the editor exits
        successfully.

        Raises:
            NotInitialized: If the repository has no entries
            HookRejected: If before-edit exits non-zero
        """
        path = self.latest_path()
        run_hook(self.repo_dir, HookType.BEFORE_EDIT, path)

        result = EditResult(path=path, editor=open_in_editor(self.config.editor, path))
        if not result.editor.success:
            result.messages.append(result.editor.describe())
            return result

        result.after_hook_status = run_hook(self.repo_dir, HookType.AFTER_EDIT, path)
        return result

    # ========== Rollover ==========

    def rollover(self) -> RolloverResult:
        """Create a new entry holding the latest entry's unfinished tasks.

        Either the new entry is created or nothing changes: a rejecting
        before-rollover hook or an exhausted sequence aborts before any
        file is written. The after-rollover status is reported, never
        rolled back.

        Raises:
            NotInitialized: If the repository has no entries
            HookRejected: If before-rollover exits non-zero
            SequenceExhausted: If no further sequence number is available
            IoFailure: If the repository lock cannot be acquired
        """
        latest = self.index.latest()
        if latest is None:
            raise NotInitialized(self.repo_dir)
        old_path = latest.path.resolve()

        run_hook(self.repo_dir, HookType.BEFORE_ROLLOVER, old_path)

        with repository_lock(self.repo_dir, timeout=LOCK_TIMEOUT):
            plan = rollover(latest, self.index)
            new_path = self._create_entry(plan.new_sequence, plan.new_text).resolve()

        logger.info("Rolled over %d tasks from %s", len(plan.carried), old_path)
        result = RolloverResult(old_path=old_path, new_path=new_path, plan=plan)
        result.after_hook_status = run_hook(
            self.repo_dir, HookType.AFTER_ROLLOVER, old_path, new_path
        )
        return result

    # ========== Queries ==========

    def status(
        self,
        back: int = 0,
        statuses: Iterable[Status] = ALL_STATUSES,
    ) -> list[tuple[Entry, TaskBlock]]:
        """Select tasks from the entry ``back`` places before the latest.

        Returns an empty list when there is no such entry.
        """
        self.require_initialized()
        entry = self.index.nth_back(back)
        if entry is None:
            return []
        return select([entry], statuses)

    def tail(self, limit: Optional[int] = None) -> list[Entry]:
        """Get the most recent entries, oldest first."""
        self.require_initialized()
        if limit is None:
            limit = self.config.tail_limit
        if limit < 1:
            raise ValueError("limit must be >= 1")
        return self.index.tail(limit)
