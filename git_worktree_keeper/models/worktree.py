"""Worktree data models."""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch: str  # short name, "" when detached
    head_commit: str
    is_bare: bool = False
    prunable: bool = False  # git reports the directory as gone

    @property
    def is_missing(self) -> bool:
        """Registered, but the working directory no longer exists."""
        if self.is_bare:
            return False
        return self.prunable or not os.path.isdir(self.path)

    @property
    def label(self) -> str:
        """Branch name, or the path for detached/bare entries."""
        return self.branch or self.path

    def __str__(self) -> str:
        if self.is_bare:
            return f"{self.path} (bare)"
        return f"{self.label} @ {self.path}"


@dataclass
class AnalysisOptions:
    """Inputs for classifying worktrees during cleanup."""

    current_path: str = ""
    default_branch: str = "main"
    protected_branches: List[str] = field(default_factory=list)
    threshold: Optional[int] = None  # None = every safe worktree, regardless of age
    force: bool = False


@dataclass
class CleanableWorktree:
    """A worktree plus the safety facts cleanup needs."""

    record: WorktreeRecord
    age_days: int
    has_uncommitted: bool
    has_unpushed: bool
    can_clean: bool
    reason: Optional[str] = None

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def branch(self) -> str:
        return self.record.branch

    @property
    def is_bare(self) -> bool:
        return self.record.is_bare

    @property
    def label(self) -> str:
        return self.record.label


@dataclass
class CleanupReport:
    """Outcome of one cleanup run."""

    cleanable: List[CleanableWorktree] = field(default_factory=list)
    skipped: List[CleanableWorktree] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)  # (path, error)
    dry_run: bool = False
    cancelled: bool = False

    @property
    def success(self) -> bool:
        return not self.failed
