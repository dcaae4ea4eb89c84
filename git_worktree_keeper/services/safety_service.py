"""Decide which worktrees cleanup may remove."""

import git
import os
import time
from typing import List, Optional

from git_worktree_keeper.constants import (
    REASON_CURRENT,
    REASON_DEFAULT_BRANCH,
    REASON_PROTECTED,
    REASON_UNCOMMITTED,
    REASON_UNPUSHED,
    SECONDS_PER_DAY,
)
from git_worktree_keeper.models.worktree import AnalysisOptions, CleanableWorktree, WorktreeRecord
from git_worktree_keeper.services.git.errors import describe_git_error
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


class SafetyAnalyzer:
    """Classifies worktrees as removable or kept, with a reason."""

    def __init__(self, repo_path: str):
        self.repo_path = repo_path

    def _get_repo(self):
        return git.Repo(self.repo_path)

    def _git_in(self, worktree_path: str, *args: str) -> str:
        """Run a git command inside another worktree."""
        return self._get_repo().git.execute(["git", "-C", worktree_path, *args])

    @staticmethod
    def get_age_days(worktree_path: str, now: Optional[float] = None) -> int:
        """Whole days since the worktree's .git entry was modified; 0 if unreadable."""
        try:
            mtime = os.stat(os.path.join(worktree_path, ".git")).st_mtime
        except OSError as e:
            logger.debug(f"Could not stat {worktree_path}: {e}")
            return 0
        now = time.time() if now is None else now
        return max(0, int((now - mtime) // SECONDS_PER_DAY))

    def has_uncommitted_changes(self, worktree_path: str) -> bool:
        """True when `git status --porcelain` reports anything, or cannot run."""
        try:
            return bool(self._git_in(worktree_path, "status", "--porcelain").strip())
        except git.exc.GitCommandError as e:
            logger.debug(f"Assuming {worktree_path} is dirty: {describe_git_error(e, 'status')}")
            return True

    def has_unpushed_commits(self, worktree_path: str) -> bool:
        """True when HEAD is ahead of its upstream, or the count cannot be read.

        No upstream configured means nothing to push.
        """
        try:
            self._git_in(worktree_path, "rev-parse", "--abbrev-ref", "@{u}")
        except git.exc.GitCommandError:
            return False

        try:
            count = self._git_in(worktree_path, "rev-list", "@{u}..HEAD", "--count").strip()
            return int(count or 0) > 0
        except (git.exc.GitCommandError, ValueError) as e:
            logger.debug(f"Assuming {worktree_path} has unpushed commits: {e}")
            return True

    @staticmethod
    def _is_current(record: WorktreeRecord, current_path: str) -> bool:
        if not current_path:
            return False
        return os.path.realpath(record.path) == os.path.realpath(current_path)

    def classify(self, record: WorktreeRecord, options: AnalysisOptions, age_days: int) -> CleanableWorktree:
        """Apply the safety rules to a single worktree."""
        has_uncommitted = self.has_uncommitted_changes(record.path)
        has_unpushed = self.has_unpushed_commits(record.path)

        if self._is_current(record, options.current_path):
            reason = REASON_CURRENT
        elif record.branch and record.branch == options.default_branch:
            reason = REASON_DEFAULT_BRANCH
        elif record.branch and record.branch in options.protected_branches:
            reason = REASON_PROTECTED
        elif has_uncommitted and not options.force:
            reason = REASON_UNCOMMITTED
        elif has_unpushed and not options.force:
            reason = REASON_UNPUSHED
        else:
            reason = None

        return CleanableWorktree(
            record=record,
            age_days=age_days,
            has_uncommitted=has_uncommitted,
            has_unpushed=has_unpushed,
            can_clean=reason is None,
            reason=reason,
        )

    def analyze(
        self,
        worktrees: List[WorktreeRecord],
        options: AnalysisOptions,
        now: Optional[float] = None,
    ) -> List[CleanableWorktree]:
        """Classify every non-bare worktree.

        With options.threshold set, worktrees younger than it are left out entirely.
        """
        results = []
        for record in worktrees:
            if record.is_bare:
                continue

            age_days = self.get_age_days(record.path, now)
            if options.threshold is not None and age_days < options.threshold:
                logger.debug(f"Skipping {record.path}: {age_days}d is below threshold {options.threshold}d")
                continue

            entry = self.classify(record, options, age_days)
            logger.debug(
                f"{record.label}: can_clean={entry.can_clean} reason={entry.reason} age={age_days}d"
            )
            results.append(entry)

        return results
