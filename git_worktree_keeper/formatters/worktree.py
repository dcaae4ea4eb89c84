"""Worktree formatting utilities."""

from typing import List

from git_worktree_keeper.constants import (
    REASON_UNCOMMITTED,
    REASON_UNPUSHED,
    SYMBOL_UNCOMMITTED,
    SYMBOL_UNPUSHED,
    WorktreeStyleType,
)
from git_worktree_keeper.models.worktree import CleanableWorktree


def format_worktree_label(entry: CleanableWorktree) -> str:
    """Branch name, or "(detached)" when no branch is checked out."""
    return entry.branch or "(detached)"


def format_state(entry: CleanableWorktree) -> str:
    """
    Compact local-work indicator.

    Returns:
        "M" for uncommitted changes, "↑" for unpushed commits, both, or ""
    """
    state = ""
    if entry.has_uncommitted:
        state += SYMBOL_UNCOMMITTED
    if entry.has_unpushed:
        state += SYMBOL_UNPUSHED
    return state


def format_removal_confirmation_items(entries: List[CleanableWorktree]) -> str:
    """
    Format worktrees for the removal confirmation message.

    Example:
        "  • feature/old (12d) /repo/feature/old"
    """
    return "\n".join(
        f"  • {format_worktree_label(e)} ({e.age_days}d) {e.path}" for e in entries
    )


def get_worktree_style_type(entry: CleanableWorktree) -> str:
    """
    Determine the row style for a worktree.

    Returns:
        WorktreeStyleType constant
    """
    if entry.can_clean:
        return WorktreeStyleType.REMOVABLE
    if entry.reason in (REASON_UNCOMMITTED, REASON_UNPUSHED):
        return WorktreeStyleType.WARNING
    return WorktreeStyleType.PROTECTED
