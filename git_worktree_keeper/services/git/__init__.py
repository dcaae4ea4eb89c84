"""Git-related services for git-worktree-keeper."""

from .worktrees import WorktreeService, parse_worktree_porcelain
from .branch_queries import BranchQueries, find_ref_conflict

__all__ = [
    "WorktreeService",
    "parse_worktree_porcelain",
    "BranchQueries",
    "find_ref_conflict",
]
