"""Data models for git-worktree-keeper."""

from .branch import BranchLocation, RefConflict, StartPoint
from .checkout import CheckoutRequest, CheckoutResult, CheckoutState, LeftoverPolicy
from .worktree import AnalysisOptions, CleanableWorktree, CleanupReport, WorktreeRecord

__all__ = [
    "BranchLocation",
    "RefConflict",
    "StartPoint",
    "CheckoutRequest",
    "CheckoutResult",
    "CheckoutState",
    "LeftoverPolicy",
    "AnalysisOptions",
    "CleanableWorktree",
    "CleanupReport",
    "WorktreeRecord",
]
