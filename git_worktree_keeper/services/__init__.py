"""Services for git-worktree-keeper."""

from .git import BranchQueries, WorktreeService
from .navigation_service import signal_navigation
from .safety_service import SafetyAnalyzer

__all__ = [
    "BranchQueries",
    "WorktreeService",
    "SafetyAnalyzer",
    "signal_navigation",
]
