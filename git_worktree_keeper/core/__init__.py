"""Core functionality for git-worktree-keeper."""

from .worktree_keeper import WorktreeKeeper
from .worktree_creator import WorktreeCreator
from .cleanup import AutoCleaner, CleanupExecutor

__all__ = ["WorktreeKeeper", "WorktreeCreator", "AutoCleaner", "CleanupExecutor"]
