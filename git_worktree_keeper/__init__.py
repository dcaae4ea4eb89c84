"""
git-worktree-keeper - branch-aware checkout and safe cleanup for git worktrees
"""

from .__version__ import __version__
from .core import WorktreeKeeper

__all__ = ["WorktreeKeeper", "__version__"]
