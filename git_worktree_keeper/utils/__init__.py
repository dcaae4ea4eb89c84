"""Utility functions for git-worktree-keeper.

This package provides utility modules:
- logging: rich console logging, the --debug log file and logger creation
"""

from .logging import setup_logging, get_logger

__all__ = [
    "setup_logging",
    "get_logger",
]
