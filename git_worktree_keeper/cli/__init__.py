"""Command-line interface for git-worktree-keeper.

This package provides the CLI entry point and argument parsing.
"""

from .main import main, run
from .args import Command, parse_args

__all__ = ["main", "run", "Command", "parse_args"]
