"""Formatting utilities for git-worktree-keeper.

- date: Age formatting
- worktree: Worktree labels, states and confirmation lists
"""

# Date formatters
from .date import format_age

# Worktree formatters
from .worktree import (
    format_worktree_label,
    format_state,
    format_removal_confirmation_items,
    get_worktree_style_type,
)

__all__ = [
    # Date
    "format_age",
    # Worktree
    "format_worktree_label",
    "format_state",
    "format_removal_confirmation_items",
    "get_worktree_style_type",
]
