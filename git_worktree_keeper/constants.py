"""Shared constants for git-worktree-keeper."""

import os
from dataclasses import dataclass
from typing import List

# Navigation marker read by the shell wrapper (relative to the home directory)
NAV_DIR = os.path.join(".gw", "tmp")
NAV_FILE_NAME = "last-nav"

# Debug log written by --debug (relative to the home directory)
DEBUG_LOG_PATH = os.path.join(".gw", "gw.log")

# Auto-clean runs at most once per day
AUTO_CLEAN_COOLDOWN_MS = 24 * 60 * 60 * 1000

SECONDS_PER_DAY = 24 * 60 * 60


# Reasons shown for worktrees that cleanup will not touch
REASON_CURRENT = "current worktree (cannot remove)"
REASON_DEFAULT_BRANCH = "default branch protected"
REASON_PROTECTED = "protected branch"
REASON_UNCOMMITTED = "has uncommitted changes"
REASON_UNPUSHED = "has unpushed commits"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


# Columns of the cleanup preview tables
COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path", 0),
    ColumnDefinition("age", "Age", 6),
    ColumnDefinition("state", "State", 8),
    ColumnDefinition("notes", "Notes", 30),
]


# Symbol constants
SYMBOL_OK = "✓"
SYMBOL_FAIL = "✗"
SYMBOL_UNCOMMITTED = "M"
SYMBOL_UNPUSHED = "↑"


class WorktreeStyleType:
    """Style types for worktree rows."""

    REMOVABLE = "removable"
    PROTECTED = "protected"
    WARNING = "warning"  # Has local work preventing removal


# CLI colors (Rich color names)
CLI_COLORS = {
    WorktreeStyleType.REMOVABLE: "red",  # Will be removed
    WorktreeStyleType.PROTECTED: "cyan",
    WorktreeStyleType.WARNING: "yellow",  # Can't remove (has local work)
}


LEGEND_TEXT = """
Legend:
M = Uncommitted changes   ↑ = Unpushed commits
"""
