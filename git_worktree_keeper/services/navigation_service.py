"""Navigation marker consumed by the shell wrapper."""

import os
from pathlib import Path
from typing import Optional

from git_worktree_keeper.constants import NAV_DIR, NAV_FILE_NAME
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def get_nav_file_path() -> Path:
    """Location of the marker, ~/.gw/tmp/last-nav."""
    return Path.home() / NAV_DIR / NAV_FILE_NAME


def signal_navigation(path: str, nav_file: Optional[Path] = None) -> Path:
    """Record path as the directory the calling shell should change into.

    Overwrites any previous marker. The shell wrapper deletes it after use.

    Returns:
        The marker file that was written
    """
    nav_file = Path(nav_file) if nav_file else get_nav_file_path()
    nav_file.parent.mkdir(parents=True, exist_ok=True)
    nav_file.write_text(os.path.abspath(path) + "\n", encoding="utf-8")
    logger.debug(f"Wrote navigation marker {nav_file} -> {path}")
    return nav_file
