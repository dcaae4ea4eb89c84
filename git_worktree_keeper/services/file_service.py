"""Copy untracked files (e.g. .env) into freshly created worktrees."""

import os
import shutil
from typing import List, Tuple

from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def copy_files(source_root: str, target_root: str, files: List[str]) -> Tuple[List[str], List[Tuple[str, str]]]:
    """Copy each relative path in files from source_root into target_root.

    Directories are copied recursively, missing parents are created.

    Returns:
        Tuple of (copied, failed) where failed items are (path, error_message)
    """
    copied = []
    failed = []

    for rel_path in files:
        if os.path.isabs(rel_path) or os.path.normpath(rel_path).startswith(".."):
            failed.append((rel_path, "path must be relative to the repository"))
            continue

        source = os.path.join(source_root, rel_path)
        target = os.path.join(target_root, rel_path)

        if not os.path.exists(source):
            failed.append((rel_path, "not found"))
            continue

        try:
            os.makedirs(os.path.dirname(target) or target_root, exist_ok=True)
            if os.path.isdir(source):
                shutil.copytree(source, target, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target)
        except OSError as e:
            logger.warning(f"Could not copy {rel_path}: {e}")
            failed.append((rel_path, str(e)))
            continue

        logger.debug(f"Copied {source} -> {target}")
        copied.append(rel_path)

    return copied, failed
