"""Worktree registry service for git-worktree-keeper."""

import git
import os
from typing import Optional, Dict, Any, List

from git_worktree_keeper.exceptions import GitOperationError, RegistryError, WorktreeCreationError
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.errors import describe_git_error, git_stderr
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached", or "bare")
        prunable gitdir file points to non-existent location   (optional)
        (blank line between worktrees)

    Branch names keep every "/" segment; only the refs/heads/ prefix is dropped.
    """
    records = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch", ""),
                    head_commit=current.get("HEAD", ""),
                    is_bare=current.get("bare", False),
                    prunable=current.get("prunable", False),
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            flush()
            continue

        if line.startswith("worktree "):
            # A new block without a separating blank line
            if current:
                flush()
            current["path"] = line[len("worktree "):]
        elif line.startswith("HEAD "):
            current["HEAD"] = line[len("HEAD "):].strip()
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):].strip()
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = branch_ref
        elif line.strip() == "bare":
            current["bare"] = True
        elif line.strip() == "detached":
            current["branch"] = ""
        elif line == "prunable" or line.startswith("prunable "):
            current["prunable"] = True

    flush()
    return records


def get_current_worktree_path(cwd: Optional[str] = None) -> str:
    """Top-level directory of the worktree containing cwd.

    Returns "" when cwd is not inside a work tree (e.g. a bare repository root).
    """
    try:
        return git.Git(cwd or os.getcwd()).rev_parse("--show-toplevel").strip()
    except git.exc.GitCommandError as e:
        logger.debug(f"Not inside a work tree: {git_stderr(e)}")
        return ""


def find_git_root(cwd: Optional[str] = None) -> str:
    """Resolve the repository root for cwd.

    The parent of the common .git directory for a normal repository, the
    repository directory itself for a bare one.

    Raises:
        GitOperationError: If cwd is not inside a git repository
    """
    cwd = cwd or os.getcwd()
    try:
        common_dir = git.Git(cwd).rev_parse("--git-common-dir").strip()
    except git.exc.GitCommandError as e:
        raise GitOperationError("find_git_root", message=git_stderr(e) or "Not a git repository") from e

    common_dir = os.path.realpath(os.path.join(cwd, common_dir))
    if os.path.basename(common_dir) == ".git":
        return os.path.dirname(common_dir)
    return common_dir


def resolve_worktree_path(root: str, name: str) -> str:
    """Map a worktree name to its directory; "team/feature" -> <root>/team/feature."""
    if os.path.isabs(name):
        return name
    return os.path.join(root, name)


def _same_path(a: str, b: str) -> bool:
    return os.path.realpath(a) == os.path.realpath(b)


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the repository root (bare or non-bare)
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Open the repository. GitPython repos are cheap to open."""
        return git.Repo(self.repo_path)

    def list_worktrees(self) -> List[WorktreeRecord]:
        """List every worktree registered with the repository.

        Raises:
            RegistryError: If git cannot produce the list
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree list")
            logger.debug(f"Could not list worktrees: {error_msg}")
            raise RegistryError(error_msg) from e

        records = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(records)} worktrees")
        for wt in records:
            logger.debug(f"  {wt}")
        return records

    def list_live_worktrees(self) -> List[WorktreeRecord]:
        """list_worktrees() without entries whose directory is gone.

        Matches what the list holds after `git worktree prune`, without
        touching the registry.
        """
        live = []
        for wt in self.list_worktrees():
            if wt.is_missing:
                logger.debug(f"Ignoring missing worktree {wt}")
                continue
            live.append(wt)
        return live

    @staticmethod
    def find_by_branch(worktrees: List[WorktreeRecord], branch: str) -> Optional[WorktreeRecord]:
        """Worktree that has branch checked out (bare entries ignored)."""
        for wt in worktrees:
            if not wt.is_bare and wt.branch == branch:
                return wt
        return None

    @staticmethod
    def find_by_path(worktrees: List[WorktreeRecord], path: str) -> Optional[WorktreeRecord]:
        """Worktree registered at path, comparing resolved paths."""
        for wt in worktrees:
            if _same_path(wt.path, path):
                return wt
        return None

    def add_worktree(self, path: str, start_point: str, new_branch: Optional[str] = None) -> None:
        """Run `git worktree add [-b <new_branch>] <path> <start_point>`.

        Raises:
            WorktreeCreationError: If git refuses
        """
        args = ["add"]
        if new_branch:
            args.extend(["-b", new_branch])
        args.extend([path, start_point])

        try:
            self._get_repo().git.worktree(*args)
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree add")
            logger.debug(f"Failed to create worktree at {path}: {error_msg}")
            raise WorktreeCreationError(new_branch or start_point, error_msg) from e

        logger.info(f"Created worktree at {path} ({new_branch or start_point})")

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Pass --force to git (dirty or locked worktrees)

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        args = ["remove", path]
        if force:
            args.append("--force")

        try:
            self._get_repo().git.worktree(*args)
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree remove")
            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

        logger.info(f"Removed worktree at {path}")
        return True, None

    def prune_worktrees(self) -> tuple[bool, Optional[str]]:
        """Prune administrative data of worktrees whose directories are gone.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._get_repo().git.worktree("prune")
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree prune")
            logger.warning(f"Failed to prune worktrees: {error_msg}")
            return False, error_msg

        logger.info("Pruned stale worktree metadata")
        return True, None
