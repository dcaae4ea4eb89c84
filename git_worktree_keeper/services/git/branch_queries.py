"""Branch query service for git-worktree-keeper."""

import git
from typing import Iterable, List, Optional

from git_worktree_keeper.exceptions import BranchNotFoundError
from git_worktree_keeper.models.branch import BranchLocation, RefConflict, StartPoint
from git_worktree_keeper.services.git.errors import describe_git_error, first_fatal_line
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def find_ref_conflict(name: str, branches: Iterable[str]) -> Optional[RefConflict]:
    """Find an existing branch whose ref path collides with name.

    git stores refs as files, so "rel" and "rel/v2" cannot both exist.
    The first colliding branch wins.
    """
    for branch in branches:
        if branch.startswith(name + "/") or name.startswith(branch + "/"):
            return RefConflict(requested=name, conflicting_branch=branch)
    return None


class BranchQueries:
    """Service for querying branch existence and preparing start points."""

    def __init__(self, repo_path: str, remote_name: str = "origin"):
        """Initialize the branch queries service.

        Args:
            repo_path: Path to the git repository
            remote_name: Remote used for fetching and tracking
        """
        self.repo_path = repo_path
        self.remote_name = remote_name

        logger.debug("Branch queries service initialized")

    def _get_repo(self):
        """Open the repository. GitPython repos are lightweight."""
        return git.Repo(self.repo_path)

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._get_repo().git.rev_parse("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def local_branch_exists(self, branch_name: str) -> bool:
        """Check refs/heads/<branch_name>."""
        return self._ref_exists(f"refs/heads/{branch_name}")

    def remote_branch_exists(self, branch_name: str) -> bool:
        """Check the cached remote-tracking ref (no network)."""
        return self._ref_exists(f"refs/remotes/{self.remote_name}/{branch_name}")

    def locate(self, branch_name: str) -> BranchLocation:
        """Where branch_name exists right now. Not cached."""
        location = BranchLocation.from_probes(
            self.local_branch_exists(branch_name),
            self.remote_branch_exists(branch_name),
        )
        logger.debug(f"Branch {branch_name} is {location.value}")
        return location

    def remote_has_branch(self, branch_name: str) -> bool:
        """Ask the remote whether it has branch_name (ls-remote, network)."""
        try:
            self._get_repo().git.ls_remote("--exit-code", "--heads", self.remote_name, branch_name)
            return True
        except git.exc.GitCommandError as e:
            logger.debug(f"Remote has no branch {branch_name}: {describe_git_error(e, 'ls-remote')}")
            return False

    def list_local_branches(self) -> List[str]:
        """Short names of all local branches.

        Raises:
            git.exc.GitCommandError: If git cannot list refs
        """
        output = self._get_repo().git.for_each_ref("--format=%(refname:short)", "refs/heads/")
        return [line.strip() for line in output.split("\n") if line.strip()]

    def detect_conflict(self, branch_name: str) -> Optional[RefConflict]:
        """Check whether creating branch_name would collide with an existing branch.

        A failed listing reports no conflict; git refuses the creation itself.
        """
        try:
            branches = self.list_local_branches()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not list branches: {describe_git_error(e, 'for-each-ref')}")
            return None
        return find_ref_conflict(branch_name, branches)

    def has_remote(self) -> bool:
        """Check whether the configured remote exists."""
        try:
            self._get_repo().git.remote("get-url", self.remote_name)
            return True
        except git.exc.GitCommandError:
            return False

    def fetch_start_point(self, branch_name: str) -> StartPoint:
        """Fetch branch_name and pick the freshest start point available.

        Tried in order:
            1. no remote configured: the name itself, flagged as not fetched
            2. fetch into refs/remotes/<remote>/<branch> and use that
            3. plain fetch; the tracking ref if present, else FETCH_HEAD
            4. the local branch, flagged as not fetched

        Raises:
            BranchNotFoundError: If every tier fails and no local branch exists
        """
        remote_ref = f"{self.remote_name}/{branch_name}"

        if not self.has_remote():
            return StartPoint(branch_name, False, f"No remote '{self.remote_name}' configured")

        repo = self._get_repo()
        fetch_error = None

        try:
            repo.git.fetch(
                self.remote_name,
                f"refs/heads/{branch_name}:refs/remotes/{self.remote_name}/{branch_name}",
            )
            if self._ref_exists(remote_ref):
                return StartPoint(remote_ref, True)
        except git.exc.GitCommandError as e:
            fetch_error = e
            logger.debug(f"Explicit fetch of {branch_name} failed: {describe_git_error(e, 'fetch')}")

        try:
            repo.git.fetch(self.remote_name, branch_name)
            if self._ref_exists(remote_ref):
                return StartPoint(remote_ref, True)
            if self._ref_exists("FETCH_HEAD"):
                return StartPoint(
                    "FETCH_HEAD", True, "Using FETCH_HEAD (remote-tracking branch not available)"
                )
        except git.exc.GitCommandError as e:
            fetch_error = fetch_error or e
            logger.debug(f"Plain fetch of {branch_name} failed: {describe_git_error(e, 'fetch')}")

        error_msg = first_fatal_line(fetch_error) if fetch_error else "Unable to fetch from remote"

        if self._ref_exists(branch_name):
            logger.warning(f"Could not fetch {branch_name}: {error_msg}")
            return StartPoint(branch_name, False, f"{error_msg}, using local branch")

        raise BranchNotFoundError(branch_name, self.remote_name)

    def set_upstream(self, worktree_path: str, branch_name: str) -> bool:
        """Point branch_name at <remote>/<branch_name> for pull/push.

        Returns:
            True when both config entries were written
        """
        repo = self._get_repo()
        try:
            repo.git.execute(
                ["git", "-C", worktree_path, "config", f"branch.{branch_name}.remote", self.remote_name]
            )
            repo.git.execute(
                ["git", "-C", worktree_path, "config", f"branch.{branch_name}.merge", f"refs/heads/{branch_name}"]
            )
        except git.exc.GitCommandError as e:
            logger.warning(
                f"Could not set upstream for {branch_name}: {describe_git_error(e, 'config')}"
            )
            return False

        logger.debug(f"Set upstream of {branch_name} to {self.remote_name}/{branch_name}")
        return True
