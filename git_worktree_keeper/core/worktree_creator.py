"""Create or reuse the worktree for a branch."""

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import (
    BranchNotFoundError,
    FetchError,
    LeftoverPathError,
    RefConflictError,
)
from git_worktree_keeper.models.branch import BranchLocation, StartPoint
from git_worktree_keeper.models.checkout import (
    CheckoutRequest,
    CheckoutResult,
    CheckoutState,
    LeftoverPolicy,
)
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.file_service import copy_files
from git_worktree_keeper.services.git import BranchQueries, WorktreeService
from git_worktree_keeper.services.git.worktrees import resolve_worktree_path
from git_worktree_keeper.services.navigation_service import signal_navigation
from git_worktree_keeper.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class _CreateMode(Enum):
    LOCAL = "local"  # existing local branch
    REMOTE = "remote"  # branch only on the remote
    NEW = "new"  # branch must be created


class WorktreeCreator:
    """Runs the checkout state machine for one request.

    REQUESTED moves to exactly one of NAVIGATE_EXISTING, CONFLICT_REJECTED,
    LEFTOVER_REJECTED or CREATED. The rejected states raise, so callers only
    ever receive NAVIGATE_EXISTING or CREATED.
    """

    def __init__(
        self,
        git_root: str,
        config: Config,
        worktree_service: Optional[WorktreeService] = None,
        branch_queries: Optional[BranchQueries] = None,
        nav_file: Optional[Path] = None,
    ):
        self.git_root = git_root
        self.config = config
        self.worktree_service = worktree_service or WorktreeService(git_root)
        self.branch_queries = branch_queries or BranchQueries(git_root, config.remote_name)
        self.nav_file = nav_file

    def checkout(self, request: CheckoutRequest) -> CheckoutResult:
        """Ensure a worktree exists for the request and report where it is.

        Raises:
            LeftoverPathError: Target path exists but is not a worktree
            RefConflictError: New branch name collides with an existing branch
            FetchError: Explicit --from branch could not be fetched
            BranchNotFoundError: Start point exists neither locally nor remotely
            WorktreeCreationError: git refused to create the worktree
        """
        branch = request.branch
        path = resolve_worktree_path(self.git_root, request.name)
        worktrees = self.worktree_service.list_worktrees()
        logger.debug(f"Checkout requested: name={request.name} branch={branch} path={path}")

        bound = self.worktree_service.find_by_branch(worktrees, branch)
        if bound:
            console.print(f"[blue]Branch {branch} is already checked out at {bound.path}[/blue]")
            return self._navigate_existing(bound.path, branch, request)

        registered = self.worktree_service.find_by_path(worktrees, path)
        if registered:
            console.print(f"[blue]Worktree already exists at {registered.path}[/blue]")
            return self._navigate_existing(registered.path, branch, request)

        if os.path.exists(path):
            self._handle_leftover(path, request.leftover_policy)

        mode = self._resolve_mode(request)
        if mode is _CreateMode.NEW:
            conflict = self.branch_queries.detect_conflict(branch)
            if conflict:
                logger.debug(f"{CheckoutState.CONFLICT_REJECTED.value}: {conflict}")
                raise RefConflictError(conflict.requested, conflict.conflicting_branch)

        return self._create(request, path, mode, worktrees)

    def _navigate_existing(self, path: str, branch: str, request: CheckoutRequest) -> CheckoutResult:
        if request.navigate:
            signal_navigation(path, self.nav_file)
        return CheckoutResult(state=CheckoutState.NAVIGATE_EXISTING, path=path, branch=branch)

    @staticmethod
    def _handle_leftover(path: str, policy: LeftoverPolicy) -> None:
        """Deal with a target path that exists but is not a registered worktree.

        Only an empty directory is ever removed; anything else is rejected.
        """
        if policy is LeftoverPolicy.REMOVE_EMPTY and os.path.isdir(path) and not os.listdir(path):
            logger.info(f"Removing empty leftover directory {path}")
            os.rmdir(path)
            return

        logger.debug(f"{CheckoutState.LEFTOVER_REJECTED.value}: {path}")
        raise LeftoverPathError(path)

    def _resolve_mode(self, request: CheckoutRequest) -> _CreateMode:
        if request.explicit_create:
            return _CreateMode.NEW

        location = self.branch_queries.locate(request.branch)
        if location.is_local:
            return _CreateMode.LOCAL
        if location is BranchLocation.REMOTE_ONLY:
            return _CreateMode.REMOTE

        # Not fetched yet, ask the remote directly
        if self.branch_queries.has_remote() and self.branch_queries.remote_has_branch(request.branch):
            return _CreateMode.REMOTE
        return _CreateMode.NEW

    def _create(
        self,
        request: CheckoutRequest,
        path: str,
        mode: _CreateMode,
        worktrees: List[WorktreeRecord],
    ) -> CheckoutResult:
        branch = request.branch
        start_point: Optional[StartPoint] = None

        if mode is _CreateMode.LOCAL:
            self.worktree_service.add_worktree(path, branch)
        elif mode is _CreateMode.REMOTE:
            start_point = self._remote_start_point(branch)
            self.worktree_service.add_worktree(path, start_point.start_point, new_branch=branch)
        else:
            start_point = self._new_branch_start_point(request)
            self.worktree_service.add_worktree(path, start_point.start_point, new_branch=branch)

        created_branch = mode is not _CreateMode.LOCAL
        console.print(f"[green]✓ Created worktree for {branch} at {path}[/green]")
        if start_point and start_point.note:
            console.print(f"[yellow]{start_point.note}[/yellow]")

        tracking_configured = False
        if created_branch and self.branch_queries.has_remote():
            tracking_configured = self.branch_queries.set_upstream(path, branch)

        copied = self._copy_files(request, path, worktrees)

        if request.navigate:
            signal_navigation(path, self.nav_file)

        return CheckoutResult(
            state=CheckoutState.CREATED,
            path=path,
            branch=branch,
            start_point=start_point,
            created_branch=created_branch,
            tracking_configured=tracking_configured,
            copied_files=copied,
        )

    def _remote_start_point(self, branch: str) -> StartPoint:
        """Fresh remote ref for a remote-only branch; the cached ref if fetching fails."""
        cached_ref = f"{self.branch_queries.remote_name}/{branch}"
        try:
            start_point = self.branch_queries.fetch_start_point(branch)
        except BranchNotFoundError:
            if not self.branch_queries.remote_branch_exists(branch):
                raise
            return StartPoint(cached_ref, False, f"Could not fetch {branch}, using cached {cached_ref}")

        if start_point.degraded:
            if not self.branch_queries.remote_branch_exists(branch):
                raise BranchNotFoundError(branch, self.branch_queries.remote_name)
            return StartPoint(cached_ref, False, f"{start_point.note}, using cached {cached_ref}")
        return start_point

    def _new_branch_start_point(self, request: CheckoutRequest) -> StartPoint:
        """Start point for a brand new branch: --from, else the default branch."""
        base = request.from_branch or self.config.default_branch
        start_point = self.branch_queries.fetch_start_point(base)

        if start_point.degraded and request.from_branch and self.branch_queries.has_remote():
            raise FetchError(base, start_point.note)
        if start_point.degraded:
            logger.warning(f"Creating {request.branch} from {start_point.start_point}: {start_point.note}")
        return start_point

    def _copy_files(self, request: CheckoutRequest, path: str, worktrees: List[WorktreeRecord]) -> List[str]:
        files = request.files or self.config.auto_copy_files
        if not files:
            return []

        source = self.worktree_service.find_by_branch(worktrees, self.config.default_branch)
        source_root = source.path if source else self.git_root
        copied, failed = copy_files(source_root, path, files)

        for rel_path in copied:
            console.print(f"[green]✓ Copied {rel_path}[/green]")
        for rel_path, error in failed:
            console.print(f"[yellow]⚠ Could not copy {rel_path}: {error}[/yellow]")
        return copied
