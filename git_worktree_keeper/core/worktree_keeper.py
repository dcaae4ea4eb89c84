"""Core functionality for git-worktree-keeper"""

from pathlib import Path
from typing import Optional, Union

from rich.console import Console

from git_worktree_keeper.config import Config
from git_worktree_keeper.core.cleanup import AutoCleaner, CleanupExecutor
from git_worktree_keeper.core.worktree_creator import WorktreeCreator
from git_worktree_keeper.models.checkout import CheckoutRequest, CheckoutResult, CheckoutState
from git_worktree_keeper.models.worktree import AnalysisOptions, CleanupReport
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import BranchQueries, WorktreeService
from git_worktree_keeper.services.safety_service import SafetyAnalyzer
from git_worktree_keeper.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class WorktreeKeeper:
    """Main class for managing git worktrees."""

    def __init__(
        self,
        git_root: str,
        config: Union[Config, dict],
        current_path: str = "",
        nav_file: Optional[Path] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            git_root: Repository root (bare directory or main worktree)
            config: Configuration dict or Config object
            current_path: Worktree the command runs in, "" when outside one
            nav_file: Override for the navigation marker location
        """
        self.git_root = git_root
        self.config = Config.from_dict(config) if isinstance(config, dict) else config
        self.current_path = current_path

        self.worktree_service = WorktreeService(git_root)
        self.branch_queries = BranchQueries(git_root, self.config.remote_name)
        self.analyzer = SafetyAnalyzer(git_root)
        self.display_service = DisplayService(verbose=self.config.verbose)
        self.executor = CleanupExecutor(self.worktree_service, self.display_service)
        self.creator = WorktreeCreator(
            git_root, self.config, self.worktree_service, self.branch_queries, nav_file
        )
        self.auto_cleaner = AutoCleaner(
            git_root, self.config, self.worktree_service, self.analyzer, self.executor
        )

    def checkout(self, request: CheckoutRequest) -> CheckoutResult:
        """Create or reuse the worktree for request; may trigger auto-clean."""
        result = self.creator.checkout(request)
        if result.state is CheckoutState.CREATED:
            self.auto_cleaner.run(self.current_path)
        return result

    def _analysis_options(self, threshold: Optional[int], force: bool) -> AnalysisOptions:
        return AnalysisOptions(
            current_path=self.current_path,
            default_branch=self.config.default_branch,
            protected_branches=self.config.protected_branches,
            threshold=threshold,
            force=force,
        )

    def clean(self, force: bool = False, dry_run: bool = False, use_age_threshold: bool = False) -> CleanupReport:
        """Remove safe worktrees, optionally only those past the age threshold.

        Entries whose directories are already gone are pruned first; a dry
        run leaves them registered and only hides them.
        """
        if not dry_run:
            self.worktree_service.prune_worktrees()

        threshold = self.config.clean_threshold if use_age_threshold else None
        analyzed = self.analyzer.analyze(
            self.worktree_service.list_live_worktrees(), self._analysis_options(threshold, force)
        )
        return self.executor.run(analyzed, dry_run=dry_run, confirm=True, force_remove=force)

    def prune(
        self, clean: bool = False, dry_run: bool = False, force: bool = False, verbose: bool = False
    ) -> Optional[CleanupReport]:
        """Prune stale worktree metadata; with clean, also remove every safe worktree."""
        if not dry_run:
            success, error_message = self.worktree_service.prune_worktrees()
            if success and (verbose or not clean):
                console.print("[green]✓ Pruned stale worktree metadata[/green]")
            elif not success:
                console.print(f"[yellow]⚠ {error_message}[/yellow]")

        if not clean:
            return None

        analyzed = self.analyzer.analyze(
            self.worktree_service.list_live_worktrees(), self._analysis_options(None, False)
        )
        return self.executor.run(analyzed, dry_run=dry_run, confirm=not force, default_yes=True)
