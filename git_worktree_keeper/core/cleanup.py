"""Remove worktrees that the safety analysis marked as removable."""

import time
from typing import List, Optional

from rich.console import Console

from git_worktree_keeper.config import Config, update_repo_config
from git_worktree_keeper.constants import AUTO_CLEAN_COOLDOWN_MS
from git_worktree_keeper.exceptions import GitWorktreeKeeperError, RemovalError
from git_worktree_keeper.formatters import format_removal_confirmation_items
from git_worktree_keeper.models.worktree import AnalysisOptions, CleanableWorktree, CleanupReport
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import WorktreeService
from git_worktree_keeper.services.safety_service import SafetyAnalyzer
from git_worktree_keeper.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class CleanupExecutor:
    """Previews, confirms and removes a batch of analyzed worktrees."""

    def __init__(self, worktree_service: WorktreeService, display_service: Optional[DisplayService] = None):
        self.worktree_service = worktree_service
        self.display_service = display_service or DisplayService()

    def run(
        self,
        analyzed: List[CleanableWorktree],
        dry_run: bool = False,
        confirm: bool = True,
        force_remove: bool = False,
        default_yes: bool = False,
    ) -> CleanupReport:
        """Remove every cleanable worktree in analyzed.

        Args:
            analyzed: Output of SafetyAnalyzer.analyze
            dry_run: Only show what would happen
            confirm: Ask once before removing the batch
            force_remove: Pass --force to git worktree remove
            default_yes: An empty answer to the prompt means yes

        Returns:
            CleanupReport; one failed removal never stops the others
        """
        report = CleanupReport(
            cleanable=[e for e in analyzed if e.can_clean],
            skipped=[e for e in analyzed if not e.can_clean],
            dry_run=dry_run,
        )

        self.display_service.display_cleanup_preview(report.cleanable, report.skipped)

        if not report.cleanable:
            console.print("[green]No worktrees to clean up[/green]")
            return report

        if dry_run:
            console.print(
                f"\n[yellow]Dry run: {len(report.cleanable)} worktree(s) would be removed[/yellow]"
            )
            return report

        if confirm and not self._confirm(report.cleanable, default_yes):
            console.print("[yellow]Cleanup cancelled[/yellow]")
            report.cancelled = True
            return report

        for entry in report.cleanable:
            success, error_message = self.worktree_service.remove_worktree(entry.path, force=force_remove)
            if success:
                report.removed.append(entry.path)
            else:
                error = RemovalError(entry.path, error_message)
                logger.debug(str(error))
                report.failed.append((entry.path, error_message or "Unknown error"))

        # Drop administrative data of anything removed
        self.worktree_service.prune_worktrees()

        self.display_service.display_removal_results(report.removed, report.failed)
        return report

    @staticmethod
    def _confirm(entries: List[CleanableWorktree], default_yes: bool) -> bool:
        """Show the batch and ask once."""
        console.print("\nThe following worktrees will be removed:")
        console.print(format_removal_confirmation_items(entries))

        choices = "[Y/n]" if default_yes else "[y/N]"
        response = console.input(f"\nProceed with cleanup? {choices} ").strip().lower()
        if not response:
            return default_yes
        return response in ("y", "yes")


class AutoCleaner:
    """Offers to remove stale worktrees at most once per cooldown period."""

    def __init__(
        self,
        git_root: str,
        config: Config,
        worktree_service: WorktreeService,
        analyzer: Optional[SafetyAnalyzer] = None,
        executor: Optional[CleanupExecutor] = None,
    ):
        self.git_root = git_root
        self.config = config
        self.worktree_service = worktree_service
        self.analyzer = analyzer or SafetyAnalyzer(git_root)
        self.executor = executor or CleanupExecutor(worktree_service)

    def is_due(self, now_ms: int) -> bool:
        """Auto-clean enabled and the cooldown has passed."""
        if not self.config.auto_clean:
            return False
        last = self.config.last_auto_clean_time
        return last is None or now_ms - last >= AUTO_CLEAN_COOLDOWN_MS

    def _record_run(self, now_ms: int) -> None:
        # Only the timestamp; command-line overrides and defaults stay out of the file
        update_repo_config(self.git_root, last_auto_clean_time=now_ms)
        self.config.last_auto_clean_time = now_ms

    def run(self, current_path: str, now_ms: Optional[int] = None) -> Optional[CleanupReport]:
        """Offer stale worktrees for removal if due.

        Errors are logged and never propagate; auto-clean must not fail the
        command that triggered it.

        Returns:
            CleanupReport, or None when nothing was offered
        """
        now_ms = int(time.time() * 1000) if now_ms is None else now_ms
        if not self.is_due(now_ms):
            return None

        try:
            self._record_run(now_ms)

            options = AnalysisOptions(
                current_path=current_path,
                default_branch=self.config.default_branch,
                protected_branches=self.config.protected_branches,
                threshold=self.config.clean_threshold,
                force=False,
            )
            stale = [
                e for e in self.analyzer.analyze(self.worktree_service.list_worktrees(), options)
                if e.can_clean
            ]
            if not stale:
                logger.debug("Auto-clean: nothing stale")
                return None

            console.print(
                f"\n[yellow]Found {len(stale)} worktree(s) older than {self.config.clean_threshold} days[/yellow]"
            )
            return self.executor.run(stale, confirm=True, default_yes=True)
        except (GitWorktreeKeeperError, OSError) as e:
            logger.warning(f"Auto-clean skipped: {e}")
            return None
