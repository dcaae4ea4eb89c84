"""Display service for cleanup previews and results"""
from rich.console import Console
from rich.table import Table
from typing import List, Tuple

from git_worktree_keeper.constants import COLUMNS, CLI_COLORS, LEGEND_TEXT, SYMBOL_FAIL, SYMBOL_OK
from git_worktree_keeper.formatters import (
    format_age,
    format_state,
    format_worktree_label,
    get_worktree_style_type,
)
from git_worktree_keeper.models.worktree import CleanableWorktree
from git_worktree_keeper.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class DisplayService:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def build_worktree_table(self, entries: List[CleanableWorktree], title: str) -> Table:
        """Build a table of worktrees, one row each, colored by removability."""
        table = Table(title=title, title_justify="left")
        for col in COLUMNS:
            if col.width:
                table.add_column(col.label, max_width=col.width)
            else:
                table.add_column(col.label)

        for entry in entries:
            row_style = CLI_COLORS.get(get_worktree_style_type(entry))
            table.add_row(
                format_worktree_label(entry),
                entry.path,
                format_age(entry.age_days),
                format_state(entry),
                entry.reason or "",
                style=row_style,
            )
        return table

    def display_cleanup_preview(
        self, cleanable: List[CleanableWorktree], skipped: List[CleanableWorktree]
    ) -> None:
        """Show what will be removed and what is kept."""
        if cleanable:
            console.print(self.build_worktree_table(cleanable, f"Worktrees to remove ({len(cleanable)})"))
        if skipped:
            console.print(self.build_worktree_table(skipped, f"Worktrees kept ({len(skipped)})"))
        if self.verbose and any(e.has_uncommitted or e.has_unpushed for e in cleanable + skipped):
            console.print(LEGEND_TEXT)

    def display_removal_results(self, removed: List[str], failed: List[Tuple[str, str]]) -> None:
        """Per-item outcome followed by a tally."""
        for path in removed:
            console.print(f"[green]{SYMBOL_OK} Removed worktree at {path}[/green]")
        for path, error in failed:
            console.print(f"[red]{SYMBOL_FAIL} Failed to remove worktree at {path}: {error}[/red]")

        summary = f"\n[green]Removed {len(removed)} worktree(s)[/green]"
        if failed:
            summary += f", [red]{len(failed)} failed[/red]"
        console.print(summary)
