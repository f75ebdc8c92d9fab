"""Display service for worktree information and operation outcomes"""

import os
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treework.constants import Style
from treework.formatters import format_branch_result, format_removal, pluralize
from treework.models.outcomes import BranchDisposition, BulkReport, CreationResult, ItemReport
from treework.models.worktree import WorktreeDisplay, WorktreeRecord
from treework.logging_config import get_logger

logger = get_logger(__name__)


class DisplayService:
    """Renders engine results; the engine itself never prints."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _say(self, style: str, message: str) -> None:
        """Print plain text in a style; paths, branches and git errors are never markup."""
        self.console.print(f"[{style}]{escape(message)}[/{style}]")

    def success(self, message: str) -> None:
        self._say(Style.SUCCESS, f"✓ {message}")

    def info(self, message: str) -> None:
        self._say(Style.INFO, message)

    def warn(self, message: str) -> None:
        self._say(Style.WARNING, f"! {message}")

    def error(self, message: str) -> None:
        self._say(Style.ERROR, f"✗ {message}")

    def muted(self, message: str) -> None:
        self._say(Style.MUTED, message)

    def banner(self, version: str) -> None:
        self.console.print(f"[{Style.BRAND}]treework[/{Style.BRAND}] [{Style.MUTED}]v{version}[/{Style.MUTED}]")

    def show_worktree_table(self, items: List[WorktreeDisplay]) -> None:
        """Display discovered worktrees as a table."""
        table = Table()
        table.add_column("Worktree")
        table.add_column("Branch")
        table.add_column("Repo")
        table.add_column("Path", style=Style.MUTED)
        for item in items:
            table.add_row(escape(item.name), escape(item.branch), escape(item.repo), escape(item.path))
        self.console.print(table)

    def show_records(self, repo_root: str, records: List[WorktreeRecord]) -> None:
        """Display the worktrees of one repository before a bulk operation."""
        name = escape(os.path.basename(repo_root))
        self.console.print(f"[{Style.INFO}]Worktrees for [bold]{name}[/bold]:[/{Style.INFO}]")
        for record in records:
            self.muted(f"  {record.name}  ({record.display_branch})")

    def show_creation(self, result: CreationResult, repo_root: str) -> None:
        name = os.path.basename(result.path)
        if not result.created:
            self.info(f"Already exists: {name}")
        else:
            if result.env_files:
                self.muted(f"Copied {pluralize(len(result.env_files), 'env file')}")
            if result.installed_with:
                self.success(f"Dependencies installed with {result.installed_with}")
        for warning in result.warnings:
            self.warn(warning)
        if result.created:
            self.success(f"Ready: {name}")
            self.muted(result.path)

    def show_item(self, item: ItemReport) -> None:
        """Display what happened to a single worktree."""
        if item.outcome is not None:
            style, message = format_removal(item.outcome)
            self._say(style, message)
        if item.branch_result is not None:
            style, message = format_branch_result(item.branch_result)
            self._say(style, message)

    def show_bulk_report(self, report: BulkReport) -> None:
        """Display the aggregate result of a bulk removal."""
        if report.total == 0:
            self.info("No worktrees to remove.")
            return

        for failure in report.failures:
            style, message = format_removal(failure)
            self._say(style, message)

        if report.failed:
            self.warn(
                f"Removed {report.removed} of {pluralize(report.total, 'worktree')}, "
                f"{len(report.failed)} failed"
            )
        else:
            self.success(f"Removed {pluralize(report.removed, 'worktree')}")

        if report.deleted_branches:
            self.muted(f"Deleted merged branches: {', '.join(report.deleted_branches)}")

        for result in report.branch_results:
            if result.disposition is BranchDisposition.DELETION_FAILED:
                style, message = format_branch_result(result)
                self._say(style, message)

        if report.forced_deletions:
            for result in report.forced_deletions:
                style, message = format_branch_result(result)
                self._say(style, message)
        elif report.unmerged:
            self.muted(f"Kept unmerged branches: {', '.join(report.unmerged)}")
