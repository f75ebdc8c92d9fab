"""Removes a batch of worktrees with per-item failure isolation."""

from typing import Iterable, List

from treework.models.outcomes import BranchResult, BulkReport, ItemReport
from treework.models.worktree import WorktreeRecord
from treework.services.branch_reconciler import BranchReconciler
from treework.services.removal_planner import RemovalPlanner
from treework.services.status_inspector import StatusInspector
from treework.logging_config import get_logger

logger = get_logger(__name__)


class BulkOrchestrator:
    """Runs status check, removal and branch reconciliation over many worktrees.

    Items are processed strictly in the given order, one at a time. A failed
    removal is recorded and the batch moves on.
    """

    def __init__(
        self,
        status_inspector: StatusInspector,
        removal_planner: RemovalPlanner,
        branch_reconciler: BranchReconciler,
    ):
        self.status_inspector = status_inspector
        self.removal_planner = removal_planner
        self.branch_reconciler = branch_reconciler

    def clear_all(
        self, repo_root: str, records: Iterable[WorktreeRecord], dirty_confirmed: bool
    ) -> BulkReport:
        """Remove every worktree in records.

        Args:
            repo_root: Primary worktree of the repository
            records: Worktrees to remove, in listing order
            dirty_confirmed: One upfront decision applied to every dirty worktree

        Returns:
            BulkReport with per-item results and the branches left unmerged
        """
        report = BulkReport(default_branch=self.branch_reconciler.resolve_default_branch(repo_root))

        for record in records:
            item = ItemReport(record=record)
            report.items.append(item)

            item.status = self.status_inspector.check_status(record.path)
            item.outcome = self.removal_planner.remove(
                repo_root, record, item.status, dirty_confirmed, prune=False
            )
            if not item.outcome.removed:
                logger.warning(f"Skipping {record.name}: {item.outcome.reason}")
                continue

            if record.branch:
                item.branch_result = self.branch_reconciler.reconcile(
                    repo_root, record.branch, report.default_branch
                )

        self.removal_planner.prune(repo_root)

        logger.info(
            f"Removed {report.removed}/{report.total} worktrees, "
            f"{len(report.failed)} failed, {len(report.unmerged)} unmerged branches kept"
        )
        return report

    def force_delete_unmerged(
        self, repo_root: str, report: BulkReport, confirmed: bool
    ) -> List[BranchResult]:
        """Apply one aggregate decision to every unmerged branch in the report."""
        if not confirmed or not report.unmerged:
            return []

        results = self.branch_reconciler.force_delete_all(
            repo_root, report.unmerged, report.default_branch
        )
        report.forced_deletions.extend(results)
        return results
