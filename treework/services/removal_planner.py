"""Chooses and executes soft or forced worktree removal."""

from typing import Optional

from treework.models.outcomes import RemovalMode, RemovalOutcome
from treework.models.worktree import WorktreeRecord, WorktreeStatus
from treework.services.git.gateway import GitGateway
from treework.logging_config import get_logger

logger = get_logger(__name__)


class RemovalPlanner:
    """Removes one worktree, escalating to a forced removal only when confirmed."""

    def __init__(self, gateway: GitGateway):
        self.gateway = gateway

    @staticmethod
    def choose_mode(status: WorktreeStatus, confirmed: bool) -> RemovalMode:
        """Forced iff the worktree is dirty and the caller confirmed; soft otherwise."""
        if status.is_dirty and confirmed:
            return RemovalMode.FORCED
        return RemovalMode.SOFT

    def remove(
        self,
        repo_root: str,
        record: WorktreeRecord,
        status: WorktreeStatus,
        confirmed: bool,
        prune: bool = True,
    ) -> RemovalOutcome:
        """Remove a worktree.

        The caller is responsible for obtaining ``confirmed`` from the user before
        a dirty worktree is passed in; this method never prompts. A failed soft
        removal is reported, never retried as forced.

        Args:
            repo_root: Primary worktree of the repository
            record: Worktree to remove
            status: Status computed for this removal
            confirmed: Whether the user agreed to discard unsaved work
            prune: Prune stale worktree metadata afterwards (bulk callers prune once at the end)

        Returns:
            RemovalOutcome describing the attempt
        """
        mode = self.choose_mode(status, confirmed)
        if status.is_dirty and mode is RemovalMode.SOFT:
            logger.info(f"{record.name} has {status.describe()} but force was not confirmed")

        try:
            self.gateway.remove_worktree(repo_root, record.path, force=mode is RemovalMode.FORCED)
            outcome = RemovalOutcome.success(record, mode)
        except Exception as e:
            logger.error(f"Failed to remove worktree {record.path}: {e}")
            outcome = RemovalOutcome.failure(record, mode, str(e))

        if prune:
            self.prune(repo_root)
        return outcome

    def prune(self, repo_root: str) -> Optional[str]:
        """Prune stale worktree metadata.

        Failures are logged and swallowed.

        Returns:
            The error message if pruning failed, otherwise None
        """
        try:
            self.gateway.prune_worktrees(repo_root)
            return None
        except Exception as e:
            logger.debug(f"Ignoring prune failure in {repo_root}: {e}")
            return str(e)
