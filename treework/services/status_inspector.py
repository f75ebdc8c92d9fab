"""Detects unsaved work in a worktree."""

from treework.models.worktree import WorktreeStatus
from treework.services.git.gateway import GitGateway
from treework.logging_config import get_logger

logger = get_logger(__name__)


def has_porcelain_entries(status_output: str) -> bool:
    """True if ``git status --porcelain`` reported any modified, staged or untracked entry."""
    return any(line.strip() for line in status_output.splitlines())


class StatusInspector:
    """Determines whether a worktree holds uncommitted changes or unpushed commits.

    Any query failure reports the corresponding flag as set.
    """

    def __init__(self, gateway: GitGateway):
        self.gateway = gateway

    def check_status(self, worktree_path: str) -> WorktreeStatus:
        """Compute a fresh status for the worktree at worktree_path."""
        status = WorktreeStatus(
            has_uncommitted_changes=self._has_uncommitted_changes(worktree_path),
            has_unpushed_commits=self._has_unpushed_commits(worktree_path),
        )
        logger.debug(f"Status of {worktree_path}: {status.describe()}")
        return status

    def _has_uncommitted_changes(self, worktree_path: str) -> bool:
        try:
            output = self.gateway.status_porcelain(worktree_path)
        except Exception as e:
            logger.warning(f"Could not check status of {worktree_path}, assuming changes: {e}")
            return True
        return has_porcelain_entries(output)

    def _has_unpushed_commits(self, worktree_path: str) -> bool:
        try:
            branch = self.gateway.current_branch(worktree_path)
        except Exception as e:
            logger.warning(f"Could not read branch of {worktree_path}, assuming unpushed commits: {e}")
            return True

        if branch is None:
            # Detached HEAD: no branch to compare against remotes
            return False

        try:
            return self.gateway.count_unpushed_commits(worktree_path, branch) > 0
        except Exception as e:
            logger.warning(f"Could not count unpushed commits on {branch}, assuming some: {e}")
            return True
