"""Decides what happens to a removed worktree's branch."""

from typing import Iterable, List, Optional

from treework.constants import DEFAULT_BRANCH_CANDIDATES, DEFAULT_BRANCH_FALLBACK
from treework.models.outcomes import BranchDisposition, BranchResult
from treework.services.git.gateway import GitGateway
from treework.logging_config import get_logger

logger = get_logger(__name__)


class BranchReconciler:
    """Deletes merged branches and leaves unmerged ones for an explicit decision.

    The repository's default branch is never deleted, and an unmerged branch is
    only ever force-deleted through ``force_delete`` after the user agreed.
    """

    def __init__(self, gateway: GitGateway):
        self.gateway = gateway

    def resolve_default_branch(self, repo_root: str) -> str:
        """Resolve the branch merges are compared against.

        Order: the remote's symbolic HEAD, a local "main", a local "master",
        then the literal "main".
        """
        try:
            remote_default = self.gateway.remote_default_branch(repo_root)
        except Exception as e:
            logger.debug(f"Could not read remote default branch: {e}")
            remote_default = None
        if remote_default:
            logger.debug(f"Default branch from remote HEAD: {remote_default}")
            return remote_default

        for candidate in DEFAULT_BRANCH_CANDIDATES:
            try:
                if self.gateway.branch_exists(repo_root, candidate):
                    logger.debug(f"Default branch from local branch: {candidate}")
                    return candidate
            except Exception as e:
                logger.debug(f"Could not check for branch {candidate}: {e}")

        return DEFAULT_BRANCH_FALLBACK

    def reconcile(
        self, repo_root: str, branch: str, default_branch: Optional[str] = None
    ) -> BranchResult:
        """Dispose of the branch of a worktree that was just removed.

        Args:
            repo_root: Primary worktree of the repository
            branch: Branch the removed worktree had checked out, empty when detached
            default_branch: Already resolved default branch, resolved here when omitted

        Returns:
            BranchResult with DELETED, KEPT_UNMERGED, DELETION_FAILED, SKIPPED_IS_DEFAULT
            or SKIPPED_NO_BRANCH
        """
        if not branch:
            logger.debug("Nothing to reconcile: worktree had no branch")
            return BranchResult(branch, BranchDisposition.SKIPPED_NO_BRANCH)

        default_branch = default_branch or self.resolve_default_branch(repo_root)
        if branch == default_branch:
            logger.debug(f"Keeping {branch}: it is the default branch")
            return BranchResult(branch, BranchDisposition.SKIPPED_IS_DEFAULT)

        try:
            merged = self.gateway.is_ancestor(repo_root, branch, default_branch)
        except Exception as e:
            logger.warning(f"Could not check whether {branch} is merged, keeping it: {e}")
            return BranchResult(branch, BranchDisposition.KEPT_UNMERGED, reason=str(e))

        if not merged:
            logger.info(f"Branch {branch} is not merged into {default_branch}")
            return BranchResult(branch, BranchDisposition.KEPT_UNMERGED)

        try:
            self.gateway.delete_branch(repo_root, branch, force=False)
        except Exception as e:
            logger.warning(f"Could not delete merged branch {branch}: {e}")
            return BranchResult(branch, BranchDisposition.DELETION_FAILED, reason=str(e))

        logger.info(f"Deleted merged branch {branch}")
        return BranchResult(branch, BranchDisposition.DELETED)

    def force_delete(
        self, repo_root: str, branch: str, default_branch: Optional[str] = None
    ) -> BranchResult:
        """Force-delete an unmerged branch the user explicitly chose to discard.

        The default branch is never deleted, even when asked for explicitly.
        """
        if not branch:
            return BranchResult(branch, BranchDisposition.SKIPPED_NO_BRANCH)

        default_branch = default_branch or self.resolve_default_branch(repo_root)
        if branch == default_branch:
            logger.warning(f"Refusing to force delete {branch}: it is the default branch")
            return BranchResult(branch, BranchDisposition.SKIPPED_IS_DEFAULT)

        try:
            self.gateway.delete_branch(repo_root, branch, force=True)
        except Exception as e:
            logger.error(f"Failed to force delete branch {branch}: {e}")
            return BranchResult(branch, BranchDisposition.DELETION_FAILED, forced=True, reason=str(e))

        logger.info(f"Force deleted branch {branch}")
        return BranchResult(branch, BranchDisposition.DELETED, forced=True)

    def force_delete_all(
        self, repo_root: str, branches: Iterable[str], default_branch: Optional[str] = None
    ) -> List[BranchResult]:
        """Force-delete each branch independently; one failure does not stop the rest."""
        default_branch = default_branch or self.resolve_default_branch(repo_root)
        return [self.force_delete(repo_root, branch, default_branch) for branch in branches]
