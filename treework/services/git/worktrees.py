"""Worktree inventory service for treework."""

from typing import Dict, List, Optional

from treework.constants import (
    BRANCH_REF_PREFIX,
    PORCELAIN_BRANCH,
    PORCELAIN_DETACHED,
    PORCELAIN_WORKTREE,
)
from treework.models.worktree import WorktreeListing, WorktreeRecord
from treework.services.git.gateway import GitGateway
from treework.logging_config import get_logger

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse ``git worktree list --porcelain`` output into records.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name     (or "detached")
        (blank line between worktrees)

    Every ``worktree`` line starts a new entry, so a missing blank separator
    does not merge two entries. The primary worktree is included.
    """
    entries: List[WorktreeRecord] = []
    current: Dict[str, str] = {}

    for raw_line in output.splitlines():
        line = raw_line.rstrip("\r")

        if line.startswith(PORCELAIN_WORKTREE):
            if current.get("path"):
                entries.append(WorktreeRecord(current["path"], current.get("branch", "")))
            current = {"path": line[len(PORCELAIN_WORKTREE):]}
        elif line.startswith(PORCELAIN_BRANCH) and current:
            branch_ref = line[len(PORCELAIN_BRANCH):].strip()
            if branch_ref.startswith(BRANCH_REF_PREFIX):
                branch_ref = branch_ref[len(BRANCH_REF_PREFIX):]
            current["branch"] = branch_ref
        elif line.startswith(PORCELAIN_DETACHED) and current:
            current["branch"] = ""

    # Handle last entry if no trailing blank line
    if current.get("path"):
        entries.append(WorktreeRecord(current["path"], current.get("branch", "")))

    return entries


class WorktreeInventory:
    """Lists a repository's linked worktrees.

    Results are never cached: the repository may change between listing a
    worktree and acting on it.
    """

    def __init__(self, gateway: GitGateway):
        self.gateway = gateway

    def scan(self, repo_root: str) -> WorktreeListing:
        """List linked worktrees, keeping a failed query distinguishable from an empty one.

        The primary worktree (always the first listing entry) is dropped and the
        order of the remaining entries is preserved.
        """
        try:
            output = self.gateway.list_worktrees(repo_root)
        except Exception as e:
            logger.warning(f"Could not list worktrees for {repo_root}: {e}")
            return WorktreeListing(error=str(e))

        entries = parse_worktree_porcelain(output)
        records = entries[1:]

        logger.debug(f"Found {len(records)} linked worktrees in {repo_root}")
        for record in records:
            logger.debug(f"  {record}")
        return WorktreeListing(records=records)

    def list_worktrees(self, repo_root: str) -> List[WorktreeRecord]:
        """List linked worktrees, returning an empty list if the query fails."""
        return self.scan(repo_root).records

    def primary_worktree(self, path: str) -> Optional[str]:
        """Return the primary worktree path of the repository that path belongs to."""
        try:
            output = self.gateway.list_worktrees(path)
        except Exception as e:
            logger.debug(f"Could not list worktrees from {path}: {e}")
            return None

        entries = parse_worktree_porcelain(output)
        if not entries:
            return None
        return entries[0].path
