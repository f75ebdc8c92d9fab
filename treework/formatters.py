"""Text formatting for worktree outcomes."""

from typing import Tuple

from treework.constants import Style
from treework.models.outcomes import BranchDisposition, BranchResult, RemovalMode, RemovalOutcome


def format_removal(outcome: RemovalOutcome) -> Tuple[str, str]:
    """Return (style, message) describing a removal attempt."""
    if outcome.removed:
        how = " (forced)" if outcome.mode is RemovalMode.FORCED else ""
        return Style.SUCCESS, f"Removed worktree {outcome.record.name}{how}"
    return Style.ERROR, f"Failed to remove worktree {outcome.record.name}: {outcome.reason}"


def format_branch_result(result: BranchResult) -> Tuple[str, str]:
    """Return (style, message) describing what happened to a branch."""
    if result.disposition is BranchDisposition.DELETED:
        if result.forced:
            return Style.SUCCESS, f"Force deleted branch '{result.branch}'"
        return Style.SUCCESS, f"Deleted merged branch '{result.branch}'"
    if result.disposition is BranchDisposition.KEPT_UNMERGED:
        return Style.MUTED, f"Kept unmerged branch '{result.branch}'"
    if result.disposition is BranchDisposition.SKIPPED_IS_DEFAULT:
        return Style.MUTED, f"Kept default branch '{result.branch}'"
    if result.disposition is BranchDisposition.SKIPPED_NO_BRANCH:
        return Style.MUTED, "No branch to clean up (detached HEAD)"
    return Style.WARNING, f"Could not delete branch '{result.branch}': {result.reason}"


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
