"""Outcome models produced by the worktree lifecycle engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from treework.models.worktree import WorktreeRecord, WorktreeStatus


class RemovalMode(Enum):
    """How a worktree removal is performed."""
    SOFT = "soft"
    FORCED = "forced"


@dataclass(frozen=True)
class RemovalOutcome:
    """Result of removing one worktree."""

    record: WorktreeRecord
    mode: RemovalMode
    removed: bool
    reason: Optional[str] = None  # Set when removal failed

    @classmethod
    def success(cls, record: WorktreeRecord, mode: RemovalMode) -> "RemovalOutcome":
        return cls(record=record, mode=mode, removed=True)

    @classmethod
    def failure(cls, record: WorktreeRecord, mode: RemovalMode, reason: str) -> "RemovalOutcome":
        return cls(record=record, mode=mode, removed=False, reason=reason)


class BranchDisposition(Enum):
    """What happened to a removed worktree's branch."""
    DELETED = "deleted"
    KEPT_UNMERGED = "kept-unmerged"
    DELETION_FAILED = "deletion-failed"
    SKIPPED_IS_DEFAULT = "skipped-default"
    SKIPPED_NO_BRANCH = "skipped-no-branch"


@dataclass(frozen=True)
class BranchResult:
    """Disposition of a single branch."""

    branch: str
    disposition: BranchDisposition
    forced: bool = False
    reason: Optional[str] = None


@dataclass
class ItemReport:
    """Everything that happened to one worktree during an operation.

    The stages are filled in order: status, removal outcome, then branch
    result (only when removal succeeded and the worktree had a branch).
    """

    record: WorktreeRecord
    status: Optional[WorktreeStatus] = None
    outcome: Optional[RemovalOutcome] = None
    branch_result: Optional[BranchResult] = None

    @property
    def removed(self) -> bool:
        return self.outcome is not None and self.outcome.removed


@dataclass
class BulkReport:
    """Aggregate result of removing a batch of worktrees."""

    items: List[ItemReport] = field(default_factory=list)
    forced_deletions: List[BranchResult] = field(default_factory=list)
    default_branch: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def failed(self) -> List[str]:
        """Paths of worktrees whose removal failed, in processing order."""
        return [item.record.path for item in self.items if not item.removed]

    @property
    def failures(self) -> List[RemovalOutcome]:
        return [item.outcome for item in self.items if item.outcome and not item.outcome.removed]

    @property
    def removed(self) -> int:
        return self.total - len(self.failed)

    @property
    def branch_results(self) -> List[BranchResult]:
        return [item.branch_result for item in self.items if item.branch_result]

    @property
    def deleted_branches(self) -> List[str]:
        return [
            result.branch
            for result in self.branch_results
            if result.disposition == BranchDisposition.DELETED
        ]

    @property
    def unmerged(self) -> List[str]:
        """Branches left behind because they are not merged into the default branch."""
        return [
            result.branch
            for result in self.branch_results
            if result.disposition == BranchDisposition.KEPT_UNMERGED
        ]


@dataclass(frozen=True)
class CreationResult:
    """Result of creating (or re-opening) a worktree."""

    path: str
    branch: str
    created: bool
    new_branch: bool = False
    env_files: List[str] = field(default_factory=list)
    installed_with: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class ResultState(Enum):
    """Terminal state of a user-facing operation."""
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass
class OperationResult:
    """Tagged result of an interactive operation.

    An abort is its own state, never an error: ``value`` still carries any
    progress that was made before the user cancelled.
    """

    state: ResultState
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def completed(cls, value: Any = None) -> "OperationResult":
        return cls(ResultState.COMPLETED, value)

    @classmethod
    def aborted(cls, value: Any = None) -> "OperationResult":
        return cls(ResultState.ABORTED, value)

    @classmethod
    def failed(cls, error: str, value: Any = None) -> "OperationResult":
        return cls(ResultState.FAILED, value, error)

    @property
    def is_completed(self) -> bool:
        return self.state == ResultState.COMPLETED

    @property
    def is_aborted(self) -> bool:
        return self.state == ResultState.ABORTED

    @property
    def is_failed(self) -> bool:
        return self.state == ResultState.FAILED
