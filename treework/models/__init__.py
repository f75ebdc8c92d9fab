"""Data models for treework."""

from .worktree import WorktreeRecord, WorktreeStatus, WorktreeListing, WorktreeDisplay
from .outcomes import (
    RemovalMode,
    RemovalOutcome,
    BranchDisposition,
    BranchResult,
    ItemReport,
    BulkReport,
    CreationResult,
    ResultState,
    OperationResult,
)

__all__ = [
    "WorktreeRecord",
    "WorktreeStatus",
    "WorktreeListing",
    "WorktreeDisplay",
    "RemovalMode",
    "RemovalOutcome",
    "BranchDisposition",
    "BranchResult",
    "ItemReport",
    "BulkReport",
    "CreationResult",
    "ResultState",
    "OperationResult",
]
