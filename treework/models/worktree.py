"""Worktree data models."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from treework.constants import DETACHED_LABEL


@dataclass(frozen=True)
class WorktreeRecord:
    """A linked worktree as reported by the repository's worktree listing."""

    path: str
    branch: str = ""  # Empty when HEAD is detached

    @property
    def is_detached(self) -> bool:
        return not self.branch

    @property
    def name(self) -> str:
        return os.path.basename(self.path.rstrip(os.sep))

    @property
    def display_branch(self) -> str:
        return self.branch or DETACHED_LABEL

    def __str__(self) -> str:
        """String representation of worktree."""
        return f"{self.name} ({self.display_branch})"


@dataclass(frozen=True)
class WorktreeStatus:
    """Unsaved-work flags for one worktree, computed at a single point in time."""

    has_uncommitted_changes: bool
    has_unpushed_commits: bool

    @property
    def is_dirty(self) -> bool:
        return self.has_uncommitted_changes or self.has_unpushed_commits

    def describe(self) -> str:
        """Short human readable summary of what would be lost."""
        parts = []
        if self.has_uncommitted_changes:
            parts.append("uncommitted changes")
        if self.has_unpushed_commits:
            parts.append("unpushed commits")
        return " and ".join(parts) if parts else "clean"


@dataclass
class WorktreeListing:
    """Result of scanning a repository's worktrees.

    ``error`` is set when the listing query itself failed, which lets callers
    tell a failed query apart from a repository with no linked worktrees.
    """

    records: List[WorktreeRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class WorktreeDisplay:
    """A discovered worktree directory, with what the list view shows for it."""

    path: str
    branch: str
    repo: str

    @property
    def name(self) -> str:
        return os.path.basename(self.path.rstrip(os.sep))
