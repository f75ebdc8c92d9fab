"""Git-related services for treework."""

from .gateway import GitGateway, GitPythonGateway
from .worktrees import WorktreeInventory, parse_worktree_porcelain

__all__ = [
    "GitGateway",
    "GitPythonGateway",
    "WorktreeInventory",
    "parse_worktree_porcelain",
]
