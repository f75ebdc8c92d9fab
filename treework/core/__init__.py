"""Core functionality for treework."""

from .worktree_keeper import WorktreeKeeper, Prompter

__all__ = ["WorktreeKeeper", "Prompter"]
