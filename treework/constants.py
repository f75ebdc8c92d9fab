"""Shared constants for treework."""

from pathlib import Path
from typing import List, Tuple


# Worktree directories live next to their repo as <repo>-worktree-<name>
WORKTREE_MARKER = "-worktree-"

# Porcelain listing prefixes (git worktree list --porcelain)
PORCELAIN_WORKTREE = "worktree "
PORCELAIN_BRANCH = "branch "
PORCELAIN_DETACHED = "detached"
BRANCH_REF_PREFIX = "refs/heads/"

# Default branch resolution
REMOTE_NAME = "origin"
REMOTE_HEAD_REF = f"refs/remotes/{REMOTE_NAME}/HEAD"
DEFAULT_BRANCH_CANDIDATES: List[str] = ["main", "master"]
DEFAULT_BRANCH_FALLBACK = "main"

# Display labels
DETACHED_LABEL = "(detached)"

# Discovery depth limits, relative to the base folder
REPO_SCAN_DEPTH = 5
WORKTREE_SCAN_DEPTH = 3

# Name sanitising
MAX_NAME_LENGTH = 100

# Configuration
ENV_BASE_DIR = "DEV_DIR"
ENV_EDITOR = "WT_EDITOR"
# Relative to the user's home directory
CONFIG_RELATIVE_PATH = Path(".config") / "treework" / "config.json"
DEFAULT_BASE_DIR_RELATIVE = Path("Desktop") / "Development"

# Environment files copied into new worktrees
ENV_FILE_PREFIX = ".env"

# Lockfile -> package manager, in priority order
LOCKFILES: List[Tuple[str, str]] = [
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
]

# Editors tried when none is configured, with the flags that open a new window
EDITORS: List[Tuple[str, List[str]]] = [
    ("cursor", ["--new-window"]),
    ("code", ["-n"]),
    ("open", []),
]


# Rich styles for the presentation layer
class Style:
    """Style names used when printing outcomes."""

    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"
    INFO = "cyan"
    MUTED = "dim"
    BRAND = "bold magenta"
