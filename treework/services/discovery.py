"""Finds repositories and worktree directories under the base folder."""

import os
from typing import List, Optional

from treework.constants import REPO_SCAN_DEPTH, WORKTREE_MARKER, WORKTREE_SCAN_DEPTH
from treework.services.git.gateway import GitGateway
from treework.logging_config import get_logger

logger = get_logger(__name__)


def worktree_path(repo_dir: str, name: str) -> str:
    """Path of the worktree called name: a sibling ``<repo>-worktree-<name>`` directory."""
    repo_dir = os.path.abspath(repo_dir.rstrip(os.sep))
    repo = os.path.basename(repo_dir)
    return os.path.join(os.path.dirname(repo_dir), f"{repo}{WORKTREE_MARKER}{name}")


def repo_name_from_worktree(dirname: str) -> str:
    """Extract the repository name from a ``<repo>-worktree-<name>`` directory name."""
    idx = dirname.find(WORKTREE_MARKER)
    if idx >= 0:
        return dirname[:idx]
    return dirname


def _depth(base_dir: str, path: str) -> int:
    rel = os.path.relpath(path, base_dir)
    if rel == os.curdir:
        return 0
    return rel.count(os.sep) + 1


def find_repos(base_dir: str, max_depth: int = REPO_SCAN_DEPTH) -> List[str]:
    """Find git repositories under base_dir, skipping worktree directories."""
    repos = []
    base_dir = os.path.abspath(base_dir)

    for root, dirs, _files in os.walk(base_dir, onerror=lambda e: logger.debug(f"Skipping: {e}")):
        if ".git" in dirs:
            repos.append(root)

        if _depth(base_dir, root) + 1 >= max_depth:
            dirs[:] = []
            continue

        dirs[:] = sorted(d for d in dirs if d != ".git" and WORKTREE_MARKER not in d)

    logger.debug(f"Found {len(repos)} repositories under {base_dir}")
    return repos


def find_worktree_dirs(base_dir: str, max_depth: int = WORKTREE_SCAN_DEPTH) -> List[str]:
    """Find ``*-worktree-*`` directories under base_dir."""
    found = []
    base_dir = os.path.abspath(base_dir)

    for root, dirs, _files in os.walk(base_dir, onerror=lambda e: logger.debug(f"Skipping: {e}")):
        keep = []
        for d in sorted(dirs):
            if d == ".git":
                continue
            if WORKTREE_MARKER in d:
                found.append(os.path.join(root, d))
            else:
                keep.append(d)

        if _depth(base_dir, root) + 1 >= max_depth:
            keep = []
        dirs[:] = keep

    logger.debug(f"Found {len(found)} worktree directories under {base_dir}")
    return found


def current_repo(gateway: GitGateway, path: Optional[str] = None) -> Optional[str]:
    """Top level of the repository containing path (default: cwd), or None."""
    path = path or os.getcwd()
    try:
        return gateway.show_toplevel(path)
    except Exception as e:
        logger.debug(f"{path} is not inside a git repository: {e}")
        return None
