"""Worktree and branch name sanitising."""

import re

from treework.constants import MAX_NAME_LENGTH

_NON_NAME_CHARS = re.compile(r"[^a-z0-9_-]")
_DASH_RUNS = re.compile(r"-{2,}")


def sanitize_name(name: str) -> str:
    """Turn free text into a safe worktree/branch name.

    Lowercases, replaces anything outside ``[a-z0-9_-]`` with a hyphen, collapses
    repeated hyphens, strips leading/trailing hyphens and caps the length.
    The result may be empty.
    """
    name = name.strip().lower()
    name = _NON_NAME_CHARS.sub("-", name)
    name = _DASH_RUNS.sub("-", name)
    name = name.strip("-")
    if len(name) > MAX_NAME_LENGTH:
        name = name[:MAX_NAME_LENGTH].rstrip("-")
    return name
