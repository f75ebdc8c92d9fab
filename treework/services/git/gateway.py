"""Git capability interface used by the worktree lifecycle engine.

The engine never shells out directly: it talks to a ``GitGateway``. The
production implementation wraps GitPython; tests substitute an in-memory fake.
Every method raises ``GitOperationError`` when the underlying query or
mutation fails.
"""

import os
from typing import Optional, Protocol

import git

from treework.constants import BRANCH_REF_PREFIX, REMOTE_HEAD_REF, REMOTE_NAME
from treework.exceptions import GitOperationError
from treework.logging_config import get_logger

logger = get_logger(__name__)


class GitGateway(Protocol):
    """Narrow set of git operations the engine depends on."""

    # Queries

    def list_worktrees(self, path: str) -> str:
        """Return ``git worktree list --porcelain`` output for the repo containing path."""
        ...

    def status_porcelain(self, worktree_path: str) -> str:
        """Return ``git status --porcelain`` output for a worktree."""
        ...

    def current_branch(self, worktree_path: str) -> Optional[str]:
        """Return the checked out branch, or None when HEAD is detached."""
        ...

    def count_unpushed_commits(self, worktree_path: str, branch: str) -> int:
        """Count commits on branch not reachable from any remote-tracking branch."""
        ...

    def is_ancestor(self, repo_root: str, branch: str, base: str) -> bool:
        ...

    def remote_default_branch(self, repo_root: str) -> Optional[str]:
        ...

    def branch_exists(self, repo_root: str, branch: str) -> bool:
        ...

    def show_toplevel(self, path: str) -> str:
        ...

    # Mutations

    def add_worktree(self, repo_root: str, path: str, branch: str, new_branch: bool) -> None:
        ...

    def remove_worktree(self, repo_root: str, path: str, force: bool = False) -> None:
        ...

    def prune_worktrees(self, repo_root: str) -> None:
        ...

    def delete_branch(self, repo_root: str, branch: str, force: bool = False) -> None:
        ...


def _describe_error(e: Exception) -> str:
    """Build a one-line description of a failed git call."""
    if isinstance(e, git.exc.GitCommandError):
        stderr = (e.stderr or "").strip()
        # GitPython wraps stderr as "stderr: '...'"
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:"):].strip().strip("'").strip()
        status = e.status if e.status is not None else "unknown"
        if stderr:
            return f"exit {status}: {stderr}"
        return f"exit code {status}"
    return str(e) or e.__class__.__name__


class GitPythonGateway:
    """GitGateway backed by GitPython."""

    def __init__(self, remote_name: str = REMOTE_NAME):
        self.remote_name = remote_name

    def _get_repo(self, repo_root: str) -> git.Repo:
        """Open the repository at repo_root.

        A fresh Repo is created for each call.
        """
        try:
            return git.Repo(repo_root)
        except (git.exc.NoSuchPathError, git.exc.InvalidGitRepositoryError) as e:
            raise GitOperationError("open", repo_root, f"not a git repository ({e})") from e

    def _get_git(self, path: str) -> git.Git:
        """Get a git command runner working inside path."""
        if not os.path.isdir(path):
            raise GitOperationError("open", path, "directory does not exist")
        return git.Git(path)

    def list_worktrees(self, path: str) -> str:
        try:
            return self._get_git(path).worktree("list", "--porcelain")
        except GitOperationError:
            raise
        except Exception as e:
            raise GitOperationError("worktree list", path, _describe_error(e)) from e

    def status_porcelain(self, worktree_path: str) -> str:
        try:
            return self._get_git(worktree_path).status("--porcelain")
        except GitOperationError:
            raise
        except Exception as e:
            raise GitOperationError("status", worktree_path, _describe_error(e)) from e

    def current_branch(self, worktree_path: str) -> Optional[str]:
        try:
            branch = self._get_git(worktree_path).rev_parse("--abbrev-ref", "HEAD").strip()
        except GitOperationError:
            raise
        except Exception as e:
            raise GitOperationError("rev-parse", worktree_path, _describe_error(e)) from e

        if not branch:
            raise GitOperationError("rev-parse", worktree_path, "empty branch name")
        if branch == "HEAD":
            return None
        return branch

    def count_unpushed_commits(self, worktree_path: str, branch: str) -> int:
        try:
            output = self._get_git(worktree_path).rev_list(
                "--count", f"{BRANCH_REF_PREFIX}{branch}", "--not", "--remotes"
            )
            return int(output.strip())
        except GitOperationError:
            raise
        except Exception as e:
            raise GitOperationError("rev-list", branch, _describe_error(e)) from e

    def is_ancestor(self, repo_root: str, branch: str, base: str) -> bool:
        repo = self._get_repo(repo_root)
        try:
            # merge-base --is-ancestor: exit 0 = ancestor, exit 1 = not, other = error
            return repo.is_ancestor(f"{BRANCH_REF_PREFIX}{branch}", base)
        except Exception as e:
            raise GitOperationError("merge-base", branch, _describe_error(e)) from e

    def remote_default_branch(self, repo_root: str) -> Optional[str]:
        repo = self._get_repo(repo_root)
        try:
            ref = repo.git.symbolic_ref("--quiet", "--short", REMOTE_HEAD_REF).strip()
        except git.exc.GitCommandError:
            return None

        prefix = f"{self.remote_name}/"
        if ref.startswith(prefix):
            ref = ref[len(prefix):]
        return ref or None

    def branch_exists(self, repo_root: str, branch: str) -> bool:
        repo = self._get_repo(repo_root)
        try:
            repo.git.show_ref("--verify", "--quiet", "--", f"{BRANCH_REF_PREFIX}{branch}")
            return True
        except git.exc.GitCommandError:
            return False

    def show_toplevel(self, path: str) -> str:
        try:
            return self._get_git(path).rev_parse("--show-toplevel").strip()
        except GitOperationError:
            raise
        except Exception as e:
            raise GitOperationError("rev-parse", path, _describe_error(e)) from e

    def add_worktree(self, repo_root: str, path: str, branch: str, new_branch: bool) -> None:
        repo = self._get_repo(repo_root)
        try:
            if new_branch:
                repo.git.worktree("add", "-b", branch, "--", path)
            else:
                repo.git.worktree("add", "--", path, branch)
            logger.info(f"Added worktree at {path} (branch {branch})")
        except Exception as e:
            raise GitOperationError("worktree add", path, _describe_error(e)) from e

    def remove_worktree(self, repo_root: str, path: str, force: bool = False) -> None:
        repo = self._get_repo(repo_root)
        args = ["remove"]
        if force:
            args.append("--force")
        args.extend(["--", path])
        try:
            repo.git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
        except Exception as e:
            raise GitOperationError("worktree remove", path, _describe_error(e)) from e

    def prune_worktrees(self, repo_root: str) -> None:
        repo = self._get_repo(repo_root)
        try:
            repo.git.worktree("prune")
            logger.debug("Pruned stale worktree metadata")
        except Exception as e:
            raise GitOperationError("worktree prune", repo_root, _describe_error(e)) from e

    def delete_branch(self, repo_root: str, branch: str, force: bool = False) -> None:
        repo = self._get_repo(repo_root)
        try:
            repo.git.branch("-D" if force else "-d", "--", branch)
            logger.info(f"Deleted branch {branch}{' (forced)' if force else ''}")
        except Exception as e:
            raise GitOperationError("branch delete", branch, _describe_error(e)) from e
