"""Pytest fixtures for treework tests"""
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import pytest
import git

from treework.config import Config
from treework.exceptions import GitOperationError, UserAbort


ABORT = object()


class FakeGitGateway:
    """In-memory GitGateway.

    Holds one repository with a primary worktree on "main" plus linked
    worktrees. Failures can be injected per method, optionally per target.
    """

    def __init__(self, repo_root: str = "/dev/project", worktrees: Optional[List[Tuple[str, str]]] = None):
        self.repo_root = repo_root
        self.worktrees: List[Tuple[str, str]] = list(worktrees or [])
        self.branches = {"main"} | {branch for _, branch in self.worktrees if branch}
        self.remote_default: Optional[str] = "main"
        self.merged = set()
        self.uncommitted = set()
        self.unpushed: Dict[str, int] = {}
        self.failures: Dict[Tuple[str, Optional[str]], str] = {}
        self.calls: List[tuple] = []

    def fail(self, method: str, target: Optional[str] = None, message: str = "simulated failure"):
        self.failures[(method, target)] = message

    def called(self, method: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == method]

    def _call(self, method: str, target: Optional[str], *args):
        self.calls.append((method, target) + args)
        for key in ((method, target), (method, None)):
            if key in self.failures:
                raise GitOperationError(method, target, self.failures[key])

    def _branch_of(self, path: str) -> str:
        if path == self.repo_root:
            return "main"
        for wt_path, branch in self.worktrees:
            if wt_path == path:
                return branch
        raise GitOperationError("rev-parse", path, "not a git repository")

    # Queries

    def list_worktrees(self, path):
        self._call("list_worktrees", path)
        lines = [f"worktree {self.repo_root}", "HEAD 1111111", "branch refs/heads/main", ""]
        for wt_path, branch in self.worktrees:
            lines += [f"worktree {wt_path}", "HEAD 2222222"]
            lines.append(f"branch refs/heads/{branch}" if branch else "detached")
            lines.append("")
        return "\n".join(lines)

    def status_porcelain(self, worktree_path):
        self._call("status_porcelain", worktree_path)
        return "?? notes.txt\n" if worktree_path in self.uncommitted else ""

    def current_branch(self, worktree_path):
        self._call("current_branch", worktree_path)
        return self._branch_of(worktree_path) or None

    def count_unpushed_commits(self, worktree_path, branch):
        self._call("count_unpushed_commits", branch)
        return self.unpushed.get(branch, 0)

    def is_ancestor(self, repo_root, branch, base):
        self._call("is_ancestor", branch, base)
        return branch in self.merged

    def remote_default_branch(self, repo_root):
        self._call("remote_default_branch", repo_root)
        return self.remote_default

    def branch_exists(self, repo_root, branch):
        self._call("branch_exists", branch)
        return branch in self.branches

    def show_toplevel(self, path):
        self._call("show_toplevel", path)
        return self.repo_root

    # Mutations

    def add_worktree(self, repo_root, path, branch, new_branch):
        self._call("add_worktree", path, branch, new_branch)
        self.worktrees.append((path, branch))
        self.branches.add(branch)

    def remove_worktree(self, repo_root, path, force=False):
        self._call("remove_worktree", path, force)
        if path in self.uncommitted and not force:
            raise GitOperationError("worktree remove", path, "contains modified or untracked files")
        self.worktrees = [(p, b) for p, b in self.worktrees if p != path]

    def prune_worktrees(self, repo_root):
        self._call("prune_worktrees", repo_root)

    def delete_branch(self, repo_root, branch, force=False):
        self._call("delete_branch", branch, force)
        if not force and branch not in self.merged:
            raise GitOperationError("branch delete", branch, "branch is not fully merged")
        self.branches.discard(branch)


class ScriptedPrompter:
    """Prompter answering from a fixed script; ABORT in the script raises UserAbort."""

    def __init__(self, answers=None):
        self.answers = list(answers or [])
        self.asked: List[str] = []

    def _next(self, message):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        if answer is ABORT:
            raise UserAbort()
        return answer

    def confirm(self, message, default=False):
        return self._next(message)

    def select(self, title, options, allow_back=True):
        return self._next(title)

    def ask(self, message, default=None):
        return self._next(message)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def fake_gateway():
    """Fake gateway with two linked worktrees: a (branch x) and b (branch y)."""
    return FakeGitGateway(
        worktrees=[
            ("/dev/project-worktree-a", "x"),
            ("/dev/project-worktree-b", "y"),
        ]
    )


@pytest.fixture
def config(temp_dir):
    """Config pointing at the temporary directory."""
    return Config(base_dir=str(temp_dir))


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository on main, pushed to a bare origin."""
    origin_path = temp_dir / "origin.git"
    git.Repo.init(origin_path, bare=True).close()

    repo_path = temp_dir / "project"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    (repo_path / "README.md").write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch("-M", "main")

    repo.create_remote("origin", str(origin_path))
    repo.git.push("-u", "origin", "main")
    repo.git.remote("set-head", "origin", "main")

    yield repo

    # Cleanup
    repo.close()


def make_worktree(repo: git.Repo, name: str, branch: Optional[str] = None) -> Path:
    """Add a linked worktree next to the repo, on a new branch."""
    repo_path = Path(repo.working_dir)
    path = repo_path.parent / f"{repo_path.name}-worktree-{name}"
    repo.git.worktree("add", "-b", branch or name, str(path))
    return path


def commit_file(worktree: Path, filename: str, content: str = "content\n") -> None:
    """Commit a new file inside a worktree."""
    (worktree / filename).write_text(content)
    runner = git.Git(str(worktree))
    runner.add(filename)
    runner.commit("-m", f"Add {filename}")
