"""Worktree lifecycle flows: create, list, remove one, clear all."""

import os
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from treework.config import Config
from treework.exceptions import (
    DependencyInstallError,
    EditorNotFoundError,
    GitOperationError,
    UserAbort,
)
from treework.models.outcomes import (
    BranchDisposition,
    BulkReport,
    CreationResult,
    ItemReport,
    OperationResult,
)
from treework.models.worktree import WorktreeDisplay, WorktreeRecord
from treework.services.branch_reconciler import BranchReconciler
from treework.services.bulk_orchestrator import BulkOrchestrator
from treework.services.dependencies import detect_package_manager, install_dependencies
from treework.services.discovery import (
    current_repo,
    find_repos,
    find_worktree_dirs,
    repo_name_from_worktree,
    worktree_path,
)
from treework.services.editor import open_in_editor
from treework.services.environment import copy_env_files
from treework.services.git.gateway import GitGateway, GitPythonGateway
from treework.services.git.worktrees import WorktreeInventory
from treework.services.removal_planner import RemovalPlanner
from treework.services.status_inspector import StatusInspector
from treework.constants import DETACHED_LABEL
from treework.utils.sanitize import sanitize_name
from treework.logging_config import get_logger

logger = get_logger(__name__)


class Prompter(Protocol):
    """User decisions requested by the lifecycle flows.

    Implementations raise ``UserAbort`` when the user cancels.
    """

    def confirm(self, message: str, default: bool = False) -> bool:
        ...

    def select(self, title: str, options: Sequence[Tuple[str, str]], allow_back: bool = True) -> Optional[str]:
        """Pick one option value; None means the user chose to go back."""
        ...

    def ask(self, message: str, default: Optional[str] = None) -> str:
        ...


def _same_path(a: str, b: str) -> bool:
    return os.path.realpath(a) == os.path.realpath(b)


class WorktreeKeeper:
    """Drives the worktree lifecycle engine for the command line.

    Every flow returns an ``OperationResult``. Prompts are the only points
    where the user can abort; an abort returns whatever progress was already
    made and never undoes it.
    """

    def __init__(
        self,
        config: Config,
        prompter: Prompter,
        gateway: Optional[GitGateway] = None,
        open_editor: Callable[..., List[str]] = open_in_editor,
        detect_manager: Callable = detect_package_manager,
        install: Callable = install_dependencies,
    ):
        """Initialize WorktreeKeeper.

        Args:
            config: Resolved settings
            prompter: Source of user decisions
            gateway: Git access, GitPython by default
            open_editor: Editor launcher
            detect_manager: Package manager detection
            install: Dependency installer
        """
        self.config = config
        self.prompter = prompter
        self.gateway = gateway or GitPythonGateway()
        self.open_editor = open_editor
        self.detect_manager = detect_manager
        self.install = install

        self.inventory = WorktreeInventory(self.gateway)
        self.status_inspector = StatusInspector(self.gateway)
        self.removal_planner = RemovalPlanner(self.gateway)
        self.branch_reconciler = BranchReconciler(self.gateway)
        self.bulk_orchestrator = BulkOrchestrator(
            self.status_inspector, self.removal_planner, self.branch_reconciler
        )

    def _decide(self, message: str, default: bool = False) -> Optional[bool]:
        """Ask a yes/no question. Returns None if the user aborted."""
        try:
            return self.prompter.confirm(message, default)
        except UserAbort:
            logger.debug(f"User aborted at: {message}")
            return None

    def open_worktree(self, path: str) -> Optional[str]:
        """Open path in the editor, returning a warning instead of failing."""
        try:
            self.open_editor(path, self.config.editor)
            return None
        except EditorNotFoundError as e:
            return f"Could not open editor: {e}"

    # Repository and worktree selection

    def choose_repo(self, prefer_current: bool = True) -> OperationResult:
        """Pick the repository to work on.

        The repository containing the working directory wins when
        prefer_current is set; otherwise the user picks one from the base folder.
        """
        if prefer_current:
            repo = current_repo(self.gateway)
            if repo:
                return OperationResult.completed(repo)

        base_dir = self.config.base_dir
        if not os.path.isdir(base_dir):
            return OperationResult.failed(f"DEV_DIR not found: {base_dir}")

        repos = find_repos(base_dir)
        if not repos:
            return OperationResult.failed(f"No git repos found in {base_dir}")

        options = [(os.path.basename(repo), repo) for repo in repos]
        try:
            selected = self.prompter.select("Select a project", options, allow_back=False)
        except UserAbort:
            return OperationResult.aborted()
        if selected is None:
            return OperationResult.aborted()
        return OperationResult.completed(selected)

    def list_worktrees(self) -> OperationResult:
        """Discover worktree directories under the base folder with their branches."""
        base_dir = self.config.base_dir
        if not os.path.isdir(base_dir):
            return OperationResult.failed(f"DEV_DIR not found: {base_dir}")

        items = []
        for path in find_worktree_dirs(base_dir):
            try:
                branch = self.gateway.current_branch(path) or DETACHED_LABEL
            except GitOperationError as e:
                logger.debug(f"Could not read branch of {path}: {e}")
                branch = ""
            items.append(
                WorktreeDisplay(
                    path=path,
                    branch=branch,
                    repo=repo_name_from_worktree(os.path.basename(path)),
                )
            )
        return OperationResult.completed(items)

    # Create

    def create(self, repo_root: str, name: str) -> OperationResult:
        """Create a worktree next to repo_root, or reopen it if it already exists."""
        name = sanitize_name(name)
        if not name:
            return OperationResult.failed("Name became empty after sanitising.")

        path = worktree_path(repo_root, name)
        warnings = []

        if os.path.exists(path):
            logger.info(f"Worktree {path} already exists, opening it")
            warning = self.open_worktree(path)
            if warning:
                warnings.append(warning)
            return OperationResult.completed(
                CreationResult(path=path, branch=name, created=False, warnings=warnings)
            )

        try:
            new_branch = not self.gateway.branch_exists(repo_root, name)
            self.gateway.add_worktree(repo_root, path, name, new_branch)
        except GitOperationError as e:
            return OperationResult.failed(f"Failed to create worktree: {e}")

        try:
            env_files = copy_env_files(repo_root, path)
        except OSError as e:
            logger.warning(f"Could not copy env files: {e}")
            env_files = []
            warnings.append(f"Could not copy env files: {e}")

        installed_with = None
        manager = self.detect_manager(path)
        if manager is not None:
            install = self._decide(f"Install dependencies with {manager.name}?", default=True)
            if install is None:
                return OperationResult.aborted(
                    CreationResult(path, name, True, new_branch, env_files, None, warnings)
                )
            if install:
                try:
                    self.install(path, manager)
                    installed_with = manager.name
                except DependencyInstallError as e:
                    logger.warning(str(e))
                    warnings.append("Install failed. You can run it later inside the folder.")

        warning = self.open_worktree(path)
        if warning:
            warnings.append(warning)

        return OperationResult.completed(
            CreationResult(path, name, True, new_branch, env_files, installed_with, warnings)
        )

    # Remove one

    def choose_worktree(self) -> OperationResult:
        """Let the user pick one of the worktree directories under the base folder."""
        base_dir = self.config.base_dir
        if not os.path.isdir(base_dir):
            return OperationResult.failed(f"DEV_DIR not found: {base_dir}")

        dirs = find_worktree_dirs(base_dir)
        if not dirs:
            return OperationResult.completed(None)

        options = [(os.path.basename(d), d) for d in dirs]
        try:
            selected = self.prompter.select("Select a worktree", options)
        except UserAbort:
            return OperationResult.aborted()
        if selected is None:
            return OperationResult.aborted()
        return OperationResult.completed(selected)

    def _find_record(self, repo_root: str, path: str) -> WorktreeRecord:
        for record in self.inventory.list_worktrees(repo_root):
            if _same_path(record.path, path):
                return record

        try:
            branch = self.gateway.current_branch(path) or ""
        except GitOperationError:
            branch = ""
        return WorktreeRecord(path=path, branch=branch)

    def remove(self, worktree_dir: str) -> OperationResult:
        """Remove one worktree and reconcile its branch, prompting as each decision comes up."""
        worktree_dir = os.path.abspath(worktree_dir)
        repo_root = self.inventory.primary_worktree(worktree_dir)
        if repo_root is None:
            return OperationResult.failed("Can't find main repo for this worktree.")
        if _same_path(repo_root, worktree_dir):
            return OperationResult.failed("Refusing to remove the main worktree of a repository.")

        record = self._find_record(repo_root, worktree_dir)
        item = ItemReport(record=record)
        item.status = self.status_inspector.check_status(record.path)

        confirmed = False
        if item.status.is_dirty:
            answer = self._decide(
                f"Force-remove worktree '{record.name}' with {item.status.describe()}?"
            )
            if not answer:
                logger.debug(f"Keeping {record.path}: forced removal declined")
                return OperationResult.aborted(item)
            confirmed = True

        item.outcome = self.removal_planner.remove(repo_root, record, item.status, confirmed)
        if not item.outcome.removed:
            return OperationResult.failed(f"Failed to remove worktree: {item.outcome.reason}", item)

        if not record.branch:
            return OperationResult.completed(item)

        item.branch_result = self.branch_reconciler.reconcile(repo_root, record.branch)
        if item.branch_result.disposition is BranchDisposition.KEPT_UNMERGED:
            answer = self._decide(f"Force delete unmerged branch '{record.branch}'?")
            if answer is None:
                return OperationResult.aborted(item)
            if answer:
                item.branch_result = self.branch_reconciler.force_delete(repo_root, record.branch)

        return OperationResult.completed(item)

    # Clear all

    def clear(
        self,
        repo_root: str,
        on_listed: Optional[Callable[[str, List[WorktreeRecord]], None]] = None,
    ) -> OperationResult:
        """Remove every linked worktree of repo_root.

        Args:
            repo_root: Primary worktree of the repository
            on_listed: Called with the worktrees about to be removed, before any prompt
        """
        listing = self.inventory.scan(repo_root)
        if not listing.ok:
            return OperationResult.failed(f"Could not list worktrees: {listing.error}")

        records = listing.records
        if not records:
            return OperationResult.completed(BulkReport())
        if on_listed is not None:
            on_listed(repo_root, records)

        answer = self._decide(f"Remove all {len(records)} worktrees?")
        # Declining cancels the operation just like an abort
        if not answer:
            return OperationResult.aborted(BulkReport())

        dirty = [r for r in records if self.status_inspector.check_status(r.path).is_dirty]
        dirty_confirmed = False
        if dirty:
            names = ", ".join(r.name for r in dirty)
            answer = self._decide(
                f"{len(dirty)} worktree(s) have unsaved work ({names}). Force-remove them?"
            )
            if answer is None:
                return OperationResult.aborted(BulkReport())
            dirty_confirmed = answer

        report = self.bulk_orchestrator.clear_all(repo_root, records, dirty_confirmed)

        if report.unmerged:
            answer = self._decide(f"Force delete all {len(report.unmerged)} unmerged branches?")
            if answer is None:
                return OperationResult.aborted(report)
            self.bulk_orchestrator.force_delete_unmerged(repo_root, report, answer)

        return OperationResult.completed(report)
