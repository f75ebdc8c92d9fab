"""Integration tests for the GitPython gateway against real repositories"""
import pytest
import git

from treework.exceptions import GitOperationError
from treework.models.outcomes import BranchDisposition, RemovalMode
from treework.services.branch_reconciler import BranchReconciler
from treework.services.bulk_orchestrator import BulkOrchestrator
from treework.services.git import GitPythonGateway, WorktreeInventory
from treework.services.removal_planner import RemovalPlanner
from treework.services.status_inspector import StatusInspector

from conftest import commit_file, make_worktree


@pytest.fixture
def gateway():
    return GitPythonGateway()


@pytest.fixture
def repo_root(git_repo):
    return git_repo.working_dir


class TestQueries:

    def test_list_worktrees(self, git_repo, repo_root, gateway):
        feature = make_worktree(git_repo, "feature")
        git_repo.git.worktree("add", "--detach", str(feature.parent / "project-worktree-bisect"))

        records = WorktreeInventory(gateway).list_worktrees(repo_root)

        assert sorted((r.name, r.branch) for r in records) == [
            ("project-worktree-bisect", ""),
            ("project-worktree-feature", "feature"),
        ]

    def test_list_worktrees_outside_repo(self, temp_dir, gateway):
        listing = WorktreeInventory(gateway).scan(str(temp_dir))
        assert not listing.ok

    def test_primary_worktree_from_linked_worktree(self, git_repo, repo_root, gateway):
        feature = make_worktree(git_repo, "feature")
        assert WorktreeInventory(gateway).primary_worktree(str(feature)) == repo_root

    def test_status_of_clean_worktree(self, git_repo, gateway):
        feature = make_worktree(git_repo, "feature")
        git_repo.git.push("origin", "feature")
        status = StatusInspector(gateway).check_status(str(feature))
        assert not status.is_dirty

    def test_untracked_file_and_unpushed_commit(self, git_repo, gateway):
        feature = make_worktree(git_repo, "feature")
        commit_file(feature, "work.txt")
        (feature / "scratch.txt").write_text("draft\n")

        status = StatusInspector(gateway).check_status(str(feature))

        assert status.has_uncommitted_changes
        assert status.has_unpushed_commits

    def test_current_branch_detached(self, git_repo, temp_dir, gateway):
        path = temp_dir / "project-worktree-bisect"
        git_repo.git.worktree("add", "--detach", str(path))
        assert gateway.current_branch(str(path)) is None

    def test_missing_directory_raises(self, temp_dir, gateway):
        with pytest.raises(GitOperationError):
            gateway.status_porcelain(str(temp_dir / "gone"))

    def test_remote_default_branch(self, repo_root, gateway):
        assert gateway.remote_default_branch(repo_root) == "main"

    def test_remote_default_branch_without_remote_head(self, git_repo, repo_root, gateway):
        git_repo.git.remote("set-head", "origin", "--delete")
        assert gateway.remote_default_branch(repo_root) is None

    def test_master_only_repository(self, temp_dir, gateway):
        repo = git.Repo.init(temp_dir / "legacy")
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()
        (temp_dir / "legacy" / "README.md").write_text("legacy\n")
        repo.index.add(["README.md"])
        repo.index.commit("Initial commit")
        repo.git.branch("-M", "master")

        assert BranchReconciler(gateway).resolve_default_branch(repo.working_dir) == "master"
        repo.close()

    def test_branch_exists(self, repo_root, gateway):
        assert gateway.branch_exists(repo_root, "main")
        assert not gateway.branch_exists(repo_root, "nope")

    def test_is_ancestor(self, git_repo, repo_root, gateway):
        feature = make_worktree(git_repo, "feature")
        assert gateway.is_ancestor(repo_root, "feature", "main")
        commit_file(feature, "work.txt")
        assert not gateway.is_ancestor(repo_root, "feature", "main")

    def test_is_ancestor_unknown_branch_raises(self, repo_root, gateway):
        with pytest.raises(GitOperationError):
            gateway.is_ancestor(repo_root, "nope", "main")


class TestMutations:

    def test_add_worktree_new_and_existing_branch(self, git_repo, repo_root, temp_dir, gateway):
        gateway.add_worktree(repo_root, str(temp_dir / "project-worktree-one"), "one", new_branch=True)
        git_repo.git.branch("two")
        gateway.add_worktree(repo_root, str(temp_dir / "project-worktree-two"), "two", new_branch=False)

        records = WorktreeInventory(gateway).list_worktrees(repo_root)
        assert sorted(r.branch for r in records) == ["one", "two"]

    def test_add_worktree_existing_branch_as_new_fails(self, repo_root, temp_dir, gateway):
        with pytest.raises(GitOperationError) as exc_info:
            gateway.add_worktree(repo_root, str(temp_dir / "project-worktree-main"), "main", True)
        assert "worktree add" in str(exc_info.value)

    def test_soft_remove_refuses_untracked_files(self, git_repo, repo_root, gateway):
        feature = make_worktree(git_repo, "feature")
        (feature / "scratch.txt").write_text("draft\n")

        with pytest.raises(GitOperationError):
            gateway.remove_worktree(repo_root, str(feature))
        assert feature.exists()

        gateway.remove_worktree(repo_root, str(feature), force=True)
        assert not feature.exists()

    def test_delete_branch_soft_refuses_unmerged(self, git_repo, repo_root, gateway):
        feature = make_worktree(git_repo, "feature")
        commit_file(feature, "work.txt")
        gateway.remove_worktree(repo_root, str(feature))

        with pytest.raises(GitOperationError):
            gateway.delete_branch(repo_root, "feature")
        gateway.delete_branch(repo_root, "feature", force=True)
        assert not gateway.branch_exists(repo_root, "feature")

    def test_prune(self, repo_root, gateway):
        gateway.prune_worktrees(repo_root)


class TestClearAllWithRealRepository:

    def _orchestrator(self, gateway):
        return BulkOrchestrator(
            StatusInspector(gateway), RemovalPlanner(gateway), BranchReconciler(gateway)
        )

    def test_clean_merged_and_dirty_unmerged(self, git_repo, repo_root, gateway):
        # A: clean, branch x has nothing beyond main
        wt_a = make_worktree(git_repo, "a", branch="x")
        # B: branch y carries its own commit plus an untracked file
        wt_b = make_worktree(git_repo, "b", branch="y")
        commit_file(wt_b, "feature.txt")
        (wt_b / "scratch.txt").write_text("draft\n")

        records = WorktreeInventory(gateway).list_worktrees(repo_root)
        report = self._orchestrator(gateway).clear_all(repo_root, records, dirty_confirmed=True)

        items = {item.record.branch: item for item in report.items}
        assert items["x"].outcome.mode is RemovalMode.SOFT
        assert items["x"].branch_result.disposition is BranchDisposition.DELETED
        assert items["y"].outcome.mode is RemovalMode.FORCED
        assert items["y"].branch_result.disposition is BranchDisposition.KEPT_UNMERGED
        assert report.removed == 2
        assert report.failed == []
        assert report.unmerged == ["y"]

        assert not wt_a.exists()
        assert not wt_b.exists()
        assert not gateway.branch_exists(repo_root, "x")
        assert gateway.branch_exists(repo_root, "y")
        assert WorktreeInventory(gateway).list_worktrees(repo_root) == []

    def test_locked_worktree_does_not_stop_the_batch(self, git_repo, repo_root, gateway):
        first = make_worktree(git_repo, "first")
        second = make_worktree(git_repo, "second")
        third = make_worktree(git_repo, "third")
        git_repo.git.worktree("lock", str(second))

        records = WorktreeInventory(gateway).list_worktrees(repo_root)
        report = self._orchestrator(gateway).clear_all(repo_root, records, dirty_confirmed=False)

        assert report.removed == 2
        assert report.failed == [str(second)]
        assert not first.exists()
        assert second.exists()
        assert not third.exists()
        assert gateway.branch_exists(repo_root, "second")
        assert [r.path for r in WorktreeInventory(gateway).list_worktrees(repo_root)] == [str(second)]
