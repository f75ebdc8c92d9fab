"""Tests for argument parsing and command dispatch"""
import io
from unittest.mock import Mock, patch

import pytest
from rich.console import Console

from treework.cli.args import parse_args
from treework.cli.commands import run_clear, run_ls, run_rm, run_settings
from treework.cli.main import exit_code, main
from treework.core import WorktreeKeeper
from treework.models.outcomes import (
    BranchDisposition,
    BranchResult,
    BulkReport,
    ItemReport,
    OperationResult,
    RemovalMode,
    RemovalOutcome,
)
from treework.models.worktree import WorktreeRecord
from treework.services.display_service import DisplayService

from conftest import ABORT, FakeGitGateway, ScriptedPrompter


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def display(output):
    return DisplayService(Console(file=output, width=200, color_system=None))


def make_keeper(config, gateway, answers=()):
    return WorktreeKeeper(
        config, ScriptedPrompter(answers), gateway=gateway,
        open_editor=Mock(), detect_manager=Mock(return_value=None), install=Mock(),
    )


class TestParseArgs:

    def test_no_command_opens_menu(self):
        args = parse_args([])
        assert args.command is None
        assert not args.verbose

    def test_new_with_name(self):
        args = parse_args(["new", "login"])
        assert args.command == "new"
        assert args.name == "login"

    def test_new_without_name(self):
        assert parse_args(["new"]).name is None

    @pytest.mark.parametrize("alias,command", [("list", "ls"), ("remove", "rm"), ("ls", "ls")])
    def test_aliases(self, alias, command):
        assert parse_args([alias]).command == command

    def test_global_flags(self):
        args = parse_args(["--debug", "-v", "clear"])
        assert args.debug
        assert args.verbose
        assert args.command == "clear"

    def test_unknown_command_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["explode"])


class TestExitCode:

    def test_completed(self, display):
        assert exit_code(OperationResult.completed(), display) == 0

    def test_aborted_is_not_an_error(self, display, output):
        assert exit_code(OperationResult.aborted(), display) == 0
        assert "Cancelled." in output.getvalue()

    def test_failed(self, display, output):
        assert exit_code(OperationResult.failed("boom"), display) == 1
        assert "boom" in output.getvalue()


class TestDisplayService:

    def test_bracketed_names_are_printed_verbatim(self, display, output):
        display.show_records("/dev/app[v2]", [WorktreeRecord("/dev/app[v2]-worktree-a", "feat[1]")])
        text = output.getvalue()
        assert "Worktrees for app[v2]" in text
        assert "app[v2]-worktree-a  (feat[1])" in text

    def test_git_error_with_closing_tag_in_bulk_report(self, display, output):
        failed = WorktreeRecord("/dev/app-worktree-a", "x")
        removed = WorktreeRecord("/dev/app-worktree-b", "feat[1]")
        report = BulkReport(
            items=[
                ItemReport(
                    record=failed,
                    outcome=RemovalOutcome.failure(failed, RemovalMode.SOFT, "fatal: bad [/path]"),
                ),
                ItemReport(
                    record=removed,
                    outcome=RemovalOutcome.success(removed, RemovalMode.SOFT),
                    branch_result=BranchResult("feat[1]", BranchDisposition.DELETED),
                ),
            ],
            default_branch="main",
        )

        display.show_bulk_report(report)

        text = output.getvalue()
        assert "Failed to remove worktree app-worktree-a: fatal: bad [/path]" in text
        assert "Removed 1 of 2 worktrees, 1 failed" in text
        assert "Deleted merged branches: feat[1]" in text

    def test_error_message_with_markup_is_printed_verbatim(self, display, output):
        display.error("Failed: [bold]not markup[/bold]")
        assert "Failed: [bold]not markup[/bold]" in output.getvalue()


class TestCommands:

    def test_clear_reports_summary(self, config, display, output):
        gateway = FakeGitGateway(
            repo_root="/dev/project",
            worktrees=[("/dev/project-worktree-a", "x"), ("/dev/project-worktree-b", "y")],
        )
        gateway.merged.add("x")
        keeper = make_keeper(config, gateway, answers=[True, False])

        result = run_clear(keeper, display)

        assert result.is_completed
        text = output.getvalue()
        assert "Worktrees for project" in text
        assert "Removed 2 worktrees" in text
        assert "Deleted merged branches: x" in text
        assert "Kept unmerged branches: y" in text

    def test_clear_cancelled_prints_no_summary(self, config, display, output):
        gateway = FakeGitGateway(worktrees=[("/dev/project-worktree-a", "x")])
        result = run_clear(make_keeper(config, gateway, answers=[False]), display)
        assert result.is_aborted
        assert "Removed" not in output.getvalue()

    def test_rm_without_worktrees(self, config, display, output):
        result = run_rm(make_keeper(config, FakeGitGateway()), display)
        assert result.is_completed
        assert "No worktrees found." in output.getvalue()

    def test_ls_opens_selected_worktree(self, config, display, temp_dir):
        wt = temp_dir / "project-worktree-a"
        wt.mkdir()
        gateway = FakeGitGateway(worktrees=[(str(wt), "x")])
        keeper = make_keeper(config, gateway, answers=[str(wt), True])

        result = run_ls(keeper, display)

        assert result.is_completed
        keeper.open_editor.assert_called_once_with(str(wt), None)

    def test_ls_abort(self, config, display, temp_dir):
        (temp_dir / "project-worktree-a").mkdir()
        gateway = FakeGitGateway(worktrees=[(str(temp_dir / "project-worktree-a"), "x")])
        assert run_ls(make_keeper(config, gateway, answers=[ABORT]), display).is_aborted

    def test_settings_saves_base_folder(self, config, display, temp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        monkeypatch.delenv("DEV_DIR", raising=False)
        code_dir = temp_dir / "code"
        code_dir.mkdir()
        keeper = make_keeper(config, FakeGitGateway(), answers=[str(code_dir)])

        result = run_settings(keeper, display)

        assert result.is_completed
        assert keeper.config.base_dir == str(code_dir)
        assert keeper.config.base_dir_origin == "config"

    def test_settings_rejects_missing_directory(self, config, display, temp_dir):
        keeper = make_keeper(config, FakeGitGateway(), answers=[str(temp_dir / "nope")])
        result = run_settings(keeper, display)
        assert result.is_failed
        assert "Not a valid directory" in result.error


class TestMain:

    def test_version(self):
        assert main(["version"]) == 0

    def test_git_missing(self):
        with patch("treework.cli.main.shutil.which", return_value=None):
            assert main(["ls"]) == 1
