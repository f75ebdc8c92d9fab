"""Subcommand handlers: each runs one flow and renders its result."""

import os
from typing import Optional

from treework.config import Config, save_config
from treework.core import WorktreeKeeper
from treework.exceptions import ConfigError, UserAbort
from treework.models.outcomes import OperationResult
from treework.services.display_service import DisplayService


def run_new(
    keeper: WorktreeKeeper, display: DisplayService, name: Optional[str] = None, direct: bool = True
) -> OperationResult:
    """Create a worktree in the current repo (direct) or a chosen project (menu)."""
    repo = keeper.choose_repo(prefer_current=direct)
    if not repo.is_completed:
        return repo

    if not name:
        try:
            name = keeper.prompter.ask("Worktree name")
        except UserAbort:
            return OperationResult.aborted()

    result = keeper.create(repo.value, name)
    if result.value is not None:
        display.show_creation(result.value, repo.value)
    return result


def run_ls(keeper: WorktreeKeeper, display: DisplayService) -> OperationResult:
    """List worktrees under the base folder and offer to open one."""
    result = keeper.list_worktrees()
    if not result.is_completed:
        return result

    items = result.value
    if not items:
        display.info("No worktrees found.")
        return result

    display.show_worktree_table(items)
    options = [(f"{item.name}  ({item.branch})  {item.repo}", item.path) for item in items]
    try:
        selected = keeper.prompter.select("Worktrees", options)
        if selected is None:
            return OperationResult.aborted()
        open_it = keeper.prompter.confirm(f"Open {os.path.basename(selected)} in editor?")
    except UserAbort:
        return OperationResult.aborted()

    if open_it:
        warning = keeper.open_worktree(selected)
        if warning:
            display.warn(warning)
        else:
            display.success(f"Opened: {os.path.basename(selected)}")
    else:
        display.muted(selected)
    return OperationResult.completed(selected)


def run_rm(keeper: WorktreeKeeper, display: DisplayService) -> OperationResult:
    """Pick one worktree and remove it."""
    chosen = keeper.choose_worktree()
    if not chosen.is_completed:
        return chosen
    if chosen.value is None:
        display.info("No worktrees found.")
        return chosen

    display.info(f"Removing: {os.path.basename(chosen.value)}")
    result = keeper.remove(chosen.value)
    if result.value is not None:
        display.show_item(result.value)
    return result


def run_clear(keeper: WorktreeKeeper, display: DisplayService, direct: bool = True) -> OperationResult:
    """Remove every worktree of the current repo (direct) or a chosen project (menu)."""
    repo = keeper.choose_repo(prefer_current=direct)
    if not repo.is_completed:
        return repo

    result = keeper.clear(repo.value, on_listed=display.show_records)
    if result.value is not None and (result.is_completed or result.value.total):
        display.show_bulk_report(result.value)
    return result


def run_settings(keeper: WorktreeKeeper, display: DisplayService) -> OperationResult:
    """Show the base folder and let the user change it."""
    config = keeper.config
    display.info(f"Base folder: {config.base_dir}")
    display.muted(f"({config.base_dir_source()})")

    try:
        selected = keeper.prompter.ask("Base folder path", default=config.base_dir)
    except UserAbort:
        return OperationResult.aborted()

    selected = os.path.abspath(os.path.expanduser(selected.strip()))
    if not os.path.isdir(selected):
        return OperationResult.failed(f"Not a valid directory: {selected}")

    try:
        save_config(selected)
    except ConfigError as e:
        return OperationResult.failed(f"Failed to save config: {e}")

    keeper.config = Config.resolve(verbose=config.verbose, debug=config.debug)
    display.success(f"Base folder set to {selected}")
    return OperationResult.completed(selected)
