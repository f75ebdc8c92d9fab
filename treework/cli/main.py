"""Command-line entry point for treework"""

import os
import shutil
import sys

from rich.console import Console
from rich.markup import escape

from treework.__version__ import __version__
from treework.cli.args import parse_args
from treework.cli.commands import run_clear, run_ls, run_new, run_rm, run_settings
from treework.cli.prompts import ConsolePrompter
from treework.config import Config
from treework.constants import ENV_BASE_DIR
from treework.core import WorktreeKeeper
from treework.exceptions import ConfigError, UserAbort
from treework.logging_config import get_logger, setup_logging
from treework.models.outcomes import OperationResult
from treework.services.display_service import DisplayService

console = Console()
logger = get_logger(__name__)

MENU_OPTIONS = [
    ("Create new worktree", "new"),
    ("List worktrees", "ls"),
    ("Remove a worktree", "rm"),
    ("Remove ALL worktrees for a repo", "clear"),
    ("Settings", "settings"),
    ("Quit", "quit"),
]


def exit_code(result: OperationResult, display: DisplayService) -> int:
    """Render the terminal state of a direct command and map it to an exit code."""
    if result.is_failed:
        display.error(result.error or "Operation failed")
        return 1
    if result.is_aborted:
        display.muted("Cancelled.")
    return 0


def run_command(command: str, keeper: WorktreeKeeper, display: DisplayService, name=None, direct=True) -> OperationResult:
    if command == "new":
        return run_new(keeper, display, name=name, direct=direct)
    if command == "ls":
        return run_ls(keeper, display)
    if command == "rm":
        return run_rm(keeper, display)
    if command == "clear":
        return run_clear(keeper, display, direct=direct)
    if command == "settings":
        return run_settings(keeper, display)
    raise ValueError(f"Unknown command: {command}")


def first_run_setup(keeper: WorktreeKeeper, display: DisplayService) -> None:
    """Offer to pick a base folder when neither DEV_DIR nor a config file sets one."""
    if os.environ.get(ENV_BASE_DIR) or Config.has_config_file():
        return

    display.info("Welcome! Let's set your base folder (where your git repos live).")
    result = run_settings(keeper, display)
    if result.is_failed:
        display.error(result.error)
    if not result.is_completed:
        display.muted(f"Skipped. You can set it later with 'treework settings' or set {ENV_BASE_DIR}.")


def run_menu(keeper: WorktreeKeeper, display: DisplayService) -> int:
    """Interactive menu loop; failures and cancellations return to the menu."""
    display.banner(__version__)
    first_run_setup(keeper, display)

    while True:
        console.print()
        try:
            action = keeper.prompter.select("What would you like to do?", MENU_OPTIONS, allow_back=False)
        except UserAbort:
            action = "quit"

        if action == "quit":
            display.muted("Goodbye.")
            return 0

        result = run_command(action, keeper, display, direct=False)
        if result.is_failed:
            display.error(result.error or "Operation failed")
        elif result.is_aborted:
            logger.debug(f"{action} cancelled, back to menu")


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        display = DisplayService(console)

        if parsed_args.command == "version":
            display.banner(__version__)
            return 0

        if shutil.which("git") is None:
            display.error("git is not installed. Please install git and try again.")
            return 1

        config = Config.resolve(verbose=parsed_args.verbose, debug=parsed_args.debug)
        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {escape(str(value))}")

        keeper = WorktreeKeeper(config, ConsolePrompter(console))

        if not parsed_args.command:
            return run_menu(keeper, display)

        console.print()
        result = run_command(
            parsed_args.command, keeper, display, name=getattr(parsed_args, "name", None)
        )
        return exit_code(result, display)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 0
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
