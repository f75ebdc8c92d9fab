"""Command-line argument parsing for treework."""

import argparse

from treework.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treework",
        description="Git worktree manager",
        epilog="Worktrees are created next to their repo as <repo>-worktree-<name>. "
        "Set DEV_DIR to choose the base folder and WT_EDITOR to choose the editor.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"treework {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    new_parser = subparsers.add_parser("new", help="Create a new worktree")
    new_parser.add_argument("name", nargs="?", help="Worktree and branch name")

    subparsers.add_parser("ls", aliases=["list"], help="List worktrees and optionally open one")
    subparsers.add_parser("rm", aliases=["remove"], help="Remove a worktree")
    subparsers.add_parser("clear", help="Remove ALL worktrees for a repo")
    subparsers.add_parser("settings", help="Show or change the base folder")
    subparsers.add_parser("version", help="Print the version")

    return parser


# Aliases resolve to the canonical command name
COMMAND_ALIASES = {"list": "ls", "remove": "rm"}


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    if args.command:
        args.command = COMMAND_ALIASES.get(args.command, args.command)
    return args
