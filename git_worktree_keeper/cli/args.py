"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from enum import Enum
from typing import List, Optional

from git_worktree_keeper.__version__ import __version__


class Command(Enum):
    """Sub-commands understood by gw."""

    CHECKOUT = "checkout"
    ADD = "add"
    CLEAN = "clean"
    PRUNE = "prune"


COMMAND_ALIASES = {"co": Command.CHECKOUT}


def resolve_command(name: str) -> Command:
    """Map a sub-command name or alias to its Command."""
    return COMMAND_ALIASES.get(name) or Command(name)


def _add_checkout_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Branch (or worktree) name, e.g. feature/login")
    parser.add_argument(
        "files", nargs="*", help="Files to copy from the default-branch worktree (e.g. .env)"
    )
    parser.add_argument("-b", dest="new_branch", metavar="NEW", help="Create a new branch named NEW")
    parser.add_argument(
        "--from", dest="from_branch", metavar="BRANCH", help="Start the new branch from BRANCH"
    )
    parser.add_argument(
        "--no-cd", dest="no_cd", action="store_true", help="Do not navigate to the worktree"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the gw argument parser."""
    parser = argparse.ArgumentParser(
        prog="gw",
        description="Branch-aware worktree checkout and safe worktree cleanup",
        epilog="Navigation needs the shell wrapper; without it gw only prints where the worktree is.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information and write ~/.gw/gw.log"
    )
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")
    parser.add_argument(
        "--protected",
        action="append",
        default=[],
        metavar="NAME",
        help="Branch never removed by cleanup (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    checkout = subparsers.add_parser(
        Command.CHECKOUT.value, aliases=["co"], help="Switch to a branch in its own worktree"
    )
    _add_checkout_arguments(checkout)

    add = subparsers.add_parser(
        Command.ADD.value,
        help="Create a worktree (an empty leftover directory at the target is removed)",
    )
    _add_checkout_arguments(add)

    clean = subparsers.add_parser(Command.CLEAN.value, help="Remove worktrees that are safe to remove")
    clean.add_argument(
        "-f", "--force", action="store_true",
        help="Ignore uncommitted changes and unpushed commits (still asks)",
    )
    clean.add_argument("-n", "--dry-run", action="store_true", help="Preview without removing")
    clean.add_argument(
        "--use-age-threshold",
        "--use-autoclean-threshold",
        dest="use_age_threshold",
        action="store_true",
        help="Only remove worktrees older than cleanThreshold days",
    )

    prune = subparsers.add_parser(
        Command.PRUNE.value, help="Prune stale worktree metadata, optionally removing safe worktrees"
    )
    prune.add_argument("--clean", action="store_true", help="Also remove every safe worktree")
    prune.add_argument("-n", "--dry-run", action="store_true", help="Preview without removing")
    prune.add_argument("-f", "--force", action="store_true", help="Skip the confirmation prompt")
    prune.add_argument(
        "-v", "--verbose", dest="detail", action="store_true", help="Show detailed output"
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Files may follow the options (``co feature/x -b feature/y .env``).
    Older argparse releases stop filling ``files`` at the first option and
    leave the rest unrecognized, so those are collected here.
    """
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    if not extras:
        return args

    takes_files = resolve_command(args.command) in (Command.CHECKOUT, Command.ADD)
    if not takes_files or any(extra.startswith("-") for extra in extras):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    args.files = list(args.files) + extras
    return args
