"""Command-line interface for git-worktree-keeper"""

import argparse
import os
import sys
from typing import Callable, Dict

from rich.console import Console

from git_worktree_keeper.cli.args import Command, parse_args, resolve_command
from git_worktree_keeper.config import load_repo_config
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import GitWorktreeKeeperError
from git_worktree_keeper.models.checkout import CheckoutRequest, CheckoutState, LeftoverPolicy
from git_worktree_keeper.services.git.worktrees import find_git_root, get_current_worktree_path
from git_worktree_keeper.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def _checkout(keeper: WorktreeKeeper, args: argparse.Namespace, policy: LeftoverPolicy) -> int:
    request = CheckoutRequest(
        name=args.name,
        new_branch=args.new_branch,
        from_branch=args.from_branch,
        navigate=not args.no_cd,
        leftover_policy=policy,
        files=list(args.files),
    )
    result = keeper.checkout(request)
    if result.state is CheckoutState.NAVIGATE_EXISTING and args.no_cd:
        console.print(result.path)
    return 0


def handle_checkout(keeper: WorktreeKeeper, args: argparse.Namespace) -> int:
    """gw checkout / gw co"""
    return _checkout(keeper, args, LeftoverPolicy.REJECT)


def handle_add(keeper: WorktreeKeeper, args: argparse.Namespace) -> int:
    """gw add"""
    return _checkout(keeper, args, LeftoverPolicy.REMOVE_EMPTY)


def handle_clean(keeper: WorktreeKeeper, args: argparse.Namespace) -> int:
    """gw clean"""
    report = keeper.clean(
        force=args.force, dry_run=args.dry_run, use_age_threshold=args.use_age_threshold
    )
    return 0 if report.success else 1


def handle_prune(keeper: WorktreeKeeper, args: argparse.Namespace) -> int:
    """gw prune"""
    report = keeper.prune(clean=args.clean, dry_run=args.dry_run, force=args.force, verbose=args.detail)
    if report is None:
        return 0
    return 0 if report.success else 1


COMMAND_HANDLERS: Dict[Command, Callable[[WorktreeKeeper, argparse.Namespace], int]] = {
    Command.CHECKOUT: handle_checkout,
    Command.ADD: handle_add,
    Command.CLEAN: handle_clean,
    Command.PRUNE: handle_prune,
}

_unhandled = set(Command) - set(COMMAND_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for commands: {sorted(c.value for c in _unhandled)}")


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        cwd = os.getcwd()
        git_root = find_git_root(cwd)
        current_path = get_current_worktree_path(cwd)
        logger.debug(f"Repository root: {git_root}, current worktree: {current_path or '(none)'}")

        config = load_repo_config(git_root, verbose=parsed_args.verbose, debug=parsed_args.debug)
        for name in parsed_args.protected:
            if name not in config.protected_branches:
                config.protected_branches.append(name)

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        keeper = WorktreeKeeper(git_root, config, current_path)
        handler = COMMAND_HANDLERS[resolve_command(parsed_args.command)]
        return handler(keeper, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except GitWorktreeKeeperError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
