"""Logging setup for the gw command.

Console records go through rich so they share the terminal styling of the
tables and prompts. ``--debug`` additionally keeps a plain-text log of the
last run under the home directory.
"""
import logging
from pathlib import Path
from typing import List

from rich.console import Console
from rich.logging import RichHandler

from git_worktree_keeper.constants import DEBUG_LOG_PATH

# Module prefixes dropped from logger names, outermost first
_NAME_PREFIXES = ("git_worktree_keeper.", "services.git.", "services.")

_DEBUG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _console_handler(level: int, debug: bool) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    return handler


def _debug_file_handler() -> logging.Handler:
    log_path = Path.home() / DEBUG_LOG_PATH
    log_path.parent.mkdir(parents=True, exist_ok=True)
    # One run per file
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False) -> List[logging.Handler]:
    """Install gw's handlers on the root logger, replacing any existing ones.

    Warnings and errors are always shown, ``verbose`` adds progress messages
    and ``debug`` adds git command detail plus the log file at ~/.gw/gw.log.

    Returns:
        The handlers that were installed
    """
    level = _level_for(verbose, debug)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handlers = [_console_handler(level, debug)]
    if debug:
        handlers.append(_debug_file_handler())
    for handler in handlers:
        root_logger.addHandler(handler)
    return handlers


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the package path (``core.cleanup``, ``worktrees``)."""
    for prefix in _NAME_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
