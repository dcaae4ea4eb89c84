"""Tests for logging setup"""
import logging
import pytest
from rich.logging import RichHandler

from git_worktree_keeper.utils.logging import get_logger, setup_logging


@pytest.fixture
def root_logger():
    """Root logger restored to its previous handlers and level afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


class TestSetupLogging:
    """Test handler installation."""

    def test_default_shows_warnings_only(self, root_logger):
        """Without flags only warnings reach the console."""
        handlers = setup_logging()
        assert root_logger.level == logging.WARNING
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
        assert root_logger.handlers == handlers

    def test_verbose_level(self, root_logger):
        """--verbose shows progress messages."""
        setup_logging(verbose=True)
        assert root_logger.level == logging.INFO

    def test_debug_writes_log_file(self, root_logger, isolated_home):
        """--debug adds a log file under ~/.gw."""
        handlers = setup_logging(debug=True)
        assert root_logger.level == logging.DEBUG
        assert len(handlers) == 2

        get_logger("git_worktree_keeper.core.cleanup").debug("removing feature/x")
        for handler in handlers:
            handler.flush()

        log_text = (isolated_home / ".gw" / "gw.log").read_text()
        assert "core.cleanup DEBUG removing feature/x" in log_text

    def test_repeated_setup_replaces_handlers(self, root_logger):
        """Calling setup twice does not duplicate output."""
        setup_logging()
        handlers = setup_logging(verbose=True)
        assert root_logger.handlers == handlers


class TestGetLogger:
    """Test logger naming."""

    def test_package_prefix_dropped(self):
        assert get_logger("git_worktree_keeper.core.cleanup").name == "core.cleanup"

    def test_service_prefixes_dropped(self):
        assert get_logger("git_worktree_keeper.services.git.worktrees").name == "worktrees"
        assert get_logger("git_worktree_keeper.services.safety_service").name == "safety_service"

    def test_other_names_untouched(self):
        assert get_logger("git").name == "git"
