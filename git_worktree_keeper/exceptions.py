"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class GitWorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class ConfigError(GitWorktreeKeeperError):
    """Exception raised when the repository configuration is invalid."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid config at {path}: {message}")


class GitOperationError(GitWorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RegistryError(GitOperationError):
    """Exception raised when the worktree list cannot be read."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("list_worktrees", message=message or "Failed to list worktrees")


class BranchNotFoundError(GitOperationError):
    """Exception raised when a branch exists neither locally nor on the remote."""

    def __init__(self, branch: str, remote: str = "origin"):
        self.remote = remote
        super().__init__(
            "find_branch", branch, f"Branch does not exist locally or on remote '{remote}'"
        )


class RefConflictError(GitOperationError):
    """Exception raised when a new branch name collides with an existing ref path."""

    def __init__(self, requested: str, conflicting_branch: str):
        self.requested = requested
        self.conflicting_branch = conflicting_branch
        super().__init__(
            "create_branch",
            requested,
            f"Conflicts with existing branch '{conflicting_branch}'",
        )


class LeftoverPathError(GitOperationError):
    """Exception raised when the target path exists but is not a registered worktree."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("add_worktree", message=f"Path {path} already exists but is not a valid worktree")


class WorktreeCreationError(GitOperationError):
    """Exception raised when git refuses to create the worktree."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("add_worktree", branch, message)


class FetchError(GitOperationError):
    """Exception raised when a fetch that must succeed did not."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("fetch", branch, message or "Could not fetch from remote")


class RemovalError(GitOperationError):
    """Exception raised when a single worktree cannot be removed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__("remove_worktree", message=message or f"Failed to remove worktree: {path}")
