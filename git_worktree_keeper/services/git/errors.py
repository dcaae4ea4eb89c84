"""Helpers for turning GitCommandError into readable messages."""

import git


def git_stderr(e: git.exc.GitCommandError) -> str:
    """Return the stderr text of a failed git command.

    GitPython renders stderr as "stderr: '<text>'"; the wrapper is removed.
    """
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else str(e)).strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip()
        if len(stderr) >= 2 and stderr[0] == stderr[-1] == "'":
            stderr = stderr[1:-1]
    return stderr.strip()


def describe_git_error(e: git.exc.GitCommandError, operation: str) -> str:
    """Format a failed git command as 'git <operation> failed (exit N): <stderr>'."""
    stderr = git_stderr(e)
    status = e.status if hasattr(e, "status") else "unknown"

    if stderr:
        return f"git {operation} failed (exit {status}): {stderr}"
    return f"git {operation} failed with exit code {status}"


def first_fatal_line(e: git.exc.GitCommandError, default: str = "Unable to fetch from remote") -> str:
    """First line of stderr with the 'fatal: ' prefix dropped, or default."""
    stderr = git_stderr(e)
    if "fatal" not in stderr:
        return default
    return stderr.split("\n")[0].replace("fatal: ", "").strip()
