"""Pytest fixtures for git-worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
import pytest
import git

from git_worktree_keeper.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing (symlinks resolved)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture(autouse=True)
def isolated_home(temp_dir, monkeypatch):
    """Point HOME at a scratch directory so ~/.gw is never the real one."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def nav_file(isolated_home):
    """Location of the navigation marker under the scratch HOME."""
    return isolated_home / ".gw" / "tmp" / "last-nav"


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


def _configure(repo):
    writer = repo.config_writer()
    writer.set_value("user", "name", "Test User")
    writer.set_value("user", "email", "test@example.com")
    writer.set_value("commit", "gpgsign", "false")
    writer.release()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure(repo)

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def origin_repo(temp_dir, git_repo):
    """Bare repository registered as 'origin' of git_repo, with main pushed."""
    origin_path = temp_dir / "origin.git"
    origin = git.Repo.init(origin_path, bare=True)

    git_repo.create_remote("origin", str(origin_path))
    git_repo.git.push("-u", "origin", "main")

    yield origin

    origin.close()


@pytest.fixture
def bare_store(temp_dir, git_repo):
    """Bare clone of git_repo, the layout where every branch lives in a worktree."""
    bare_path = temp_dir / "store.git"
    bare = git.Repo.clone_from(git_repo.working_dir, bare_path, bare=True)
    _configure(bare)

    yield bare

    bare.close()


def make_remote_only_branch(repo, name):
    """Create branch name on origin only; no local branch, no tracking ref."""
    repo.git.branch(name, "main")
    repo.git.push("origin", name)
    repo.git.branch("-D", name)
    repo.git.update_ref("-d", f"refs/remotes/origin/{name}")


def commit_file(repo_path, filename, content="content\n", message="Add file"):
    """Commit a file inside the worktree at repo_path."""
    repo = git.Repo(repo_path)
    (Path(repo_path) / filename).write_text(content)
    repo.index.add([filename])
    repo.index.commit(message)
    repo.close()


@pytest.fixture
def remote_only_branch(git_repo, origin_repo):
    """Factory creating branches that exist only on origin."""
    def _make(name):
        make_remote_only_branch(git_repo, name)
        return name
    return _make


@pytest.fixture
def committer():
    """Factory committing a file in a given worktree."""
    return commit_file
