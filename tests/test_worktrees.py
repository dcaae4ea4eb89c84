"""Tests for the worktree registry"""
import os
import pytest
from unittest.mock import Mock, patch
import git

from git_worktree_keeper.exceptions import RegistryError, WorktreeCreationError
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.worktrees import (
    WorktreeService,
    find_git_root,
    get_current_worktree_path,
    parse_worktree_porcelain,
    resolve_worktree_path,
)


PORCELAIN = """worktree /repo
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /repo/team/feature
HEAD 2222222222222222222222222222222222222222
branch refs/heads/team/feature

worktree /tmp/detached
HEAD 3333333333333333333333333333333333333333
detached
"""

BARE_PORCELAIN = """worktree /store.git
bare

worktree /store.git/main
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main
"""


def _failing_repo(message="fatal: not a git repository"):
    repo = Mock()
    repo.git.worktree.side_effect = git.exc.GitCommandError(["git", "worktree"], 128, stderr=message)
    return repo


class TestParsePorcelain:
    """Test parsing of `git worktree list --porcelain`."""

    def test_parses_blocks(self):
        """Each block becomes one record in order."""
        records = parse_worktree_porcelain(PORCELAIN)
        assert [r.path for r in records] == ["/repo", "/repo/team/feature", "/tmp/detached"]
        assert records[0].head_commit == "1" * 40

    def test_branch_keeps_slash_segments(self):
        """Only refs/heads/ is stripped from branch names."""
        records = parse_worktree_porcelain(PORCELAIN)
        assert records[1].branch == "team/feature"

    def test_detached_has_empty_branch(self):
        """Detached worktrees have no branch."""
        records = parse_worktree_porcelain(PORCELAIN)
        assert records[2].branch == ""
        assert records[2].label == "/tmp/detached"

    def test_bare_marker(self):
        """The bare entry is flagged and has no branch."""
        records = parse_worktree_porcelain(BARE_PORCELAIN)
        assert records[0].is_bare is True
        assert records[0].branch == ""
        assert records[1].is_bare is False
        assert records[1].branch == "main"

    def test_empty_output(self):
        """No output means no worktrees."""
        assert parse_worktree_porcelain("") == []

    def test_blocks_without_blank_separator(self):
        """A new 'worktree' line starts a new record even without a blank line."""
        output = "worktree /a\nbranch refs/heads/a\nworktree /b\nbranch refs/heads/b"
        records = parse_worktree_porcelain(output)
        assert [(r.path, r.branch) for r in records] == [("/a", "a"), ("/b", "b")]

    def test_prunable_marker(self):
        """A 'prunable <reason>' line flags a worktree whose directory is gone."""
        output = (
            "worktree /repo\nHEAD " + "1" * 40 + "\nbranch refs/heads/main\n\n"
            "worktree /repo/gone\nHEAD " + "2" * 40 + "\nbranch refs/heads/gone\n"
            "prunable gitdir file points to non-existent location\n"
        )
        records = parse_worktree_porcelain(output)
        assert [r.prunable for r in records] == [False, True]
        assert records[1].is_missing is True
        assert records[1].branch == "gone"


class TestFindHelpers:
    """Test lookups over a worktree list."""

    def test_find_by_branch_ignores_bare(self):
        """A bare record never matches a branch."""
        records = [
            WorktreeRecord("/store.git", "main", "", is_bare=True),
            WorktreeRecord("/store.git/main", "main", "abc"),
        ]
        found = WorktreeService.find_by_branch(records, "main")
        assert found.path == "/store.git/main"

    def test_find_by_branch_missing(self):
        """Unknown branch returns None."""
        assert WorktreeService.find_by_branch(parse_worktree_porcelain(PORCELAIN), "nope") is None

    def test_find_by_path_resolves_symlinks(self, temp_dir):
        """Paths are compared after resolving symlinks."""
        real = temp_dir / "real"
        real.mkdir()
        link = temp_dir / "link"
        os.symlink(real, link)

        records = [WorktreeRecord(str(real), "feature", "abc")]
        assert WorktreeService.find_by_path(records, str(link)) is records[0]
        assert WorktreeService.find_by_path(records, str(temp_dir / "other")) is None


class TestWorktreeService:
    """Test worktree operations against real repositories."""

    def test_list_single_worktree(self, git_repo):
        """A fresh repository has just its main worktree."""
        service = WorktreeService(git_repo.working_dir)
        records = service.list_worktrees()
        assert len(records) == 1
        assert records[0].path == git_repo.working_dir
        assert records[0].branch == "main"

    def test_add_and_remove(self, git_repo):
        """Worktrees can be added with a new branch and removed again."""
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "feature", "a")

        service.add_worktree(path, "main", new_branch="feature/a")
        assert os.path.isdir(path)
        assert service.find_by_branch(service.list_worktrees(), "feature/a") is not None

        success, error = service.remove_worktree(path)
        assert success is True
        assert error is None
        assert not os.path.exists(path)

    def test_add_existing_branch_fails(self, git_repo):
        """git refuses a second worktree for the checked-out branch."""
        service = WorktreeService(git_repo.working_dir)
        with pytest.raises(WorktreeCreationError) as exc_info:
            service.add_worktree(os.path.join(git_repo.working_dir, "dup"), "main")
        assert "worktree add" in str(exc_info.value)

    def test_remove_dirty_needs_force(self, git_repo):
        """Removal failure is reported, not raised."""
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "dirty")
        service.add_worktree(path, "main", new_branch="dirty")
        with open(os.path.join(path, "scratch.txt"), "w") as f:
            f.write("work in progress\n")

        success, error = service.remove_worktree(path)
        assert success is False
        assert "git worktree remove failed" in error

        success, error = service.remove_worktree(path, force=True)
        assert success is True

    def test_list_failure_raises_registry_error(self, git_repo):
        """A failing `git worktree list` is fatal."""
        service = WorktreeService(git_repo.working_dir)
        with patch.object(service, "_get_repo", return_value=_failing_repo()):
            with pytest.raises(RegistryError) as exc_info:
                service.list_worktrees()
        assert "not a git repository" in str(exc_info.value)

    def test_prune_failure_is_not_fatal(self, git_repo):
        """Prune failures come back as (False, message)."""
        service = WorktreeService(git_repo.working_dir)
        with patch.object(service, "_get_repo", return_value=_failing_repo("fatal: locked")):
            success, error = service.prune_worktrees()
        assert success is False
        assert "exit 128" in error
        assert "fatal: locked" in error

    def test_prune_removes_phantom(self, git_repo):
        """Entries whose directory vanished disappear after prune."""
        import shutil

        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "gone")
        service.add_worktree(path, "main", new_branch="gone")
        shutil.rmtree(path)

        assert len(service.list_worktrees()) == 2
        success, _ = service.prune_worktrees()
        assert success is True
        assert len(service.list_worktrees()) == 1

    def test_list_live_worktrees_skips_missing(self, git_repo):
        """Deleted directories are hidden without pruning the registry."""
        import shutil

        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "gone")
        service.add_worktree(path, "main", new_branch="gone")
        shutil.rmtree(path)

        assert [wt.branch for wt in service.list_live_worktrees()] == ["main"]
        assert len(service.list_worktrees()) == 2

    def test_bare_entry_is_never_missing(self):
        """The bare repository entry has no working directory to check."""
        record = WorktreeRecord("/does/not/exist.git", "", "", is_bare=True)
        assert record.is_missing is False


class TestRepositoryLocation:
    """Test resolving the repository root and current worktree."""

    def test_git_root_of_normal_repo(self, git_repo):
        """The root of a normal repository is its main worktree."""
        sub = os.path.join(git_repo.working_dir, "sub")
        os.mkdir(sub)
        assert find_git_root(sub) == git_repo.working_dir

    def test_git_root_from_linked_worktree(self, git_repo):
        """Linked worktrees resolve to the main repository."""
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "linked")
        service.add_worktree(path, "main", new_branch="linked")
        assert find_git_root(path) == git_repo.working_dir

    def test_git_root_of_bare_store(self, bare_store):
        """A bare repository is its own root."""
        bare_path = os.path.realpath(bare_store.git_dir)
        assert find_git_root(bare_path) == bare_path

    def test_current_worktree(self, git_repo):
        """Inside a worktree the top-level directory is returned."""
        sub = os.path.join(git_repo.working_dir, "nested")
        os.mkdir(sub)
        assert get_current_worktree_path(sub) == git_repo.working_dir

    def test_current_worktree_in_bare_root(self, bare_store):
        """The bare repository root is not a work tree."""
        assert get_current_worktree_path(bare_store.git_dir) == ""

    def test_bare_store_lists_bare_entry(self, bare_store):
        """Worktrees of a bare store follow a bare record."""
        service = WorktreeService(bare_store.git_dir)
        path = os.path.join(bare_store.git_dir, "main")
        service.add_worktree(path, "main")

        records = service.list_worktrees()
        assert records[0].is_bare is True
        assert service.find_by_branch(records, "main").path == os.path.realpath(path)

    def test_resolve_worktree_path(self):
        """Names map below the root keeping slashes; absolute paths are kept."""
        assert resolve_worktree_path("/repo", "team/feature") == "/repo/team/feature"
        assert resolve_worktree_path("/repo", "/elsewhere/wt") == "/elsewhere/wt"
