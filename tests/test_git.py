"""Tests for git operations module."""

import subprocess
from unittest.mock import MagicMock, call, patch

import pytest

from commitsplit.core.git import GitError, GitOperations


@pytest.fixture
def git_operations():
    """Fixture for GitOperations instance."""
    return GitOperations()


@patch("subprocess.run")
def test_get_staged_files_success(mock_run, git_operations):
    """Test that only index entries are reported."""
    mock_run.return_value = MagicMock(
        stdout=" M unstaged.py\0M  file2.py\0A  new.py\0D  gone.py\0MM both.py\0",
        stderr="",
        returncode=0,
    )

    files = git_operations.get_staged_files()

    assert [(f.path, f.status) for f in files] == [
        ("file2.py", "M"),
        ("new.py", "A"),
        ("gone.py", "D"),
        ("both.py", "M"),
    ]


@patch("subprocess.run")
def test_get_staged_files_with_renames(mock_run, git_operations):
    """Test that renames and non-ASCII names are read verbatim."""
    mock_run.return_value = MagicMock(
        stdout="R  new file.py\0old file.py\0M  caf\u00e9.md\0",
        stderr="",
        returncode=0,
    )

    files = git_operations.get_staged_files()

    assert len(files) == 2
    assert files[0].path == "new file.py"
    assert files[0].status == "R"
    assert files[0].old_path == "old file.py"
    assert files[1].path == "caf\u00e9.md"
    assert files[1].old_path is None


@patch("subprocess.run")
def test_get_staged_files_ignores_untracked(mock_run, git_operations):
    """Test that untracked files are ignored."""
    mock_run.return_value = MagicMock(stdout="?? new.py\0M  tracked.py\0", stderr="", returncode=0)

    files = git_operations.get_staged_files()

    assert [f.path for f in files] == ["tracked.py"]


@patch("subprocess.run")
def test_get_staged_files_error(mock_run, git_operations):
    """Test error handling in get_staged_files."""
    mock_run.side_effect = subprocess.CalledProcessError(1, "git", stderr="fatal: not a git repository")

    with pytest.raises(GitError, match="Failed to get staged files"):
        git_operations.get_staged_files()


@patch("subprocess.run")
def test_get_file_diff_for_rename(mock_run, git_operations):
    """Test that rename diffs include both paths."""
    mock_run.return_value = MagicMock(stdout="rename from a.py", stderr="", returncode=0)

    diff = git_operations.get_file_diff("b.py", old_path="a.py")

    assert diff == "rename from a.py"
    mock_run.assert_called_once_with(
        ["git", "diff", "--cached", "-M", "--", "a.py", "b.py"],
        capture_output=True,
        text=True,
        check=True,
    )


@patch("subprocess.run")
def test_has_commits(mock_run, git_operations):
    """Test HEAD detection."""
    mock_run.return_value = MagicMock(returncode=0)
    assert git_operations.has_commits() is True

    mock_run.return_value = MagicMock(returncode=1)
    assert git_operations.has_commits() is False


@patch("subprocess.run")
def test_reset_index_to_head(mock_run, git_operations):
    """Test resetting the index."""
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

    git_operations.reset_index_to_head()

    mock_run.assert_called_once_with(
        ["git", "reset", "--quiet", "HEAD"], capture_output=True, text=True, check=True
    )


@patch("subprocess.run")
def test_reset_index_to_head_error(mock_run, git_operations):
    """Test error handling when resetting the index."""
    mock_run.side_effect = subprocess.CalledProcessError(1, "git reset", stderr="fatal: bad revision")

    with pytest.raises(GitError, match="Failed to reset staged changes"):
        git_operations.reset_index_to_head()


@patch("subprocess.run")
def test_clear_index(mock_run, git_operations):
    """Test clearing the index of a repository without commits."""
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

    git_operations.clear_index()

    mock_run.assert_called_once_with(
        ["git", "rm", "--cached", "-r", "--quiet", "--ignore-unmatch", "."],
        capture_output=True,
        text=True,
        check=True,
    )


@patch("subprocess.run")
@patch("commitsplit.core.git.logger")
def test_stage_file_with_warning(mock_logger, mock_run, git_operations):
    """Test handling of git warnings during staging."""
    mock_run.return_value = MagicMock(
        returncode=0, stdout="", stderr="warning: LF will be replaced by CRLF in file1.py"
    )

    git_operations.stage_file("file1.py")

    mock_run.assert_called_once_with(
        ["git", "add", "-A", "--", "file1.py"], capture_output=True, text=True, check=True
    )
    mock_logger.warning.assert_called_once_with(
        "Git warning while staging %s: %s",
        "file1.py",
        "warning: LF will be replaced by CRLF in file1.py",
    )


@patch("subprocess.run")
def test_stage_file_error(mock_run, git_operations):
    """Test error handling in stage_file."""
    mock_run.side_effect = subprocess.CalledProcessError(
        128, "git add", stderr="fatal: pathspec 'file1.py' did not match any files"
    )

    with pytest.raises(GitError, match="Failed to stage file1.py"):
        git_operations.stage_file("file1.py")


@patch("subprocess.run")
def test_write_index_tree(mock_run, git_operations):
    mock_run.return_value = MagicMock(returncode=0, stdout="4b825dc\n", stderr="")

    assert git_operations.write_index_tree() == "4b825dc"
    mock_run.assert_called_once_with(
        ["git", "write-tree"], capture_output=True, text=True, check=True
    )


@patch("subprocess.run")
def test_stage_file_from_tree(mock_run, git_operations):
    """Test that staging from a tree copies the recorded blob, not the working tree."""
    mock_run.side_effect = [
        MagicMock(returncode=0, stdout="100644 blob abc123\tsrc/b.py\0", stderr=""),
        MagicMock(returncode=0, stdout="", stderr=""),
    ]

    git_operations.stage_file("src/b.py", source="tree0")

    assert mock_run.call_args_list == [
        call(
            ["git", "ls-tree", "-z", "--full-tree", "tree0", "--", "src/b.py"],
            capture_output=True,
            text=True,
            check=True,
        ),
        call(
            ["git", "update-index", "--add", "--cacheinfo", "100644,abc123,src/b.py"],
            capture_output=True,
            text=True,
            check=True,
        ),
    ]


@patch("subprocess.run")
def test_stage_file_from_tree_removes_missing_path(mock_run, git_operations):
    """Test that a path absent from the tree is removed from the index."""
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

    git_operations.stage_file("gone.py", source="tree0")

    assert mock_run.call_args_list[-1] == call(
        ["git", "update-index", "--force-remove", "--", "gone.py"],
        capture_output=True,
        text=True,
        check=True,
    )


@patch("subprocess.run")
def test_has_unstaged_changes(mock_run, git_operations):
    """Test detection of worktree changes."""
    mock_run.return_value = MagicMock(stdout="M  staged.py\n", stderr="", returncode=0)
    assert git_operations.has_unstaged_changes() is False

    mock_run.return_value = MagicMock(stdout=" M edited.py\n", stderr="", returncode=0)
    assert git_operations.has_unstaged_changes() is True

    mock_run.return_value = MagicMock(stdout="?? new.py\n", stderr="", returncode=0)
    assert git_operations.has_unstaged_changes() is True


@patch("subprocess.run")
def test_create_commit_success(mock_run, git_operations):
    """Test successful commit creation."""
    mock_run.side_effect = [
        MagicMock(returncode=1),  # diff --cached --quiet: changes staged
        MagicMock(returncode=0, stdout="", stderr=""),  # commit
        MagicMock(returncode=0, stdout="abc123\n", stderr=""),  # rev-parse
    ]

    commit_id = git_operations.create_commit("feat: add new feature")

    assert commit_id == "abc123"
    assert mock_run.call_args_list[1] == call(
        ["git", "commit", "-m", "feat: add new feature"],
        capture_output=True,
        text=True,
        check=True,
    )


@patch("subprocess.run")
def test_create_commit_nothing_staged(mock_run, git_operations):
    """Test that an empty index is a commit failure."""
    mock_run.return_value = MagicMock(returncode=0)

    with pytest.raises(GitError, match="nothing staged"):
        git_operations.create_commit("feat: add new feature")

    assert mock_run.call_count == 1


@patch("subprocess.run")
def test_create_commit_failure(mock_run, git_operations):
    """Test handling of commit creation failure."""
    mock_run.side_effect = [
        MagicMock(returncode=1),
        subprocess.CalledProcessError(1, "git commit", stderr="pre-commit hook failed"),
    ]

    with pytest.raises(GitError, match="Failed to create commit: pre-commit hook failed"):
        git_operations.create_commit("feat: add new feature")
