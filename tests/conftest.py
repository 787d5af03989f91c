"""Common test fixtures."""

from unittest.mock import MagicMock

import pytest

from commitsplit.core.git import GitOperations
from commitsplit.core.inventory import ChangeKind, Inventory, StagedFile
from commitsplit.core.models import CommitType, Group


@pytest.fixture
def staged_file():
    """Fixture for creating StagedFile instances."""
    def _create_staged_file(path: str, kind: ChangeKind = ChangeKind.MODIFIED, old_path: str = None):
        return StagedFile(path=path, change_kind=kind, old_path=old_path)
    return _create_staged_file


@pytest.fixture
def make_inventory(staged_file):
    """Fixture building an Inventory from paths, with a small diff per file."""
    def _make_inventory(*paths: str, diffs: dict = None):
        files = [staged_file(path) for path in paths]
        if diffs is None:
            diffs = {path: f"diff --git a/{path} b/{path}\n+change" for path in paths}
        return Inventory(files=files, diffs=diffs, tree="tree0")
    return _make_inventory


@pytest.fixture
def make_group():
    """Fixture for creating Group instances."""
    def _make_group(group_id: str, files: list, type_: CommitType = CommitType.FEAT, scope: str = "",
                    description: str = "update files"):
        return Group(id=group_id, files=list(files), type=type_, scope=scope, description=description)
    return _make_group


@pytest.fixture
def mock_git():
    """Fixture for a mocked git collaborator."""
    git = MagicMock(spec=GitOperations)
    git.has_commits.return_value = True
    git.write_index_tree.return_value = "tree0"
    git.create_commit.side_effect = lambda message: f"sha{git.create_commit.call_count}"
    return git


@pytest.fixture
def mock_ui():
    """Fixture for a mocked UI collaborator."""
    ui = MagicMock()
    ui.confirm_commit_all.return_value = True
    ui.continue_after_error.return_value = True
    ui.confirm_dry_run.return_value = True
    ui.confirm_large_changeset.return_value = True
    ui.confirm_stage_all.return_value = True
    return ui
