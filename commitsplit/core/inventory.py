"""Snapshot of the staged changes for one split run."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .errors import GitError
from .git import GitOperations

logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    """How a staged file changed."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNKNOWN = "unknown"

    @classmethod
    def from_status(cls, status: str) -> "ChangeKind":
        """Map a porcelain index status letter to a change kind."""
        return _STATUS_KINDS.get(status, cls.UNKNOWN)


_STATUS_KINDS = {
    "A": ChangeKind.ADDED,
    "C": ChangeKind.ADDED,
    "M": ChangeKind.MODIFIED,
    "T": ChangeKind.MODIFIED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
}


@dataclass(frozen=True)
class StagedFile:
    """A file in the staging area at the start of the run."""

    path: str
    change_kind: ChangeKind
    old_path: str | None = None


@dataclass
class Inventory:
    """Staged files and their diffs, in index order, with the index recorded as a tree."""

    files: list[StagedFile] = field(default_factory=list)
    diffs: dict[str, str] = field(default_factory=dict)
    tree: str | None = None

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def is_empty(self) -> bool:
        return not self.files

    def get(self, path: str) -> StagedFile | None:
        """Look up a staged file by path."""
        for staged in self.files:
            if staged.path == path:
                return staged
        return None

    def diff_for(self, path: str) -> str:
        return self.diffs.get(path, "")


class ChangeInventory:
    """Reads the staging area through the git collaborator."""

    def __init__(self, git: GitOperations | None = None):
        self.git = git or GitOperations()

    def snapshot(self) -> Inventory:
        """
        Capture the staged files and a diff for each of them.

        A failing diff does not abort the snapshot: the file is kept with an
        unknown change kind and an empty diff.

        Returns:
            Inventory, empty when nothing is staged
        """
        inventory = Inventory()
        seen: set[str] = set()

        for git_file in self.git.get_staged_files():
            if git_file.path in seen:
                continue
            seen.add(git_file.path)

            kind = ChangeKind.from_status(git_file.status)
            try:
                diff = self.git.get_file_diff(git_file.path, git_file.old_path)
            except GitError as e:
                logger.warning("Could not read diff for %s: %s", git_file.path, e)
                kind = ChangeKind.UNKNOWN
                diff = ""

            inventory.files.append(
                StagedFile(path=git_file.path, change_kind=kind, old_path=git_file.old_path)
            )
            inventory.diffs[git_file.path] = diff or ""

        if inventory.files:
            inventory.tree = self.git.write_index_tree()

        logger.debug("Captured %d staged files", len(inventory.files))
        return inventory
