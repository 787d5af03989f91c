"""Git operations module."""

import logging
import subprocess
from dataclasses import dataclass

from .errors import GitError

logger = logging.getLogger(__name__)

__all__ = ["GitError", "GitFile", "GitOperations"]


@dataclass
class GitFile:
    """Represents a staged file with its index status."""

    path: str
    status: str
    old_path: str | None = None  # For renamed files


def _run_git(args: list[str], action: str) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args], capture_output=True, text=True, check=True
        )
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr if e.stderr else str(e)
        raise GitError(f"Failed to {action}: {error_msg}")


class GitOperations:
    """Basic git operations handler."""

    @staticmethod
    def get_staged_files() -> list[GitFile]:
        """Get the files recorded in the index, ignoring unstaged and untracked changes."""
        # -z keeps paths verbatim: no C-quoting of spaces or non-ASCII names
        result = _run_git(
            ["status", "--porcelain", "-z", "--untracked-files=no"], "get staged files"
        )

        files = []
        entries = iter(result.stdout.split("\0"))
        for entry in entries:
            if len(entry) < 4:
                continue

            # First character is the index status, second is the worktree
            staged = entry[0]
            path = entry[3:]

            # Renames and copies are followed by their source path
            old_path = next(entries, "") if {"R", "C"} & set(entry[:2]) else None

            if staged in (" ", "?", "!"):
                continue

            if staged == "R":
                files.append(GitFile(path=path, status="R", old_path=old_path))
            else:
                files.append(GitFile(path=path, status=staged))

        return files

    @staticmethod
    def get_file_diff(path: str, old_path: str | None = None) -> str:
        """Get the staged diff of a single file."""
        cmd = ["diff", "--cached", "-M", "--"]
        if old_path:
            cmd.append(old_path)
        cmd.append(path)
        return _run_git(cmd, f"get diff for {path}").stdout

    @staticmethod
    def has_commits() -> bool:
        """Check whether HEAD points to a commit."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
            capture_output=True,
            text=True,
        )
        return result.returncode == 0

    @staticmethod
    def reset_index_to_head() -> None:
        """Reset the index to the last commit, keeping the working tree."""
        _run_git(["reset", "--quiet", "HEAD"], "reset staged changes")

    @staticmethod
    def clear_index() -> None:
        """Remove every entry from the index of a repository without commits."""
        _run_git(
            ["rm", "--cached", "-r", "--quiet", "--ignore-unmatch", "."],
            "clear the index",
        )

    @staticmethod
    def write_index_tree() -> str:
        """Record the current index as a tree object and return its id."""
        return _run_git(["write-tree"], "record staged changes").stdout.strip()

    @staticmethod
    def stage_file(path: str, source: str | None = None) -> None:
        """
        Stage a single path, including deletions.

        Args:
            path: Path to stage
            source: Tree to take the content from; None stages the working tree copy
        """
        if source:
            GitOperations._stage_from_tree(path, source)
            return

        result = _run_git(["add", "-A", "--", path], f"stage {path}")
        if result.stderr:
            if "warning" in result.stderr.lower():
                logger.warning("Git warning while staging %s: %s", path, result.stderr.strip())
            else:
                logger.info("Git message while staging %s: %s", path, result.stderr.strip())

    @staticmethod
    def _stage_from_tree(path: str, tree: str) -> None:
        """Make the index entry of `path` match `tree`, removing it when absent there."""
        listing = _run_git(
            ["ls-tree", "-z", "--full-tree", tree, "--", path], f"stage {path}"
        ).stdout

        for record in listing.split("\0"):
            meta, _, name = record.partition("\t")
            if name != path:
                continue
            mode, _type, sha = meta.split()
            _run_git(
                ["update-index", "--add", "--cacheinfo", f"{mode},{sha},{path}"],
                f"stage {path}",
            )
            return

        _run_git(["update-index", "--force-remove", "--", path], f"stage {path}")

    @staticmethod
    def stage_all() -> None:
        """Stage every change in the working tree."""
        _run_git(["add", "-A"], "stage all changes")

    @staticmethod
    def has_unstaged_changes() -> bool:
        """Check for modified tracked files or untracked files."""
        result = _run_git(["status", "--porcelain"], "get repository status")
        return any(line[1:2] not in ("", " ") for line in result.stdout.splitlines())

    @staticmethod
    def create_commit(message: str) -> str:
        """Commit the index and return the new commit id."""
        status = subprocess.run(
            ["git", "diff", "--cached", "--quiet"],
            capture_output=True,
            text=True,
        )
        if status.returncode == 0:
            raise GitError("Failed to create commit: nothing staged for this group")

        result = _run_git(["commit", "-m", message], "create commit")
        if result.stderr and "warning" in result.stderr.lower():
            logger.warning("Git warning during commit: %s", result.stderr.strip())

        return _run_git(["rev-parse", "HEAD"], "read commit id").stdout.strip()
