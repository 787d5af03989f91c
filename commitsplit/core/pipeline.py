"""Sequential commit pipeline: one isolated commit per group."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .errors import GitError
from .git import GitOperations
from .inventory import Inventory
from .messages import MessageComposer
from .models import Group, GroupState, RunOutcome

logger = logging.getLogger(__name__)


class ReviewAction(Enum):
    """Per-group decision taken in review mode."""

    COMMIT = "commit"
    EDIT = "edit"
    SKIP = "skip"
    CANCEL = "cancel"


@dataclass
class ReviewDecision:
    """A review decision, with the edited message for EDIT."""

    action: ReviewAction
    message: str | None = None


ReviewCallback = Callable[[Group, int, int], ReviewDecision]
ErrorCallback = Callable[[Group, GitError], bool]
CommitCallback = Callable[[Group, str, str], None]


class CommitPipeline:
    """
    Commits groups one after another.

    The index is a single-writer resource: before each group it is reset to
    HEAD (or emptied when the repository has no commits yet) and the group's
    files are staged from the tree recorded at snapshot time, so unstaged
    edits never reach a commit. After the loop, files of every group that did
    not commit are staged again the same way.
    """

    def __init__(
        self,
        git: GitOperations,
        composer: MessageComposer,
        inventory: Inventory,
    ):
        self.git = git
        self.composer = composer
        self.inventory = inventory

    def _paths_to_stage(self, group: Group) -> list[str]:
        paths = []
        for path in group.files:
            staged = self.inventory.get(path)
            if staged is not None and staged.old_path:
                paths.append(staged.old_path)
            paths.append(path)
        return paths

    def _clear_index(self) -> None:
        if self.git.has_commits():
            self.git.reset_index_to_head()
        else:
            self.git.clear_index()

    def commit_group(self, group: Group) -> tuple[str, str]:
        """
        Stage exactly the group's snapshot content and commit it.

        Returns:
            Tuple of (message, commit id)

        Raises:
            GitError: If resetting, staging or committing fails
        """
        self._clear_index()
        for path in self._paths_to_stage(group):
            self.git.stage_file(path, source=self.inventory.tree)
        group.state = GroupState.STAGED

        message = self.composer.resolve(group, self.inventory.diffs)
        commit_id = self.git.create_commit(message)
        group.state = GroupState.COMMITTED
        return message, commit_id

    def run(
        self,
        groups: list[Group],
        review: ReviewCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_commit: CommitCallback | None = None,
    ) -> RunOutcome:
        """
        Process groups in order.

        Args:
            groups: Finalized groups, in commit order
            review: Per-group decision callback; None commits every group
            on_error: Called with the failed group and error, returns True to
                continue with the remaining groups; None aborts
            on_commit: Called with the group, message and commit id after
                each successful commit

        Returns:
            RunOutcome counting every group that reached a terminal state
        """
        outcome = RunOutcome()
        total = len(groups)

        for index, group in enumerate(groups):
            if review is not None:
                decision = review(group, index, total)
                if decision.action == ReviewAction.CANCEL:
                    outcome.cancelled = True
                    break
                if decision.action == ReviewAction.SKIP:
                    group.state = GroupState.SKIPPED
                    outcome.skipped_count += 1
                    continue
                if decision.action == ReviewAction.EDIT and decision.message:
                    group.custom_message = decision.message

            try:
                message, commit_id = self.commit_group(group)
            except GitError as e:
                group.state = GroupState.FAILED
                outcome.failed_count += 1
                logger.info("Failed to commit group %s: %s", group.id, e)
                if on_error is None or not on_error(group, e):
                    break
                continue

            outcome.committed_count += 1
            logger.info("Committed group %s as %s", group.id, commit_id)
            if on_commit is not None:
                on_commit(group, message, commit_id)

        outcome.restage_failures = self.restage(groups)
        return outcome

    def restage(self, groups: list[Group]) -> list[str]:
        """
        Stage again the files of every group that was not committed.

        Returns:
            Paths that could not be staged again
        """
        failed = []
        for group in groups:
            if group.is_committed:
                continue
            for path in self._paths_to_stage(group):
                try:
                    self.git.stage_file(path, source=self.inventory.tree)
                except GitError as e:
                    logger.warning("Could not restage %s: %s", path, e)
                    failed.append(path)
        return failed
