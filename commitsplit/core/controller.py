"""Orchestration of a split run: grouping, merging, review and commits."""

import logging

from ..config.settings import Config
from .errors import GitError, NothingStagedError, UserCancellation
from .git import GitOperations
from .grouping import AIGrouper, GroupingEngine, GroupingResult
from .inventory import ChangeInventory, Inventory
from .messages import MessageComposer
from .models import Group, GroupPreview, RunOutcome, SplitOptions
from .pipeline import CommitPipeline

logger = logging.getLogger(__name__)

ACTIONS = ("commit-all", "review", "merge", "cancel")


def merge_groups(groups: list[Group], indices: list[int], description: str = "merged changes") -> list[Group]:
    """
    Merge the selected groups into one group appended at the end.

    Files are concatenated in selection order, the type of the first
    selected group wins and distinct non-empty scopes are comma-joined.

    Args:
        groups: Current working list of groups
        indices: Zero-based positions of the groups to merge, in selection order
        description: Description of the merged group

    Returns:
        New list with the selected groups replaced by the merged one

    Raises:
        ValueError: If fewer than two distinct valid positions are given
    """
    if len(set(indices)) != len(indices):
        raise ValueError("Each group can only be selected once")
    if len(indices) < 2:
        raise ValueError("Please select at least 2 groups to merge")
    for index in indices:
        if not 0 <= index < len(groups):
            raise ValueError(f"No group at position {index + 1}")

    selected = [groups[index] for index in indices]
    scopes: list[str] = []
    for group in selected:
        if group.scope and group.scope not in scopes:
            scopes.append(group.scope)

    merged = Group(
        id="+".join(group.id for group in selected),
        files=[path for group in selected for path in group.files],
        type=selected[0].type,
        scope=",".join(scopes),
        description=description.strip() or "merged changes",
        rationale="User merged groups",
    )

    remaining = [group for position, group in enumerate(groups) if position not in indices]
    return remaining + [merged]


class SplitController:
    """
    Drives one split run.

    The `ui` collaborator renders everything and answers prompts; see
    `commitsplit.cli.main.ConsoleUI` for the methods it must provide.
    """

    def __init__(
        self,
        git: GitOperations | None = None,
        ui=None,
        provider=None,
        config: Config | None = None,
    ):
        self.git = git or GitOperations()
        self.ui = ui
        self.provider = provider
        self.config = config or Config()
        self.inventory = ChangeInventory(self.git)

    def collect(self, offer_staging: bool = True) -> Inventory:
        """
        Snapshot the staged changes, offering to stage everything when empty.

        Raises:
            NothingStagedError: If there is still nothing staged
        """
        inventory = self.inventory.snapshot()
        if not inventory.is_empty():
            return inventory

        if not offer_staging or not self.ui.confirm_stage_all(self.git.has_unstaged_changes()):
            raise NothingStagedError("No staged changes found.")

        self.git.stage_all()
        inventory = self.inventory.snapshot()
        if inventory.is_empty():
            raise NothingStagedError("No file changes detected.")
        return inventory

    def _engine(self, options: SplitOptions) -> GroupingEngine:
        if options.use_ai and self.provider is not None:
            return GroupingEngine(ai=AIGrouper(self.provider, self.config.group_diff_limit))
        return GroupingEngine()

    def composer(self, options: SplitOptions) -> MessageComposer:
        provider = self.provider if options.use_ai else None
        return MessageComposer(provider, diff_limit=self.config.message_diff_limit)

    def plan(self, inventory: Inventory, options: SplitOptions) -> GroupingResult:
        """Partition the inventory, falling back to the heuristic on any AI problem."""
        if options.use_ai and self.provider is None:
            self.ui.notify_ai_unavailable()

        result = self._engine(options).group(inventory, options.max_groups, use_ai=options.use_ai)
        result.groups = [group for group in result.groups if group.files]
        logger.debug("Planned %d groups using %s grouping", len(result.groups), result.strategy)
        return result

    def preview(self, options: SplitOptions, inventory: Inventory | None = None) -> list[GroupPreview]:
        """
        Compute groups and their messages without touching the index.

        Raises:
            NothingStagedError: If nothing is staged
        """
        if inventory is None:
            inventory = self.collect(offer_staging=False)
        groups = self.plan(inventory, options).groups
        composer = self.composer(options)
        return [GroupPreview(group, composer.compose(group, inventory.diffs)) for group in groups]

    def _error_handler(self, options: SplitOptions):
        def on_error(group: Group, error: GitError) -> bool:
            self.ui.show_failure(group, error)
            if options.auto:
                return True
            return self.ui.continue_after_error(group)

        return on_error

    def commit_all(self, groups: list[Group], inventory: Inventory, options: SplitOptions) -> RunOutcome:
        """Commit every group in order after one confirmation."""
        if not options.auto and not self.ui.confirm_commit_all(groups):
            raise UserCancellation("Operation cancelled.")

        pipeline = CommitPipeline(self.git, self.composer(options), inventory)
        return pipeline.run(
            groups,
            on_error=self._error_handler(options),
            on_commit=self.ui.on_commit,
        )

    def review(self, groups: list[Group], inventory: Inventory, options: SplitOptions) -> RunOutcome:
        """Ask for a decision on each group before committing it."""
        pipeline = CommitPipeline(self.git, self.composer(options), inventory)
        return pipeline.run(
            groups,
            review=self.ui.review_group,
            on_error=self._error_handler(options),
            on_commit=self.ui.on_commit,
        )

    def run(self, options: SplitOptions) -> RunOutcome:
        """
        Run a complete split.

        Raises:
            NothingStagedError: If there is nothing to split
            UserCancellation: If the user stops before any commit
        """
        inventory = self.collect(offer_staging=not options.dry_run and not options.auto)

        if len(inventory.files) == 1:
            self.ui.notify_single_file(inventory.files[0].path)
            return RunOutcome()

        if len(inventory.files) > self.config.large_changeset_threshold and not options.auto:
            if not self.ui.confirm_large_changeset(len(inventory.files)):
                raise UserCancellation("Split operation cancelled.")

        if options.dry_run:
            if not options.auto and not self.ui.confirm_dry_run():
                raise UserCancellation("Dry run cancelled.")
            previews = self.preview(options, inventory)
            self.ui.show_previews(previews)
            return RunOutcome()

        result = self.plan(inventory, options)
        self.ui.show_grouping(result)
        groups = result.groups

        action = "commit-all" if options.auto else self.ui.choose_action(groups)
        while action == "merge":
            selection = self.ui.select_merge(groups)
            if selection:
                indices, description = selection
                groups = merge_groups(groups, indices, description)
                self.ui.notify_merged(len(indices), groups)
            action = self.ui.choose_action(groups)

        if action == "cancel":
            raise UserCancellation("Split operation cancelled.")
        if action not in ACTIONS:
            raise ValueError(f"Unknown action: {action}")

        if action == "review":
            outcome = self.review(groups, inventory, options)
        else:
            outcome = self.commit_all(groups, inventory, options)

        self.ui.show_summary(outcome)
        return outcome
