#!/usr/bin/env python3
"""Main CLI module for commitsplit."""

import logging

from ..config.settings import Config
from ..core.controller import SplitController
from ..core.errors import GitError
from ..core.git import GitOperations
from ..core.grouping import GroupingResult
from ..core.models import Group, GroupPreview, RunOutcome, SplitOptions
from ..core.pipeline import ReviewAction, ReviewDecision
from ..services.ai_service import provider_from_config
from . import console

logger = logging.getLogger(__name__)


class ConsoleUI:
    """Terminal implementation of the controller's UI collaborator."""

    def confirm_stage_all(self, has_unstaged: bool) -> bool:
        if not has_unstaged:
            return False
        console.print_warning("No staged changes found, but the working tree has changes.")
        return console.confirm_action("Would you like to stage all changes now?")

    def notify_single_file(self, path: str) -> None:
        console.print_warning(f"Only one file changed ({path}). No need to split.")
        console.print_info("Tip: commit it directly with git commit")

    def confirm_large_changeset(self, count: int) -> bool:
        console.print_warning(f"{count} files changed. This may take a while.")
        return console.confirm_action("Continue with analysis?")

    def notify_ai_unavailable(self) -> None:
        console.print_warning("No AI provider configured. Using heuristic grouping.")
        console.print_info("Set OPENAI_API_KEY or GROQ_API_KEY to enable AI-powered grouping.")

    def show_grouping(self, result: GroupingResult) -> None:
        console.print_grouping_result(result)

    def choose_action(self, groups: list[Group]) -> str:
        return console.select_action(groups)

    def select_merge(self, groups: list[Group]) -> tuple[list[int], str] | None:
        return console.select_groups_to_merge(groups)

    def notify_merged(self, count: int, groups: list[Group]) -> None:
        console.print_success(f"Merged {count} groups")
        console.print_group_preview(groups)

    def confirm_commit_all(self, groups: list[Group]) -> bool:
        console.print_info("Ready to commit all groups")
        console.console.print(f"[dim]Total groups: {len(groups)}[/dim]")
        console.console.print(f"[dim]Total files: {sum(len(g.files) for g in groups)}[/dim]")
        return console.confirm_action("Proceed with committing all groups?")

    def review_group(self, group: Group, index: int, total: int) -> ReviewDecision:
        console.print_group_details(group, index, total)
        action = ReviewAction(console.select_review_action())
        if action == ReviewAction.EDIT:
            message = console.prompt_commit_message(group.custom_message or group.header)
            return ReviewDecision(ReviewAction.EDIT, message)
        return ReviewDecision(action)

    def on_commit(self, group: Group, message: str, commit_id: str) -> None:
        console.print_commit_success(message, commit_id)

    def show_failure(self, group: Group, error: GitError) -> None:
        console.print_commit_failure(group, error)

    def continue_after_error(self, group: Group) -> bool:
        return console.confirm_action("Continue with remaining groups?")

    def confirm_dry_run(self) -> bool:
        return console.confirm_action("This is a dry run. No commits will be made. Continue?")

    def show_previews(self, previews: list[GroupPreview]) -> None:
        console.print_previews(previews)

    def show_summary(self, outcome: RunOutcome) -> None:
        console.print_summary(outcome)


class CommitSplit:
    """Main application class."""

    def __init__(self, config: Config | None = None):
        """Initialize commitsplit."""
        self.config = config or Config.from_env()
        self.git = GitOperations()
        self.ui = ConsoleUI()

    def build_controller(self, use_ai: bool) -> SplitController:
        provider = provider_from_config(self.config) if use_ai else None
        if provider is not None:
            logger.debug("Using %s provider with model %s", provider.name, provider.model_id)
        return SplitController(self.git, self.ui, provider=provider, config=self.config)

    def run(
        self,
        use_ai: bool = False,
        max_groups: int | None = None,
        dry_run: bool = False,
        auto: bool = False,
        debug: bool = False,
    ) -> RunOutcome:
        """Run the main application logic."""
        console.setup_logging(debug)

        options = SplitOptions(
            use_ai=use_ai,
            max_groups=max_groups or self.config.max_groups,
            dry_run=dry_run,
            auto=auto,
        )
        controller = self.build_controller(use_ai)
        return controller.run(options)
