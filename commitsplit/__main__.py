#!/usr/bin/env python3
"""Entry point for running commitsplit as a module."""

import sys
from typing import NoReturn

import click

from .cli import console
from .cli.main import CommitSplit
from .config.settings import Config
from .core.errors import NothingStagedError, UserCancellation
from .services.ai_service import supported_providers


def handle_error(error: BaseException, debug: bool = False) -> NoReturn:
    """Handle errors in a consistent way."""
    if isinstance(error, KeyboardInterrupt):
        console.print_error("\nOperation cancelled by user.")
        console.print_info("Commits already created are kept. Run git status to review the index.")
        sys.exit(1)
    if isinstance(error, NothingStagedError):
        console.print_warning(str(error))
        console.print_info("Tip: Stage changes with: git add <files>")
        sys.exit(0)
    if isinstance(error, UserCancellation):
        console.print_warning(str(error))
        sys.exit(0)

    console.print_error(f"An error occurred: {str(error)}")
    if debug:
        console.console.print_exception()
    sys.exit(1)


@click.command()
@click.option("--ai", "--genie", "use_ai", is_flag=True, help="Use AI-powered grouping and messages")
@click.option("-y", "--auto", is_flag=True, help="Commit all groups without confirmation")
@click.option("--dry-run", is_flag=True, help="Preview groups and messages without committing")
@click.option(
    "--max-groups",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of groups (default: 5)",
)
@click.option(
    "--provider",
    type=click.Choice(supported_providers(), case_sensitive=False),
    default=None,
    help="AI provider to use with --ai",
)
@click.option("-d", "--debug", is_flag=True, help="Enable debug logging")
def main(
    use_ai: bool,
    auto: bool,
    dry_run: bool,
    max_groups: int | None,
    provider: str | None,
    debug: bool,
) -> None:
    """Split staged changes into logical atomic commits."""
    try:
        config = Config.from_env()
        if provider:
            config = config.with_provider(provider)
        app = CommitSplit(config)
        outcome = app.run(
            use_ai=use_ai, max_groups=max_groups, dry_run=dry_run, auto=auto, debug=debug
        )
    except (KeyboardInterrupt, Exception) as e:
        handle_error(e, debug)

    if outcome.failed_count:
        sys.exit(1)


if __name__ == "__main__":
    main()
