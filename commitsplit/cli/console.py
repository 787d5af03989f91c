"""Console output formatting and user interaction."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm, Prompt
from rich.text import Text

from ..core.grouping import GroupingResult
from ..core.messages import MAX_MESSAGE_LENGTH
from ..core.models import Group, GroupPreview, RunOutcome

console = Console()

SEPARATOR = "─" * 60


def setup_logging(debug: bool = False) -> None:
    """Configure logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, markup=False)],
        force=True,
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def print_group_preview(groups: list[Group]) -> None:
    """Print the detected groups."""
    console.print("\n[bold cyan]📋 Detected Groups:[/bold cyan]")
    for index, group in enumerate(groups, start=1):
        console.print(f"[dim]{SEPARATOR}[/dim]")
        header = Text(f"[Group {index}] ", style="bold yellow")
        header.append(group.header, style="green")
        console.print(header)
        console.print(f"[dim]Files ({len(group.files)}):[/dim]")
        for path in group.files:
            console.print(f"  • {path}", markup=False)
        if group.rationale:
            console.print(Text(f"Rationale: {group.rationale}", style="dim"))
    console.print(f"[dim]{SEPARATOR}[/dim]")


def print_grouping_result(result: GroupingResult) -> None:
    """Explain an AI fallback, if any, then print the groups."""
    if result.violations:
        print_error("AI grouping validation failed:")
        for violation in result.violations:
            console.print(Text(f"  - {violation}", style="yellow"))
        print_info("Falling back to heuristic grouping...")
    elif result.error:
        print_warning(f"AI grouping failed: {result.error}")
        print_info("Falling back to heuristic grouping...")
    print_group_preview(result.groups)


def print_previews(previews: list[GroupPreview]) -> None:
    """Print dry-run previews."""
    console.print("\n[bold cyan]📋 Preview of Groups (Dry Run):[/bold cyan]\n")
    for index, preview in enumerate(previews, start=1):
        console.print(f"[dim]{SEPARATOR}[/dim]")
        console.print(f"[bold yellow][Group {index}][/bold yellow]")
        console.print(Text(f"Message: {preview.message}", style="green"))
        console.print(f"[dim]Files ({len(preview.group.files)}):[/dim]")
        for path in preview.group.files:
            console.print(f"  • {path}", markup=False)
    console.print(f"[dim]{SEPARATOR}[/dim]")
    console.print("\n[cyan]Dry run complete. No commits were made.[/cyan]")


def print_group_details(group: Group, index: int, total: int) -> None:
    """Print one group for review."""
    console.print(f"\n[bold cyan]📝 Reviewing Group {index + 1} of {total}[/bold cyan]\n")
    console.print(f"[dim]{SEPARATOR}[/dim]")
    console.print(Text.assemble(("Type: ", "yellow"), group.type.value))
    console.print(Text.assemble(("Scope: ", "yellow"), group.scope or "(none)"))
    console.print(Text.assemble(("Description: ", "yellow"), group.description))
    console.print(f"[yellow]Files ({len(group.files)}):[/yellow]")
    for path in group.files:
        console.print(f"  • {path}", markup=False)
    console.print(f"[dim]{SEPARATOR}[/dim]")


def print_commit_success(message: str, commit_id: str) -> None:
    console.print(Text.assemble(("✓ Committed ", "bold green"), (commit_id[:7], "dim"), " ", message))


def print_commit_failure(group: Group, error: Exception) -> None:
    console.print(Text(f"✗ Failed to commit group {group.id}: {group.header}", style="bold red"))
    console.print(Text(f"Error: {error}", style="yellow"))


def print_summary(outcome: RunOutcome) -> None:
    """Print the outcome of a split run."""
    console.print("\n[bold cyan]📊 Split Summary[/bold cyan]\n")
    console.print(f"[dim]{SEPARATOR}[/dim]")
    if outcome.committed_count:
        console.print(f"[green]✓ Committed: {_plural(outcome.committed_count, 'group')}[/green]")
    if outcome.skipped_count:
        console.print(f"[yellow]⏭️  Skipped: {_plural(outcome.skipped_count, 'group')}[/yellow]")
    if outcome.failed_count:
        console.print(f"[red]✗ Failed: {_plural(outcome.failed_count, 'group')}[/red]")
    if outcome.cancelled:
        console.print("[yellow]Remaining groups were not committed.[/yellow]")
    console.print(f"[dim]{SEPARATOR}[/dim]")

    if outcome.restage_failures:
        print_warning("Some files could not be restaged:")
        for path in outcome.restage_failures:
            console.print(f"  • {path}", markup=False)
    if outcome.committed_count:
        print_success("Successfully split your changes into atomic commits!")
        console.print("[cyan]Tip: View your commits with: git log[/cyan]")


def confirm_action(prompt: str, default: bool = True) -> bool:
    """Ask user to confirm an action."""
    return Confirm.ask(f"\n{prompt}", default=default, console=console)


def select_action(groups: list[Group]) -> str:
    """Ask user how to proceed with the detected groups."""
    console.print(
        f"\n[bold blue]I've detected {_plural(len(groups), 'logical group')} of changes. "
        "How would you like to proceed?[/bold blue]"
    )
    console.print("  [cyan]commit-all[/cyan]  Commit all groups as suggested")
    console.print("  [cyan]review[/cyan]      Review and edit each group")
    console.print("  [cyan]merge[/cyan]       Merge groups together")
    console.print("  [cyan]cancel[/cyan]      Cancel")
    return Prompt.ask(
        "Choose action",
        choices=["commit-all", "review", "merge", "cancel"],
        default="commit-all",
        console=console,
    )


def select_review_action() -> str:
    """Ask what to do with the group under review."""
    return Prompt.ask(
        "What would you like to do with this group?",
        choices=["commit", "edit", "skip", "cancel"],
        default="commit",
        console=console,
    )


def validate_commit_message(message: str) -> str | None:
    """Return an error description for an invalid edited message."""
    if not message or not message.strip():
        return "Commit message cannot be empty"
    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        return f"Commit message should be under {MAX_MESSAGE_LENGTH} characters"
    return None


def prompt_commit_message(default: str) -> str:
    """Ask for a commit message until a valid one is entered."""
    while True:
        message = Prompt.ask("Enter commit message", default=default, console=console)
        error = validate_commit_message(message)
        if error is None:
            return message.strip()
        print_error(error)


def parse_group_selection(raw: str, count: int) -> list[int] | None:
    """Parse `1,3` style input into zero-based indices, None when invalid."""
    indices = []
    for part in raw.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit():
            return None
        number = int(part)
        if not 1 <= number <= count or number - 1 in indices:
            return None
        indices.append(number - 1)
    return indices if len(indices) >= 2 else None


def select_groups_to_merge(groups: list[Group]) -> tuple[list[int], str] | None:
    """Ask which groups to merge and the merged description."""
    console.print("\n[bold cyan]🔀 Merge Groups[/bold cyan]\n")
    for index, group in enumerate(groups, start=1):
        console.print(
            Text(f"[{index}] {group.header} ({_plural(len(group.files), 'file')})")
        )

    while True:
        raw = Prompt.ask(
            "Groups to merge (e.g. 1,3), empty to go back", default="", console=console
        )
        if not raw.strip():
            return None
        indices = parse_group_selection(raw, len(groups))
        if indices is not None:
            break
        print_error("Please select at least 2 different groups by number")

    while True:
        description = Prompt.ask(
            "Enter description for merged group", default="merged changes", console=console
        )
        if description.strip():
            return indices, description.strip()
        print_error("Description cannot be empty")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(Text(f"\n✅ {message}", style="bold green"))


def print_error(message: str) -> None:
    """Print error message."""
    console.print(Text(f"\n❌ {message}", style="bold red"))


def print_info(message: str) -> None:
    """Print info message."""
    console.print(Text(f"\nℹ️ {message}", style="bold blue"))


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(Text(f"\n⚠️ {message}", style="bold yellow"))
