"""Tests for console output formatting."""

from unittest.mock import patch

import pytest

from commitsplit.cli import console
from commitsplit.core.grouping import GroupingResult
from commitsplit.core.models import GroupPreview, RunOutcome


@pytest.mark.parametrize(
    "raw,count,expected",
    [
        ("1,3", 3, [0, 2]),
        ("3, 1", 3, [2, 0]),
        ("2 3", 3, [1, 2]),
        ("1", 3, None),
        ("1,1", 3, None),
        ("1,4", 3, None),
        ("0,1", 3, None),
        ("a,b", 3, None),
    ],
)
def test_parse_group_selection(raw, count, expected):
    assert console.parse_group_selection(raw, count) == expected


@pytest.mark.parametrize(
    "message,error",
    [
        ("feat: add login", None),
        ("   ", "Commit message cannot be empty"),
        ("x" * 73, "Commit message should be under 72 characters"),
    ],
)
def test_validate_commit_message(message, error):
    assert console.validate_commit_message(message) == error


def test_prompt_commit_message_retries():
    """Test that invalid input is rejected until a valid message is entered."""
    with patch("commitsplit.cli.console.Prompt.ask", side_effect=["", " fix: ok "]) as mock_ask:
        with patch("commitsplit.cli.console.print_error") as mock_error:
            assert console.prompt_commit_message("feat: default") == "fix: ok"

    assert mock_ask.call_count == 2
    mock_error.assert_called_once_with("Commit message cannot be empty")


def test_select_groups_to_merge(make_group):
    groups = [make_group("1", ["a"]), make_group("2", ["b"]), make_group("3", ["c"])]

    with patch("commitsplit.cli.console.Prompt.ask", side_effect=["1", "1,3", "combined"]), patch(
        "commitsplit.cli.console.console"
    ):
        assert console.select_groups_to_merge(groups) == ([0, 2], "combined")


def test_select_groups_to_merge_back_out(make_group):
    groups = [make_group("1", ["a"]), make_group("2", ["b"])]

    with patch("commitsplit.cli.console.Prompt.ask", return_value=""), patch(
        "commitsplit.cli.console.console"
    ):
        assert console.select_groups_to_merge(groups) is None


def test_print_grouping_result_fallback(make_group):
    """Test that validation violations are shown before the fallback groups."""
    result = GroupingResult(
        [make_group("1", ["a.py"])], "heuristic", violations=['File "b.py" is not assigned to any group']
    )

    with patch("commitsplit.cli.console.print_error") as mock_error, patch(
        "commitsplit.cli.console.print_info"
    ) as mock_info, patch("commitsplit.cli.console.print_group_preview") as mock_preview:
        console.print_grouping_result(result)

    mock_error.assert_called_once_with("AI grouping validation failed:")
    mock_info.assert_called_once_with("Falling back to heuristic grouping...")
    mock_preview.assert_called_once_with(result.groups)


def test_print_previews(make_group):
    previews = [GroupPreview(make_group("1", ["a.py"]), "feat: update files")]

    with patch("commitsplit.cli.console.console") as mock_console:
        console.print_previews(previews)

    printed = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
    assert "Message: feat: update files" in printed
    assert any("No commits were made" in line for line in printed)


def test_print_summary():
    outcome = RunOutcome(committed_count=2, failed_count=1, restage_failures=["c.py"])

    with patch("commitsplit.cli.console.console") as mock_console, patch(
        "commitsplit.cli.console.print_warning"
    ) as mock_warning, patch("commitsplit.cli.console.print_success") as mock_success:
        console.print_summary(outcome)

    printed = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
    assert any("Committed: 2 groups" in line for line in printed)
    assert any("Failed: 1 group" in line for line in printed)
    mock_warning.assert_called_once_with("Some files could not be restaged:")
    mock_success.assert_called_once()


def test_print_success():
    with patch("commitsplit.cli.console.console") as mock_console:
        console.print_success("Done")

    assert str(mock_console.print.call_args.args[0]) == "\n✅ Done"
