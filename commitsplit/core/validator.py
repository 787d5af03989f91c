"""Partition checks for proposed commit groups."""

from collections.abc import Iterable

from .errors import ValidationError
from .inventory import StagedFile
from .models import Group


def validate_partition(groups: list[Group], staged_files: Iterable[StagedFile]) -> list[str]:
    """
    Check that groups cover every staged file exactly once.

    Args:
        groups: Proposed groups, in commit order
        staged_files: The staged snapshot the groups must partition

    Returns:
        Ordered list of violation descriptions, empty when the partition is valid
    """
    staged_paths = [f.path for f in staged_files]
    staged_set = set(staged_paths)
    violations: list[str] = []
    assigned: set[str] = set()

    for index, group in enumerate(groups, start=1):
        if not group.files:
            violations.append(f"Group {index} has no files")
            continue

        for path in group.files:
            if path in assigned:
                violations.append(f'File "{path}" is assigned to multiple groups')
            elif path not in staged_set:
                violations.append(f'File "{path}" is not a staged file')
            assigned.add(path)

    for path in staged_paths:
        if path not in assigned:
            violations.append(f'File "{path}" is not assigned to any group')

    return violations


def ensure_valid_partition(groups: list[Group], staged_files: Iterable[StagedFile]) -> None:
    """Raise ValidationError when the groups do not partition the staged files."""
    violations = validate_partition(groups, staged_files)
    if violations:
        raise ValidationError(violations)
