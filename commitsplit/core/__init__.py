"""Core modules for commitsplit.

This module contains the core functionality including:
- Git operations and the staged-change inventory
- Heuristic and AI-assisted grouping
- Partition validation
- Commit message composition
- The commit pipeline and run orchestration
"""

from .controller import SplitController, merge_groups
from .errors import (
    AIServiceError,
    GitError,
    NothingStagedError,
    SplitError,
    UserCancellation,
    ValidationError,
)
from .git import GitFile, GitOperations
from .grouping import AIGrouper, GroupingEngine, GroupingResult, HeuristicGrouper
from .inventory import ChangeInventory, ChangeKind, Inventory, StagedFile
from .messages import MessageComposer
from .models import CommitType, Group, GroupPreview, GroupState, RunOutcome, SplitOptions
from .pipeline import CommitPipeline, ReviewAction, ReviewDecision
from .validator import ensure_valid_partition, validate_partition

__all__ = [
    "SplitController",
    "merge_groups",
    "AIServiceError",
    "GitError",
    "NothingStagedError",
    "SplitError",
    "UserCancellation",
    "ValidationError",
    "GitFile",
    "GitOperations",
    "AIGrouper",
    "GroupingEngine",
    "GroupingResult",
    "HeuristicGrouper",
    "ChangeInventory",
    "ChangeKind",
    "Inventory",
    "StagedFile",
    "MessageComposer",
    "CommitType",
    "Group",
    "GroupPreview",
    "GroupState",
    "RunOutcome",
    "SplitOptions",
    "CommitPipeline",
    "ReviewAction",
    "ReviewDecision",
    "ensure_valid_partition",
    "validate_partition",
]
