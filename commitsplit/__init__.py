"""commitsplit - Split staged changes into atomic, conventional commits."""

from .cli.main import CommitSplit
from .core.controller import SplitController, merge_groups
from .core.errors import AIServiceError, GitError, UserCancellation, ValidationError
from .core.models import CommitType, Group, GroupState, RunOutcome, SplitOptions
from .services.ai_service import AIProvider, get_provider

__version__ = "0.1.0"

__all__ = [
    "CommitSplit",
    "SplitController",
    "merge_groups",
    "AIServiceError",
    "GitError",
    "UserCancellation",
    "ValidationError",
    "CommitType",
    "Group",
    "GroupState",
    "RunOutcome",
    "SplitOptions",
    "AIProvider",
    "get_provider",
]
