"""Error types raised by the split pipeline."""


class SplitError(Exception):
    """Base class for commitsplit errors."""

    pass


class ValidationError(SplitError):
    """A proposed partition does not cover the staged files exactly once."""

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__("Invalid partition: " + "; ".join(self.violations))


class AIServiceError(SplitError):
    """AI request failed, timed out or returned an unusable response."""

    pass


class GitError(SplitError):
    """Git operation error."""

    pass


class UserCancellation(SplitError):
    """The user stopped the operation."""

    pass


class NothingStagedError(SplitError):
    """There are no staged changes to split."""

    pass
