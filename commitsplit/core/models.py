"""Data models for commit groups."""

from dataclasses import dataclass, field
from enum import Enum


class CommitType(Enum):
    """Conventional Commit types a group can carry."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"
    CI = "ci"
    BUILD = "build"
    PERF = "perf"

    @classmethod
    def from_value(cls, value: object) -> "CommitType":
        """Parse a type name, defaulting to chore for anything unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.CHORE


class GroupState(Enum):
    """Commit pipeline state of a group."""

    PENDING = "pending"
    STAGED = "staged"
    COMMITTED = "committed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class Group:
    """A disjoint subset of the staged files destined for one commit."""

    id: str
    files: list[str]
    type: CommitType = CommitType.CHORE
    scope: str = ""
    description: str = "changes"
    rationale: str = ""
    custom_message: str | None = None
    state: GroupState = GroupState.PENDING

    @property
    def header(self) -> str:
        """The templated Conventional Commit header for this group."""
        scope = f"({self.scope})" if self.scope else ""
        return f"{self.type.value}{scope}: {self.description}"

    @property
    def is_committed(self) -> bool:
        return self.state == GroupState.COMMITTED


@dataclass
class RunOutcome:
    """Counts of what happened to the groups presented to the pipeline."""

    committed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    cancelled: bool = False
    restage_failures: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.committed_count + self.skipped_count + self.failed_count


@dataclass
class GroupPreview:
    """A group together with the message it would be committed with."""

    group: Group
    message: str


@dataclass
class SplitOptions:
    """Options for a split run."""

    use_ai: bool = False
    max_groups: int = 5
    dry_run: bool = False
    auto: bool = False
