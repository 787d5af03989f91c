"""Partition staged files into commit groups, by rules or with AI assistance."""

import json
import logging
import re
from dataclasses import dataclass, field

from .errors import AIServiceError
from .inventory import Inventory, StagedFile
from .models import CommitType, Group
from .validator import ensure_valid_partition, validate_partition

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... (truncated)"

FENCED_JSON_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def truncate_diff(diff: str, limit: int) -> str:
    """Cut a diff to `limit` characters, marking the cut."""
    if len(diff) <= limit:
        return diff
    return diff[:limit] + TRUNCATION_MARKER


class HeuristicGrouper:
    """Deterministic rule-based grouping that needs no external service."""

    # Buckets are checked in order, first match wins
    BUCKET_PATTERNS = {
        "docs": [
            r"\.(md|txt|rst|adoc)$",
        ],
        "tests": [
            r"\.(test|spec)\.",
            r"_test\.",
            r"__tests__",
            r"(^|/)test_",
            r"(^|/)tests?/",
            r"(^|/)spec/",
        ],
        "config": [
            r"(^|/)package\.json$",
            r"\.lock$",
            r"-lock\.(json|yaml)$",
            r"(^|/)\.env",
            r"\.config\.",
            r"tsconfig",
            r"(^|/)(webpack|vite|rollup)[.\-]",
            r"(^|/)pyproject\.toml$",
            r"(^|/)setup\.(cfg|py)$",
            r"(^|/)pipfile",
            r"(^|/)go\.(mod|sum)$",
            r"(^|/)cargo\.toml$",
        ],
        "styles": [
            r"\.(css|scss|sass|less|styl)$",
        ],
    }

    BUCKET_GROUPS = {
        "docs": (CommitType.DOCS, "update documentation", "Documentation files grouped together"),
        "tests": (CommitType.TEST, "add/update tests", "Test files grouped together"),
        "config": (CommitType.CHORE, "update configuration", "Configuration files grouped together"),
        "styles": (CommitType.STYLE, "update styles", "Style files grouped together"),
    }

    def classify(self, path: str) -> str:
        """Return the bucket name for a path, `source` when no rule matches."""
        lowered = path.lower()
        for bucket, patterns in self.BUCKET_PATTERNS.items():
            if any(re.search(pattern, lowered) for pattern in patterns):
                return bucket
        return "source"

    @staticmethod
    def top_level_directory(path: str) -> str:
        return path.split("/", 1)[0] if "/" in path else "."

    def group(self, files: list[StagedFile], max_groups: int = 5) -> list[Group]:
        """
        Group files by kind, then split source files by top-level directory.

        Args:
            files: Staged files, in index order
            max_groups: Upper bound used to decide whether source files
                get one group per directory

        Returns:
            Groups ordered docs, tests, config, styles, then source
        """
        buckets: dict[str, list[str]] = {name: [] for name in self.BUCKET_PATTERNS}
        buckets["source"] = []
        for staged in files:
            buckets[self.classify(staged.path)].append(staged.path)

        groups: list[Group] = []
        for name, (commit_type, description, rationale) in self.BUCKET_GROUPS.items():
            if buckets[name]:
                groups.append(
                    Group(
                        id=str(len(groups) + 1),
                        files=buckets[name],
                        type=commit_type,
                        description=description,
                        rationale=rationale,
                    )
                )

        source = buckets["source"]
        if not source:
            return groups

        by_directory: dict[str, list[str]] = {}
        for path in source:
            by_directory.setdefault(self.top_level_directory(path), []).append(path)

        remaining_slots = max_groups - len(groups)
        if remaining_slots >= len(by_directory):
            for directory, paths in by_directory.items():
                label = "root" if directory == "." else directory
                groups.append(
                    Group(
                        id=str(len(groups) + 1),
                        files=paths,
                        type=CommitType.FEAT,
                        scope="" if directory == "." else directory,
                        description=f"update {label} files",
                        rationale=f"Files in {label} directory grouped together",
                    )
                )
        else:
            groups.append(
                Group(
                    id=str(len(groups) + 1),
                    files=list(source),
                    type=CommitType.FEAT,
                    description="update source files",
                    rationale="Source code files grouped together",
                )
            )

        return groups


def parse_groups_response(text: str) -> list[Group]:
    """
    Parse an AI grouping response into groups.

    The response must be a JSON array, optionally inside a fenced code block.
    Every element needs a `files` list of paths; `type`, `scope`,
    `description` and `rationale` are filled with defaults when missing.

    Raises:
        AIServiceError: If the response is not usable
    """
    raw = (text or "").strip()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        match = FENCED_JSON_RE.search(raw)
        if not match:
            raise AIServiceError("Failed to parse AI response as JSON")
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise AIServiceError(f"Failed to parse AI response as JSON: {e}") from e

    if not isinstance(data, list):
        raise AIServiceError("AI response is not an array")

    groups = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise AIServiceError(f"Group {index} is not an object")
        files = item.get("files")
        if not isinstance(files, list) or not all(isinstance(p, str) for p in files):
            raise AIServiceError(f"Group {index} missing files array")

        scope = item.get("scope")
        description = item.get("description")
        rationale = item.get("rationale")
        groups.append(
            Group(
                id=str(index + 1),
                files=list(files),
                type=CommitType.from_value(item.get("type")),
                scope=scope.strip() if isinstance(scope, str) else "",
                description=description.strip() if isinstance(description, str) and description.strip() else "changes",
                rationale=rationale if isinstance(rationale, str) else "",
            )
        )

    return groups


class AIGrouper:
    """Asks an AI provider for a partition of the staged files."""

    def __init__(self, provider, diff_limit: int = 500):
        self.provider = provider
        self.diff_limit = diff_limit

    def build_prompt(self, inventory: Inventory, max_groups: int) -> str:
        """Generate the grouping prompt for the AI model."""
        summary = [
            {
                "path": staged.path,
                "status": staged.change_kind.value,
                "diff": truncate_diff(inventory.diff_for(staged.path), self.diff_limit),
            }
            for staged in inventory.files
        ]
        types = "|".join(t.value for t in CommitType)

        return (
            "You are a senior software engineer analyzing git changes to create "
            "logical, atomic commits.\n\n"
            "TASK: Analyze the following staged files and group them into separate "
            "commits based on semantic relationships.\n\n"
            "RULES:\n"
            "1. Each group should represent ONE logical change (feature, fix, refactor, etc.)\n"
            "2. Related files should be grouped together (e.g., component + test + styles)\n"
            "3. Unrelated changes should be in separate groups\n"
            f"4. Maximum {max_groups} groups\n"
            "5. Each group must have a clear purpose\n"
            "6. Follow Conventional Commits specification for types\n\n"
            "FILES AND CHANGES:\n"
            f"{json.dumps(summary, indent=2)}\n\n"
            "Return a JSON array of groups with this structure:\n"
            "[\n"
            "  {\n"
            '    "files": ["path/to/file1.py", "path/to/test_file1.py"],\n'
            f'    "type": "{types}",\n'
            '    "scope": "component/module name (optional)",\n'
            '    "description": "brief description of this group\'s changes",\n'
            '    "rationale": "why these files belong together"\n'
            "  }\n"
            "]\n\n"
            "IMPORTANT:\n"
            "- Every file must be assigned to exactly one group\n"
            "- Groups should be ordered by importance (most significant first)\n"
            "- Return ONLY valid JSON, no explanations or markdown code blocks\n"
            '- If scope is not applicable, use empty string ""'
        )

    def group(self, inventory: Inventory, max_groups: int = 5) -> list[Group]:
        """
        Request and parse an AI partition.

        Raises:
            AIServiceError: On timeout, transport failure or malformed response
        """
        prompt = self.build_prompt(inventory, max_groups)
        response = self.provider.generate_groups(prompt)
        return parse_groups_response(response)


@dataclass
class GroupingResult:
    """Groups produced for a run and how they were obtained."""

    groups: list[Group]
    strategy: str
    violations: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def fell_back(self) -> bool:
        return self.error is not None or bool(self.violations)


class GroupingEngine:
    """Runs AI grouping when available and falls back to the heuristic."""

    def __init__(self, heuristic: HeuristicGrouper | None = None, ai: AIGrouper | None = None):
        self.heuristic = heuristic or HeuristicGrouper()
        self.ai = ai

    def heuristic_groups(self, inventory: Inventory, max_groups: int) -> list[Group]:
        groups = self.heuristic.group(inventory.files, max_groups)
        ensure_valid_partition(groups, inventory.files)
        return groups

    def group(self, inventory: Inventory, max_groups: int = 5, use_ai: bool = False) -> GroupingResult:
        """
        Partition the inventory.

        AI failures and AI partitions that fail validation never abort the
        run: the heuristic partition for the same input is returned instead.
        """
        if not use_ai or self.ai is None:
            return GroupingResult(self.heuristic_groups(inventory, max_groups), "heuristic")

        try:
            groups = self.ai.group(inventory, max_groups)
        except AIServiceError as e:
            logger.warning("AI grouping failed, falling back to heuristic grouping: %s", e)
            return GroupingResult(
                self.heuristic_groups(inventory, max_groups), "heuristic", error=str(e)
            )

        violations = validate_partition(groups, inventory.files)
        if violations:
            logger.warning("AI grouping failed validation: %s", "; ".join(violations))
            return GroupingResult(
                self.heuristic_groups(inventory, max_groups), "heuristic", violations=violations
            )

        return GroupingResult(groups, "ai")
