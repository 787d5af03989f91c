"""Commit message generation for groups."""

import logging

from .grouping import truncate_diff
from .models import Group

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 72


def template_message(group: Group) -> str:
    """Format the deterministic `type(scope): description` header."""
    return group.header


def is_acceptable_message(message: str) -> bool:
    """Check an AI message against the length and separator rules."""
    return bool(message) and len(message) <= MAX_MESSAGE_LENGTH and ":" in message


def _clean(message: str) -> str:
    cleaned = message.strip()
    for quote in ('"', "'", "`"):
        if len(cleaned) >= 2 and cleaned.startswith(quote) and cleaned.endswith(quote):
            cleaned = cleaned[1:-1].strip()
    return cleaned


class MessageComposer:
    """Produces a commit message per group, falling back to a template."""

    def __init__(self, provider=None, diff_limit: int = 300):
        self.provider = provider
        self.diff_limit = diff_limit

    def build_prompt(self, group: Group, diffs: dict[str, str]) -> str:
        """Generate the commit message prompt for a group."""
        changes = "\n---\n".join(
            f"File: {path}\n{truncate_diff(diffs.get(path, ''), self.diff_limit)}"
            for path in group.files
        )
        scope_rule = f"- Scope: {group.scope}\n" if group.scope else ""
        files = "\n".join(group.files)

        return (
            "You are a senior software engineer creating a git commit message.\n\n"
            "Generate a professional commit message following Conventional Commits "
            "specification.\n\n"
            "REQUIREMENTS:\n"
            "- Format: type(scope): description\n"
            "- Description under 50 characters\n"
            "- Imperative mood (add, fix, update)\n"
            "- Lowercase description\n"
            "- No period at end\n"
            f"- Type: {group.type.value}\n"
            f"{scope_rule}\n"
            "FILES IN THIS COMMIT:\n"
            f"{files}\n\n"
            "CHANGES:\n"
            f"{changes}\n\n"
            f"CONTEXT: {group.description}\n\n"
            "Return ONLY the commit message, no quotes or explanations."
        )

    def compose(self, group: Group, diffs: dict[str, str]) -> str:
        """
        Generate a commit message for a group.

        Never raises: any provider failure or unacceptable reply yields the
        templated message.
        """
        fallback = template_message(group)
        if self.provider is None:
            return fallback

        try:
            reply = self.provider.generate_commit_message(self.build_prompt(group, diffs))
        except Exception as e:
            logger.debug("AI message generation failed for group %s: %s", group.id, e)
            return fallback

        message = _clean(reply or "")
        if not is_acceptable_message(message):
            logger.debug("Discarding AI message for group %s: %r", group.id, message)
            return fallback
        return message

    def resolve(self, group: Group, diffs: dict[str, str]) -> str:
        """Return the user's custom message when set, otherwise a generated one."""
        if group.custom_message and group.custom_message.strip():
            return group.custom_message.strip()
        return self.compose(group, diffs)
