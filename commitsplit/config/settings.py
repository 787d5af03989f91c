"""Configuration settings for commitsplit."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables at module level
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

API_KEY_VARIABLES = {
    "openai": "OPENAI_API_KEY",
    "groq": "GROQ_API_KEY",
}


@dataclass(frozen=True)
class Config:
    """Main configuration settings."""

    provider: str = "openai"
    model_name: str | None = None
    ai_timeout: float = 30.0
    max_groups: int = 5
    large_changeset_threshold: int = 50
    group_diff_limit: int = 500
    message_diff_limit: int = 300
    api_keys: dict[str, str] = field(default_factory=dict)

    @property
    def api_key(self) -> str | None:
        """API key of the active provider, if one is configured."""
        return self.api_keys.get(self.provider)

    def with_provider(self, provider: str) -> "Config":
        """Return a copy of this configuration using another provider."""
        return replace(self, provider=provider.lower())

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        api_keys = {
            name: os.environ[variable]
            for name, variable in API_KEY_VARIABLES.items()
            if os.getenv(variable)
        }

        return cls(
            provider=os.getenv("COMMITSPLIT_PROVIDER", "openai").lower(),
            model_name=os.getenv("COMMITSPLIT_MODEL") or None,
            ai_timeout=float(os.getenv("COMMITSPLIT_AI_TIMEOUT", "30")),
            max_groups=int(os.getenv("COMMITSPLIT_MAX_GROUPS", "5")),
            large_changeset_threshold=int(os.getenv("COMMITSPLIT_LARGE_CHANGESET", "50")),
            group_diff_limit=500,
            message_diff_limit=300,
            api_keys=api_keys,
        )
