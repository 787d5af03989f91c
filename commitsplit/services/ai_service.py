"""AI providers used for grouping and commit messages."""

import logging
from abc import ABC, abstractmethod

import requests

from ..config.settings import Config
from ..core.errors import AIServiceError

logger = logging.getLogger(__name__)


class AIProvider(ABC):
    """Capability interface every AI backend implements."""

    name: str = ""
    default_model: str = ""

    def __init__(self, api_key: str, model: str | None = None, timeout: float = 30.0):
        if not api_key or not isinstance(api_key, str):
            raise ValueError("API key is required and must be a string")
        self.api_key = api_key
        self.model_id = model or self.default_model
        self.timeout = timeout

    @abstractmethod
    def generate_groups(self, prompt: str) -> str:
        """Return the raw text of a grouping response."""

    @abstractmethod
    def generate_commit_message(self, prompt: str) -> str:
        """Return the raw text of a commit message response."""


class ChatCompletionsProvider(AIProvider):
    """Provider speaking the OpenAI-compatible chat completions API."""

    base_url: str = ""

    def _complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        data = {
            "model": self.model_id,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise AIServiceError(
                f"{self.name} request timed out after {self.timeout:g}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise AIServiceError(f"{self.name} request failed: {e}") from e

        if response.status_code >= 400:
            try:
                error_message = response.json().get("error", {}).get("message", "Unknown error")
            except (ValueError, AttributeError):
                error_message = response.text or "Unknown error"
            raise AIServiceError(f"{self.name} API error ({response.status_code}): {error_message}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AIServiceError(f"Unexpected {self.name} response format") from e

        if not isinstance(content, str):
            raise AIServiceError(f"Unexpected {self.name} response format")

        logger.debug("%s (%s) returned %d characters", self.name, self.model_id, len(content))
        return content.strip()

    def generate_groups(self, prompt: str) -> str:
        return self._complete(prompt, temperature=0.4, max_tokens=2000)

    def generate_commit_message(self, prompt: str) -> str:
        return self._complete(prompt, temperature=0.3, max_tokens=100)


class OpenAIProvider(ChatCompletionsProvider):
    name = "openai"
    default_model = "gpt-4o-mini"
    base_url = "https://api.openai.com/v1"


class GroqProvider(ChatCompletionsProvider):
    name = "groq"
    default_model = "llama-3.3-70b-versatile"
    base_url = "https://api.groq.com/openai/v1"


PROVIDERS: dict[str, type[AIProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
    GroqProvider.name: GroqProvider,
}


def supported_providers() -> list[str]:
    return list(PROVIDERS)


def get_provider(
    name: str, api_key: str | None, model: str | None = None, timeout: float = 30.0
) -> AIProvider:
    """
    Create a provider instance from the registry.

    Raises:
        ValueError: For unknown provider names or a missing API key
    """
    provider_class = PROVIDERS.get(name.lower())
    if provider_class is None:
        raise ValueError(
            f"Unknown provider: {name}. Supported providers: {', '.join(supported_providers())}"
        )
    return provider_class(api_key, model=model, timeout=timeout)


def provider_from_config(config: Config) -> AIProvider | None:
    """Build the configured provider, or None when no API key is set."""
    if not config.api_key:
        return None
    return get_provider(
        config.provider, config.api_key, model=config.model_name, timeout=config.ai_timeout
    )
