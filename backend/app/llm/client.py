"""Chat-completion client for schedule generation (Fireworks.ai).

Security: Reads API key from environment only, never hardcoded.
Performs exactly one call per invocation; retries and fallbacks belong
to the interpreter and the fan-out orchestrator.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1500


class LLMConfigurationError(RuntimeError):
    """Required provider configuration (e.g. API key) is missing."""


class ChatCompletionClient(Protocol):
    """Protocol for chat-completion client implementations."""

    async def complete(
        self, *, model_id: str, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """Send one prompt to one model.

        Args:
            model_id: Provider model identifier
            prompt: Rendered prompt text
            max_tokens: Output token budget

        Returns:
            Raw response text (possibly empty)
        """
        ...


class FireworksClient:
    """Fireworks.ai client over the OpenAI-compatible chat completions API."""

    def __init__(self, api_key: str | None, base_url: str):
        """Initialize client.

        Args:
            api_key: Fireworks API key; may be None, checked on each call
            base_url: OpenAI-compatible inference endpoint
        """
        self._api_key = api_key
        self._base_url = base_url
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise LLMConfigurationError("FIREWORKS_API_KEY environment variable is not set.")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    async def complete(
        self, *, model_id: str, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """Issue a single chat completion and return the first choice's text."""
        client = self._get_client()

        logger.info(f"Fireworks API call with model {model_id}")
        response = await client.chat.completions.create(
            model=model_id,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def get_llm_client(settings: Settings | None = None) -> ChatCompletionClient:
    """Factory function to get the configured chat-completion client.

    A missing API key is not an error here; it surfaces per call so the
    orchestrator can report it for each model.
    """
    settings = settings or get_settings()
    api_key = settings.fireworks_api_key

    if not api_key or not api_key.get_secret_value():
        logger.warning("No Fireworks API key configured; model calls will fail over to fallback")
        return FireworksClient(api_key=None, base_url=settings.fireworks_base_url)

    return FireworksClient(
        api_key=api_key.get_secret_value(),
        base_url=settings.fireworks_base_url,
    )
