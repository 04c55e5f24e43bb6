"""
LLM provider router / factory.

Returns the correct LLMProvider implementation based on application settings.
A fresh instance is built per call; nothing is shared across requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from advisor.llm.provider import LLMProvider

if TYPE_CHECKING:
    from advisor.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("gemini", "openai")


def get_llm_provider(settings: Settings | None = None) -> LLMProvider:
    """Return an LLMProvider instance for the configured provider.

    Args:
        settings: Application settings. If *None*, loads from ``get_settings()``.

    Raises:
        ValueError: If the configured provider is not supported or API key is missing.
    """
    if settings is None:
        from advisor.config import get_settings

        settings = get_settings()

    provider_name = settings.llm_provider.lower()
    if not settings.llm_api_key:
        raise ValueError(
            "GEMINI_API_KEY (or LLM_API_KEY) is required. "
            "Set it in your environment or .env file."
        )

    if provider_name == "gemini":
        from advisor.llm.gemini_provider import GeminiProvider

        provider: LLMProvider = GeminiProvider(
            api_key=settings.llm_api_key,
            api_base=settings.gemini_api_base,
            timeout=settings.llm_timeout,
        )
    elif provider_name == "openai":
        from advisor.llm.openai_provider import OpenAIProvider

        provider = OpenAIProvider(api_key=settings.llm_api_key, timeout=settings.llm_timeout)
    else:
        raise ValueError(
            f"Unknown LLM provider: '{provider_name}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    logger.debug("Created LLM provider: %s", provider_name)
    return provider
