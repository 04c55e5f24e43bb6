"""LLM provider abstraction. The model only drafts recommendations; the handler decides."""

from advisor.llm.gemini_provider import GeminiProvider
from advisor.llm.openai_provider import OpenAIProvider
from advisor.llm.provider import LLMError, LLMErrorKind, LLMProvider
from advisor.llm.router import get_llm_provider

__all__ = [
    "GeminiProvider",
    "LLMError",
    "LLMErrorKind",
    "LLMProvider",
    "OpenAIProvider",
    "get_llm_provider",
]
