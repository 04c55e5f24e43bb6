"""
OpenAI LLM provider implementation.

Uses the openai Python SDK (>=1.0.0) with the async client. SDK retries are
disabled: each candidate model is attempted exactly once.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from openai import (
    AsyncOpenAI,
    AuthenticationError,
    NotFoundError,
    OpenAIError,
    PermissionDeniedError,
)

from advisor.llm.provider import LLMError, LLMErrorKind, LLMProvider

logger = logging.getLogger(__name__)


def classify_openai_error(exc: OpenAIError) -> LLMErrorKind:
    """Map an openai SDK exception to a failure category."""
    if isinstance(exc, (AuthenticationError, PermissionDeniedError)):
        return LLMErrorKind.PERMISSION
    if isinstance(exc, NotFoundError):
        return LLMErrorKind.NOT_FOUND
    return LLMErrorKind.OTHER


class OpenAIProvider(LLMProvider):
    """Concrete LLM provider backed by the OpenAI API."""

    name = "openai"
    model_marker = "gpt"
    default_models = ("gpt-4o", "gpt-4o-mini")

    def __init__(self, api_key: str, timeout: float = 60.0) -> None:
        self.timeout = timeout
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    # ------------------------------------------------------------------
    # LLMProvider interface
    # ------------------------------------------------------------------

    async def list_models(self) -> list[str]:
        try:
            page = await self._client.models.list()
        except OpenAIError as exc:
            raise LLMError(
                f"OpenAI model listing failed: {exc}",
                kind=classify_openai_error(exc),
                status_code=getattr(exc, "status_code", None),
            ) from exc
        return [m.id for m in page.data]

    async def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Send prompt to OpenAI and return the completion text.

        Supported kwargs:
            temperature (float): Sampling temperature (default 0.7).
            max_tokens (int): Maximum tokens in the response.
            response_format (dict): E.g. {"type": "json_object"} for JSON mode.
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        create_kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": kwargs.get("temperature", 0.7),
        }
        if "max_tokens" in kwargs:
            create_kwargs["max_tokens"] = kwargs["max_tokens"]
        if "response_format" in kwargs:
            create_kwargs["response_format"] = kwargs["response_format"]

        try:
            start = time.monotonic()
            response = await self._client.chat.completions.create(**create_kwargs)
            elapsed = time.monotonic() - start
        except OpenAIError as exc:
            raise LLMError(
                f"OpenAI API error: {exc}",
                kind=classify_openai_error(exc),
                status_code=getattr(exc, "status_code", None),
            ) from exc

        usage = response.usage
        logger.info(
            "LLM call: model=%s tokens_in=%d tokens_out=%d latency=%.2fs",
            model,
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
            elapsed,
        )
        return response.choices[0].message.content or ""
