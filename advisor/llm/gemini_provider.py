"""
Gemini LLM provider over the Generative Language REST API.

Uses an httpx async client per call; no SDK and no retries. Each candidate
model is tried once by the caller.

Security: the API key is passed in request params. The ``httpx`` logger is
raised to WARNING in ``advisor.main`` so request URLs are never logged.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from advisor.llm.provider import LLMError, LLMErrorKind, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1"

# Catalog names come back as "models/<id>"; generation URLs take the bare id
_MODEL_PREFIX = "models/"

_PERMISSION_STATUSES = frozenset({"PERMISSION_DENIED", "UNAUTHENTICATED"})


def classify_gemini_error(
    status_code: int | None,
    status: str = "",
    reasons: list[str] | None = None,
) -> LLMErrorKind:
    """Map an HTTP status, google.rpc status and ErrorInfo reasons to a category.

    Invalid keys come back as 400 INVALID_ARGUMENT with reason API_KEY_INVALID,
    so a 400 is only OTHER when no API_KEY reason is attached.
    """
    if status_code in (401, 403) or status in _PERMISSION_STATUSES:
        return LLMErrorKind.PERMISSION
    if any(r.startswith("API_KEY") for r in reasons or []):
        return LLMErrorKind.PERMISSION
    if status_code == 404 or status == "NOT_FOUND":
        return LLMErrorKind.NOT_FOUND
    return LLMErrorKind.OTHER


def _error_from_response(response: httpx.Response) -> LLMError:
    """Build a classified LLMError from a non-2xx Gemini response."""
    status = ""
    message = response.text[:300]
    reasons: list[str] = []
    try:
        payload = response.json()
    except ValueError:
        payload = None
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        status = str(error.get("status") or "")
        message = str(error.get("message") or message)
        for detail in error.get("details") or []:
            if isinstance(detail, dict) and detail.get("reason"):
                reasons.append(str(detail["reason"]))

    kind = classify_gemini_error(response.status_code, status, reasons)
    return LLMError(
        f"Gemini API error {response.status_code} {status}: {message}",
        kind=kind,
        status_code=response.status_code,
    )


def _extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate. Empty when blocked."""
    candidates = data.get("candidates") or []
    if not candidates:
        logger.warning("Gemini returned no candidates: promptFeedback=%s", data.get("promptFeedback"))
        return ""
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


class GeminiProvider(LLMProvider):
    """Concrete LLM provider backed by the Gemini REST API."""

    name = "gemini"
    model_marker = "gemini"
    default_models = (
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "gemini-2.0-flash",
        "gemini-1.5-flash-latest",
        "gemini-1.5-flash",
        "gemini-1.5-pro",
    )

    def __init__(
        self,
        api_key: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    # LLMProvider interface
    # ------------------------------------------------------------------

    async def list_models(self) -> list[str]:
        data = await self._request("GET", "/models")
        descriptors = data.get("models") or []
        if not isinstance(descriptors, list):
            raise LLMError(
                f"Gemini model catalog has unexpected shape: {type(descriptors).__name__}"
            )
        names: list[str] = []
        for descriptor in descriptors:
            name = descriptor.get("name") if isinstance(descriptor, dict) else None
            # Entries without a string name are skipped
            if isinstance(name, str) and name:
                names.append(name.replace(_MODEL_PREFIX, "", 1))
        return names

    async def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Generate content with *model*.

        Supported kwargs:
            temperature (float): Sampling temperature.
            max_tokens (int): Maximum output tokens.
        """
        body: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        generation_config: dict[str, Any] = {}
        if "temperature" in kwargs:
            generation_config["temperature"] = kwargs["temperature"]
        if "max_tokens" in kwargs:
            generation_config["maxOutputTokens"] = kwargs["max_tokens"]
        if generation_config:
            body["generationConfig"] = generation_config

        start = time.monotonic()
        data = await self._request("POST", f"/models/{model}:generateContent", json=body)
        elapsed = time.monotonic() - start

        text = _extract_text(data)
        usage = data.get("usageMetadata") or {}
        logger.info(
            "LLM call: model=%s tokens_in=%d tokens_out=%d latency=%.2fs",
            model,
            usage.get("promptTokenCount", 0),
            usage.get("candidatesTokenCount", 0),
            elapsed,
        )
        return text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        """Send one request and return the decoded JSON body, or raise LLMError."""
        url = f"{self.api_base}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method, url, params={"key": self.api_key}, json=json
                )
        except httpx.HTTPError as exc:
            raise LLMError(f"Gemini request failed: {type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            raise _error_from_response(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMError(
                "Gemini returned a non-JSON body", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise LLMError("Gemini returned an unexpected body", status_code=response.status_code)
        return data
