"""
LLM provider abstraction.

Providers expose two calls: list the model ids the credential can see, and
generate text with a given model. Every failure surfaces as ``LLMError``
carrying an ``LLMErrorKind``, so callers branch on the category and never on
provider-specific message wording.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class LLMErrorKind(str, Enum):
    """Closed set of failure categories for outbound LLM calls."""

    PERMISSION = "permission"  # bad, leaked or unauthorised key
    NOT_FOUND = "not_found"  # model id unavailable to this key/region
    OTHER = "other"


class LLMError(Exception):
    """Failure of an outbound LLM call, already classified."""

    def __init__(
        self,
        message: str,
        kind: LLMErrorKind = LLMErrorKind.OTHER,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    name: str = ""
    # Substring that identifies usable text models in list_models() output
    model_marker: str = ""
    # Ordered most capable/newest first; used when discovery yields nothing
    default_models: tuple[str, ...] = ()

    @abstractmethod
    async def list_models(self) -> list[str]:
        """Return model ids available to the credential.

        Raises:
            LLMError: If the catalog cannot be fetched.
        """
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Send prompt to *model* and return completion text.

        Raises:
            LLMError: On any failure, classified by kind.
        """
        ...
