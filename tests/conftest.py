"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from advisor.config import Settings
from advisor.llm.gemini_provider import GeminiProvider
from advisor.llm.provider import LLMProvider
from advisor.schemas.survey import SurveyInput
from tests.test_constants import SAMPLE_SURVEY, TEST_API_KEY


def make_settings(**overrides: Any) -> Settings:
    """Create a Settings instance with test defaults, without reading env."""
    s = object.__new__(Settings)  # skip __init__ (avoids env reads)
    s.app_name = "Survey Advisor"
    s.debug = False
    s.llm_provider = "gemini"
    s.llm_api_key = TEST_API_KEY
    s.llm_models = []
    s.llm_model_marker = ""
    s.llm_discover_models = True
    s.llm_timeout = 60.0
    s.gemini_api_base = "https://generativelanguage.googleapis.com/v1"
    s.cors_allow_origins = []
    for k, v in overrides.items():
        setattr(s, k, v)
    return s


def make_provider(
    models: list[str] | None = None,
    list_error: Exception | None = None,
    responses: list[Any] | None = None,
) -> MagicMock:
    """Build a mock provider behaving like GeminiProvider.

    *responses* is consumed in order by ``complete``; exception items are raised.
    """
    provider = MagicMock(spec=LLMProvider)
    provider.name = GeminiProvider.name
    provider.model_marker = GeminiProvider.model_marker
    provider.default_models = GeminiProvider.default_models
    if list_error is not None:
        provider.list_models = AsyncMock(side_effect=list_error)
    else:
        provider.list_models = AsyncMock(return_value=models or [])
    provider.complete = AsyncMock(side_effect=responses or [])
    return provider


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture
def provider_factory() -> Callable[..., MagicMock]:
    return make_provider


@pytest.fixture
def survey_payload() -> dict:
    """Fresh copy of the wire-format survey body."""
    return {**SAMPLE_SURVEY, "atividadesConsomemTempo": list(SAMPLE_SURVEY["atividadesConsomemTempo"])}


@pytest.fixture
def survey(survey_payload: dict) -> SurveyInput:
    return SurveyInput.model_validate(survey_payload)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from advisor.main import app

    return TestClient(app)
