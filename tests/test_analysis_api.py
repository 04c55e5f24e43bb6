"""Tests for the survey analysis API route."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from advisor.api.deps import get_survey_analyzer
from advisor.llm.provider import LLMError, LLMErrorKind
from advisor.schemas.survey import SurveyInput
from advisor.services.analysis import SurveyAnalyzer
from advisor.services.fallback import generate_fallback_analysis
from tests.test_constants import SAMPLE_SURVEY, VALID_ANALYSIS

_VALID_RESPONSE = json.dumps(VALID_ANALYSIS, ensure_ascii=False)


@pytest.fixture
def use_analyzer(client: TestClient):
    """Install an analyzer override for the duration of a test."""
    from advisor.main import app

    def _install(analyzer: SurveyAnalyzer) -> SurveyAnalyzer:
        app.dependency_overrides[get_survey_analyzer] = lambda: analyzer
        return analyzer

    yield _install
    app.dependency_overrides.pop(get_survey_analyzer, None)


def _fallback_body(payload: dict) -> dict:
    return generate_fallback_analysis(SurveyInput.model_validate(payload)).model_dump(by_alias=True)


class TestAnalyzeSuccess:
    def test_returns_model_analysis(self, client, use_analyzer, settings_factory, provider_factory):
        provider = provider_factory(models=["gemini-a"], responses=[_VALID_RESPONSE])
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post("/api/analysis", json=SAMPLE_SURVEY)

        assert response.status_code == 200
        assert response.json() == VALID_ANALYSIS

    def test_legacy_path(self, client, use_analyzer, settings_factory, provider_factory):
        provider = provider_factory(models=["gemini-a"], responses=[_VALID_RESPONSE])
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post("/api/gemini", json=SAMPLE_SURVEY)

        assert response.status_code == 200
        assert response.json() == VALID_ANALYSIS


class TestAnalyzeFallback:
    def test_permission_error_returns_fallback_with_200(
        self, client, use_analyzer, settings_factory, provider_factory
    ):
        provider = provider_factory(
            models=["gemini-a", "gemini-b"],
            responses=[LLMError("403 Forbidden", kind=LLMErrorKind.PERMISSION), _VALID_RESPONSE],
        )
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post("/api/analysis", json=SAMPLE_SURVEY)

        assert response.status_code == 200
        assert response.json() == _fallback_body(SAMPLE_SURVEY)
        assert provider.complete.call_count == 1

    def test_fallback_has_same_shape_as_success(
        self, client, use_analyzer, settings_factory, provider_factory
    ):
        provider = provider_factory(models=["gemini-a"], responses=["sem json"])
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        body = client.post("/api/analysis", json=SAMPLE_SURVEY).json()

        assert set(body) == set(VALID_ANALYSIS)
        assert set(body["ferramentasRecomendadas"][0]) == {"nome", "descricao", "casoDeUso", "categoria"}

    def test_unexpected_error_returns_fallback(self, client, use_analyzer, settings_factory, provider_factory):
        provider = provider_factory(models=["gemini-a"])
        provider.complete = AsyncMock(side_effect=RuntimeError("boom"))
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post("/api/analysis", json=SAMPLE_SURVEY)

        assert response.status_code == 200
        assert response.json() == _fallback_body(SAMPLE_SURVEY)

    def test_unknown_provider_returns_fallback(self, client, use_analyzer, settings_factory):
        use_analyzer(SurveyAnalyzer(settings_factory(llm_provider="nope")))

        response = client.post("/api/analysis", json=SAMPLE_SURVEY)

        assert response.status_code == 200
        assert response.json() == _fallback_body(SAMPLE_SURVEY)


class TestAnalyzeErrors:
    def test_missing_api_key_returns_500_without_calls(
        self, client, use_analyzer, settings_factory, provider_factory
    ):
        provider = provider_factory(models=["gemini-a"], responses=[_VALID_RESPONSE])
        use_analyzer(SurveyAnalyzer(settings_factory(llm_api_key=None), provider=provider))

        response = client.post("/api/analysis", json=SAMPLE_SURVEY)

        assert response.status_code == 500
        assert "GEMINI_API_KEY" in response.json()["error"]
        provider.list_models.assert_not_called()
        provider.complete.assert_not_called()

    def test_malformed_json_returns_500(self, client, use_analyzer, settings_factory, provider_factory):
        provider = provider_factory()
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post(
            "/api/analysis",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to process analysis:")
        provider.complete.assert_not_called()

    def test_invalid_survey_returns_500(self, client, use_analyzer, settings_factory, provider_factory):
        provider = provider_factory()
        use_analyzer(SurveyAnalyzer(settings_factory(), provider=provider))

        response = client.post("/api/analysis", json={**SAMPLE_SURVEY, "frequenciaRetrabalho": 9})

        assert response.status_code == 500
        assert "error" in response.json()
        provider.complete.assert_not_called()
