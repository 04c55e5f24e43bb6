"""Tests for the analyze_survey CLI script."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from advisor.config import get_settings
from advisor.schemas.analysis import AnalysisResult
from advisor.schemas.survey import SurveyInput
from advisor.scripts.analyze_survey import main
from advisor.services.analysis import ConfigurationError
from advisor.services.fallback import generate_fallback_analysis
from tests.test_constants import SAMPLE_SURVEY, VALID_ANALYSIS


@pytest.fixture
def survey_file(tmp_path: Path) -> Path:
    path = tmp_path / "survey.json"
    path.write_text(json.dumps(SAMPLE_SURVEY, ensure_ascii=False), encoding="utf-8")
    return path


class TestAnalyzeSurveyScript:
    def test_fallback_only_prints_rule_based_analysis(self, survey_file, capsys) -> None:
        assert main([str(survey_file), "--fallback-only"]) == 0
        out, _ = capsys.readouterr()
        expected = generate_fallback_analysis(SurveyInput.model_validate(SAMPLE_SURVEY))
        assert json.loads(out) == expected.model_dump(by_alias=True)

    def test_runs_analyzer(self, survey_file, capsys) -> None:
        result = AnalysisResult.model_validate(VALID_ANALYSIS)
        with patch(
            "advisor.scripts.analyze_survey.SurveyAnalyzer.analyze",
            new=AsyncMock(return_value=result),
        ):
            assert main([str(survey_file)]) == 0
        out, _ = capsys.readouterr()
        assert json.loads(out) == VALID_ANALYSIS

    def test_reads_stdin(self, capsys, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(SAMPLE_SURVEY)))
        assert main(["-", "--fallback-only"]) == 0
        out, _ = capsys.readouterr()
        assert "problemasIdentificados" in out

    def test_exits_1_on_missing_key(self, survey_file, capsys) -> None:
        with patch(
            "advisor.scripts.analyze_survey.SurveyAnalyzer.analyze",
            new=AsyncMock(side_effect=ConfigurationError("LLM API key is not configured.")),
        ):
            assert main([str(survey_file)]) == 1
        _, err = capsys.readouterr()
        assert "Configuration error" in err

    def test_exits_2_on_invalid_input(self, tmp_path, capsys) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({**SAMPLE_SURVEY, "satisfacaoInformacoes": 0}), encoding="utf-8")
        assert main([str(path), "--fallback-only"]) == 2
        _, err = capsys.readouterr()
        assert "Invalid survey input" in err

    def test_exits_2_on_missing_file(self, tmp_path, capsys) -> None:
        assert main([str(tmp_path / "missing.json")]) == 2

    def test_unknown_provider_prints_fallback(self, survey_file, capsys, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")
        get_settings.cache_clear()
        try:
            assert main([str(survey_file)]) == 0
        finally:
            get_settings.cache_clear()
        out, _ = capsys.readouterr()
        expected = generate_fallback_analysis(SurveyInput.model_validate(SAMPLE_SURVEY))
        assert json.loads(out) == expected.model_dump(by_alias=True)
