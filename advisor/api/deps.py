"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from advisor.config import get_settings
from advisor.services.analysis import SurveyAnalyzer

__all__ = ["get_survey_analyzer"]


def get_survey_analyzer() -> SurveyAnalyzer:
    """Build a per-request analyzer from the application settings."""
    return SurveyAnalyzer(get_settings())
