"""Pydantic schemas for request/response validation."""

from advisor.schemas.analysis import AnalysisResult, ErrorResponse, RecommendedTool
from advisor.schemas.survey import SurveyInput

__all__ = [
    "AnalysisResult",
    "ErrorResponse",
    "RecommendedTool",
    "SurveyInput",
]
