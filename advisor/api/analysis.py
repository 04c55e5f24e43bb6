"""Survey analysis API route."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from advisor.api.deps import get_survey_analyzer
from advisor.schemas.analysis import AnalysisResult, ErrorResponse
from advisor.schemas.survey import SurveyInput
from advisor.services.analysis import ConfigurationError, SurveyAnalyzer
from advisor.services.fallback import generate_fallback_analysis

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_survey(request: Request) -> SurveyInput:
    return SurveyInput.model_validate(await request.json())


@router.post(
    "",
    response_model=AnalysisResult,
    responses={500: {"model": ErrorResponse}},
)
async def api_analyze_survey(
    request: Request,
    analyzer: SurveyAnalyzer = Depends(get_survey_analyzer),
) -> AnalysisResult | JSONResponse:
    """Analyze a survey submission and return AI recommendations.

    LLM and parsing failures return the rule-based analysis with the same
    shape. Only a missing API key or an unusable body yields a 500.
    """
    try:
        analyzer.require_credential()
        survey = await _read_survey(request)
        return await analyzer.analyze(survey)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except Exception as exc:
        logger.error("Error processing analysis: %s", exc)
        try:
            survey = await _read_survey(request)
        except Exception:
            logger.exception("Could not re-read survey for fallback analysis")
            return JSONResponse(
                status_code=500,
                content={"error": f"Failed to process analysis: {exc}"},
            )
        logger.info("Returning fallback analysis after error")
        return generate_fallback_analysis(survey)
