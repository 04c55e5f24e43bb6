"""Turn loosely structured LLM text into a validated ``AnalysisResult``.

The model is asked for bare JSON but often wraps it in markdown fences or
prose. Extraction strategies run in order and the first one that yields a
structurally valid object wins. When none does, the rule-based fallback is
returned; the model's prose is never surfaced to the caller.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from advisor.schemas.analysis import AnalysisResult
from advisor.schemas.survey import SurveyInput
from advisor.services.fallback import fallback_insight, generate_fallback_analysis

logger = logging.getLogger(__name__)

REQUIRED_LIST_FIELDS = ("problemasIdentificados", "ferramentasRecomendadas", "proximosPassos")
INSIGHTS_FIELD = "insights"

_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]+?\})\s*```")
_FENCE_MARKER_RE = re.compile(r"```(?:json)?\n?")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_PREVIEW_CHARS = 500


class AnalysisValidationError(ValueError):
    """Parsed value does not have the shape of an analysis."""


def validate_analysis(parsed: Any, survey: SurveyInput) -> AnalysisResult:
    """Check the structure of a parsed LLM response.

    The three list fields are required; their items are trusted as written.
    A missing, empty or non-string ``insights`` is replaced with the fallback
    insight instead of failing.

    Raises:
        AnalysisValidationError: If the value is not a usable analysis.
    """
    if not isinstance(parsed, dict):
        raise AnalysisValidationError("Response is not a JSON object")

    for field in REQUIRED_LIST_FIELDS:
        if not isinstance(parsed.get(field), list):
            raise AnalysisValidationError(f"{field} missing or not a list")

    data = dict(parsed)
    insights = data.get(INSIGHTS_FIELD)
    if not isinstance(insights, str) or not insights.strip():
        logger.info("LLM response has no usable insights; using fallback insight")
        data[INSIGHTS_FIELD] = fallback_insight(survey)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        raise AnalysisValidationError(f"Invalid analysis: {exc}") from exc


def _try_parse(candidate: str, survey: SurveyInput, strategy: str) -> AnalysisResult | None:
    """Parse and validate *candidate*. Return ``None`` on any failure."""
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.debug("Parse strategy '%s' failed: %s", strategy, exc)
        return None
    try:
        result = validate_analysis(parsed, survey)
    except AnalysisValidationError as exc:
        logger.warning("Parse strategy '%s' produced invalid analysis: %s", strategy, exc)
        return None
    logger.info("Parse strategy '%s' succeeded", strategy)
    return result


def _slice_braces(text: str) -> str | None:
    """Substring from the first '{' to the last '}' inclusive."""
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return text[first : last + 1]


def parse_analysis_response(response_text: str, survey: SurveyInput) -> AnalysisResult:
    """Extract an analysis from raw LLM text, falling back to rules. Never raises."""
    text = (response_text or "").strip()

    result = _try_parse(text, survey, "direct")
    if result is not None:
        return result

    fenced = _FENCED_BLOCK_RE.search(text)
    if fenced:
        result = _try_parse(fenced.group(1), survey, "fenced_block")
        if result is not None:
            return result

    stripped = _FENCE_MARKER_RE.sub("", text)
    sliced = _slice_braces(stripped)
    if sliced is not None:
        result = _try_parse(sliced, survey, "brace_slice")
        if result is not None:
            return result

    loose = _OBJECT_RE.search(stripped)
    if loose:
        result = _try_parse(loose.group(0), survey, "loose_pattern")
        if result is not None:
            return result

    logger.error(
        "No valid analysis JSON in LLM response; using fallback. Preview: %r",
        text[:_PREVIEW_CHARS],
    )
    return generate_fallback_analysis(survey)
