"""Survey analysis: prompt → candidate models → parsed recommendations.

Every failure after the credential check degrades to the rule-based
fallback, so callers always get an ``AnalysisResult`` shape back.
"""

from __future__ import annotations

import logging

from advisor.config import Settings
from advisor.llm.provider import LLMError, LLMErrorKind, LLMProvider
from advisor.llm.router import get_llm_provider
from advisor.prompts.loader import render_prompt
from advisor.schemas.analysis import AnalysisResult
from advisor.schemas.survey import SurveyInput
from advisor.services.fallback import generate_fallback_analysis
from advisor.services.response_parser import parse_analysis_response

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = "survey_analysis_v1"

# Placeholders for optional free-text answers
MISSING_MAIN_PROBLEM = "Não informado"
MISSING_COMMENTS = "Nenhum"

ACTIVITIES_DELIMITER = ", "

_PREVIEW_CHARS = 200


class ConfigurationError(RuntimeError):
    """Required configuration (the LLM credential) is missing."""


def build_analysis_prompt(survey: SurveyInput) -> str:
    """Render the analysis prompt with every survey answer embedded verbatim."""
    return render_prompt(
        PROMPT_TEMPLATE,
        SECTOR=survey.sector,
        COMPANY_SIZE=survey.company_size,
        STRATEGIC_GOAL=survey.strategic_goal,
        COMPETITIVE_EDGE=survey.competitive_edge,
        TIME_CONSUMING_ACTIVITIES=ACTIVITIES_DELIMITER.join(survey.time_consuming_activities),
        INFORMATION_SATISFACTION=str(survey.information_satisfaction),
        RESOURCE_WASTE=survey.resource_waste,
        BOTTLENECK_AREA=survey.bottleneck_area,
        REWORK_FREQUENCY=str(survey.rework_frequency),
        USES_AI=survey.uses_ai,
        AI_BARRIER=survey.ai_barrier,
        AI_LEADERSHIP=survey.ai_leadership,
        MAIN_PROBLEM=survey.main_problem or MISSING_MAIN_PROBLEM,
        ADDITIONAL_COMMENTS=survey.additional_comments or MISSING_COMMENTS,
    )


class SurveyAnalyzer:
    """Runs one survey through the LLM candidate chain.

    Parameters
    ----------
    settings : Settings
        Explicit configuration; the environment is never read per request.
    provider : LLMProvider | None
        Injected provider. When None, one is built from *settings* on first use.
    """

    def __init__(self, settings: Settings, provider: LLMProvider | None = None) -> None:
        self.settings = settings
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_llm_provider(self.settings)
        return self._provider

    def require_credential(self) -> None:
        """Raise ConfigurationError when no API key is configured."""
        if not self.settings.llm_api_key:
            raise ConfigurationError(
                "LLM API key is not configured. Set GEMINI_API_KEY (or LLM_API_KEY)."
            )

    def default_models(self, provider: LLMProvider) -> list[str]:
        return list(self.settings.llm_models or provider.default_models)

    async def candidate_models(self, provider: LLMProvider) -> list[str]:
        """Discovered models matching the provider marker, else the default list."""
        if not self.settings.llm_discover_models:
            return self.default_models(provider)

        try:
            available = await provider.list_models()
        except LLMError as exc:
            logger.info("Could not list models (%s); using default list", exc.kind.value)
            logger.debug("Model listing error: %s", exc)
            return self.default_models(provider)

        marker = self.settings.llm_model_marker or provider.model_marker
        discovered = [m for m in available if marker in m]
        if not discovered:
            logger.info("No '%s' models discovered; using default list", marker)
            return self.default_models(provider)

        logger.info("Discovered %d candidate models: %s", len(discovered), discovered)
        return discovered

    async def analyze(self, survey: SurveyInput) -> AnalysisResult:
        """Return recommendations for *survey*.

        Any failure after the credential check returns the rule-based analysis.

        Raises:
            ConfigurationError: If the API key is missing. Nothing is called.
        """
        self.require_credential()
        logger.info("Starting survey analysis: provider=%s", self.settings.llm_provider)

        try:
            return await self._run_models(survey)
        except Exception:
            logger.exception("Unexpected error during analysis; using fallback")
            return generate_fallback_analysis(survey)

    async def _run_models(self, survey: SurveyInput) -> AnalysisResult:
        prompt = build_analysis_prompt(survey)
        provider = self.provider
        candidates = await self.candidate_models(provider)

        for model in candidates:
            logger.info("Trying model %s", model)
            try:
                response_text = await provider.complete(prompt, model=model)
            except LLMError as exc:
                logger.error("Model %s failed [%s]: %s", model, exc.kind.value, exc)
                if exc.kind is LLMErrorKind.NOT_FOUND:
                    continue
                if exc.kind is LLMErrorKind.PERMISSION:
                    logger.error("API key problem; skipping remaining models and using fallback")
                else:
                    logger.error("Unexpected model error; using fallback")
                return generate_fallback_analysis(survey)

            logger.info(
                "Model %s succeeded; response preview: %r",
                model,
                response_text[:_PREVIEW_CHARS],
            )
            return parse_analysis_response(response_text, survey)

        logger.error("All %d candidate models failed; using fallback", len(candidates))
        return generate_fallback_analysis(survey)
