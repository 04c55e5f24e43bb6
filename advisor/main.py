"""
Survey Advisor FastAPI application entry point.

Flow: survey answers → prompt → LLM candidate models → parsed recommendations
(rule-based fallback on any failure)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from advisor import __version__
from advisor.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
# httpx logs full request URLs at INFO; Gemini URLs carry the API key
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = get_settings()
    logger.info("%s starting (provider=%s)", settings.app_name, settings.llm_provider)
    try:
        if not settings.llm_api_key:
            logger.warning(
                "No LLM API key configured; analysis requests will fail with 500. "
                "Set GEMINI_API_KEY or LLM_API_KEY."
            )

        # Fail fast on a missing or broken prompt template
        from advisor.prompts.loader import load_prompt
        from advisor.services.analysis import PROMPT_TEMPLATE

        try:
            load_prompt(PROMPT_TEMPLATE)
        except Exception as e:
            logger.critical("Prompt template validation failed at startup: %s", e)
            raise

        yield
    finally:
        logger.info("%s shutting down", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["POST", "GET"],
            allow_headers=["*"],
        )

    from advisor.api.analysis import router as analysis_router

    app.include_router(analysis_router, prefix="/api/analysis", tags=["analysis"])
    # Path used by the original questionnaire frontend
    app.include_router(analysis_router, prefix="/api/gemini", include_in_schema=False)

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Reports whether an LLM key is configured."""
        return {
            "status": "ok",
            "version": __version__,
            "llm_configured": bool(get_settings().llm_api_key),
        }

    return app


app = create_app()
