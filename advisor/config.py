"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


def _split_csv(value: str) -> list[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Survey Advisor"
    debug: bool = False

    # LLM
    llm_provider: str = "gemini"
    llm_api_key: Optional[str] = None
    # Candidate models when discovery is off or finds nothing; empty = provider default list
    llm_models: list[str] = ()
    # Substring a discovered model id must contain; empty = provider default marker
    llm_model_marker: str = ""
    llm_discover_models: bool = True
    llm_timeout: float = 60.0
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1"

    # HTTP; empty = no CORS middleware
    cors_allow_origins: list[str] = ()

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        self.llm_provider = os.getenv("LLM_PROVIDER", self.llm_provider).lower()
        # GEMINI_API_KEY is the historical name; LLM_API_KEY works for any provider
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("LLM_API_KEY")
        self.llm_api_key = api_key.strip() if api_key and api_key.strip() else None
        self.llm_models = _split_csv(os.getenv("LLM_MODELS", ""))
        self.llm_model_marker = os.getenv("LLM_MODEL_MARKER", "").strip()
        self.llm_discover_models = (
            os.getenv("LLM_DISCOVER_MODELS", "true").lower() == "true"
        )
        self.llm_timeout = float(os.getenv("LLM_TIMEOUT", str(self.llm_timeout)))
        self.gemini_api_base = os.getenv("GEMINI_API_BASE", self.gemini_api_base).rstrip("/")

        self.cors_allow_origins = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", ""))
