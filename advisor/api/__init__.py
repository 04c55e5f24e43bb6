"""API routes."""

from advisor.api.analysis import router as analysis_router

__all__ = ["analysis_router"]
