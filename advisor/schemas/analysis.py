"""Analysis result schemas. Matches the JSON shape requested from the LLM."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecommendedTool(BaseModel):
    """A single AI tool recommendation, as the prompt asks the model to write it."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field("", alias="nome")
    description: str = Field("", alias="descricao")
    use_case: str = Field("", alias="casoDeUso")
    category: str = Field("", alias="categoria")


class AnalysisResult(BaseModel):
    """Recommendations returned to the caller, from the LLM or the rule-based fallback.

    List items are kept exactly as the model wrote them; only the lists
    themselves and ``insights`` are checked.
    """

    model_config = ConfigDict(populate_by_name=True)

    problems: list[Any] = Field(..., alias="problemasIdentificados")
    tools: list[Any] = Field(..., alias="ferramentasRecomendadas")
    next_steps: list[Any] = Field(..., alias="proximosPassos")
    insights: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    """Error body for configuration failures and unusable requests."""

    error: str
