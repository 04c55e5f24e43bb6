"""Survey input schema. Wire keys are the questionnaire's camelCase field names."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SurveyInput(BaseModel):
    """One questionnaire submission. Built once per request and never mutated."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sector: str = Field(..., alias="setor")
    company_size: str = Field(..., alias="porte")
    strategic_goal: str = Field(..., alias="objetivoEstrategico")
    competitive_edge: str = Field(..., alias="diferencialCompetitivo")
    time_consuming_activities: list[str] = Field(
        default_factory=list,
        alias="atividadesConsomemTempo",
        description="Multi-select; order is irrelevant",
    )
    information_satisfaction: int = Field(..., ge=1, le=5, alias="satisfacaoInformacoes")
    resource_waste: str = Field(..., alias="desperdicioRecursos")
    bottleneck_area: str = Field(..., alias="areaGargalos")
    rework_frequency: int = Field(..., ge=1, le=5, alias="frequenciaRetrabalho")
    uses_ai: str = Field(..., alias="usaIA")
    ai_barrier: str = Field(..., alias="barreiraIA")
    ai_leadership: str = Field(..., alias="liderancaIA")
    main_problem: str | None = Field(None, alias="problemaPrincipal")
    additional_comments: str | None = Field(None, alias="comentariosAdicionais")

    # Lead capture: collected with the answers, not used by the analysis
    name: str = Field("", alias="nome")
    email: str = ""
    phone: str = Field("", alias="telefone")
    timestamp: str = ""
