"""Rule-based analysis used whenever the LLM path cannot produce a valid result."""

from __future__ import annotations

from advisor.schemas.analysis import AnalysisResult, RecommendedTool
from advisor.schemas.survey import SurveyInput

# Rating thresholds (1-5 scale)
HIGH_REWORK_MIN = 4
LOW_SATISFACTION_MAX = 2

# Activity options from the questionnaire that trigger a problem
ACTIVITY_INFORMATION_SEARCH = "Busca de informações/documentos"
ACTIVITY_MANUAL_PROCESSES = "Processos manuais repetitivos"

PROBLEM_HIGH_REWORK = "Alta frequência de retrabalho impactando eficiência"
PROBLEM_INFORMATION_ACCESS = "Dificuldade no acesso e utilização de informações internas"
PROBLEM_INFORMATION_SEARCH = "Tempo excessivo gasto na busca de informações"
PROBLEM_MANUAL_PROCESSES = "Processos manuais repetitivos consumindo tempo da equipe"
PROBLEM_GENERIC = "Oportunidades de otimização identificadas"

FALLBACK_TOOLS = (
    RecommendedTool(
        name="ChatGPT ou Claude",
        description="Assistente de IA para automação de tarefas e geração de conteúdo",
        use_case="Automatizar tarefas repetitivas e melhorar produtividade",
        category="Automação",
    ),
    RecommendedTool(
        name="Notion AI ou Obsidian",
        description="Gestão de conhecimento com IA para organizar informações",
        use_case="Criar base de conhecimento pesquisável e acessível",
        category="Gestão de Conhecimento",
    ),
    RecommendedTool(
        name="Zapier ou Make",
        description="Automação de processos entre diferentes ferramentas",
        use_case="Conectar sistemas e automatizar fluxos de trabalho",
        category="Automação",
    ),
)

FALLBACK_NEXT_STEPS = (
    "Identificar o processo mais crítico que pode ser automatizado",
    "Começar com uma ferramenta simples e de fácil adoção",
    "Treinar a equipe em uso básico de IA",
    "Estabelecer métricas para medir o impacto das melhorias",
)

_INSIGHT_TEMPLATE = (
    "Com base nas suas respostas, identificamos oportunidades significativas "
    "de otimização através de IA. \n"
    "O foco deve ser em {area}, onde há maior potencial de impacto imediato."
)


def fallback_insight(survey: SurveyInput) -> str:
    """Insight sentence pointing at the survey's bottleneck area."""
    return _INSIGHT_TEMPLATE.format(area=survey.bottleneck_area.lower())


def identify_problems(survey: SurveyInput) -> list[str]:
    """Apply the fixed rules in order. Never returns an empty list."""
    problems: list[str] = []
    if survey.rework_frequency >= HIGH_REWORK_MIN:
        problems.append(PROBLEM_HIGH_REWORK)
    if survey.information_satisfaction <= LOW_SATISFACTION_MAX:
        problems.append(PROBLEM_INFORMATION_ACCESS)
    if ACTIVITY_INFORMATION_SEARCH in survey.time_consuming_activities:
        problems.append(PROBLEM_INFORMATION_SEARCH)
    if ACTIVITY_MANUAL_PROCESSES in survey.time_consuming_activities:
        problems.append(PROBLEM_MANUAL_PROCESSES)
    if not problems:
        problems.append(PROBLEM_GENERIC)
    return problems


def generate_fallback_analysis(survey: SurveyInput) -> AnalysisResult:
    """Deterministic analysis computed purely from the survey answers."""
    return AnalysisResult(
        problems=identify_problems(survey),
        tools=[tool.model_dump(by_alias=True) for tool in FALLBACK_TOOLS],
        next_steps=list(FALLBACK_NEXT_STEPS),
        insights=fallback_insight(survey),
    )
