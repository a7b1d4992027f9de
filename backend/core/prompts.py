"""
Prompt composition for the text-generation backend.

All localized text lives in PROMPT_LOCALES; supporting a new language means
adding one PromptLocale entry. Rendering is pure: no I/O, no randomness.
"""
import json
from dataclasses import dataclass
from typing import Any

from core.errors import UnsupportedLanguageError

MAX_SAMPLE_ROWS = 10
SECTION_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class PromptLocale:
    persona: str
    modes: dict[str, str]
    titles: dict[str, str]
    contract_intro: str
    contract_note: str
    semantic_context_hint: str
    key_highlights_hint: str
    fallback_summary: str  # formatted with anomalies=, correlations=


PROMPT_LOCALES: dict[str, PromptLocale] = {
    "pt-BR": PromptLocale(
        persona="""Você é um analista especialista em análise semântica de dados, parte do ACE (Augmented Context Engine).

Suas responsabilidades:
- Interpretar dados estatísticos e analíticos complexos
- Identificar padrões, tendências e anomalias
- Correlacionar múltiplas variáveis e identificar drivers de causa-efeito
- Gerar insights acionáveis e recomendações práticas
- Explicar fenômenos complexos em linguagem clara e objetiva
- Fornecer contexto semântico aumentado para suportar decisões inteligentes

Princípios:
- Sempre baseie suas análises nos dados fornecidos
- Seja preciso, conciso e objetivo
- Identifique causa raiz, não apenas sintomas
- Priorize insights de alto impacto
- Forneça recomendações específicas e acionáveis
- Use linguagem clara, evitando jargões desnecessários""",
        modes={
            "semantic_summary": "Foco: Gerar um resumo semântico consolidado dos dados, destacando pontos principais.",
            "root_cause": "Foco: Identificar causas raiz de problemas ou variações detectadas nos dados.",
            "anomaly_detection": "Foco: Detectar e explicar anomalias, outliers e comportamentos atípicos.",
            "correlation_analysis": "Foco: Analisar correlações entre variáveis e explicar relações causais.",
            "recommendation": "Foco: Gerar recomendações práticas e acionáveis baseadas na análise.",
            "risk_scoring": "Foco: Avaliar riscos e pontuar níveis de criticidade de diferentes fatores.",
            "mixed": (
                "Foco: Análise abrangente combinando múltiplas técnicas "
                "(resumo, causas, anomalias, correlações e recomendações)."
            ),
        },
        titles={
            "context": "## CONTEXTO DA ANÁLISE",
            "features": "## FEATURES ESTATÍSTICAS (FSB)",
            "analytic_data": "## DADOS ANALÍTICOS",
            "statistics": "## ANÁLISE ESTATÍSTICA",
            "documents": "## DOCUMENTOS COMPLEMENTARES",
            "instruction": "## INSTRUÇÃO",
        },
        contract_intro="**IMPORTANTE**: Sua resposta deve ser um JSON válido seguindo esta estrutura:",
        contract_note="Valores numéricos (impact_score, confidence) devem estar entre 0 e 1.",
        semantic_context_hint="string - resumo semântico em linguagem natural",
        key_highlights_hint="array de strings com principais destaques",
        fallback_summary=(
            "Análise concluída. {anomalies} anomalia(s) detectada(s). "
            "{correlations} correlação(ões) identificada(s)."
        ),
    ),
    "en-US": PromptLocale(
        persona="""You are a data semantic analysis expert, part of ACE (Augmented Context Engine).

Your responsibilities:
- Interpret complex statistical and analytical data
- Identify patterns, trends, and anomalies
- Correlate multiple variables and identify cause-effect drivers
- Generate actionable insights and practical recommendations
- Explain complex phenomena in clear, objective language
- Provide augmented semantic context to support intelligent decisions

Principles:
- Always base your analysis on provided data
- Be precise, concise, and objective
- Identify root cause, not just symptoms
- Prioritize high-impact insights
- Provide specific, actionable recommendations
- Use clear language, avoiding unnecessary jargon""",
        modes={
            "semantic_summary": "Focus: Generate a consolidated semantic summary of the data, highlighting key points.",
            "root_cause": "Focus: Identify root causes of problems or detected variations in the data.",
            "anomaly_detection": "Focus: Detect and explain anomalies, outliers, and atypical behaviors.",
            "correlation_analysis": "Focus: Analyze correlations between variables and explain causal relationships.",
            "recommendation": "Focus: Generate practical, actionable recommendations based on analysis.",
            "risk_scoring": "Focus: Assess risks and score criticality levels of different factors.",
            "mixed": (
                "Focus: Comprehensive analysis combining multiple techniques "
                "(summary, causes, anomalies, correlations, and recommendations)."
            ),
        },
        titles={
            "context": "## ANALYSIS CONTEXT",
            "features": "## STATISTICAL FEATURES (FSB)",
            "analytic_data": "## ANALYTICAL DATA",
            "statistics": "## STATISTICAL ANALYSIS",
            "documents": "## COMPLEMENTARY DOCUMENTS",
            "instruction": "## INSTRUCTION",
        },
        contract_intro="**IMPORTANT**: Your response must be valid JSON following this structure:",
        contract_note="Numeric values (impact_score, confidence) must be between 0 and 1.",
        semantic_context_hint="string - semantic summary in natural language",
        key_highlights_hint="array of strings with key highlights",
        fallback_summary=(
            "Analysis completed. {anomalies} anomaly(ies) detected. "
            "{correlations} correlation(s) identified."
        ),
    ),
    "es-ES": PromptLocale(
        persona="""Eres un analista experto en análisis semántico de datos, parte de ACE (Augmented Context Engine).

Tus responsabilidades:
- Interpretar datos estadísticos y analíticos complejos
- Identificar patrones, tendencias y anomalías
- Correlacionar múltiples variables e identificar impulsores de causa-efecto
- Generar insights accionables y recomendaciones prácticas
- Explicar fenómenos complejos en lenguaje claro y objetivo
- Proporcionar contexto semántico aumentado para apoyar decisiones inteligentes

Principios:
- Siempre basa tu análisis en los datos proporcionados
- Sé preciso, conciso y objetivo
- Identifica la causa raíz, no solo los síntomas
- Prioriza insights de alto impacto
- Proporciona recomendaciones específicas y accionables
- Usa lenguaje claro, evitando jergas innecesarias""",
        modes={
            "semantic_summary": "Enfoque: Generar un resumen semántico consolidado de los datos, destacando puntos clave.",
            "root_cause": "Enfoque: Identificar causas raíz de problemas o variaciones detectadas en los datos.",
            "anomaly_detection": "Enfoque: Detectar y explicar anomalías, valores atípicos y comportamientos anormales.",
            "correlation_analysis": "Enfoque: Analizar correlaciones entre variables y explicar relaciones causales.",
            "recommendation": "Enfoque: Generar recomendaciones prácticas y accionables basadas en el análisis.",
            "risk_scoring": "Enfoque: Evaluar riesgos y puntuar niveles de criticidad de diferentes factores.",
            "mixed": (
                "Enfoque: Análisis integral que combina múltiples técnicas "
                "(resumen, causas, anomalías, correlaciones y recomendaciones)."
            ),
        },
        titles={
            "context": "## CONTEXTO DEL ANÁLISIS",
            "features": "## CARACTERÍSTICAS ESTADÍSTICAS (FSB)",
            "analytic_data": "## DATOS ANALÍTICOS",
            "statistics": "## ANÁLISIS ESTADÍSTICO",
            "documents": "## DOCUMENTOS COMPLEMENTARIOS",
            "instruction": "## INSTRUCCIÓN",
        },
        contract_intro="**IMPORTANTE**: Tu respuesta debe ser un JSON válido siguiendo esta estructura:",
        contract_note="Los valores numéricos (impact_score, confidence) deben estar entre 0 y 1.",
        semantic_context_hint="string - resumen semántico en lenguaje natural",
        key_highlights_hint="array de strings con puntos destacados",
        fallback_summary=(
            "Análisis completado. {anomalies} anomalía(s) detectada(s). "
            "{correlations} correlación(es) identificada(s)."
        ),
    ),
}


def get_locale(language: str) -> PromptLocale:
    try:
        return PROMPT_LOCALES[language]
    except KeyError:
        raise UnsupportedLanguageError(
            f"Unsupported language {language!r}; expected one of {sorted(PROMPT_LOCALES)}"
        ) from None


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def output_contract(language: str) -> dict[str, Any]:
    """
    The JSON object shape the backend is asked to return.

    A shape description, not a valid reply: enum fields hold every allowed
    value as "a|b|c", which fails item validation in normalize_narrative.
    """
    locale = get_locale(language)
    return {
        "semantic_context": locale.semantic_context_hint,
        "key_highlights": [locale.key_highlights_hint],
        "drivers": [
            {
                "name": "string",
                "direction": "positive|negative|neutral",
                "impact_score": 0.0,
                "explanation": "string",
            }
        ],
        "insights": [
            {
                "title": "string",
                "description": "string",
                "category": "performance|risk|opportunity|quality|capacity|financial",
                "priority": "low|medium|high|critical",
                "confidence": 0.0,
                "related_metrics": ["string"],
            }
        ],
        "actions": [
            {
                "label": "string",
                "description": "string",
                "action_type": (
                    "notification|schedule_review|threshold_adjustment|"
                    "resource_reallocation|alert_escalation|custom"
                ),
                "urgency": "low|medium|high|immediate",
            }
        ],
    }


def render_output_contract(language: str) -> str:
    locale = get_locale(language)
    return f"{locale.contract_intro}\n\n{_dump(output_contract(language))}\n\n{locale.contract_note}"


def build_system_prompt(mode: str, language: str) -> str:
    locale = get_locale(language)
    return f"{locale.persona}\n\n{locale.modes[mode]}"


def build_fallback_summary(anomaly_count: int, correlation_count: int, language: str) -> str:
    return get_locale(language).fallback_summary.format(
        anomalies=anomaly_count, correlations=correlation_count
    )


def _context_section(request, locale: PromptLocale) -> str:
    section = f"{locale.titles['context']}\n\n"
    section += f"Use Case: {request.use_case}\n"
    section += f"Domain: {request.context.domain}\n"
    if request.context.business_metadata:
        section += "\nBusiness Metadata:\n"
        section += _dump(request.context.business_metadata)
    return section


def _features_section(features, locale: PromptLocale) -> str:
    return f"{locale.titles['features']}\n\n{_dump(features.features)}"


def _analytic_data_section(data, locale: PromptLocale) -> str:
    section = f"{locale.titles['analytic_data']}\n\n"
    for table in data.tables:
        section += f"### {table.name}\n\n"
        section += "Columns: " + ", ".join(f"{c.name} ({c.type})" for c in table.columns) + "\n\n"
        section += _dump(table.rows[:MAX_SAMPLE_ROWS])
        if len(table.rows) > MAX_SAMPLE_ROWS:
            section += f"\n\n... ({len(table.rows) - MAX_SAMPLE_ROWS} more rows)\n"
        section += "\n\n"
    return section


def _statistics_section(analysis, locale: PromptLocale) -> str:
    section = f"{locale.titles['statistics']}\n\n"
    if analysis.anomalies:
        section += f"### Anomalies Detected: {len(analysis.anomalies)}\n\n"
        section += _dump([a.model_dump(exclude_none=True) for a in analysis.anomalies])
        section += "\n\n"
    if analysis.correlations:
        section += f"### Correlations Found: {len(analysis.correlations)}\n\n"
        section += _dump([c.model_dump() for c in analysis.correlations])
        section += "\n\n"
    if analysis.statistics:
        section += "### Statistics Summary:\n\n"
        section += _dump({name: s.model_dump() for name, s in analysis.statistics.items()})
    return section


def _documents_section(documents, locale: PromptLocale) -> str:
    section = f"{locale.titles['documents']}\n\n"
    for doc in documents:
        section += f"### {doc.type} ({doc.doc_id})\n\n"
        section += f"{doc.content}\n\n"
    return section


def _instruction_section(request, locale: PromptLocale) -> str:
    return f"{locale.titles['instruction']}\n\n{request.prompt}\n\n{render_output_contract(request.language)}"


def build_analysis_prompt(request, analysis) -> str:
    """
    Task prompt: context, FSB features, analytic data sample, statistical
    analysis, complementary documents, then the caller's instruction with the
    output contract. Optional sections are skipped when their input is absent.
    """
    locale = get_locale(request.language)
    sections = [_context_section(request, locale)]
    if request.fsb_features is not None:
        sections.append(_features_section(request.fsb_features, locale))
    if request.analytic_data is not None:
        sections.append(_analytic_data_section(request.analytic_data, locale))
    sections.append(_statistics_section(analysis, locale))
    if request.raw_documents:
        sections.append(_documents_section(request.raw_documents, locale))
    sections.append(_instruction_section(request, locale))
    return SECTION_SEPARATOR.join(sections)
