"""
Analysis orchestration: statistics first, then either a model-backed narrative
or one synthesized from the statistics alone (constraints.disable_llm).

Single pass, no retries. Unparseable model output degrades to raw text; any
other failure propagates to the caller unchanged.
"""
import time
from datetime import datetime, timezone
from typing import Callable

from core import config
from core.ids import generate_id
from core.llm import TextGenerator
from core.log import request_logger
from core.prompts import build_analysis_prompt, build_fallback_summary, build_system_prompt
from core.providers import get_generator
from schemas.analysis import AnalyzeResponse, Debug, Meta
from schemas.insights import Action, Anomaly, Insight
from schemas.request import AnalyzeRequest
from services.model_output import Narrative, normalize_narrative, parse_model_reply
from services.statistical_analysis import StatisticalAnalysis, analyze_statistics

LLM_TEMPERATURE = 0.7
FALLBACK_MAX_INSIGHTS = config.MAX_INSIGHTS_DEFAULT
FALLBACK_MAX_ACTIONS = 3
SEVERITY_RANK = {"critical": 3, "high": 2, "medium": 1, "low": 0}


def _by_priority(anomalies: list[Anomaly]) -> list[Anomaly]:
    return sorted(anomalies, key=lambda a: (SEVERITY_RANK[a.severity], a.anomaly_score), reverse=True)


def fallback_insights(anomalies: list[Anomaly], limit: int = FALLBACK_MAX_INSIGHTS) -> list[Insight]:
    return [
        Insight(
            id=generate_id("insight"),
            title=f"Anomaly detected in {a.metric}",
            description=a.description,
            category="risk",
            priority=a.severity,
            confidence=a.anomaly_score,
            related_metrics=[a.metric],
        )
        for a in _by_priority(anomalies)[:limit]
    ]


def fallback_actions(anomalies: list[Anomaly], limit: int = FALLBACK_MAX_ACTIONS) -> list[Action]:
    urgent = [a for a in _by_priority(anomalies) if a.severity in ("critical", "high")]
    return [
        Action(
            id=generate_id("action"),
            label=f"Investigate {a.metric}",
            description=f"{a.severity.capitalize()} anomaly detected in {a.metric}. Investigation required.",
            action_type="alert_escalation",
            urgency="immediate" if a.severity == "critical" else "high",
        )
        for a in urgent[:limit]
    ]


def local_narrative(
    analysis: StatisticalAnalysis,
    language: str,
    max_insights: int | None = None,
) -> Narrative:
    limit = FALLBACK_MAX_INSIGHTS if max_insights is None else min(FALLBACK_MAX_INSIGHTS, max_insights)
    return Narrative(
        semantic_context=build_fallback_summary(len(analysis.anomalies), len(analysis.correlations), language),
        insights=fallback_insights(analysis.anomalies, max(limit, 0)),
        actions=fallback_actions(analysis.anomalies),
    )


def _build_debug(request: AnalyzeRequest, raw_output: str | None) -> Debug | None:
    options = request.return_options
    if options is None:
        return None
    if options.include_debug_info:
        return Debug(
            raw_llm_output=raw_output,
            feature_snapshot=request.fsb_features.features if request.fsb_features else None,
            rules_fired=[],
        )
    if options.include_raw_llm_output and raw_output is not None:
        return Debug(raw_llm_output=raw_output)
    return None


def run_analysis(
    request: AnalyzeRequest,
    resolve_generator: Callable[[], TextGenerator] = get_generator,
) -> AnalyzeResponse:
    """
    Run one analysis request end to end.

    resolve_generator is only called on the model branch; with
    constraints.disable_llm the narrative comes from the statistics alone.
    """
    started = time.perf_counter()
    log = request_logger(request.request_id or "unknown", request.tenant_id, __name__)
    log.info("Starting analysis: use_case=%s mode=%s language=%s", request.use_case, request.mode, request.language)

    constraints = request.constraints
    max_insights = constraints.max_insights if constraints else None

    try:
        analysis = analyze_statistics(request.fsb_features, request.analytic_data, config.ANOMALY_THRESHOLD)

        model_used: str | None = None
        tokens_input = 0
        tokens_output = 0
        raw_output: str | None = None

        if constraints is not None and constraints.disable_llm:
            log.debug("LLM disabled; using statistics-only narrative")
            narrative = local_narrative(analysis, request.language, max_insights)
        else:
            system_prompt = build_system_prompt(request.mode, request.language)
            analysis_prompt = build_analysis_prompt(request, analysis)
            generator = resolve_generator()
            result = generator.generate(
                analysis_prompt,
                system_prompt=system_prompt,
                max_tokens=(constraints.max_tokens if constraints else None) or config.MAX_TOKENS_DEFAULT,
                temperature=LLM_TEMPERATURE,
            )
            model_used = result.model_id
            tokens_input = result.tokens_input
            tokens_output = result.tokens_output
            raw_output = result.text
            narrative = normalize_narrative(parse_model_reply(result.text), max_insights)
            for warning in narrative.warnings:
                log.warning("Model reply normalized: %s", warning)

        duration_ms = int((time.perf_counter() - started) * 1000)
        response = AnalyzeResponse(
            request_id=request.request_id,
            mode=request.mode,
            semantic_context=narrative.semantic_context,
            key_highlights=narrative.key_highlights,
            drivers=narrative.drivers,
            anomalies=analysis.anomalies,
            correlations=analysis.correlations,
            statistics=analysis.statistics or None,
            insights=narrative.insights,
            actions=narrative.actions,
            meta=Meta(
                duration_ms=duration_ms,
                llm_model_used=model_used,
                llm_tokens_input=tokens_input,
                llm_tokens_output=tokens_output,
                timestamp=datetime.now(timezone.utc).isoformat(),
                trace_id=request.trace.trace_id if request.trace else None,
                warnings=narrative.warnings,
            ),
            debug=_build_debug(request, raw_output),
        )
    except Exception as exc:
        log.error("Analysis failed: %s", exc)
        raise

    log.info(
        "Analysis done: duration_ms=%d insights=%d actions=%d anomalies=%d",
        duration_ms,
        len(response.insights),
        len(response.actions),
        len(analysis.anomalies),
    )
    return response
