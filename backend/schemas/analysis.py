from typing import Any

from pydantic import BaseModel, Field

from schemas.insights import Action, Anomaly, Correlation, Driver, Insight, MetricStatistics
from schemas.request import AnalysisMode


class Meta(BaseModel):
    duration_ms: int
    llm_model_used: str | None = None
    llm_tokens_input: int = 0
    llm_tokens_output: int = 0
    timestamp: str  # ISO string, UTC
    trace_id: str | None = None
    warnings: list[str] = Field(default_factory=list)


class Debug(BaseModel):
    raw_llm_output: str | None = None
    feature_snapshot: dict[str, Any] | None = None
    rules_fired: list[str] | None = None


class AnalyzeResponse(BaseModel):
    request_id: str | None = None
    mode: AnalysisMode
    semantic_context: str
    key_highlights: list[str] | None = None
    drivers: list[Driver] | None = None
    anomalies: list[Anomaly] | None = None
    correlations: list[Correlation] | None = None
    statistics: dict[str, MetricStatistics] | None = None
    insights: list[Insight]
    actions: list[Action]
    meta: Meta
    debug: Debug | None = None
