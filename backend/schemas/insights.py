from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high", "critical"]
CorrelationType = Literal["positive", "negative", "nonlinear", "none"]
Direction = Literal["positive", "negative", "neutral"]
InsightCategory = Literal["performance", "risk", "opportunity", "quality", "capacity", "financial"]
ActionType = Literal[
    "notification",
    "schedule_review",
    "threshold_adjustment",
    "resource_reallocation",
    "alert_escalation",
    "custom",
]
Urgency = Literal["low", "medium", "high", "immediate"]


class TimeRange(BaseModel):
    from_: str = Field(alias="from")
    to: str


class Anomaly(BaseModel):
    id: str
    metric: str  # table.column when detected in analytic data
    severity: Severity
    anomaly_score: float = Field(ge=0, le=1)
    description: str
    time_range: TimeRange | None = None


class Correlation(BaseModel):
    metric_x: str
    metric_y: str
    correlation_type: CorrelationType
    correlation_score: float = Field(ge=0, le=1)
    explanation: str


class MetricStatistics(BaseModel):
    mean: float
    std_dev: float
    min: float
    max: float
    current: float | None = None  # last value in row order


class Driver(BaseModel):
    name: str
    direction: Direction
    impact_score: float = Field(ge=0, le=1)
    explanation: str


class Insight(BaseModel):
    id: str
    title: str
    description: str
    category: InsightCategory
    priority: Severity
    confidence: float = Field(ge=0, le=1)
    related_metrics: list[str] | None = None


class Action(BaseModel):
    id: str
    label: str
    description: str
    action_type: ActionType
    target_system: str | None = None
    expected_impact: str | None = None
    estimated_impact_score: float | None = Field(default=None, ge=0, le=1)
    urgency: Urgency
