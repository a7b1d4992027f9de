from typing import Any, Literal

from pydantic import BaseModel, Field

AnalysisMode = Literal[
    "semantic_summary",
    "root_cause",
    "anomaly_detection",
    "correlation_analysis",
    "recommendation",
    "risk_scoring",
    "mixed",
]
Language = Literal["pt-BR", "en-US", "es-ES"]
ColumnRole = Literal["METRIC", "DIMENSION", "TIMESTAMP", "CATEGORY"]
DocumentType = Literal["note", "email_excerpt", "incident_description", "generic"]
UserRole = Literal["EXECUTIVE", "MANAGER", "SUPERVISOR", "ANALYST"]


class TimeWindow(BaseModel):
    from_: str = Field(alias="from")
    to: str
    granularity: Literal["minute", "hour", "day", "week", "month"] | None = None


class UserContext(BaseModel):
    user_id: str | None = None
    role: UserRole | None = None
    department: str | None = None
    permissions: list[str] | None = None


class Context(BaseModel):
    domain: str
    operation_id: str | None = None
    user_context: UserContext | None = None
    business_metadata: dict[str, Any] | None = None


class FSBFeatures(BaseModel):
    schema_version: str = "1.0.0"
    features: dict[str, bool | int | float | str | None]


class Column(BaseModel):
    name: str
    type: str
    role: ColumnRole | None = None


class Table(BaseModel):
    name: str
    primary_keys: list[str] | None = None
    columns: list[Column]
    rows: list[dict[str, Any]]


class AnalyticData(BaseModel):
    schema_version: str = "1.0.0"
    tables: list[Table]


class RawDocument(BaseModel):
    doc_id: str
    type: DocumentType
    content: str


class Constraints(BaseModel):
    max_tokens: int | None = Field(default=None, gt=0)
    max_insights: int | None = Field(default=None, ge=0)
    max_depth: int | None = None
    disable_llm: bool | None = None


class ReturnOptions(BaseModel):
    include_raw_llm_output: bool = False
    include_debug_info: bool = False
    include_intermediate_scores: bool = False


class Trace(BaseModel):
    trace_id: str | None = None
    span_id: str | None = None
    parent_span_id: str | None = None


class AnalyzeRequest(BaseModel):
    request_id: str | None = None  # filled from X-Request-Id by the router
    tenant_id: str | None = None
    use_case: str
    mode: AnalysisMode
    language: Language
    time_window: TimeWindow | None = None
    context: Context
    fsb_features: FSBFeatures | None = None
    analytic_data: AnalyticData | None = None
    raw_documents: list[RawDocument] | None = None
    prompt: str
    constraints: Constraints | None = None
    return_options: ReturnOptions | None = None
    trace: Trace | None = None
