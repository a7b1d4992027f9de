from schemas.analysis import AnalyzeResponse, Debug, Meta
from schemas.errors import ErrorDetail, ErrorResponse
from schemas.health import HealthResponse, ModelOut, ModelsResponse
from schemas.insights import Action, Anomaly, Correlation, Driver, Insight, MetricStatistics
from schemas.request import AnalyticData, AnalyzeRequest, Column, FSBFeatures, Table

__all__ = [
    "AnalyzeRequest",
    "AnalyticData",
    "Column",
    "FSBFeatures",
    "Table",
    "Anomaly",
    "Correlation",
    "MetricStatistics",
    "Driver",
    "Insight",
    "Action",
    "Meta",
    "Debug",
    "AnalyzeResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ModelOut",
    "ModelsResponse",
]
