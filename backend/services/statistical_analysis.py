"""
Runs both detection passes and assembles the single statistical artifact
consumed by prompt composition and the orchestrator.
"""
import logging
from dataclasses import dataclass, field

from core.stats import is_number
from schemas.insights import Anomaly, Correlation, MetricStatistics
from schemas.request import AnalyticData, FSBFeatures, Table
from services.anomalies import (
    Z_THRESHOLD,
    detect_current_value_anomaly,
    detect_feature_anomalies,
    summarize_series,
)
from services.correlations import compute_table_correlations

logger = logging.getLogger(__name__)


@dataclass
class StatisticalAnalysis:
    anomalies: list[Anomaly] = field(default_factory=list)
    correlations: list[Correlation] = field(default_factory=list)
    statistics: dict[str, MetricStatistics] = field(default_factory=dict)


def metric_columns(table: Table) -> list[str]:
    return [col.name for col in table.columns if col.role == "METRIC"]


def _analyze_table(table: Table, threshold: float, result: StatisticalAnalysis) -> None:
    columns = metric_columns(table)
    if not columns:
        return

    for column in columns:
        values = [row.get(column) for row in table.rows]
        values = [v for v in values if is_number(v)]
        if not values:
            continue
        result.statistics[f"{table.name}.{column}"] = summarize_series(values)
        anomaly = detect_current_value_anomaly(table.name, column, values, threshold)
        if anomaly is not None:
            result.anomalies.append(anomaly)

    result.correlations.extend(compute_table_correlations(table.name, table.rows, columns))


def analyze_statistics(
    fsb_features: FSBFeatures | None = None,
    analytic_data: AnalyticData | None = None,
    threshold: float = Z_THRESHOLD,
) -> StatisticalAnalysis:
    """
    Feature-snapshot pass, then per-table pass. Missing inputs yield an empty
    analysis. An unexpected failure is logged and also yields an empty analysis
    rather than failing the request.
    """
    result = StatisticalAnalysis()
    try:
        if fsb_features is not None and fsb_features.features:
            result.anomalies.extend(detect_feature_anomalies(fsb_features.features, threshold))

        if analytic_data is not None:
            for table in analytic_data.tables:
                _analyze_table(table, threshold, result)
    except Exception:
        logger.exception("Statistical analysis failed; returning empty result")
        return StatisticalAnalysis()

    logger.info(
        "Statistical analysis done: %d anomalies, %d correlations, %d metrics",
        len(result.anomalies),
        len(result.correlations),
        len(result.statistics),
    )
    return result
