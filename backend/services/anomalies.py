"""
Z-score anomaly detection.

Two baselines, kept separate on purpose:
- feature snapshot: each numeric feature against the mean/std of all numeric
  features in the same snapshot (cross-sectional);
- analytic table column: the current (last) value against the column's own
  mean/std (temporal self-baseline).
Deterministic apart from generated ids. No I/O.
"""
from core.ids import generate_id
from core.stats import is_anomaly, is_number, mean, normalize, standard_deviation, z_score
from schemas.insights import Anomaly, MetricStatistics

Z_THRESHOLD = 2.5
MAX_Z = 5.0  # |z| at which anomaly_score saturates to 1


def severity_for_score(score: float) -> str:
    if score >= 0.8:
        return "critical"
    if score >= 0.6:
        return "high"
    if score >= 0.4:
        return "medium"
    return "low"


def anomaly_score(z: float) -> float:
    return min(normalize(abs(z), 0, MAX_Z), 1.0)


def _format_value(value: float) -> str:
    return f"{value:.2f}" if isinstance(value, float) else str(value)


def detect_feature_anomalies(
    features: dict[str, object],
    threshold: float = Z_THRESHOLD,
) -> list[Anomaly]:
    """Flag features that sit more than `threshold` std devs from their peers."""
    numeric = [(name, value) for name, value in features.items() if is_number(value)]
    if not numeric:
        return []

    values = [value for _, value in numeric]
    baseline_mean = mean(values)
    baseline_std = standard_deviation(values)

    anomalies = []
    for name, value in numeric:
        if not is_anomaly(value, baseline_mean, baseline_std, threshold):
            continue
        score = anomaly_score(z_score(value, baseline_mean, baseline_std))
        anomalies.append(
            Anomaly(
                id=generate_id("anomaly"),
                metric=name,
                severity=severity_for_score(score),
                anomaly_score=score,
                description=f'Feature "{name}" has an anomalous value: {_format_value(value)}',
            )
        )
    return anomalies


def summarize_series(values: list[float]) -> MetricStatistics:
    return MetricStatistics(
        mean=mean(values),
        std_dev=standard_deviation(values),
        min=min(values),
        max=max(values),
        current=values[-1],
    )


def detect_current_value_anomaly(
    table_name: str,
    column: str,
    values: list[float],
    threshold: float = Z_THRESHOLD,
) -> Anomaly | None:
    """
    Check the column's current (last) value against the column's own mean/std.
    Needs at least two values; a single value has no spread to deviate from.
    """
    if len(values) < 2:
        return None
    baseline_mean = mean(values)
    baseline_std = standard_deviation(values)
    current = values[-1]
    if not is_anomaly(current, baseline_mean, baseline_std, threshold):
        return None
    score = anomaly_score(z_score(current, baseline_mean, baseline_std))
    return Anomaly(
        id=generate_id("anomaly"),
        metric=f"{table_name}.{column}",
        severity=severity_for_score(score),
        anomaly_score=score,
        description=f'Metric "{column}" in "{table_name}" is anomalous: {current:.2f}',
    )
