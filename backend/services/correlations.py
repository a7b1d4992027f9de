"""
Pearson correlation between METRIC columns of one analytic table.
Deterministic math only.
"""
from typing import Any

from core.stats import is_number, pearson_correlation
from schemas.insights import Correlation

MIN_PAIRED_ROWS = 3
MIN_ABS_CORRELATION = 0.5
NO_CORRELATION_BELOW = 0.3


def correlation_type(r: float) -> str:
    # Below MIN_ABS_CORRELATION nothing is emitted, so "none" never reaches a result.
    if abs(r) < NO_CORRELATION_BELOW:
        return "none"
    if r > 0:
        return "positive"
    return "negative"


def paired_series(rows: list[dict[str, Any]], x: str, y: str) -> tuple[list[float], list[float]]:
    """Values of x and y from the rows where both are numeric."""
    xs: list[float] = []
    ys: list[float] = []
    for row in rows:
        vx = row.get(x)
        vy = row.get(y)
        if is_number(vx) and is_number(vy):
            xs.append(vx)
            ys.append(vy)
    return xs, ys


def compute_table_correlations(
    table_name: str,
    rows: list[dict[str, Any]],
    metric_columns: list[str],
) -> list[Correlation]:
    """
    Each unordered pair of metric columns once (x before y in column order).
    Only |r| > 0.5 over at least 3 paired rows is reported.
    """
    results: list[Correlation] = []

    for i, metric_x in enumerate(metric_columns):
        for metric_y in metric_columns[i + 1 :]:  # no self, no duplicate pair
            xs, ys = paired_series(rows, metric_x, metric_y)
            if len(xs) < MIN_PAIRED_ROWS:
                continue
            r = pearson_correlation(xs, ys)
            abs_r = abs(r)
            if abs_r <= MIN_ABS_CORRELATION:
                continue
            sign = "Positive" if r > 0 else "Negative"
            results.append(
                Correlation(
                    metric_x=f"{table_name}.{metric_x}",
                    metric_y=f"{table_name}.{metric_y}",
                    correlation_type=correlation_type(r),
                    correlation_score=min(abs_r, 1.0),
                    explanation=(
                        f"{sign} correlation of {abs_r * 100:.1f}% between {metric_x} and {metric_y}"
                    ),
                )
            )

    return results
