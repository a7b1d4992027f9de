"""
Descriptive statistics kernel. Pure functions; empty or degenerate input
returns 0 instead of raising.
"""
import math


def is_number(value) -> bool:
    """True for finite ints/floats. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values: list[float]) -> float:
    """Population standard deviation (divides by N)."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(mean([(v - avg) ** 2 for v in values]))


def z_score(value: float, mean: float, std_dev: float) -> float:
    if std_dev == 0:
        return 0.0
    return (value - mean) / std_dev


def is_anomaly(value: float, mean: float, std_dev: float, threshold: float = 2.5) -> bool:
    return abs(z_score(value, mean, std_dev)) > threshold


def normalize(value: float, min_value: float, max_value: float) -> float:
    """Rescale to [0, 1], clamped."""
    if max_value == min_value:
        return 0.0
    return max(0.0, min(1.0, (value - min_value) / (max_value - min_value)))


def pearson_correlation(x: list[float], y: list[float]) -> float:
    """Pearson r. Returns 0 if undefined (length mismatch, empty, zero variance)."""
    n = len(x)
    if n != len(y) or n == 0:
        return 0.0
    mx = mean(x)
    my = mean(y)
    dx = [xi - mx for xi in x]
    dy = [yi - my for yi in y]
    ss_xx = sum(d * d for d in dx)
    ss_yy = sum(d * d for d in dy)
    denominator = math.sqrt(ss_xx * ss_yy)
    if denominator == 0:
        return 0.0
    ss_xy = sum(dx[i] * dy[i] for i in range(n))
    r = ss_xy / denominator
    # float noise can push |r| a hair past 1
    return max(-1.0, min(1.0, r))
