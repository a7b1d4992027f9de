from __future__ import annotations

import math

import pytest

from core.stats import (
    is_anomaly,
    is_number,
    mean,
    normalize,
    pearson_correlation,
    standard_deviation,
    z_score,
)


def test_empty_input_is_zero() -> None:
    assert mean([]) == 0
    assert standard_deviation([]) == 0


def test_population_standard_deviation() -> None:
    # population std of 2,4,4,4,5,5,7,9 is exactly 2
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert standard_deviation([5, 5, 5]) == 0


@pytest.mark.parametrize("values", [[1], [1, 2], [-3.5, 0, 12, 7], [1e6, -1e6, 3]])
def test_standard_deviation_non_negative(values: list[float]) -> None:
    assert standard_deviation(values) >= 0


def test_z_score_zero_std_is_zero() -> None:
    assert z_score(10, 5, 0) == 0
    assert z_score(7, 5, 2) == pytest.approx(1.0)


@pytest.mark.parametrize("k", [0.5, 2.5, 3.0, 10.0])
def test_is_anomaly_symmetric(k: float) -> None:
    assert is_anomaly(50 + k, 50, 1, 2.5) == is_anomaly(50 - k, 50, 1, 2.5)


def test_is_anomaly_threshold_is_strict() -> None:
    assert not is_anomaly(2.5, 0, 1, 2.5)
    assert is_anomaly(2.6, 0, 1, 2.5)


def test_normalize_clamps_and_handles_flat_range() -> None:
    assert normalize(2.5, 0, 5) == pytest.approx(0.5)
    assert normalize(9, 0, 5) == 1
    assert normalize(-1, 0, 5) == 0
    assert normalize(3, 4, 4) == 0


def test_pearson_perfect_and_degenerate() -> None:
    xs = [1, 2, 3, 4, 5]
    assert pearson_correlation(xs, [2 * x for x in xs]) == pytest.approx(1.0)
    assert pearson_correlation(xs, [-x for x in xs]) == pytest.approx(-1.0)
    assert pearson_correlation(xs, [3, 3, 3, 3, 3]) == 0
    assert pearson_correlation([], []) == 0
    assert pearson_correlation([1, 2], [1, 2, 3]) == 0


def test_pearson_symmetric_and_bounded() -> None:
    xs = [3.1, 7.4, 1.2, 9.9, 4.4, 6.0]
    ys = [10.0, 2.2, 8.8, 4.1, 7.7, 3.3]
    r = pearson_correlation(xs, ys)
    assert r == pearson_correlation(ys, xs)
    assert -1 <= r <= 1


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, True), (2.5, True), (0, True), (True, False), ("3", False), (None, False), (math.nan, False), (math.inf, False), (10**400, False)],
)
def test_is_number(value, expected: bool) -> None:
    assert is_number(value) is expected
