"""Tests for the shared numeric helpers."""

import math

import pandas as pd
import pytest

from forecast_core.utils import (
    centered_moving_average,
    clamp,
    coefficient_of_variation,
    fit_linear_trend,
    future_months,
    growth_rates,
    is_flat,
    log_returns,
    mean_absolute_percentage_error,
    median,
    months_between,
    total_growth_rate,
    variance,
    volatility,
)


def test_growth_rates_skip_zero_predecessor() -> None:
    """A zero previous value is skipped instead of dividing by zero."""
    rates = growth_rates([100.0, 110.0, 0.0, 50.0])
    assert rates == pytest.approx([0.1, -1.0])


def test_growth_rates_short_input() -> None:
    assert growth_rates([]) == []
    assert growth_rates([5.0]) == []


def test_log_returns_skip_non_positive_ratios() -> None:
    returns = log_returns([100.0, 0.0, 50.0, 100.0])
    # 100 -> 0 has ratio 0, 0 -> 50 has a zero base; only 50 -> 100 counts
    assert returns == pytest.approx([math.log(2.0)])


def test_volatility_of_constant_growth_is_zero() -> None:
    assert volatility([100.0, 110.0, 121.0, 133.1]) == pytest.approx(0.0, abs=1e-12)
    assert volatility([42.0]) == 0.0


def test_coefficient_of_variation_zero_mean() -> None:
    assert coefficient_of_variation([0.0, 0.0, 0.0]) == 0.0
    assert coefficient_of_variation([10.0, 10.0]) == 0.0
    assert coefficient_of_variation([5.0, 15.0]) == pytest.approx(0.5)


def test_mape_skips_zero_actuals() -> None:
    mape = mean_absolute_percentage_error([0.0, 100.0, 200.0], [10.0, 110.0, 180.0])
    assert mape == pytest.approx(10.0)
    assert mean_absolute_percentage_error([0.0], [5.0]) == 0.0


def test_descriptive_statistics() -> None:
    assert variance([1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.25)
    assert median([3.0, 1.0, 2.0]) == 2.0
    assert median([4.0, 1.0, 2.0, 3.0]) == 2.5
    assert variance([]) == 0.0


def test_total_growth_rate() -> None:
    assert total_growth_rate([100.0, 80.0, 150.0]) == pytest.approx(0.5)
    assert total_growth_rate([0.0, 150.0]) == 0.0
    assert total_growth_rate([150.0]) == 0.0


def test_centered_moving_average_truncates_edges() -> None:
    result = centered_moving_average([1.0, 2.0, 3.0, 4.0, 5.0], 3)
    assert result == pytest.approx([1.5, 2.0, 3.0, 4.0, 4.5])


def test_fit_linear_trend_exact_line() -> None:
    fit = fit_linear_trend([1.0, 3.0, 5.0, 7.0])
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(1.0)
    assert fit.r_squared == pytest.approx(1.0)
    assert fit.predict(4) == pytest.approx(9.0)


def test_fit_linear_trend_flat_and_single_point() -> None:
    flat = fit_linear_trend([250.0] * 6)
    assert flat.slope == 0.0
    assert flat.intercept == 250.0
    assert flat.r_squared == 1.0

    single = fit_linear_trend([80.0])
    assert single.slope == 0.0
    assert single.intercept == 80.0
    assert single.r_squared == 0.0


def test_fit_linear_trend_empty_raises() -> None:
    with pytest.raises(ValueError):
        fit_linear_trend([])


def test_month_arithmetic() -> None:
    assert months_between(pd.Timestamp("2023-11-01"), pd.Timestamp("2024-02-15")) == 3
    assert months_between(pd.Timestamp("2024-05-01"), pd.Timestamp("2024-02-01")) == -3

    dates = future_months(pd.Timestamp("2023-11-01"), 3)
    assert list(dates) == [
        pd.Timestamp("2023-12-01"),
        pd.Timestamp("2024-01-01"),
        pd.Timestamp("2024-02-01"),
    ]


def test_clamp() -> None:
    assert clamp(120.0, 30.0, 95.0) == 95.0
    assert clamp(-5.0, 30.0, 95.0) == 30.0
    assert clamp(50.0, 30.0, 95.0) == 50.0


@pytest.mark.parametrize("level", [0.1, 333.3, 1e-3, 1234567.89])
def test_fit_linear_trend_flat_inexact_values(level) -> None:
    """Flat series whose value has no exact binary form still fit perfectly."""
    fit = fit_linear_trend([level] * 12)
    assert fit.slope == 0.0
    assert fit.intercept == level
    assert fit.r_squared == 1.0


def test_is_flat() -> None:
    assert is_flat([0.1] * 12)
    assert is_flat([])
    assert not is_flat([0.1, 0.1, 0.2])
