"""Shared numeric utilities for the forecasting engine.

This module provides the small statistical helpers used across analyzers
and strategies. It includes:

- Descriptive statistics: mean, population variance/stddev, median
- Growth measures: period-over-period growth rates, log-return volatility
- Error measures: coefficient of variation, MAPE
- Smoothing and fitting: centered moving average, OLS linear trend
- Month arithmetic for projection horizons

Every helper skips terms that would divide by zero instead of producing
NaN or infinity.

Examples:
    >>> growth_rates([100.0, 110.0, 0.0, 50.0])
    [0.1, -1.0]
    >>> clamp(120.0, 30.0, 95.0)
    95.0

"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value to the closed interval [lower, upper]."""
    return float(min(upper, max(lower, value)))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def variance(values: Sequence[float]) -> float:
    """Population variance, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.var(values))


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation, 0.0 for an empty sequence."""
    return math.sqrt(variance(values))


def median(values: Sequence[float]) -> float:
    """Median, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.median(values))


def is_flat(values: Sequence[float]) -> bool:
    """True when every value equals the first, up to floating-point rounding."""
    if len(values) == 0:
        return True
    y = np.asarray(values, dtype=float)
    return bool(np.allclose(y, y[0], rtol=1e-12, atol=1e-12))


def growth_rates(values: Sequence[float]) -> list[float]:
    """Period-over-period growth rates, skipping zero predecessors.

    Args:
        values: Ordered observations.

    Returns:
        List of ``(v[i] - v[i-1]) / v[i-1]`` for every i where v[i-1] != 0.
    """
    rates = []
    for prev, curr in zip(values[:-1], values[1:]):
        if prev == 0:
            continue
        rates.append((curr - prev) / prev)
    return rates


def total_growth_rate(values: Sequence[float]) -> float:
    """Growth from the first to the last observation, 0.0 if undefined."""
    if len(values) < 2:
        return 0.0
    first = values[0]
    last = values[-1]
    return (last - first) / first if first > 0 else 0.0


def log_returns(values: Sequence[float]) -> list[float]:
    """Log-returns ``ln(v[i] / v[i-1])``, skipping non-positive ratios."""
    returns = []
    for prev, curr in zip(values[:-1], values[1:]):
        if prev <= 0:
            continue
        ratio = curr / prev
        if ratio <= 0:
            continue
        returns.append(math.log(ratio))
    return returns


def volatility(values: Sequence[float]) -> float:
    """Population standard deviation of log-returns, 0.0 if none computable."""
    return stddev(log_returns(values))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population stddev divided by mean, 0.0 when the mean is zero."""
    m = mean(values)
    if m == 0:
        return 0.0
    return stddev(values) / abs(m)


def mean_absolute_percentage_error(actual: Sequence[float], fitted: Sequence[float]) -> float:
    """MAPE in percent, skipping points whose actual value is zero.

    Returns:
        Mean of ``|a - f| / |a| * 100`` over pairs with a != 0, or 0.0 if
        no pair qualifies.
    """
    errors = [abs(a - f) / abs(a) for a, f in zip(actual, fitted) if a != 0]
    if not errors:
        return 0.0
    return float(np.mean(errors)) * 100


def centered_moving_average(values: Sequence[float], window: int) -> list[float]:
    """Centered moving average with truncated windows at both edges.

    For index i the window spans ``[i - window // 2, i + ceil(window / 2))``,
    clipped to the series bounds.
    """
    if len(values) == 0:
        return []
    rolled = pd.Series(values, dtype=float).rolling(window=window, center=True, min_periods=1)
    return rolled.mean().tolist()


@dataclass(frozen=True)
class LinearFit:
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def fit_linear_trend(values: Sequence[float]) -> LinearFit:
    """Ordinary least squares of value against sequential index 0..n-1.

    A single point yields a flat line through it with R² = 0. A series with
    zero variance is fitted exactly and reports R² = 1.

    Args:
        values: Ordered observations (at least one).

    Returns:
        LinearFit with slope, intercept and R².

    Raises:
        ValueError: If values is empty.
    """
    n = len(values)
    if n == 0:
        raise ValueError("Cannot fit a linear trend to an empty sequence")
    y = np.asarray(values, dtype=float)
    if n == 1:
        return LinearFit(slope=0.0, intercept=float(y[0]), r_squared=0.0)

    if is_flat(y):
        # Flat series: the fit is exact, rounding in the sums of squares is noise
        return LinearFit(slope=0.0, intercept=float(y[0]), r_squared=1.0)

    x = sm.add_constant(np.arange(n, dtype=float), has_constant="add")
    result = sm.OLS(y, x).fit()
    intercept, slope = (float(p) for p in result.params)
    r_squared = 1.0 - float(result.ssr) / float(result.centered_tss)
    return LinearFit(slope=slope, intercept=intercept, r_squared=r_squared)


def months_between(start: pd.Timestamp, end: pd.Timestamp) -> int:
    """Whole calendar months from start to end (negative if end is earlier)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def future_months(last_date: pd.Timestamp, steps: int) -> pd.DatetimeIndex:
    """Month-start dates for the ``steps`` months following last_date."""
    first = last_date.to_period("M").to_timestamp() + pd.DateOffset(months=1)
    return pd.date_range(start=first, periods=steps, freq="MS")
