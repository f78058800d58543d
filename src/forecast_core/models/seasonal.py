"""Seasonal decomposition forecasting.

Splits the series into a trend (centered moving average over one seasonal
period), a multiplicative seasonal factor per position in the cycle, and a
residual. The trend is extrapolated linearly and re-seasonalized.

With the default twelve-month period, cycle positions are calendar months,
so a gap in the history does not shift factors onto the wrong months. Other
periods count positions along the observations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from forecast_core.config import ForecastDefaults
from forecast_core.models.base import custom_int, require_points
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import (
    centered_moving_average,
    clamp,
    fit_linear_trend,
    future_months,
    is_flat,
    variance,
)

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 45.0
MAX_CONFIDENCE = 100.0
MONTHS_PER_YEAR = 12


@dataclass
class Decomposition:
    trend: list[float]
    seasonal: list[float]  # one factor per position in the cycle
    residual: list[float]


def cycle_positions(index: pd.DatetimeIndex, period: int, offset: int = 0) -> list[int]:
    """Position in the seasonal cycle of each date.

    ``offset`` is the number of observations preceding ``index`` and only
    matters for non-calendar periods.
    """
    if period == MONTHS_PER_YEAR:
        return [month - 1 for month in index.month]
    return [(offset + i) % period for i in range(len(index))]


def seasonal_factors(
    values: list[float],
    trend: list[float],
    positions: list[int],
    period: int,
) -> list[float]:
    """Mean ratio of value to trend per cycle position, 1.0 where undefined."""
    sums = [0.0] * period
    counts = [0] * period
    for value, level, pos in zip(values, trend, positions):
        if level <= 0:
            continue
        sums[pos] += value / level
        counts[pos] += 1
    return [s / c if c > 0 else 1.0 for s, c in zip(sums, counts)]


def decompose(values: list[float], positions: list[int], period: int) -> Decomposition:
    trend = centered_moving_average(values, period)
    seasonal = seasonal_factors(values, trend, positions, period)
    residual = [v - t * seasonal[pos] for v, t, pos in zip(values, trend, positions)]
    return Decomposition(trend=trend, seasonal=seasonal, residual=residual)


def seasonal_decomposition_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Extrapolate the trend component and apply the seasonal factor per month.

    Confidence is the share of variance explained by trend and seasonality,
    in percent, clamped to [45, 100]. A flat history is fully explained.
    """
    require_points(series)
    period = custom_int(request.custom_parameters, "seasonal_period", defaults.seasonal_period)

    values = series.to_numpy(dtype=float).tolist()
    n = len(values)
    parts = decompose(values, cycle_positions(series.index, period), period)
    trend_fit = fit_linear_trend(parts.trend)

    horizon = defaults.horizon_months
    dates = future_months(series.index[-1], horizon)
    projected = []
    for h, pos in enumerate(cycle_positions(dates, period, offset=n), start=1):
        trend_value = trend_fit.predict(n - 1 + h)
        projected.append(max(0.0, trend_value * parts.seasonal[pos]))
    projection = pd.Series(projected, index=dates, dtype=float)

    if is_flat(values):
        explained = 1.0
    else:
        explained = 1 - variance(parts.residual) / variance(values)
    logger.debug("Decomposition over %d points explains %.2f of variance", n, explained)

    return StrategyResult(
        projection=projection,
        projected_value=float(projection.iloc[-1]),
        confidence=clamp(explained * 100, MIN_CONFIDENCE, MAX_CONFIDENCE),
        parameters={
            "seasonal_period": period,
            "trend_component": parts.trend,
            "seasonal_component": parts.seasonal,
            "trend_slope": trend_fit.slope,
            "explained_variance": explained,
        },
    )
