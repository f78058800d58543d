"""Linear regression forecasting.

Fits value against sequential index by ordinary least squares and
extrapolates month by month up to the request's end date.
"""

from __future__ import annotations

import logging

import pandas as pd

from forecast_core.config import ForecastDefaults
from forecast_core.models.base import require_points
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import clamp, fit_linear_trend, future_months, months_between

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 30.0
MAX_CONFIDENCE = 95.0


def regression_horizon(last_date: pd.Timestamp, end_date: pd.Timestamp) -> int:
    """Months from the last observation to end_date, at least one."""
    return max(1, months_between(last_date, end_date))


def linear_regression_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Project the OLS trend line forward to the request end date.

    Every projected point is clamped at zero. Confidence is R² scaled to
    percent and clamped to [30, 95].
    """
    require_points(series)
    values = series.to_numpy(dtype=float)
    n = len(values)

    fit = fit_linear_trend(values)
    steps = regression_horizon(series.index[-1], request.end_date)
    dates = future_months(series.index[-1], steps)
    projected = [max(0.0, fit.predict(n + i - 1)) for i in range(1, steps + 1)]
    projection = pd.Series(projected, index=dates, dtype=float)

    logger.debug(
        "Linear fit over %d points: slope=%.4f intercept=%.4f r2=%.4f",
        n,
        fit.slope,
        fit.intercept,
        fit.r_squared,
    )

    return StrategyResult(
        projection=projection,
        projected_value=float(projection.iloc[-1]),
        confidence=clamp(fit.r_squared * 100, MIN_CONFIDENCE, MAX_CONFIDENCE),
        parameters={
            "slope": fit.slope,
            "intercept": fit.intercept,
            "r_squared": fit.r_squared,
            "horizon_months": steps,
        },
    )
