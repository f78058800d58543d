"""Holt-Winters exponential smoothing.

Triple smoothing with additive trend and multiplicative seasonality over a
twelve-month cycle. Seasonal factors start at 1.0 and are learned while
replaying the history, so the method works on series of any length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from forecast_core.config import ForecastDefaults
from forecast_core.models.base import custom_fraction, require_points
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import clamp, future_months, mean_absolute_percentage_error

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 50.0
MAX_CONFIDENCE = 95.0
CYCLE_LENGTH = 12


@dataclass
class HoltWintersState:
    level: float
    trend: float
    seasonal: list[float]
    fitted: list[float]


def holt_winters_fit(
    values: list[float],
    alpha: float,
    beta: float,
    gamma: float,
    cycle: int = CYCLE_LENGTH,
) -> HoltWintersState:
    """Replay the series through the Holt-Winters update equations.

    Terms that would divide by zero (a zero seasonal factor or a zero level)
    are skipped: the observation is used undeseasonalized, or the seasonal
    factor is left unchanged.
    """
    level = values[0]
    trend = 0.0
    seasonal = [1.0] * cycle
    fitted = []

    for i, actual in enumerate(values):
        s = i % cycle
        factor = seasonal[s]
        deseasonalized = actual / factor if factor != 0 else actual

        prev_level = level
        level = alpha * deseasonalized + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend
        if level != 0:
            seasonal[s] = gamma * (actual / level) + (1 - gamma) * factor

        fitted.append(level * seasonal[s])

    return HoltWintersState(level=level, trend=trend, seasonal=seasonal, fitted=fitted)


def exponential_smoothing_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Forecast ``(level + h * trend) * seasonal[(n + h - 1) mod 12]``, floored at 0.

    Confidence is 95 minus the MAPE of the fitted values, clamped to [50, 95].
    """
    require_points(series)
    params = request.custom_parameters
    alpha = custom_fraction(params, "alpha", defaults.alpha)
    beta = custom_fraction(params, "beta", defaults.beta)
    gamma = custom_fraction(params, "gamma", defaults.gamma)

    values = series.to_numpy(dtype=float).tolist()
    n = len(values)
    state = holt_winters_fit(values, alpha, beta, gamma)

    horizon = defaults.horizon_months
    projected = []
    for h in range(1, horizon + 1):
        factor = state.seasonal[(n + h - 1) % CYCLE_LENGTH]
        projected.append(max(0.0, (state.level + h * state.trend) * factor))
    projection = pd.Series(projected, index=future_months(series.index[-1], horizon), dtype=float)

    mape = mean_absolute_percentage_error(values, state.fitted)
    logger.debug(
        "Holt-Winters level=%.4f trend=%.4f mape=%.2f over %d points",
        state.level,
        state.trend,
        mape,
        n,
    )

    return StrategyResult(
        projection=projection,
        projected_value=float(projection.iloc[-1]),
        confidence=clamp(MAX_CONFIDENCE - mape, MIN_CONFIDENCE, MAX_CONFIDENCE),
        parameters={
            "alpha": alpha,
            "beta": beta,
            "gamma": gamma,
            "level": state.level,
            "trend": state.trend,
            "seasonal_factors": list(state.seasonal),
            "mape": mape,
        },
    )
