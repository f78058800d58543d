"""Weighted moving average forecasting."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from forecast_core.config import ForecastDefaults
from forecast_core.exceptions import ConfigError
from forecast_core.models.base import custom_int, require_points
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import clamp, coefficient_of_variation, future_months

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 40.0
MAX_CONFIDENCE = 90.0


def resolve_weights(custom: object, window: int) -> np.ndarray:
    """Validate custom weights or build equal weights for the window.

    Raises:
        ConfigError: If custom weights do not match the window or do not
            have a positive sum.
    """
    if custom is None:
        return np.full(window, 1.0 / window)
    try:
        weights = np.asarray(list(custom), dtype=float)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Moving-average weights must be numbers, got {custom!r}") from e
    if len(weights) != window:
        raise ConfigError(
            f"Moving-average weights length ({len(weights)}) must equal window size ({window})"
        )
    if (weights < 0).any() or weights.sum() <= 0:
        raise ConfigError("Moving-average weights must be non-negative with a positive sum")
    return weights


def moving_average_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Hold the weighted average of the trailing window flat over the horizon.

    The window comes from ``custom_parameters["window_size"]`` or the period
    default. Weights apply oldest-to-newest. When the series is shorter than
    the window, the trailing weights are used and renormalized.
    """
    require_points(series)
    params = request.custom_parameters
    window = custom_int(params, "window_size", defaults.window_size_for(request.period.value))
    weights = resolve_weights(params.get("weights"), window)

    recent = series.to_numpy(dtype=float)[-window:]
    if len(recent) < window:
        logger.warning(
            "Moving average window %d exceeds series length %d, using %d points",
            window,
            len(series),
            len(recent),
        )
    used_weights = weights[-len(recent):]
    projected_value = float(np.dot(recent, used_weights) / used_weights.sum())

    cv = coefficient_of_variation(recent.tolist())
    confidence = clamp(MAX_CONFIDENCE - cv * 100, MIN_CONFIDENCE, MAX_CONFIDENCE)

    dates = future_months(series.index[-1], defaults.horizon_months)
    projection = pd.Series(projected_value, index=dates, dtype=float)

    return StrategyResult(
        projection=projection,
        projected_value=projected_value,
        confidence=confidence,
        parameters={
            "window_size": window,
            "weights": [float(w) for w in weights],
            "coefficient_of_variation": cv,
        },
    )
