"""Forecast accuracy scoring.

This module provides:

- ``compute_accuracy``: the score stored on a forecast once its actual
  value is observed
- ``validate_forecast``: error measures between an observed and a
  projected series
- ``backtest_method``: holdout evaluation of a forecast method on history
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from statsmodels.tools.eval_measures import meanabs, rmse

from forecast_core.config import ForecastDefaults
from forecast_core.exceptions import ConfigError, DataQualityError
from forecast_core.models import get_strategy
from forecast_core.types import (
    ForecastMethod,
    ForecastPeriod,
    ForecastRequest,
    MetricType,
)
from forecast_core.utils import mean_absolute_percentage_error

logger = logging.getLogger(__name__)


def compute_accuracy(projected_value: float, actual_value: float) -> float:
    """Accuracy of a projection against the observed value, in percent.

    ``(1 - |actual - projected| / projected) * 100`` when projected > 0,
    otherwise 0. Large misses give negative scores.

    Examples:
        >>> compute_accuracy(100.0, 90.0)
        90.0
        >>> compute_accuracy(0.0, 50.0)
        0.0
    """
    if projected_value <= 0:
        return 0.0
    return (1 - abs(actual_value - projected_value) / projected_value) * 100


@dataclass(frozen=True)
class ForecastValidation:
    """Error measures of a projection against observed values.

    Attributes:
        mape: Mean absolute percentage error, in percent (zero actuals skipped).
        mae: Mean absolute error.
        rmse: Root mean squared error.
        correlation: Pearson correlation, 0.0 when undefined.
        accuracy_score: ``max(0, 100 - mape)``.
        points: Number of months compared.
    """

    mape: float
    mae: float
    rmse: float
    correlation: float
    accuracy_score: float
    points: int

    def to_dict(self) -> dict:
        return {
            "mape": round(self.mape, 6),
            "mae": round(self.mae, 6),
            "rmse": round(self.rmse, 6),
            "correlation": round(self.correlation, 6),
            "accuracy_score": round(self.accuracy_score, 6),
            "points": self.points,
        }


def validate_forecast(actual: pd.Series, predicted: pd.Series) -> ForecastValidation:
    """Compare a projection to observed values over their shared months.

    Raises:
        DataQualityError: If the two series share no months.
    """
    aligned = pd.concat([actual.rename("actual"), predicted.rename("predicted")], axis=1, join="inner")
    if aligned.empty:
        raise DataQualityError("Actual and predicted series have no months in common")

    a = aligned["actual"].to_numpy(dtype=float)
    p = aligned["predicted"].to_numpy(dtype=float)
    mape = mean_absolute_percentage_error(a.tolist(), p.tolist())

    correlation = 0.0
    if len(a) > 1 and np.std(a) > 0 and np.std(p) > 0:
        correlation = float(np.corrcoef(a, p)[0, 1])

    return ForecastValidation(
        mape=mape,
        mae=float(meanabs(a, p)),
        rmse=float(rmse(a, p)),
        correlation=correlation,
        accuracy_score=max(0.0, 100 - mape),
        points=len(a),
    )


def backtest_method(
    series: pd.Series,
    method: ForecastMethod | str,
    holdout: int = 3,
    defaults: Optional[ForecastDefaults] = None,
    period: ForecastPeriod = ForecastPeriod.MONTHLY,
) -> ForecastValidation:
    """Evaluate a method by forecasting the last ``holdout`` months of history.

    The method is run on everything before the holdout with an end date at
    the last holdout month, and its projection is validated against the
    held-out observations.

    Raises:
        ConfigError: If holdout is not smaller than the series length.
        UnsupportedMethodError: If the method is not supported.
    """
    if holdout < 1 or holdout >= len(series):
        raise ConfigError(
            f"holdout must be between 1 and {len(series) - 1} for a series of {len(series)} points"
        )
    defaults = defaults or ForecastDefaults()
    strategy = get_strategy(method)

    train = series.iloc[:-holdout]
    test = series.iloc[-holdout:]
    request = ForecastRequest(
        metric_type=MetricType.REVENUE,
        period=period,
        start_date=test.index[0],
        end_date=test.index[-1],
        method=method,
    )
    result = strategy(train, request, defaults)
    validation = validate_forecast(test, result.projection)
    logger.info(
        "Backtest %s over %d months: MAPE %.2f%%",
        request.method.value,
        validation.points,
        validation.mape,
    )
    return validation
