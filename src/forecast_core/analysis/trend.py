"""Trend analysis: growth direction, strength and volatility."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from forecast_core.types import TrendAnalysis, TrendDirection
from forecast_core.utils import growth_rates, mean, volatility

logger = logging.getLogger(__name__)

# Average growth beyond +/- this fraction counts as a trend
TREND_THRESHOLD = 0.02


def classify_growth(avg_growth_rate: float) -> TrendDirection:
    if avg_growth_rate > TREND_THRESHOLD:
        return TrendDirection.INCREASING
    if avg_growth_rate < -TREND_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def find_change_points(series: pd.Series) -> list[pd.Timestamp]:
    """Months where period-over-period growth reverses sign.

    Only consecutive non-zero changes are compared, so a flat stretch does
    not mark a reversal by itself.
    """
    values = series.to_numpy(dtype=float)
    points: list[pd.Timestamp] = []
    prev_sign = 0
    for i in range(1, len(values)):
        delta = values[i] - values[i - 1]
        sign = int(np.sign(delta))
        if sign == 0:
            continue
        if prev_sign != 0 and sign != prev_sign:
            points.append(series.index[i - 1])
        prev_sign = sign
    return points


def analyze_trend(series: pd.Series) -> TrendAnalysis:
    """Compute growth direction, strength and volatility of a series.

    Never raises for short input: with fewer than two usable points the
    result is STABLE with zero strength and volatility.

    Args:
        series: Monthly time series.

    Returns:
        TrendAnalysis for the series.
    """
    values = series.to_numpy(dtype=float).tolist()
    rates = growth_rates(values)
    if not rates:
        logger.debug("No computable growth rates over %d points, trend is STABLE", len(values))

    avg_growth = mean(rates)
    return TrendAnalysis(
        direction=classify_growth(avg_growth),
        strength=abs(avg_growth) * 100,
        volatility=volatility(values),
        average_growth_rate=avg_growth,
        change_points=find_change_points(series),
    )
