"""Seasonality analysis: monthly seasonal indices and seasonal strength.

Seasonal indices compare each calendar month's mean to the mean of all
twelve monthly means, pooled over however many years of history exist.
"""

from __future__ import annotations

import pandas as pd

from forecast_core.types import SeasonalIndex, SeasonalityAnalysis
from forecast_core.utils import stddev

PEAK_THRESHOLD = 1.1
LOW_THRESHOLD = 0.9

# Seasonal patterns are meaningless below one year of history
MIN_POINTS = 12


def null_seasonality() -> SeasonalityAnalysis:
    return SeasonalityAnalysis(
        strength=0.0,
        peak_months=[],
        low_months=[],
        seasonal_indices=[SeasonalIndex(month=m, index=1.0) for m in range(1, 13)],
        year_over_year_growth=[],
    )


def monthly_means(series: pd.Series) -> list[float]:
    """Mean value per calendar month (January first), 0.0 for months without data."""
    by_month = series.groupby(series.index.month).mean()
    return [float(by_month.get(month, 0.0)) for month in range(1, 13)]


def year_over_year_growth(series: pd.Series) -> list[tuple[int, float]]:
    """Growth of each calendar year's total over the previous year's total."""
    totals = series.groupby(series.index.year).sum()
    growth = []
    for year in totals.index:
        prev = year - 1
        if prev not in totals.index or totals[prev] == 0:
            continue
        growth.append((int(year), float((totals[year] - totals[prev]) / totals[prev])))
    return growth


def analyze_seasonality(series: pd.Series) -> SeasonalityAnalysis:
    """Compute seasonal indices, peak/low months and seasonal strength.

    Args:
        series: Monthly time series.

    Returns:
        SeasonalityAnalysis. Series shorter than twelve points get a null
        result (strength 0, all indices 1.0, no peak or low months).
    """
    if len(series) < MIN_POINTS:
        return null_seasonality()

    means = monthly_means(series)
    overall = sum(means) / 12

    indices = [
        SeasonalIndex(month=month, index=(avg / overall) if overall > 0 else 1.0)
        for month, avg in enumerate(means, start=1)
    ]

    return SeasonalityAnalysis(
        strength=(stddev(means) / overall * 100) if overall > 0 else 0.0,
        peak_months=[si.month for si in indices if si.index > PEAK_THRESHOLD],
        low_months=[si.month for si in indices if si.index < LOW_THRESHOLD],
        seasonal_indices=indices,
        year_over_year_growth=year_over_year_growth(series),
    )
