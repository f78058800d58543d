"""Data preparation utilities for monthly time series.

This module turns raw (date, value) observations into the monthly series
consumed by the analyzers and forecast strategies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Union

import numpy as np
import pandas as pd

from forecast_core.exceptions import DataQualityError, EmptySeriesError

SeriesInput = Union[pd.Series, pd.DataFrame, Mapping, Iterable]


def build_monthly_series(
    points: SeriesInput,
    date_column: str = "date",
    value_column: str = "value",
) -> pd.Series:
    """Build a monthly time series from raw observations.

    Dates are normalized to the first day of their month and the result is
    sorted. Months without data stay absent (gaps are not zero-filled).

    Args:
        points: A Series indexed by date, a DataFrame with date/value columns,
            a mapping {date: value}, or an iterable of (date, value) pairs.
        date_column: Date column name when points is a DataFrame.
        value_column: Value column name when points is a DataFrame.

    Returns:
        Float Series indexed by a month-start DatetimeIndex, strictly increasing.

    Raises:
        EmptySeriesError: If there are no observations.
        DataQualityError: If columns are missing, values are negative or
            non-finite, or two observations fall in the same month.
    """
    if isinstance(points, pd.DataFrame):
        missing = [c for c in (date_column, value_column) if c not in points.columns]
        if missing:
            raise DataQualityError(
                f"Missing required columns: {missing}. Required: {[date_column, value_column]}"
            )
        series = pd.Series(points[value_column].to_numpy(), index=points[date_column])
    elif isinstance(points, pd.Series):
        series = points.copy()
    elif isinstance(points, Mapping):
        series = pd.Series(dict(points))
    else:
        pairs = list(points)
        series = pd.Series([v for _, v in pairs], index=[d for d, _ in pairs], dtype=float)

    if series.empty:
        raise EmptySeriesError("Time series has no observations")

    series = series.astype(float)
    if not np.isfinite(series.to_numpy()).all():
        raise DataQualityError("Time series contains NaN or infinite values")
    if (series < 0).any():
        raise DataQualityError("Time series contains negative values")

    index = pd.DatetimeIndex(pd.to_datetime(series.index)).to_period("M").to_timestamp()
    series.index = index
    series = series.sort_index()

    duplicated = series.index[series.index.duplicated()]
    if len(duplicated) > 0:
        months = sorted({ts.strftime("%Y-%m") for ts in duplicated})
        raise DataQualityError(f"Multiple observations for the same month: {months}")

    series.name = value_column
    return series


def recent_window(series: pd.Series, months: int) -> pd.Series:
    """Return the last ``months`` points (fewer if the series is shorter)."""
    if months <= 0:
        return series.iloc[0:0]
    return series.iloc[-months:]


def history_window(start_date: date | pd.Timestamp, months: int) -> tuple[pd.Timestamp, pd.Timestamp]:
    """Return the (from, to) dates covering ``months`` months before start_date."""
    to_date = pd.Timestamp(start_date)
    from_date = to_date - pd.DateOffset(months=months)
    return from_date, to_date
