"""Tests for monthly series preparation."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from forecast_core.data.preparation import build_monthly_series, history_window, recent_window
from forecast_core.exceptions import DataQualityError, EmptySeriesError


def test_build_from_pairs_normalizes_and_sorts() -> None:
    """Dates snap to the first of the month and the result is sorted."""
    series = build_monthly_series([("2024-03-15", 300), ("2024-01-31", 100), ("2024-02-02", 200)])

    assert list(series.index) == [
        pd.Timestamp("2024-01-01"),
        pd.Timestamp("2024-02-01"),
        pd.Timestamp("2024-03-01"),
    ]
    assert series.tolist() == [100.0, 200.0, 300.0]
    assert series.dtype == float


def test_build_from_dataframe_and_mapping() -> None:
    df = pd.DataFrame({"month": ["2024-01-01", "2024-02-01"], "revenue": [10.0, 20.0]})
    from_frame = build_monthly_series(df, date_column="month", value_column="revenue")
    from_mapping = build_monthly_series({"2024-01-01": 10.0, "2024-02-01": 20.0})

    assert from_frame.tolist() == from_mapping.tolist() == [10.0, 20.0]
    assert list(from_frame.index) == list(from_mapping.index)


def test_gaps_are_not_filled() -> None:
    series = build_monthly_series({"2024-01-01": 10.0, "2024-04-01": 40.0})
    assert len(series) == 2


def test_empty_input_raises() -> None:
    with pytest.raises(EmptySeriesError):
        build_monthly_series([])
    with pytest.raises(EmptySeriesError):
        build_monthly_series(pd.Series(dtype=float))


@pytest.mark.parametrize(
    "points",
    [
        {"2024-01-01": -5.0},
        {"2024-01-01": np.nan},
        {"2024-01-01": np.inf},
        [("2024-01-01", 1.0), ("2024-01-20", 2.0)],
    ],
)
def test_invalid_values_raise(points) -> None:
    with pytest.raises(DataQualityError):
        build_monthly_series(points)


def test_missing_dataframe_columns() -> None:
    df = pd.DataFrame({"date": ["2024-01-01"]})
    with pytest.raises(DataQualityError, match="Missing required columns"):
        build_monthly_series(df)


def test_recent_window(make_series) -> None:
    series = make_series([1.0, 2.0, 3.0, 4.0])
    assert recent_window(series, 2).tolist() == [3.0, 4.0]
    assert recent_window(series, 10).tolist() == [1.0, 2.0, 3.0, 4.0]
    assert recent_window(series, 0).empty


def test_history_window() -> None:
    from_date, to_date = history_window(date(2024, 1, 1), 24)
    assert from_date == pd.Timestamp("2022-01-01")
    assert to_date == pd.Timestamp("2024-01-01")
