"""Data loading and preparation utilities."""

from forecast_core.data.preparation import build_monthly_series, recent_window
from forecast_core.data.sources import (
    DataFrameHistoricalSource,
    HistoricalDataSource,
    RestHistoricalSource,
)

__all__ = [
    "DataFrameHistoricalSource",
    "HistoricalDataSource",
    "RestHistoricalSource",
    "build_monthly_series",
    "recent_window",
]
