"""Shared fixtures for forecasting engine tests."""

from collections.abc import Callable, Sequence

import pandas as pd
import pytest

from forecast_core.config import ForecastDefaults
from forecast_core.types import ForecastMethod, ForecastPeriod, ForecastRequest, MetricType


def monthly(values: Sequence[float], start: str = "2022-01-01") -> pd.Series:
    """Build a gap-free monthly series starting at ``start``."""
    index = pd.date_range(start=start, periods=len(values), freq="MS")
    return pd.Series([float(v) for v in values], index=index)


@pytest.fixture
def make_series() -> Callable[..., pd.Series]:
    return monthly


@pytest.fixture
def defaults() -> ForecastDefaults:
    return ForecastDefaults()


@pytest.fixture
def make_request() -> Callable[..., ForecastRequest]:
    def _make(
        method: ForecastMethod | str,
        start_date: str = "2024-01-01",
        end_date: str = "2024-12-01",
        period: ForecastPeriod = ForecastPeriod.MONTHLY,
        **custom: object,
    ) -> ForecastRequest:
        return ForecastRequest(
            metric_type=MetricType.REVENUE,
            period=period,
            start_date=start_date,
            end_date=end_date,
            method=method,
            custom_parameters=dict(custom),
        )

    return _make


@pytest.fixture
def seasonal_pattern() -> list[float]:
    """Twelve monthly values with clear peaks in Nov/Dec and lows in Jan/Feb."""
    return [600, 700, 950, 1000, 1000, 1000, 1000, 1000, 1050, 1050, 1250, 1400]
