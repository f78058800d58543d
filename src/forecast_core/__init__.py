"""Forecast Core - revenue and business-metric forecasting engine.

This package turns monthly business time series (revenue, expense, profit,
cash flow, occupancy, membership) into forward projections with a
confidence score, assumptions and risks.

Module Structure:
    forecast_core.api: run_forecast and ForecastService (orchestrator)
    forecast_core.models: the six forecast methods and their registry
    forecast_core.analysis: trend and seasonality analyzers
    forecast_core.accuracy: accuracy scoring, validation and backtests
    forecast_core.data: series preparation and historical data sources
    forecast_core.repository: forecast persistence boundary
    forecast_core.config: ForecastDefaults and module constants

Quick Start:
    >>> from forecast_core import ForecastRequest, build_monthly_series, run_forecast
    >>>
    >>> series = build_monthly_series({"2024-01-01": 1000.0, "2024-02-01": 1050.0})
    >>> request = ForecastRequest(
    ...     metric_type="REVENUE",
    ...     period="MONTHLY",
    ...     start_date="2024-03-01",
    ...     end_date="2025-02-01",
    ...     method="MOVING_AVERAGE",
    ... )
    >>> result = run_forecast(series, request)
    >>> print(result.projected_value, result.confidence)

Methods:
    LINEAR_REGRESSION, MOVING_AVERAGE, EXPONENTIAL_SMOOTHING,
    SEASONAL_DECOMPOSITION, MACHINE_LEARNING (fixed-weight ensemble),
    EXPERT_JUDGMENT
"""

__version__ = "0.1.0"

from forecast_core.api import ForecastService, run_forecast
from forecast_core.config import ForecastDefaults
from forecast_core.data.preparation import build_monthly_series
from forecast_core.exceptions import (
    ConfigError,
    DataQualityError,
    EmptySeriesError,
    ForecastAPIError,
    ForecastNotFoundError,
    SourceError,
    UnsupportedMethodError,
)
from forecast_core.types import (
    ForecastMethod,
    ForecastPeriod,
    ForecastRequest,
    ForecastResult,
    ForecastStatus,
    MetricType,
)

__all__ = [
    "ConfigError",
    "DataQualityError",
    "EmptySeriesError",
    "ForecastAPIError",
    "ForecastDefaults",
    "ForecastMethod",
    "ForecastNotFoundError",
    "ForecastPeriod",
    "ForecastRequest",
    "ForecastResult",
    "ForecastService",
    "ForecastStatus",
    "MetricType",
    "SourceError",
    "UnsupportedMethodError",
    "__version__",
    "build_monthly_series",
    "run_forecast",
]
