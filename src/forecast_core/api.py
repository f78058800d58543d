"""Public API for the forecasting engine.

``run_forecast`` turns an in-memory series and a request into a
``ForecastResult`` with no side effects. ``ForecastService`` wires it to a
historical data source and a forecast repository and exposes the
operations used by the surrounding application.
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from forecast_core.accuracy import compute_accuracy
from forecast_core.analysis import analyze_seasonality, analyze_trend
from forecast_core.config import ForecastDefaults
from forecast_core.data.preparation import history_window, recent_window
from forecast_core.data.sources import HistoricalDataSource
from forecast_core.exceptions import EmptySeriesError, ForecastNotFoundError
from forecast_core.models import get_strategy
from forecast_core.narrative import generate_assumptions, identify_risks
from forecast_core.repository import ForecastRepository
from forecast_core.types import (
    ForecastFilters,
    ForecastPage,
    ForecastRequest,
    ForecastResult,
    Pagination,
)
from forecast_core.utils import mean

logger = logging.getLogger(__name__)


def calculate_base_value(series: pd.Series, months: int = 3) -> float:
    """Average of the last ``months`` observations (fewer if the series is shorter).

    Raises:
        EmptySeriesError: If the series has no observations.
    """
    if len(series) == 0:
        raise EmptySeriesError("Cannot compute a base value from an empty series")
    return mean(recent_window(series, months).to_numpy(dtype=float).tolist())


def run_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: Optional[ForecastDefaults] = None,
    tenant_id: str = "",
    user_id: str = "",
) -> ForecastResult:
    """Run one forecast in memory.

    This function:
    - does NOT fetch history or persist anything,
    - MAY log progress via the logging module.

    Args:
        series: Monthly history, typically the 24 months before request.start_date.
        request: What to forecast and with which method.
        defaults: Strategy defaults. If None, uses ForecastDefaults().
        tenant_id: Owner recorded on the result.
        user_id: Creator recorded on the result.

    Returns:
        Unpersisted ForecastResult (no id or timestamps).

    Raises:
        EmptySeriesError: If the series has no observations.
        UnsupportedMethodError: If the request method is not supported.
        ConfigError: If custom parameters are invalid.
    """
    if defaults is None:
        defaults = ForecastDefaults()
    if len(series) == 0:
        raise EmptySeriesError(
            f"No {request.metric_type.value} history before {request.start_date.date()}"
        )

    strategy = get_strategy(request.method)
    base_value = calculate_base_value(series, defaults.base_value_months)
    outcome = strategy(series, request, defaults)

    trend = analyze_trend(series)
    seasonality = analyze_seasonality(series)

    if len(series) < defaults.seasonal_period:
        logger.warning(
            "%s: only %d months of history, forecast precision is reduced",
            request.metric_type.value,
            len(series),
        )

    return ForecastResult(
        tenant_id=tenant_id,
        metric_type=request.metric_type,
        period=request.period,
        start_date=request.start_date,
        end_date=request.end_date,
        base_value=base_value,
        projected_value=outcome.projected_value,
        confidence=outcome.confidence,
        method=request.method,
        method_parameters=outcome.parameters,
        assumptions=generate_assumptions(request.method, trend, seasonality),
        risks=identify_risks(outcome.confidence, trend),
        trend_analysis=trend,
        seasonality_analysis=seasonality,
        projection=outcome.projection,
        created_by=user_id,
        notes=request.notes,
    )


class ForecastService:
    """Forecast generation, accuracy tracking and listing for tenants.

    Attributes:
        source: Where historical monthly series come from.
        repository: Where generated forecasts are stored.
        defaults: Strategy defaults passed to every forecast.
    """

    def __init__(
        self,
        source: HistoricalDataSource,
        repository: ForecastRepository,
        defaults: Optional[ForecastDefaults] = None,
    ) -> None:
        self.source = source
        self.repository = repository
        self.defaults = defaults if defaults is not None else ForecastDefaults()

    def generate_forecast(
        self,
        tenant_id: str,
        user_id: str,
        request: ForecastRequest,
    ) -> ForecastResult:
        """Fetch history, run the requested method and persist the result.

        History covers ``defaults.history_months`` months before
        request.start_date. Source and repository errors propagate unchanged.

        Returns:
            The stored ForecastResult, with id and timestamps assigned.
        """
        from_date, to_date = history_window(request.start_date, self.defaults.history_months)
        try:
            series = self.source.fetch_series(tenant_id, request.metric_type, from_date, to_date)
            result = run_forecast(series, request, self.defaults, tenant_id=tenant_id, user_id=user_id)
            stored = self.repository.create(result)
        except Exception as e:
            logger.error(
                "Failed to generate %s forecast for tenant %s (%s): %s",
                request.method.value,
                tenant_id,
                request.metric_type.value,
                e,
            )
            raise

        logger.info(
            "Forecast %s generated for tenant %s: method=%s projected=%.2f confidence=%.1f",
            stored.id,
            tenant_id,
            request.method.value,
            stored.projected_value,
            stored.confidence,
        )
        return stored

    def update_forecast_accuracy(
        self,
        tenant_id: str,
        forecast_id: str,
        actual_value: float,
    ) -> float:
        """Score a stored forecast against the observed value and persist the score.

        Returns:
            The accuracy percentage that was stored.

        Raises:
            ForecastNotFoundError: If the tenant has no forecast with that id.
        """
        try:
            forecast = self.repository.get(tenant_id, forecast_id)
            if forecast is None:
                raise ForecastNotFoundError(f"Forecast {forecast_id} not found")
            accuracy = compute_accuracy(forecast.projected_value, actual_value)
            self.repository.update_accuracy(tenant_id, forecast_id, accuracy)
        except Exception as e:
            logger.error(
                "Failed to update accuracy of forecast %s for tenant %s: %s",
                forecast_id,
                tenant_id,
                e,
            )
            raise

        logger.info(
            "Forecast %s accuracy updated for tenant %s: %.2f%%", forecast_id, tenant_id, accuracy
        )
        return accuracy

    def list_forecasts(
        self,
        tenant_id: str,
        filters: Optional[ForecastFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> ForecastPage:
        """List a tenant's forecasts, newest first."""
        return self.repository.list(
            tenant_id,
            filters if filters is not None else ForecastFilters(),
            pagination if pagination is not None else Pagination(),
        )
