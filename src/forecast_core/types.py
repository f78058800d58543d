"""Shared types for the forecasting engine.

A time series throughout the package is a ``pd.Series`` of non-negative
floats indexed by a month-start ``DatetimeIndex`` in strictly increasing
order (see ``forecast_core.data.preparation.build_monthly_series``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

import pandas as pd

from forecast_core.exceptions import ConfigError, UnsupportedMethodError


class ForecastMethod(str, Enum):
    LINEAR_REGRESSION = "LINEAR_REGRESSION"
    MOVING_AVERAGE = "MOVING_AVERAGE"
    EXPONENTIAL_SMOOTHING = "EXPONENTIAL_SMOOTHING"
    SEASONAL_DECOMPOSITION = "SEASONAL_DECOMPOSITION"
    MACHINE_LEARNING = "MACHINE_LEARNING"  # fixed-weight ensemble
    EXPERT_JUDGMENT = "EXPERT_JUDGMENT"

    @classmethod
    def parse(cls, value: str | ForecastMethod) -> ForecastMethod:
        """Coerce a string into a ForecastMethod.

        Raises:
            UnsupportedMethodError: If the value is not a supported method.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError as e:
            raise UnsupportedMethodError(f"Unsupported forecast method: {value}") from e


class MetricType(str, Enum):
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"
    PROFIT = "PROFIT"
    CASH_FLOW = "CASH_FLOW"
    OCCUPANCY = "OCCUPANCY"
    MEMBERSHIP = "MEMBERSHIP"


class ForecastPeriod(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"
    ROLLING_12_MONTHS = "ROLLING_12_MONTHS"


class ForecastStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    SUPERSEDED = "SUPERSEDED"


class TrendDirection(str, Enum):
    INCREASING = "INCREASING"
    DECREASING = "DECREASING"
    STABLE = "STABLE"


@dataclass(frozen=True)
class TrendAnalysis:
    """Growth, direction and volatility of a series.

    Attributes:
        direction: Classification of the average growth rate.
        strength: Absolute average growth rate in percent.
        volatility: Population standard deviation of log-returns.
        average_growth_rate: Mean period-over-period growth rate (fraction).
        change_points: Months where the sign of period-over-period growth reverses.
    """

    direction: TrendDirection
    strength: float
    volatility: float
    average_growth_rate: float = 0.0
    change_points: list[pd.Timestamp] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "strength": self.strength,
            "volatility": self.volatility,
            "average_growth_rate": self.average_growth_rate,
            "change_points": [ts.date().isoformat() for ts in self.change_points],
        }


@dataclass(frozen=True)
class SeasonalIndex:
    month: int
    index: float


@dataclass(frozen=True)
class SeasonalityAnalysis:
    """Monthly seasonal profile of a series.

    Attributes:
        strength: Coefficient of variation of the monthly means, in percent.
        peak_months: Months (1-12) whose index exceeds the peak threshold.
        low_months: Months (1-12) whose index is below the low threshold.
        seasonal_indices: Twelve entries, one per calendar month.
        year_over_year_growth: (year, growth) for each calendar year that
            follows another year present in the history.
    """

    strength: float
    peak_months: list[int]
    low_months: list[int]
    seasonal_indices: list[SeasonalIndex]
    year_over_year_growth: list[tuple[int, float]] = field(default_factory=list)

    def index_for(self, month: int) -> float:
        for si in self.seasonal_indices:
            if si.month == month:
                return si.index
        return 1.0

    def to_dict(self) -> dict:
        return {
            "strength": self.strength,
            "peak_months": list(self.peak_months),
            "low_months": list(self.low_months),
            "seasonal_indices": [
                {"month": si.month, "index": si.index} for si in self.seasonal_indices
            ],
            "year_over_year_growth": [
                {"year": year, "growth": growth} for year, growth in self.year_over_year_growth
            ],
        }


@dataclass
class StrategyResult:
    """Output of a single forecast strategy.

    Attributes:
        projection: Projected monthly values indexed by future month starts.
        projected_value: Final projected scalar.
        confidence: Heuristic confidence in [0, 100].
        parameters: Method-specific parameters (JSON-like values).
    """

    projection: pd.Series
    projected_value: float
    confidence: float
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class ForecastRequest:
    """A request to forecast one metric over a date range.

    Attributes:
        metric_type: Metric to forecast.
        period: Granularity of the forecast; drives default moving-average windows.
        start_date: First month of the forecast; history is loaded before it.
        end_date: Last month of the forecast; bounds the linear-regression horizon.
        method: Forecast method. Strings are coerced to ForecastMethod.
        custom_parameters: Method-specific overrides (window_size, weights,
            alpha, beta, gamma, seasonal_period, scenarios).
        notes: Free-form notes carried into the result.
    """

    metric_type: MetricType
    period: ForecastPeriod
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    method: ForecastMethod
    custom_parameters: Mapping[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.method = ForecastMethod.parse(self.method)
        self.metric_type = MetricType(self.metric_type)
        self.period = ForecastPeriod(self.period)
        self.start_date = pd.Timestamp(self.start_date)
        self.end_date = pd.Timestamp(self.end_date)
        if self.end_date < self.start_date:
            raise ConfigError(
                f"end_date {self.end_date.date()} is before start_date {self.start_date.date()}"
            )
        if self.custom_parameters is None:
            self.custom_parameters = {}


@dataclass
class ForecastResult:
    """A generated forecast, as persisted by a ForecastRepository.

    ``id``, ``created_at`` and ``updated_at`` are assigned by the repository.
    ``accuracy`` is the only field updated after creation.
    """

    tenant_id: str
    metric_type: MetricType
    period: ForecastPeriod
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    base_value: float
    projected_value: float
    confidence: float
    method: ForecastMethod
    method_parameters: dict[str, Any]
    assumptions: list[str]
    risks: list[str]
    trend_analysis: TrendAnalysis
    seasonality_analysis: SeasonalityAnalysis
    projection: pd.Series
    created_by: str
    status: ForecastStatus = ForecastStatus.ACTIVE
    notes: Optional[str] = None
    accuracy: Optional[float] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Return a JSON-compatible view of the forecast."""
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "metric_type": self.metric_type.value,
            "period": self.period.value,
            "start_date": self.start_date.date().isoformat(),
            "end_date": self.end_date.date().isoformat(),
            "base_value": round(self.base_value, 4),
            "projected_value": round(self.projected_value, 4),
            "confidence": round(self.confidence, 4),
            "method": self.method.value,
            "method_parameters": self.method_parameters,
            "assumptions": list(self.assumptions),
            "risks": list(self.risks),
            "trend_analysis": self.trend_analysis.to_dict(),
            "seasonality_analysis": self.seasonality_analysis.to_dict(),
            "projection": [
                {"date": ts.date().isoformat(), "value": round(float(v), 4)}
                for ts, v in self.projection.items()
            ],
            "accuracy": self.accuracy,
            "status": self.status.value,
            "notes": self.notes,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ForecastFilters:
    metric_type: Optional[MetricType] = None
    period: Optional[ForecastPeriod] = None
    method: Optional[ForecastMethod] = None
    status: Optional[ForecastStatus] = None

    def matches(self, forecast: ForecastResult) -> bool:
        if self.metric_type is not None and forecast.metric_type != self.metric_type:
            return False
        if self.period is not None and forecast.period != self.period:
            return False
        if self.method is not None and forecast.method != self.method:
            return False
        if self.status is not None and forecast.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class Pagination:
    skip: int = 0
    take: int = 50


@dataclass
class ForecastPage:
    items: list[ForecastResult]
    total: int
    has_more: bool
