"""Configuration for the forecasting engine.

Module-level constants hold the documented defaults. ``ForecastDefaults``
bundles them into a single immutable struct that is passed explicitly into
every strategy, so strategies never read ambient state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from forecast_core.exceptions import ConfigError

# Months of history loaded before a request's start date
HISTORY_MONTHS = 24

# Projection length for methods that are not bounded by the request end date
HORIZON_MONTHS = 12

# Number of trailing points averaged into the base value
BASE_VALUE_MONTHS = 3

# Holt-Winters smoothing constants
ALPHA = 0.3
BETA = 0.1
GAMMA = 0.2

# Seasonal cycle length (monthly data, yearly seasonality)
SEASONAL_PERIOD = 12

# Ensemble weights: linear regression, moving average, exponential smoothing
ENSEMBLE_WEIGHTS = (0.4, 0.3, 0.3)

# Trailing window used by expert judgment to estimate recent growth
EXPERT_LOOKBACK_MONTHS = 6

# Default moving-average window per forecast period
WINDOW_SIZES = {
    "MONTHLY": 3,
    "QUARTERLY": 4,
    "ANNUALLY": 2,
    "ROLLING_12_MONTHS": 12,
}
FALLBACK_WINDOW_SIZE = 6


@dataclass(frozen=True)
class Scenario:
    """A named expert-judgment scenario.

    Attributes:
        name: Scenario label, e.g. "conservative".
        growth_factor: Multiplier applied to the recent growth rate.
        weight: Contribution of the scenario to the blended projection.
    """

    name: str
    growth_factor: float
    weight: float


DEFAULT_SCENARIOS = (
    Scenario("conservative", 0.5, 0.3),
    Scenario("realistic", 1.0, 0.5),
    Scenario("optimistic", 1.5, 0.2),
)


@dataclass(frozen=True)
class ForecastDefaults:
    """Parameter defaults shared by all forecast strategies.

    Attributes:
        history_months: Months of history fetched before the start date.
        horizon_months: Projection length for methods without a date-derived horizon.
        base_value_months: Trailing points averaged into the base value.
        alpha: Holt-Winters level smoothing constant.
        beta: Holt-Winters trend smoothing constant.
        gamma: Holt-Winters seasonal smoothing constant.
        seasonal_period: Length of the seasonal cycle in months.
        ensemble_weights: Weights for (linear regression, moving average,
            exponential smoothing). Must sum to 1.
        expert_lookback_months: Trailing window for expert-judgment growth.
        window_sizes: Moving-average window per forecast period name.
        fallback_window_size: Window used for periods missing from window_sizes.
        scenarios: Default expert-judgment scenarios.
    """

    history_months: int = HISTORY_MONTHS
    horizon_months: int = HORIZON_MONTHS
    base_value_months: int = BASE_VALUE_MONTHS
    alpha: float = ALPHA
    beta: float = BETA
    gamma: float = GAMMA
    seasonal_period: int = SEASONAL_PERIOD
    ensemble_weights: tuple[float, float, float] = ENSEMBLE_WEIGHTS
    expert_lookback_months: int = EXPERT_LOOKBACK_MONTHS
    window_sizes: dict[str, int] = field(default_factory=lambda: dict(WINDOW_SIZES))
    fallback_window_size: int = FALLBACK_WINDOW_SIZE
    scenarios: tuple[Scenario, ...] = DEFAULT_SCENARIOS

    def __post_init__(self) -> None:
        if self.horizon_months < 1:
            raise ConfigError(f"horizon_months must be >= 1, got {self.horizon_months}")
        if self.history_months < 1:
            raise ConfigError(f"history_months must be >= 1, got {self.history_months}")
        if self.seasonal_period < 1:
            raise ConfigError(f"seasonal_period must be >= 1, got {self.seasonal_period}")
        for name in ("alpha", "beta", "gamma"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigError(f"{name} must be in (0, 1], got {value}")
        if len(self.ensemble_weights) != 3:
            raise ConfigError("ensemble_weights must have exactly three entries")
        if abs(sum(self.ensemble_weights) - 1.0) > 1e-9:
            raise ConfigError(
                f"ensemble_weights must sum to 1, got {sum(self.ensemble_weights)}"
            )
        if not self.scenarios:
            raise ConfigError("At least one expert-judgment scenario is required")

    def window_size_for(self, period: str) -> int:
        """Return the default moving-average window for a forecast period."""
        return self.window_sizes.get(period, self.fallback_window_size)

    def with_overrides(self, **changes: object) -> ForecastDefaults:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> ForecastDefaults:
        """Create defaults, letting FORECAST_* environment variables override them.

        Recognized variables: FORECAST_HORIZON_MONTHS, FORECAST_HISTORY_MONTHS,
        FORECAST_ALPHA, FORECAST_BETA, FORECAST_GAMMA.

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range.
        """
        try:
            return cls(
                horizon_months=int(os.environ.get("FORECAST_HORIZON_MONTHS", HORIZON_MONTHS)),
                history_months=int(os.environ.get("FORECAST_HISTORY_MONTHS", HISTORY_MONTHS)),
                alpha=float(os.environ.get("FORECAST_ALPHA", ALPHA)),
                beta=float(os.environ.get("FORECAST_BETA", BETA)),
                gamma=float(os.environ.get("FORECAST_GAMMA", GAMMA)),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid forecast environment configuration: {e}") from e
