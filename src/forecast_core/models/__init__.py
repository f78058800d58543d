"""Forecast method implementations.

Adding a Forecast Method Checklist
==================================

1. Write a pure function with the ForecastStrategy signature:
   ```python
   def my_forecast(
       series: pd.Series, request: ForecastRequest, defaults: ForecastDefaults
   ) -> StrategyResult:
       require_points(series)
       ...
   ```

2. Constraints:
   - Accept any series with at least one point; degrade confidence, never raise
   - Never return a negative value at any projection point
   - Read parameter defaults from ``defaults``; overrides from
     ``request.custom_parameters``
   - Keep ``parameters`` JSON-like (floats, ints, strings, lists, dicts)

3. Add a ForecastMethod member and register the function in STRATEGIES.

Implementations:
- linear_regression_forecast: see models/linear.py
- moving_average_forecast: see models/moving_average.py
- exponential_smoothing_forecast: see models/exponential_smoothing.py
- seasonal_decomposition_forecast: see models/seasonal.py
- ensemble_forecast: see models/ensemble.py
- expert_judgment_forecast: see models/expert.py
"""

from __future__ import annotations

from forecast_core.models.base import ForecastStrategy
from forecast_core.models.ensemble import ensemble_forecast
from forecast_core.models.expert import expert_judgment_forecast
from forecast_core.models.exponential_smoothing import exponential_smoothing_forecast
from forecast_core.models.linear import linear_regression_forecast
from forecast_core.models.moving_average import moving_average_forecast
from forecast_core.models.seasonal import seasonal_decomposition_forecast
from forecast_core.types import ForecastMethod

STRATEGIES: dict[ForecastMethod, ForecastStrategy] = {
    ForecastMethod.LINEAR_REGRESSION: linear_regression_forecast,
    ForecastMethod.MOVING_AVERAGE: moving_average_forecast,
    ForecastMethod.EXPONENTIAL_SMOOTHING: exponential_smoothing_forecast,
    ForecastMethod.SEASONAL_DECOMPOSITION: seasonal_decomposition_forecast,
    ForecastMethod.MACHINE_LEARNING: ensemble_forecast,
    ForecastMethod.EXPERT_JUDGMENT: expert_judgment_forecast,
}


def get_strategy(method: ForecastMethod | str) -> ForecastStrategy:
    """Return the strategy function for a forecast method.

    Raises:
        UnsupportedMethodError: If the method is not supported.
    """
    return STRATEGIES[ForecastMethod.parse(method)]


__all__ = [
    "STRATEGIES",
    "ForecastStrategy",
    "ensemble_forecast",
    "expert_judgment_forecast",
    "exponential_smoothing_forecast",
    "get_strategy",
    "linear_regression_forecast",
    "moving_average_forecast",
    "seasonal_decomposition_forecast",
]
