"""Strategy interface for forecast methods.

Every forecast method is a plain function with the ``ForecastStrategy``
signature. Strategies are pure: they read the series, the request's horizon
and custom parameters, and the explicit defaults struct, and return a
``StrategyResult`` without touching any shared state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import pandas as pd

from forecast_core.config import ForecastDefaults
from forecast_core.exceptions import ConfigError, EmptySeriesError
from forecast_core.types import ForecastRequest, StrategyResult


class ForecastStrategy(Protocol):
    """Signature shared by all forecast method implementations."""

    def __call__(
        self,
        series: pd.Series,
        request: ForecastRequest,
        defaults: ForecastDefaults,
    ) -> StrategyResult:
        ...


def require_points(series: pd.Series) -> None:
    """Fail fast on an empty series; every other length is accepted.

    Raises:
        EmptySeriesError: If the series has no observations.
    """
    if series is None or len(series) == 0:
        raise EmptySeriesError("Cannot forecast from an empty series")


def custom_number(params: Mapping[str, Any], key: str, default: float) -> float:
    """Read a numeric override from custom parameters.

    Raises:
        ConfigError: If the override is present but not numeric.
    """
    value = params.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Custom parameter '{key}' must be numeric, got {value!r}") from e


def custom_int(params: Mapping[str, Any], key: str, default: int) -> int:
    """Read a positive integer override from custom parameters.

    Raises:
        ConfigError: If the override is present but not a positive integer.
    """
    value = custom_number(params, key, default)
    if value < 1 or int(value) != value:
        raise ConfigError(f"Custom parameter '{key}' must be a positive integer, got {value!r}")
    return int(value)


def custom_fraction(params: Mapping[str, Any], key: str, default: float) -> float:
    """Read a smoothing-constant override, which must lie in (0, 1].

    Raises:
        ConfigError: If the override is not numeric or is out of range.
    """
    value = custom_number(params, key, default)
    if not 0.0 < value <= 1.0:
        raise ConfigError(f"Custom parameter '{key}' must be in (0, 1], got {value!r}")
    return value
