"""Expert-judgment scenario blending.

Anchors on the last observation, estimates recent growth and blends named
growth scenarios (conservative, realistic, optimistic by default).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd

from forecast_core.config import ForecastDefaults, Scenario
from forecast_core.exceptions import ConfigError
from forecast_core.models.base import require_points
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import clamp, future_months, total_growth_rate, volatility

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 60.0
MAX_CONFIDENCE = 85.0


def scenario_multipliers(
    custom: Sequence[Mapping[str, Any]] | None,
    defaults: Sequence[Scenario],
    recent_growth: float,
) -> list[dict[str, Any]]:
    """Resolve scenarios into ``{name, multiplier, weight}`` dicts.

    Default scenarios scale the recent growth rate. Custom scenarios give
    either an absolute ``multiplier`` or a ``growth`` rate directly.

    Raises:
        ConfigError: If custom scenarios are empty or malformed.
    """
    if custom is None:
        return [
            {
                "name": s.name,
                "multiplier": 1 + recent_growth * s.growth_factor,
                "weight": s.weight,
            }
            for s in defaults
        ]

    if not custom:
        raise ConfigError("Custom scenarios must contain at least one scenario")
    resolved = []
    for i, scenario in enumerate(custom):
        try:
            if "multiplier" in scenario:
                multiplier = float(scenario["multiplier"])
            else:
                multiplier = 1 + float(scenario["growth"])
            weight = float(scenario["weight"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(
                f"Scenario {i} needs a numeric 'weight' and 'multiplier' or 'growth': {scenario!r}"
            ) from e
        resolved.append(
            {"name": str(scenario.get("name", f"scenario_{i + 1}")), "multiplier": multiplier, "weight": weight}
        )
    return resolved


def expert_judgment_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Blend scenario outcomes and compound monthly towards the blended value.

    The final value is ``sum(weight * anchor * multiplier)`` over the
    scenarios, floored at 0, where the anchor is the last observation. The
    monthly path compounds at the constant rate that reaches the final value
    at the end of the horizon. Confidence is ``max(0.5, 1 - volatility)`` in
    percent, clamped to [60, 85].
    """
    require_points(series)
    values = series.to_numpy(dtype=float).tolist()
    recent = values[-defaults.expert_lookback_months:]
    recent_growth = total_growth_rate(recent)
    anchor = values[-1]

    scenarios = scenario_multipliers(
        request.custom_parameters.get("scenarios"), defaults.scenarios, recent_growth
    )
    projected_value = max(0.0, sum(anchor * s["multiplier"] * s["weight"] for s in scenarios))

    horizon = defaults.horizon_months
    if anchor > 0 and projected_value > 0:
        monthly_growth = (projected_value / anchor) ** (1 / horizon) - 1
        path = [anchor * (1 + monthly_growth) ** i for i in range(1, horizon + 1)]
    else:
        monthly_growth = 0.0
        path = [projected_value] * horizon
    projection = pd.Series(path, index=future_months(series.index[-1], horizon), dtype=float)

    historical_accuracy = max(0.5, 1 - volatility(values))
    logger.debug(
        "Expert judgment: recent growth=%.4f, monthly growth=%.4f, %d scenarios",
        recent_growth,
        monthly_growth,
        len(scenarios),
    )

    return StrategyResult(
        projection=projection,
        projected_value=projected_value,
        confidence=clamp(historical_accuracy * 100, MIN_CONFIDENCE, MAX_CONFIDENCE),
        parameters={
            "recent_growth": recent_growth,
            "monthly_growth": monthly_growth,
            "expert_weights": [s["weight"] for s in scenarios],
            "scenarios": scenarios,
        },
    )
