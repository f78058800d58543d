"""Fixed-weight ensemble of linear regression, moving average and
exponential smoothing (exposed as the MACHINE_LEARNING method)."""

from __future__ import annotations

import logging

import pandas as pd

from forecast_core.analysis.seasonality import analyze_seasonality
from forecast_core.config import ForecastDefaults
from forecast_core.models.base import require_points
from forecast_core.models.exponential_smoothing import exponential_smoothing_forecast
from forecast_core.models.linear import linear_regression_forecast
from forecast_core.models.moving_average import moving_average_forecast
from forecast_core.types import ForecastRequest, StrategyResult
from forecast_core.utils import mean, median, total_growth_rate, volatility

logger = logging.getLogger(__name__)

COMPONENTS = ("linear_regression", "moving_average", "exponential_smoothing")


def extract_features(series: pd.Series) -> dict[str, float]:
    """Summary features describing the series the ensemble was built on."""
    values = series.to_numpy(dtype=float).tolist()
    return {
        "trend": total_growth_rate(values),
        "volatility": volatility(values),
        "mean": mean(values),
        "median": median(values),
        "seasonality": analyze_seasonality(series).strength / 100,
    }


def blend_projections(
    results: list[StrategyResult],
    weights: tuple[float, ...],
) -> pd.Series:
    """Point-wise weighted blend over the longest projection.

    Where a shorter projection has no point, that forecast's final scalar
    value is used in its place.
    """
    longest = max(results, key=lambda r: len(r.projection))
    blended = []
    for i in range(len(longest.projection)):
        total = 0.0
        for result, weight in zip(results, weights):
            if i < len(result.projection):
                value = float(result.projection.iloc[i])
            else:
                value = result.projected_value
            total += weight * value
        blended.append(total)
    return pd.Series(blended, index=longest.projection.index, dtype=float)


def ensemble_forecast(
    series: pd.Series,
    request: ForecastRequest,
    defaults: ForecastDefaults,
) -> StrategyResult:
    """Combine the three sub-forecasts with the configured ensemble weights.

    The final value and the confidence are the weighted sums of the
    sub-forecasts' final values and confidences.
    """
    require_points(series)
    weights = defaults.ensemble_weights
    results = [
        linear_regression_forecast(series, request, defaults),
        moving_average_forecast(series, request, defaults),
        exponential_smoothing_forecast(series, request, defaults),
    ]

    projected_value = sum(w * r.projected_value for w, r in zip(weights, results))
    confidence = sum(w * r.confidence for w, r in zip(weights, results))
    projection = blend_projections(results, weights)

    lengths = {name: len(r.projection) for name, r in zip(COMPONENTS, results)}
    if len(set(lengths.values())) > 1:
        logger.debug("Ensemble projections differ in length: %s", lengths)

    features = extract_features(series)
    return StrategyResult(
        projection=projection,
        projected_value=projected_value,
        confidence=confidence,
        parameters={
            "model_type": "ensemble",
            "weights": dict(zip(COMPONENTS, weights)),
            "components": {
                name: {"projected_value": r.projected_value, "confidence": r.confidence}
                for name, r in zip(COMPONENTS, results)
            },
            "features": list(features),
            "feature_values": features,
            "accuracy": confidence,
        },
    )
