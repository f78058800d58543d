"""Assumption and risk statements attached to every forecast."""

from __future__ import annotations

from forecast_core.types import (
    ForecastMethod,
    SeasonalityAnalysis,
    TrendAnalysis,
    TrendDirection,
)

BASE_ASSUMPTIONS = (
    "Historical patterns will continue",
    "No major external disruptions",
    "Current market conditions remain stable",
)

METHOD_ASSUMPTIONS = {
    ForecastMethod.LINEAR_REGRESSION: "Linear relationship holds",
}

STANDARD_RISKS = (
    "Economic conditions may change",
    "Competition may impact performance",
    "Seasonal variations may be more pronounced",
)

SEASONAL_STRENGTH_THRESHOLD = 20.0
LOW_CONFIDENCE_THRESHOLD = 70.0
HIGH_VOLATILITY_THRESHOLD = 0.3


def generate_assumptions(
    method: ForecastMethod,
    trend: TrendAnalysis,
    seasonality: SeasonalityAnalysis,
) -> list[str]:
    assumptions = list(BASE_ASSUMPTIONS)
    if method in METHOD_ASSUMPTIONS:
        assumptions.append(METHOD_ASSUMPTIONS[method])
    if seasonality.strength > SEASONAL_STRENGTH_THRESHOLD:
        assumptions.append("Seasonal patterns remain consistent")
    if trend.direction != TrendDirection.STABLE:
        assumptions.append(f"{trend.direction.value.lower()} trend continues")
    return assumptions


def identify_risks(confidence: float, trend: TrendAnalysis) -> list[str]:
    risks = []
    if confidence < LOW_CONFIDENCE_THRESHOLD:
        risks.append("Low forecast confidence due to data volatility")
    if trend.volatility > HIGH_VOLATILITY_THRESHOLD:
        risks.append("High historical volatility may impact accuracy")
    if trend.direction == TrendDirection.DECREASING:
        risks.append("Declining trend may continue or worsen")
    risks.extend(STANDARD_RISKS)
    return risks
