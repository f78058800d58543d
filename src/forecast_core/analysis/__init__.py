"""Trend and seasonality analysis over monthly series."""

from forecast_core.analysis.seasonality import analyze_seasonality
from forecast_core.analysis.trend import analyze_trend

__all__ = ["analyze_seasonality", "analyze_trend"]
