"""Tests for forecast defaults and environment configuration."""

import pytest

from forecast_core.config import DEFAULT_SCENARIOS, ForecastDefaults
from forecast_core.exceptions import ConfigError


def test_documented_defaults() -> None:
    defaults = ForecastDefaults()

    assert defaults.history_months == 24
    assert defaults.horizon_months == 12
    assert (defaults.alpha, defaults.beta, defaults.gamma) == (0.3, 0.1, 0.2)
    assert defaults.ensemble_weights == (0.4, 0.3, 0.3)
    assert defaults.scenarios == DEFAULT_SCENARIOS
    assert sum(s.weight for s in defaults.scenarios) == pytest.approx(1.0)


def test_window_sizes() -> None:
    defaults = ForecastDefaults()
    assert defaults.window_size_for("MONTHLY") == 3
    assert defaults.window_size_for("QUARTERLY") == 4
    assert defaults.window_size_for("ANNUALLY") == 2
    assert defaults.window_size_for("ROLLING_12_MONTHS") == 12
    assert defaults.window_size_for("WEEKLY") == 6


@pytest.mark.parametrize(
    "changes",
    [
        {"horizon_months": 0},
        {"history_months": 0},
        {"seasonal_period": 0},
        {"alpha": 0.0},
        {"gamma": 1.5},
        {"ensemble_weights": (0.5, 0.5, 0.5)},
        {"ensemble_weights": (0.5, 0.5)},
        {"scenarios": ()},
    ],
)
def test_invalid_defaults_raise(changes) -> None:
    with pytest.raises(ConfigError):
        ForecastDefaults(**changes)


def test_with_overrides_returns_copy() -> None:
    defaults = ForecastDefaults()
    shorter = defaults.with_overrides(horizon_months=6)

    assert shorter.horizon_months == 6
    assert defaults.horizon_months == 12
    with pytest.raises(ConfigError):
        defaults.with_overrides(ensemble_weights=(1.0, 1.0, 1.0))


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORECAST_HORIZON_MONTHS", "6")
    monkeypatch.setenv("FORECAST_ALPHA", "0.5")
    monkeypatch.delenv("FORECAST_HISTORY_MONTHS", raising=False)

    defaults = ForecastDefaults.from_env()

    assert defaults.horizon_months == 6
    assert defaults.alpha == 0.5
    assert defaults.history_months == 24


@pytest.mark.parametrize(("name", "value"), [("FORECAST_HORIZON_MONTHS", "twelve"), ("FORECAST_BETA", "2")])
def test_from_env_rejects_bad_values(name, value, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        ForecastDefaults.from_env()
