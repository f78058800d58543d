"""Tests for the in-memory forecast repository."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from forecast_core.api import run_forecast
from forecast_core.exceptions import ForecastNotFoundError
from forecast_core.repository import InMemoryForecastRepository
from forecast_core.types import ForecastFilters, ForecastMethod, Pagination


@pytest.fixture
def forecast(make_series, make_request):
    return run_forecast(make_series([100.0] * 6), make_request(ForecastMethod.MOVING_AVERAGE), tenant_id="t1")


def test_create_assigns_identity(forecast) -> None:
    repo = InMemoryForecastRepository()
    stored = repo.create(forecast)

    assert stored.id is not None
    assert stored.created_at == stored.updated_at
    assert forecast.id is None  # input is not mutated
    assert repo.get("t1", stored.id) is stored
    assert repo.get("t2", stored.id) is None


def test_update_accuracy_touches_updated_at(forecast) -> None:
    repo = InMemoryForecastRepository()
    stored = repo.create(forecast)

    repo.update_accuracy("t1", stored.id, 87.5)
    updated = repo.get("t1", stored.id)

    assert updated.accuracy == 87.5
    assert updated.updated_at >= stored.updated_at
    with pytest.raises(ForecastNotFoundError):
        repo.update_accuracy("t2", stored.id, 10.0)


def test_concurrent_creates(forecast) -> None:
    repo = InMemoryForecastRepository()
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda _: repo.create(forecast).id, range(40)))

    assert len(set(ids)) == 40
    page = repo.list("t1", ForecastFilters(), Pagination(take=100))
    assert page.total == 40
    assert {f.id for f in page.items} == set(ids)
