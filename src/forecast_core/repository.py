"""Persistence boundary for generated forecasts.

The engine persists through the ``ForecastRepository`` protocol. The
``InMemoryForecastRepository`` implementation backs tests and embedded use;
a database-backed store implements the same four methods.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Protocol

from forecast_core.exceptions import ForecastNotFoundError
from forecast_core.types import ForecastFilters, ForecastPage, ForecastResult, Pagination

logger = logging.getLogger(__name__)


class ForecastRepository(Protocol):
    def create(self, forecast: ForecastResult) -> ForecastResult:
        """Store a new forecast and return it with id and timestamps assigned."""
        ...

    def get(self, tenant_id: str, forecast_id: str) -> Optional[ForecastResult]:
        ...

    def update_accuracy(self, tenant_id: str, forecast_id: str, accuracy: float) -> None:
        ...

    def list(
        self,
        tenant_id: str,
        filters: ForecastFilters,
        pagination: Pagination,
    ) -> ForecastPage:
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryForecastRepository:
    """Thread-safe dict-backed forecast store scoped by tenant."""

    def __init__(self) -> None:
        self._forecasts: dict[str, ForecastResult] = {}
        self._order: dict[str, int] = {}
        self._lock = threading.Lock()

    def create(self, forecast: ForecastResult) -> ForecastResult:
        now = _now()
        stored = replace(forecast, id=str(uuid.uuid4()), created_at=now, updated_at=now)
        with self._lock:
            self._forecasts[stored.id] = stored
            self._order[stored.id] = len(self._order)
        return stored

    def get(self, tenant_id: str, forecast_id: str) -> Optional[ForecastResult]:
        with self._lock:
            forecast = self._forecasts.get(forecast_id)
        if forecast is None or forecast.tenant_id != tenant_id:
            return None
        return forecast

    def update_accuracy(self, tenant_id: str, forecast_id: str, accuracy: float) -> None:
        with self._lock:
            forecast = self._forecasts.get(forecast_id)
            if forecast is None or forecast.tenant_id != tenant_id:
                raise ForecastNotFoundError(f"Forecast {forecast_id} not found")
            self._forecasts[forecast_id] = replace(forecast, accuracy=accuracy, updated_at=_now())

    def list(
        self,
        tenant_id: str,
        filters: ForecastFilters,
        pagination: Pagination,
    ) -> ForecastPage:
        with self._lock:
            matching = [
                f
                for f in self._forecasts.values()
                if f.tenant_id == tenant_id and filters.matches(f)
            ]
            # Newest first; insertion order breaks created_at ties
            matching.sort(key=lambda f: self._order[f.id], reverse=True)
        items = matching[pagination.skip : pagination.skip + pagination.take]
        return ForecastPage(
            items=items,
            total=len(matching),
            has_more=pagination.skip + len(items) < len(matching),
        )
