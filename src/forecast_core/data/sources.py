"""Historical data sources for the forecasting engine.

The engine never owns historical records. A ``HistoricalDataSource`` hands
it an already-aggregated monthly series for one tenant and metric. Two
implementations are provided:

- ``DataFrameHistoricalSource`` aggregates transactional DataFrames
  (invoices, payments, bookings, memberships) into monthly totals/counts.
- ``RestHistoricalSource`` reads monthly totals from an HTTP JSON endpoint.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from forecast_core.data.preparation import build_monthly_series
from forecast_core.exceptions import DataQualityError, SourceError
from forecast_core.types import MetricType

logger = logging.getLogger(__name__)

# Derived metrics are fixed ratios of revenue until expense tracking exists
EXPENSE_RATIO = 0.75
PROFIT_MARGIN = 0.25


def empty_series() -> pd.Series:
    """An empty monthly series with the expected dtype and index type."""
    return pd.Series(dtype=float, index=pd.DatetimeIndex([]))


class HistoricalDataSource(Protocol):
    """Protocol for anything that can deliver a monthly series for a metric."""

    def fetch_series(
        self,
        tenant_id: str,
        metric_type: MetricType,
        from_date: pd.Timestamp,
        to_date: pd.Timestamp,
    ) -> pd.Series:
        ...


@dataclass(frozen=True)
class _TableSpec:
    """How one metric is derived from a transactional table."""

    table: str
    date_column: str
    status: str
    value_column: Optional[str] = None  # None means count rows


_TABLE_SPECS: dict[MetricType, _TableSpec] = {
    MetricType.REVENUE: _TableSpec("invoices", "created_at", "PAID", "total"),
    MetricType.CASH_FLOW: _TableSpec("payments", "processed_at", "COMPLETED", "amount"),
    MetricType.OCCUPANCY: _TableSpec("bookings", "start_time", "CONFIRMED"),
    MetricType.MEMBERSHIP: _TableSpec("memberships", "created_at", "ACTIVE"),
}

_REVENUE_RATIOS: dict[MetricType, float] = {
    MetricType.EXPENSE: EXPENSE_RATIO,
    MetricType.PROFIT: PROFIT_MARGIN,
}


class DataFrameHistoricalSource:
    """Monthly series aggregated from in-memory transactional tables.

    Each table is a DataFrame with at least ``tenant_id``, ``status`` and the
    date column of its metric (plus the value column for summed metrics):

    - invoices: created_at, total (REVENUE: sum of PAID totals)
    - payments: processed_at, amount (CASH_FLOW: sum of COMPLETED amounts)
    - bookings: start_time (OCCUPANCY: count of CONFIRMED bookings)
    - memberships: created_at (MEMBERSHIP: count of ACTIVE memberships)

    EXPENSE and PROFIT are fixed ratios of REVENUE.
    """

    def __init__(
        self,
        invoices: Optional[pd.DataFrame] = None,
        payments: Optional[pd.DataFrame] = None,
        bookings: Optional[pd.DataFrame] = None,
        memberships: Optional[pd.DataFrame] = None,
    ) -> None:
        self._tables: dict[str, Optional[pd.DataFrame]] = {
            "invoices": invoices,
            "payments": payments,
            "bookings": bookings,
            "memberships": memberships,
        }

    def fetch_series(
        self,
        tenant_id: str,
        metric_type: MetricType,
        from_date: pd.Timestamp,
        to_date: pd.Timestamp,
    ) -> pd.Series:
        metric_type = MetricType(metric_type)
        if metric_type in _REVENUE_RATIOS:
            revenue = self.fetch_series(tenant_id, MetricType.REVENUE, from_date, to_date)
            return revenue * _REVENUE_RATIOS[metric_type]

        spec = _TABLE_SPECS[metric_type]
        df = self._tables.get(spec.table)
        if df is None or df.empty:
            logger.warning("No %s table available for %s", spec.table, metric_type.value)
            return empty_series()

        required = ["tenant_id", "status", spec.date_column]
        if spec.value_column is not None:
            required.append(spec.value_column)
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise DataQualityError(
                f"Missing required columns in {spec.table}: {missing}. Required: {required}"
            )

        dates = pd.to_datetime(df[spec.date_column])
        mask = (
            (df["tenant_id"] == tenant_id)
            & (df["status"] == spec.status)
            & (dates >= pd.Timestamp(from_date))
            & (dates <= pd.Timestamp(to_date))
        )
        rows = df.loc[mask].copy()
        if rows.empty:
            return empty_series()

        rows["month"] = pd.to_datetime(rows[spec.date_column]).dt.to_period("M").dt.to_timestamp()
        grouped = rows.groupby("month")
        if spec.value_column is None:
            monthly = grouped.size().astype(float)
        else:
            monthly = grouped[spec.value_column].sum().astype(float)

        logger.debug(
            "Aggregated %d %s rows into %d months for tenant %s",
            len(rows),
            spec.table,
            len(monthly),
            tenant_id,
        )
        return build_monthly_series(monthly)


# --- HTTP source ---
DEFAULT_TIMEOUT = float(os.environ.get("FORECAST_API_TIMEOUT", "30"))
DEFAULT_RETRIES = int(os.environ.get("FORECAST_API_RETRIES", "3"))


def make_session(
    timeout: float = DEFAULT_TIMEOUT, retries: int = DEFAULT_RETRIES
) -> requests.Session:
    """Create a requests Session with retry logic and default timeout.

    Retries GET requests on 429, 500, 502, 503 and 504 with exponential
    backoff and applies ``timeout`` to every request that does not set one.

    Args:
        timeout: Default timeout in seconds.
        retries: Number of retry attempts.

    Returns:
        Configured requests.Session object.
    """
    s = requests.Session()
    s.headers.update({"Accept": "application/json"})
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


class RestHistoricalSource:
    """Monthly series read from an HTTP endpoint.

    Issues ``GET {base_url}/tenants/{tenant_id}/metrics/{metric}/monthly``
    with ``from``/``to`` query parameters and expects a JSON list of
    ``{"month": "YYYY-MM-DD", "total": number}`` objects.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else make_session()

    def fetch_series(
        self,
        tenant_id: str,
        metric_type: MetricType,
        from_date: pd.Timestamp,
        to_date: pd.Timestamp,
    ) -> pd.Series:
        metric = MetricType(metric_type).value.lower()
        url = f"{self.base_url}/tenants/{tenant_id}/metrics/{metric}/monthly"
        params = {
            "from": pd.Timestamp(from_date).date().isoformat(),
            "to": pd.Timestamp(to_date).date().isoformat(),
        }

        try:
            resp = self.session.get(url, params=params)
        except requests.RequestException as e:
            raise SourceError(f"Request to {url} failed: {e}") from e

        if not (200 <= resp.status_code < 300):
            raise SourceError(f"Fetching {metric} history failed. HTTP {resp.status_code}: {resp.text[:400]}")

        try:
            rows = resp.json()
        except ValueError as e:
            raise SourceError(f"Response from {url} is not valid JSON") from e

        if not isinstance(rows, list):
            raise SourceError(f"Expected a list of monthly totals from {url}, got {type(rows).__name__}")
        if not rows:
            return empty_series()

        try:
            pairs = [(row["month"], float(row["total"])) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise SourceError(f"Malformed monthly total in response from {url}: {e}") from e

        logger.debug("Fetched %d months of %s for tenant %s", len(pairs), metric, tenant_id)
        return build_monthly_series(pairs)
