"""Tests for historical data sources."""

from unittest.mock import MagicMock

import pandas as pd
import pytest
import requests

from forecast_core.data.sources import (
    DataFrameHistoricalSource,
    RestHistoricalSource,
    make_session,
)
from forecast_core.exceptions import DataQualityError, SourceError
from forecast_core.types import MetricType

FROM = pd.Timestamp("2022-12-01")
TO = pd.Timestamp("2023-12-31")


@pytest.fixture
def invoices() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "tenant_id": ["t1", "t1", "t1", "t2", "t1", "t1"],
            "status": ["PAID", "PAID", "CANCELLED", "PAID", "PAID", "PAID"],
            "created_at": [
                "2023-01-05",
                "2023-01-20",
                "2023-01-21",
                "2023-01-10",
                "2023-02-10",
                "2024-05-01",
            ],
            "total": [100.0, 50.0, 999.0, 777.0, 200.0, 1.0],
        }
    )


def test_revenue_sums_paid_invoices_per_month(invoices) -> None:
    """Only the tenant's PAID invoices inside the range are summed."""
    source = DataFrameHistoricalSource(invoices=invoices)
    series = source.fetch_series("t1", MetricType.REVENUE, FROM, TO)

    assert list(series.index) == [pd.Timestamp("2023-01-01"), pd.Timestamp("2023-02-01")]
    assert series.tolist() == [150.0, 200.0]


def test_expense_and_profit_are_revenue_ratios(invoices) -> None:
    source = DataFrameHistoricalSource(invoices=invoices)

    expense = source.fetch_series("t1", MetricType.EXPENSE, FROM, TO)
    profit = source.fetch_series("t1", MetricType.PROFIT, FROM, TO)

    assert expense.tolist() == pytest.approx([112.5, 150.0])
    assert profit.tolist() == pytest.approx([37.5, 50.0])


def test_bookings_are_counted() -> None:
    bookings = pd.DataFrame(
        {
            "tenant_id": ["t1"] * 4,
            "status": ["CONFIRMED", "CONFIRMED", "CANCELLED", "CONFIRMED"],
            "start_time": ["2023-03-01 09:00", "2023-03-15 18:30", "2023-03-16 10:00", "2023-04-02 08:00"],
        }
    )
    source = DataFrameHistoricalSource(bookings=bookings)
    series = source.fetch_series("t1", MetricType.OCCUPANCY, FROM, TO)

    assert series.tolist() == [2.0, 1.0]


def test_cash_flow_uses_completed_payments() -> None:
    payments = pd.DataFrame(
        {
            "tenant_id": ["t1", "t1"],
            "status": ["COMPLETED", "FAILED"],
            "processed_at": ["2023-06-01", "2023-06-02"],
            "amount": [80.0, 20.0],
        }
    )
    series = DataFrameHistoricalSource(payments=payments).fetch_series("t1", MetricType.CASH_FLOW, FROM, TO)
    assert series.tolist() == [80.0]


def test_missing_table_or_no_rows_is_empty(invoices) -> None:
    source = DataFrameHistoricalSource(invoices=invoices)

    assert source.fetch_series("t1", MetricType.MEMBERSHIP, FROM, TO).empty
    assert source.fetch_series("unknown", MetricType.REVENUE, FROM, TO).empty


def test_missing_columns_raise() -> None:
    invoices = pd.DataFrame({"tenant_id": ["t1"], "status": ["PAID"], "created_at": ["2023-01-01"]})
    source = DataFrameHistoricalSource(invoices=invoices)
    with pytest.raises(DataQualityError, match="total"):
        source.fetch_series("t1", MetricType.REVENUE, FROM, TO)


def _response(status_code: int = 200, payload: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "error body"
    resp.json.return_value = payload
    return resp


def test_rest_source_builds_series() -> None:
    session = MagicMock()
    session.get.return_value = _response(
        payload=[{"month": "2023-02-01", "total": 200}, {"month": "2023-01-01", "total": "150.5"}]
    )
    source = RestHistoricalSource("https://metrics.example.com/api/", session=session)

    series = source.fetch_series("t1", MetricType.CASH_FLOW, FROM, TO)

    session.get.assert_called_once_with(
        "https://metrics.example.com/api/tenants/t1/metrics/cash_flow/monthly",
        params={"from": "2022-12-01", "to": "2023-12-31"},
    )
    assert series.tolist() == [150.5, 200.0]
    assert series.index[0] == pd.Timestamp("2023-01-01")


def test_rest_source_empty_payload() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=[])
    source = RestHistoricalSource("https://metrics.example.com", session=session)
    assert source.fetch_series("t1", MetricType.REVENUE, FROM, TO).empty


@pytest.mark.parametrize(
    "response",
    [
        _response(status_code=503),
        _response(payload={"month": "2023-01-01"}),
        _response(payload=[{"month": "2023-01-01"}]),
        _response(payload=[{"month": "2023-01-01", "total": "n/a"}]),
    ],
)
def test_rest_source_bad_responses(response) -> None:
    session = MagicMock()
    session.get.return_value = response
    source = RestHistoricalSource("https://metrics.example.com", session=session)
    with pytest.raises(SourceError):
        source.fetch_series("t1", MetricType.REVENUE, FROM, TO)


def test_rest_source_invalid_json() -> None:
    session = MagicMock()
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    session.get.return_value = resp
    source = RestHistoricalSource("https://metrics.example.com", session=session)
    with pytest.raises(SourceError, match="not valid JSON"):
        source.fetch_series("t1", MetricType.REVENUE, FROM, TO)


def test_rest_source_wraps_transport_errors() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")
    source = RestHistoricalSource("https://metrics.example.com", session=session)
    with pytest.raises(SourceError, match="connection refused"):
        source.fetch_series("t1", MetricType.REVENUE, FROM, TO)


def test_make_session_mounts_retry_adapter() -> None:
    session = make_session(timeout=5, retries=2)
    adapter = session.get_adapter("https://metrics.example.com")

    assert adapter.max_retries.total == 2
    assert 503 in adapter.max_retries.status_forcelist
    assert session.headers["Accept"] == "application/json"
