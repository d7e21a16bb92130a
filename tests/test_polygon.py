"""Tests for PolygonProvider — trailing-year aggregation, REST and SDK paths.

No network access: the SDK client and REST session are replaced with mocks.
"""

from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

import divrecon.providers.polygon as polygon_module
from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import PayFrequency
from divrecon.providers.polygon import PolygonProvider, _Distribution

SINCE = date(2024, 1, 1)


def _dist(ex: str, amount: float, dividend_type: str = "CD", frequency=None, pay=None) -> _Distribution:
    return _Distribution(
        ex_date=date.fromisoformat(ex),
        amount=amount,
        pay_date=date.fromisoformat(pay) if pay else None,
        dividend_type=dividend_type,
        frequency=frequency,
    )


@pytest.fixture
def rest_provider(monkeypatch):
    monkeypatch.setattr(polygon_module, "_SDK_AVAILABLE", False)
    provider = PolygonProvider(api_key="test-key")
    provider.session = MagicMock()
    return provider


@pytest.fixture
def sdk_provider(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(polygon_module, "_SDK_AVAILABLE", True)
    monkeypatch.setattr(polygon_module, "RESTClient", MagicMock(return_value=client), raising=False)
    return PolygonProvider(api_key="test-key")


class TestBuildProfile:
    def test_quarterly_sum(self, rest_provider):
        records = [
            _dist("2024-11-20", 0.83, frequency=4, pay="2024-12-12"),
            _dist("2024-08-15", 0.75, frequency=4),
            _dist("2024-05-15", 0.75, frequency=4),
            _dist("2024-02-14", 0.75, frequency=4),
        ]
        p = rest_provider.build_profile("msft", records, SINCE)
        assert p.symbol == "MSFT"
        assert p.annual_amount == pytest.approx(3.08)
        assert p.pay_frequency is PayFrequency.QUARTERLY
        assert p.next_ex_date == date(2024, 11, 20)
        assert p.next_pay_date == date(2024, 12, 12)
        assert p.source == "polygon"

    def test_frequency_from_record_count(self, rest_provider):
        records = [_dist(f"2024-{m:02d}-01", 0.25) for m in range(1, 13)]
        p = rest_provider.build_profile("O", records, SINCE)
        assert p.pay_frequency is PayFrequency.MONTHLY
        assert p.annual_amount == pytest.approx(3.0)

    def test_semi_annual_count(self, rest_provider):
        records = [_dist("2024-03-01", 0.5), _dist("2024-09-01", 0.5)]
        assert rest_provider.build_profile("X", records, SINCE).pay_frequency is PayFrequency.SEMI_ANNUAL

    def test_specials_excluded_from_annual(self, rest_provider):
        records = [
            _dist("2024-06-01", 1.0),
            _dist("2024-12-01", 5.0, dividend_type="SC"),
        ]
        p = rest_provider.build_profile("COST", records, SINCE)
        assert p.annual_amount == pytest.approx(1.0)
        assert p.pay_frequency is PayFrequency.ANNUAL

    def test_special_only(self, rest_provider):
        p = rest_provider.build_profile("X", [_dist("2024-06-01", 2.0, dividend_type="SC")], SINCE)
        assert p.annual_amount == 0.0
        assert p.pay_frequency is PayFrequency.SPECIAL

    def test_records_before_window_ignored(self, rest_provider):
        p = rest_provider.build_profile("X", [_dist("2023-06-01", 1.0)], SINCE)
        assert p.annual_amount == 0.0
        assert p.pay_frequency is PayFrequency.UNKNOWN

    def test_no_records(self, rest_provider):
        assert not rest_provider.build_profile("TSLA", [], SINCE).pays_dividend


class TestRestPath:
    def test_fetch_profile(self, rest_provider):
        recent = (date.today() - timedelta(days=30)).isoformat()
        resp = MagicMock(status_code=200)
        resp.json.return_value = {"results": [
            {"ex_dividend_date": recent, "cash_amount": 0.75, "dividend_type": "CD", "frequency": 4},
        ]}
        rest_provider.session.get.return_value = resp

        p = rest_provider.fetch_profile("MSFT")
        assert p.annual_amount == pytest.approx(0.75)
        assert p.pay_frequency is PayFrequency.QUARTERLY

        url = rest_provider.session.get.call_args[0][0]
        assert url.endswith("/v3/reference/dividends")

    def test_http_error(self, rest_provider):
        rest_provider.session.get.return_value = MagicMock(status_code=429)
        with pytest.raises(DividendDataError) as exc_info:
            rest_provider.fetch_profile("MSFT")
        assert exc_info.value.code == DividendDataErrorCode.RATE_LIMITED

    def test_transport_error(self, rest_provider):
        rest_provider.session.get.side_effect = ConnectionError("refused")
        with pytest.raises(DividendDataError) as exc_info:
            rest_provider.fetch_profile("MSFT")
        assert exc_info.value.code == DividendDataErrorCode.PROVIDER_ERROR
        assert exc_info.value.retryable

    def test_malformed_payload(self, rest_provider):
        resp = MagicMock(status_code=200)
        resp.json.return_value = ["not", "an", "object"]
        rest_provider.session.get.return_value = resp
        with pytest.raises(DividendDataError) as exc_info:
            rest_provider.fetch_profile("MSFT")
        assert exc_info.value.code == DividendDataErrorCode.MALFORMED_PAYLOAD


class TestSdkPath:
    def test_fetch_profile(self, sdk_provider):
        recent = (date.today() - timedelta(days=10)).isoformat()
        sdk_provider.client.list_dividends.return_value = iter([
            SimpleNamespace(
                ex_dividend_date=recent, cash_amount=0.25, pay_date=None,
                dividend_type="CD", frequency=12,
            ),
        ])
        p = sdk_provider.fetch_profile("O")
        assert p.pay_frequency is PayFrequency.MONTHLY
        assert p.annual_amount == pytest.approx(0.25)
        _, kwargs = sdk_provider.client.list_dividends.call_args
        assert kwargs["ticker"] == "O"


def test_missing_key(monkeypatch):
    monkeypatch.delenv("POLYGON_API_KEY", raising=False)
    with pytest.raises(DividendDataError) as exc_info:
        PolygonProvider()
    assert exc_info.value.code == DividendDataErrorCode.AUTH_FAILED
