"""Tests for MockProvider and the provider registry."""

import pytest

from divrecon.config import DividendProviderType
from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers import PROVIDER_CLASSES, create_provider
from divrecon.providers.mock import MockProvider


class TestMockProvider:
    def test_unknown_symbol_is_non_payer(self, mock_provider):
        p = mock_provider.fetch_profile("tsla")
        assert p.symbol == "TSLA"
        assert p.annual_amount == 0.0
        assert p.pay_frequency is PayFrequency.UNKNOWN
        assert p.source == "mock"
        assert p.fetched_at is not None

    def test_set_dividend(self, mock_provider):
        mock_provider.set_dividend("MSFT", 3.0, yield_percent=0.8)
        p = mock_provider.fetch_profile("MSFT")
        assert p.annual_amount == 3.0
        assert p.yield_percent == 0.8
        assert p.pay_frequency is PayFrequency.QUARTERLY

    def test_set_profile(self, mock_provider):
        profile = DividendProfile(symbol="O", annual_amount=3.1, pay_frequency=PayFrequency.MONTHLY)
        mock_provider.set_profile("O", profile)
        assert mock_provider.fetch_profile("O") is profile

    def test_set_error(self, mock_provider):
        mock_provider.set_error("XYZ")
        with pytest.raises(DividendDataError) as exc_info:
            mock_provider.fetch_profile("XYZ")
        assert exc_info.value.code == DividendDataErrorCode.TIMEOUT
        assert exc_info.value.retryable

    def test_clear_error(self, mock_provider):
        mock_provider.set_error("XYZ")
        mock_provider.clear_error("XYZ")
        assert mock_provider.fetch_profile("XYZ").annual_amount == 0.0

    def test_calls_recorded(self, mock_provider):
        mock_provider.fetch_profile("AAPL")
        mock_provider.fetch_profile("MSFT")
        assert mock_provider.calls == ["AAPL", "MSFT"]
        assert mock_provider.call_count == 2
        assert mock_provider.max_in_flight == 1

    def test_fetch_profiles_serial(self, mock_provider):
        mock_provider.set_dividend("MSFT", 3.0)
        profiles = mock_provider.fetch_profiles(["MSFT", "TSLA"])
        assert [p.annual_amount for p in profiles] == [3.0, 0.0]


class TestRegistry:
    def test_all_types_registered(self):
        assert set(PROVIDER_CLASSES) == set(DividendProviderType)

    def test_create_mock(self):
        provider = create_provider(DividendProviderType.MOCK)
        assert isinstance(provider, MockProvider)
        assert provider.name == "mock"

    def test_create_forwards_kwargs(self):
        provider = create_provider(DividendProviderType.MOCK, latency=0.01)
        assert provider.latency == 0.01
