"""Shared fixtures for divrecon tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from divrecon.models.holding import Holding
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers.mock import MockProvider
from divrecon.store import MemoryDividendStore


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def store() -> MemoryDividendStore:
    """Store pre-seeded with AAPL (0.96/yr)."""
    return MemoryDividendStore({
        "AAPL": DividendProfile(
            symbol="AAPL",
            annual_amount=0.96,
            yield_percent=0.5,
            pay_frequency=PayFrequency.QUARTERLY,
        ),
    })


@pytest.fixture
def holdings() -> list[Holding]:
    return [Holding("AAPL", 100), Holding("MSFT_US_EQ", 50)]


class RecordingSleep:
    """Stand-in for time.sleep that records the provider call count at each pause."""

    def __init__(self, provider: MockProvider | None = None) -> None:
        self.provider = provider
        self.durations: list[float] = []
        self.calls_seen: list[int] = []

    def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        if self.provider is not None:
            self.calls_seen.append(self.provider.call_count)


@pytest.fixture
def recording_sleep(mock_provider: MockProvider) -> RecordingSleep:
    return RecordingSleep(mock_provider)
