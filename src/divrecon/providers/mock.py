"""Mock provider for testing and CI — no API keys required."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers.base import BaseDividendProvider


class MockProvider(BaseDividendProvider):
    """In-memory provider that returns configurable static data.

    Use ``set_dividend``, ``set_profile`` or ``set_error`` to pre-load
    responses. Unknown symbols come back as non-payers. Every call is
    recorded in ``calls``; ``max_in_flight`` tracks peak concurrency.
    """

    name = "mock"

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self.calls: list[str] = []
        self.max_in_flight = 0
        self._profiles: dict[str, DividendProfile] = {}
        self._errors: dict[str, DividendDataError] = {}
        self._in_flight = 0
        self._lock = threading.Lock()

    # --- Pre-load helpers ---

    def set_profile(self, symbol: str, profile: DividendProfile) -> None:
        self._profiles[symbol.upper()] = profile

    def set_dividend(
        self,
        symbol: str,
        annual: float,
        yield_percent: float = 0.0,
        frequency: PayFrequency = PayFrequency.QUARTERLY,
        is_fund: bool = False,
    ) -> None:
        key = symbol.upper()
        self._profiles[key] = DividendProfile(
            symbol=key,
            annual_amount=annual,
            yield_percent=yield_percent,
            pay_frequency=frequency,
            is_fund=is_fund,
            source=self.name,
        )

    def set_error(
        self,
        symbol: str,
        error: DividendDataError | None = None,
    ) -> None:
        self._errors[symbol.upper()] = error or DividendDataError(
            f"Mock transport failure for {symbol.upper()}",
            code=DividendDataErrorCode.TIMEOUT,
            retryable=True,
        )

    def clear_error(self, symbol: str) -> None:
        self._errors.pop(symbol.upper(), None)

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    # --- Provider implementation ---

    def fetch_profile(self, symbol: str) -> DividendProfile:
        key = symbol.upper()
        with self._lock:
            self.calls.append(key)
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.latency:
                time.sleep(self.latency)
            if key in self._errors:
                raise self._errors[key]
            if key in self._profiles:
                return self._profiles[key]
            return DividendProfile.no_dividend(
                key, source=self.name, fetched_at=datetime.now(timezone.utc),
            )
        finally:
            with self._lock:
                self._in_flight -= 1
