"""Finnhub dividend provider — basic financials metrics.

Install the optional dependency:
    pip install divrecon[finnhub]
"""

from __future__ import annotations

import math
import os
from datetime import datetime, timezone
from typing import Any

from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers.base import BaseDividendProvider

try:
    import finnhub
    _FINNHUB_AVAILABLE = True
except ImportError:
    _FINNHUB_AVAILABLE = False


def _metric(metrics: dict[str, Any], *names: str) -> float | None:
    for name in names:
        val = metrics.get(name)
        if val is None:
            continue
        try:
            num = float(val)
        except (TypeError, ValueError):
            continue
        if not math.isnan(num):
            return num
    return None


class FinnhubProvider(BaseDividendProvider):
    """Fetch dividend-per-share and yield from Finnhub basic financials.

    Finnhub does not report payout frequency or dates here; payers are
    assumed to pay quarterly.
    """

    name = "finnhub"

    def __init__(self, api_key: str | None = None) -> None:
        if not _FINNHUB_AVAILABLE:
            raise DividendDataError(
                "finnhub-python is not installed. Run: pip install divrecon[finnhub]",
                code=DividendDataErrorCode.PROVIDER_ERROR,
            )

        self.api_key = api_key or os.getenv("FINNHUB_API_KEY")
        if not self.api_key:
            raise DividendDataError(
                "Finnhub API key required. Set FINNHUB_API_KEY env var or pass api_key.",
                code=DividendDataErrorCode.AUTH_FAILED,
            )

        self.client = finnhub.Client(api_key=self.api_key)

    def fetch_profile(self, symbol: str) -> DividendProfile:
        key = symbol.upper()
        try:
            data = self.client.company_basic_financials(key, "all")
        except Exception as exc:
            raise DividendDataError(
                f"Finnhub company_basic_financials failed: {exc}",
                code=DividendDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        if not isinstance(data, dict):
            raise DividendDataError(
                f"Finnhub payload for {key} is not an object",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            )
        metrics = data.get("metric") or {}
        if not isinstance(metrics, dict):
            raise DividendDataError(
                f"Finnhub metric block for {key} is malformed",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            )

        now = datetime.now(timezone.utc)
        annual = _metric(metrics, "dividendPerShareAnnual", "dividendPerShareTTM")
        if not annual or annual <= 0:
            return DividendProfile.no_dividend(key, source=self.name, fetched_at=now)

        yield_pct = _metric(
            metrics, "currentDividendYieldTTM", "dividendYieldIndicatedAnnual",
        )
        return DividendProfile(
            symbol=key,
            annual_amount=annual,
            yield_percent=max(yield_pct or 0.0, 0.0),
            pay_frequency=PayFrequency.QUARTERLY,
            source=self.name,
            fetched_at=now,
        )
