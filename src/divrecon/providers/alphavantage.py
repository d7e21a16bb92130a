"""Alpha Vantage dividend provider (company OVERVIEW endpoint).

The OVERVIEW response is a flat key-value record with every value encoded
as a string. Dividend fields used: ``DividendPerShare``, ``DividendYield``,
``ExDividendDate``, ``DividendDate`` and ``AssetType``.
"""

from __future__ import annotations

import os
from datetime import date, datetime, timezone
from typing import Any

import certifi
import requests

from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers.base import BaseDividendProvider

_MISSING = {"", "none", "-", "n/a", "0000-00-00"}
_FUND_TYPES = {"ETF", "MUTUAL FUND", "FUND"}


def _parse_float(raw: Any) -> float | None:
    if raw is None:
        return None
    text = str(raw).strip()
    if text.lower() in _MISSING:
        return None
    try:
        return float(text.rstrip("%"))
    except ValueError:
        return None


def _parse_date(raw: Any) -> date | None:
    if raw is None:
        return None
    text = str(raw).strip()
    if text.lower() in _MISSING:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _parse_yield(raw: Any) -> float:
    """Yield in percent. Alpha Vantage reports a fraction ("0.0055")."""
    value = _parse_float(raw)
    if value is None:
        return 0.0
    if isinstance(raw, str) and raw.strip().endswith("%"):
        return value
    return value * 100


class AlphaVantageProvider(BaseDividendProvider):
    """Fetch dividend fields from the Alpha Vantage company overview.

    Payout frequency is not reported; dividend payers are assumed to pay
    quarterly.
    """

    name = "alphavantage"
    base_url = "https://www.alphavantage.co/query"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key or os.getenv("ALPHAVANTAGE_API_KEY")
        if not self.api_key:
            raise DividendDataError(
                "Alpha Vantage API key required. Set ALPHAVANTAGE_API_KEY env var or pass api_key.",
                code=DividendDataErrorCode.AUTH_FAILED,
            )
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.verify = certifi.where()
        self.session = session

    def fetch_profile(self, symbol: str) -> DividendProfile:
        params = {"function": "OVERVIEW", "symbol": symbol.upper(), "apikey": self.api_key}
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise DividendDataError(
                f"Alpha Vantage request timed out for {symbol}",
                code=DividendDataErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except requests.RequestException as exc:
            raise DividendDataError(
                f"Alpha Vantage request failed for {symbol}: {exc}",
                code=DividendDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        self._check_response(resp)
        try:
            data = resp.json()
        except ValueError as exc:
            raise DividendDataError(
                f"Alpha Vantage returned non-JSON body for {symbol}",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            ) from exc
        return self.parse_overview(symbol, data)

    def parse_overview(self, symbol: str, data: Any) -> DividendProfile:
        """Build a profile from an OVERVIEW record."""
        key = symbol.upper()
        if not isinstance(data, dict):
            raise DividendDataError(
                f"Alpha Vantage payload for {key} is not an object",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            )
        if "Note" in data or "Information" in data:
            raise DividendDataError(
                f"Alpha Vantage rate limited: {data.get('Note') or data.get('Information')}",
                code=DividendDataErrorCode.RATE_LIMITED,
                retryable=True,
            )
        if "Error Message" in data:
            raise DividendDataError(
                f"Alpha Vantage error for {key}: {data['Error Message']}",
                code=DividendDataErrorCode.NOT_FOUND,
            )

        now = datetime.now(timezone.utc)
        is_fund = str(data.get("AssetType", "")).strip().upper() in _FUND_TYPES
        annual = _parse_float(data.get("DividendPerShare"))
        if not annual or annual <= 0:
            return DividendProfile.no_dividend(key, source=self.name, fetched_at=now, is_fund=is_fund)

        ex_date = _parse_date(data.get("ExDividendDate"))
        pay_date = _parse_date(data.get("DividendDate"))
        if ex_date and pay_date and pay_date < ex_date:
            # DividendDate still refers to the previous distribution
            pay_date = None

        return DividendProfile(
            symbol=key,
            annual_amount=annual,
            yield_percent=_parse_yield(data.get("DividendYield")),
            pay_frequency=PayFrequency.QUARTERLY,
            next_ex_date=ex_date,
            next_pay_date=pay_date,
            is_fund=is_fund,
            source=self.name,
            fetched_at=now,
        )

    # ------------------------------------------------------------ internals

    def _check_response(self, resp: Any) -> None:
        if resp.status_code == 429:
            raise DividendDataError(
                "Alpha Vantage rate limited",
                code=DividendDataErrorCode.RATE_LIMITED,
                retryable=True,
            )
        if resp.status_code in (401, 403):
            raise DividendDataError(
                "Alpha Vantage authentication failed",
                code=DividendDataErrorCode.AUTH_FAILED,
            )
        if resp.status_code == 404:
            raise DividendDataError(
                "Symbol not found on Alpha Vantage",
                code=DividendDataErrorCode.NOT_FOUND,
            )
        if resp.status_code >= 400:
            raise DividendDataError(
                f"Alpha Vantage returned HTTP {resp.status_code}",
                code=DividendDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            )
