"""Polygon.io dividend provider.

Supports both the official ``polygon-api-client`` SDK and a direct
REST fallback using ``requests``.

Install the optional dependency:
    pip install divrecon[polygon]
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from itertools import islice
from typing import Any

import certifi
import requests

from divrecon.errors import DividendDataError, DividendDataErrorCode
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.providers.base import BaseDividendProvider

try:
    from polygon import RESTClient
    _SDK_AVAILABLE = True
except ImportError:
    _SDK_AVAILABLE = False

# Polygon dividend_type codes: CD = regular cash, SC = special cash,
# LT/ST = capital gain distributions.
_REGULAR_TYPES = {"CD", ""}
_MAX_RECORDS = 24


@dataclass(frozen=True)
class _Distribution:
    ex_date: date
    amount: float
    pay_date: date | None
    dividend_type: str
    frequency: int | None


def _to_date(raw: Any) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw))
    except ValueError:
        return None


class PolygonProvider(BaseDividendProvider):
    """Derive a dividend profile from Polygon's trailing-year dividend records.

    Annual amount is the sum of regular cash dividends with an ex-date in the
    last 365 days.
    """

    name = "polygon"

    def __init__(self, api_key: str | None = None, timeout: float = 15.0) -> None:
        self.api_key = api_key or os.getenv("POLYGON_API_KEY")
        if not self.api_key:
            raise DividendDataError(
                "Polygon API key required. Set POLYGON_API_KEY env var or pass api_key.",
                code=DividendDataErrorCode.AUTH_FAILED,
            )
        self.timeout = timeout

        if _SDK_AVAILABLE:
            self.client: Any = RESTClient(self.api_key)
        else:
            self.client = None
            self.session = requests.Session()
            self.session.verify = certifi.where()
            self.base_url = "https://api.polygon.io"

    def fetch_profile(self, symbol: str) -> DividendProfile:
        since = date.today() - timedelta(days=365)
        try:
            if _SDK_AVAILABLE and self.client is not None:
                records = self._dividends_sdk(symbol, since)
            else:
                records = self._dividends_rest(symbol, since)
        except DividendDataError:
            raise
        except requests.Timeout as exc:
            raise DividendDataError(
                f"Polygon request timed out for {symbol}",
                code=DividendDataErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except Exception as exc:
            raise DividendDataError(
                f"Polygon get_dividends failed: {exc}",
                code=DividendDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc
        return self.build_profile(symbol, records, since)

    def _dividends_sdk(self, symbol: str, since: date) -> list[_Distribution]:
        divs = self.client.list_dividends(
            ticker=symbol.upper(),
            ex_dividend_date_gte=since.isoformat(),
            order="desc",
            limit=_MAX_RECORDS,
        )
        records: list[_Distribution] = []
        for d in islice(divs, _MAX_RECORDS):
            ex_date = _to_date(getattr(d, "ex_dividend_date", None))
            if ex_date is None:
                continue
            records.append(_Distribution(
                ex_date=ex_date,
                amount=float(getattr(d, "cash_amount", 0) or 0),
                pay_date=_to_date(getattr(d, "pay_date", None)),
                dividend_type=str(getattr(d, "dividend_type", "") or ""),
                frequency=int(d.frequency) if getattr(d, "frequency", None) is not None else None,
            ))
        return records

    def _dividends_rest(self, symbol: str, since: date) -> list[_Distribution]:
        url = f"{self.base_url}/v3/reference/dividends"
        params: dict[str, Any] = {
            "apiKey": self.api_key,
            "ticker": symbol.upper(),
            "ex_dividend_date.gte": since.isoformat(),
            "order": "desc",
            "limit": _MAX_RECORDS,
        }
        resp = self.session.get(url, params=params, timeout=self.timeout)
        self._check_response(resp)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise DividendDataError(
                f"Polygon returned non-JSON body for {symbol}",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            ) from exc
        if not isinstance(payload, dict):
            raise DividendDataError(
                f"Polygon payload for {symbol} is not an object",
                code=DividendDataErrorCode.MALFORMED_PAYLOAD,
                retryable=True,
            )

        records: list[_Distribution] = []
        for r in payload.get("results", []) or []:
            ex_date = _to_date(r.get("ex_dividend_date"))
            if ex_date is None:
                continue
            records.append(_Distribution(
                ex_date=ex_date,
                amount=float(r.get("cash_amount", 0) or 0),
                pay_date=_to_date(r.get("pay_date")),
                dividend_type=str(r.get("dividend_type", "") or ""),
                frequency=int(r["frequency"]) if r.get("frequency") is not None else None,
            ))
        return records

    def build_profile(
        self, symbol: str, records: list[_Distribution], since: date,
    ) -> DividendProfile:
        """Aggregate trailing-year distributions into a profile."""
        key = symbol.upper()
        now = datetime.now(timezone.utc)
        recent = sorted(
            (r for r in records if r.ex_date >= since),
            key=lambda r: r.ex_date,
            reverse=True,
        )
        regular = [r for r in recent if r.dividend_type.upper() in _REGULAR_TYPES]

        if not regular:
            if recent:
                # one-off distributions only
                return DividendProfile(
                    symbol=key,
                    annual_amount=0.0,
                    pay_frequency=PayFrequency.SPECIAL,
                    next_ex_date=recent[0].ex_date,
                    next_pay_date=recent[0].pay_date,
                    source=self.name,
                    fetched_at=now,
                )
            return DividendProfile.no_dividend(key, source=self.name, fetched_at=now)

        latest = regular[0]
        frequency = PayFrequency.from_count(latest.frequency)
        if frequency is PayFrequency.UNKNOWN:
            frequency = self._frequency_from_count(len(regular))

        return DividendProfile(
            symbol=key,
            annual_amount=round(sum(r.amount for r in regular), 6),
            pay_frequency=frequency,
            next_ex_date=latest.ex_date,
            next_pay_date=latest.pay_date,
            source=self.name,
            fetched_at=now,
        )

    @staticmethod
    def _frequency_from_count(count: int) -> PayFrequency:
        if count >= 12:
            return PayFrequency.MONTHLY
        if count >= 4:
            return PayFrequency.QUARTERLY
        if count >= 2:
            return PayFrequency.SEMI_ANNUAL
        return PayFrequency.ANNUAL

    # ------------------------------------------------------------ internals

    def _check_response(self, resp: Any) -> None:
        if resp.status_code == 429:
            raise DividendDataError(
                "Polygon rate limited",
                code=DividendDataErrorCode.RATE_LIMITED,
                retryable=True,
            )
        if resp.status_code in (401, 403):
            raise DividendDataError(
                "Polygon authentication failed",
                code=DividendDataErrorCode.AUTH_FAILED,
            )
        if resp.status_code == 404:
            raise DividendDataError(
                "Symbol not found on Polygon",
                code=DividendDataErrorCode.NOT_FOUND,
            )
        if resp.status_code >= 400:
            raise DividendDataError(
                f"Polygon returned HTTP {resp.status_code}",
                code=DividendDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            )
