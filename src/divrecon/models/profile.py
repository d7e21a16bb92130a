"""Dividend profile data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class PayFrequency(Enum):
    """How often an identity distributes."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semiAnnual"
    ANNUAL = "annual"
    SPECIAL = "special"
    UNKNOWN = "unknown"

    @classmethod
    def from_count(cls, payments_per_year: int | None) -> PayFrequency:
        """Map a payments-per-year count (12, 4, 2, 1) to a frequency."""
        mapping = {12: cls.MONTHLY, 4: cls.QUARTERLY, 2: cls.SEMI_ANNUAL, 1: cls.ANNUAL}
        if payments_per_year is None:
            return cls.UNKNOWN
        return mapping.get(payments_per_year, cls.UNKNOWN)


@dataclass(frozen=True)
class DividendProfile:
    """Dividend characteristics of one canonical identity.

    A profile with ``annual_amount == 0`` is a final "pays no dividend"
    answer; an identity that has not been looked up has no profile at all.

    Attributes:
        symbol: Canonical identity the profile describes.
        annual_amount: Dividend per share per year (currency units).
        yield_percent: Dividend yield in percent.
        pay_frequency: Payout frequency.
        next_ex_date: Next (or latest known) ex-dividend date.
        next_pay_date: Next (or latest known) payment date.
        is_fund: Pooled vehicle (ETF, fund) rather than a single issuer.
        source: Provider name, or "seed"/"snapshot" for loaded data.
        fetched_at: When the profile was retrieved.
    """

    symbol: str
    annual_amount: float
    yield_percent: float = 0.0
    pay_frequency: PayFrequency = PayFrequency.QUARTERLY
    next_ex_date: date | None = None
    next_pay_date: date | None = None
    is_fund: bool = False
    source: str = "seed"
    fetched_at: datetime | None = None

    @property
    def quarterly_amount(self) -> float:
        """Per-share amount per quarter (assumes quarterly payout)."""
        return self.annual_amount / 4

    @property
    def pays_dividend(self) -> bool:
        return self.annual_amount > 0

    @classmethod
    def no_dividend(
        cls,
        symbol: str,
        source: str = "seed",
        fetched_at: datetime | None = None,
        is_fund: bool = False,
    ) -> DividendProfile:
        """Cacheable "this identity pays no dividend" answer."""
        return cls(
            symbol=symbol,
            annual_amount=0.0,
            yield_percent=0.0,
            pay_frequency=PayFrequency.UNKNOWN,
            is_fund=is_fund,
            source=source,
            fetched_at=fetched_at,
        )
