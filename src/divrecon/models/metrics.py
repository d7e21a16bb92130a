"""Derived portfolio dividend metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from divrecon.models.profile import DividendProfile


@dataclass(frozen=True)
class HoldingDividend:
    """Per-holding dividend contribution.

    Attributes:
        symbol: Raw broker symbol of the holding.
        identity: Canonical identity matched in the store, or None.
        shares: Share quantity.
        profile: Matched dividend profile, or None when unmatched.
        annual_income: profile.annual_amount x shares.
        quarterly_income: profile.quarterly_amount x shares.
        cost_basis: Cost basis supplied by the caller.
        position_value: Market value supplied by the caller.
    """

    symbol: str
    identity: str | None
    shares: float
    profile: DividendProfile | None = None
    annual_income: float = 0.0
    quarterly_income: float = 0.0
    cost_basis: float = 0.0
    position_value: float = 0.0

    @property
    def matched(self) -> bool:
        return self.profile is not None


@dataclass(frozen=True)
class DividendEstimate:
    """A figure derived from an assumption rather than measured data."""

    name: str
    value: float | str
    assumption: str
    is_estimate: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": self.value,
            "assumption": self.assumption,
            "is_estimate": self.is_estimate,
        }


@dataclass
class PortfolioDividendMetrics:
    """Portfolio-level dividend metrics, recomputed on every call."""

    total_annual_income: float = 0.0
    total_quarterly_income: float = 0.0
    monthly_average: float = 0.0
    yield_on_cost: float = 0.0
    portfolio_yield: float = 0.0
    dividend_paying_count: int = 0
    matched_count: int = 0
    unmatched_count: int = 0
    processed_count: int = 0
    newly_added_count: int = 0
    error_count: int = 0
    holdings: list[HoldingDividend] = field(default_factory=list)
    estimates: list[DividendEstimate] = field(default_factory=list)

    @property
    def coverage_percent(self) -> float:
        """Share of holdings matched to dividend data."""
        total = self.matched_count + self.unmatched_count
        if total == 0:
            return 0.0
        return round(self.matched_count / total * 100, 2)

    def estimate(self, name: str) -> DividendEstimate | None:
        return next((e for e in self.estimates if e.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "measured": {
                "total_annual_income": round(self.total_annual_income, 2),
                "total_quarterly_income": round(self.total_quarterly_income, 2),
                "monthly_average": round(self.monthly_average, 2),
                "yield_on_cost": round(self.yield_on_cost, 4),
                "portfolio_yield": round(self.portfolio_yield, 4),
                "dividend_paying_count": self.dividend_paying_count,
                "matched_count": self.matched_count,
                "unmatched_count": self.unmatched_count,
                "coverage_percent": self.coverage_percent,
            },
            "reconciliation": {
                "processed": self.processed_count,
                "newly_added": self.newly_added_count,
                "errors": self.error_count,
            },
            "estimates": [e.to_dict() for e in self.estimates],
        }
