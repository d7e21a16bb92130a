"""Brokerage holding data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Holding:
    """A position as reported by the caller's brokerage sync.

    Attributes:
        symbol: Raw broker ticker (e.g. "MSFT_US_EQ").
        shares: Share quantity.
        current_price: Current market price per share.
        market_value: Current market value of the position.
        average_price: Average purchase price per share, when known.
    """

    symbol: str
    shares: float
    current_price: float = 0.0
    market_value: float = 0.0
    average_price: float | None = None

    @property
    def position_value(self) -> float:
        """Market value, falling back to shares x price."""
        if self.market_value:
            return max(self.market_value, 0.0)
        return max(self.shares * self.current_price, 0.0)

    @property
    def cost_basis(self) -> float:
        """Amount paid for the position; market value when no average price."""
        if self.average_price is not None:
            return max(self.shares * self.average_price, 0.0)
        return self.position_value
