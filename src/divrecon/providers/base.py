"""Abstract base class for dividend data providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from divrecon.models.profile import DividendProfile


class BaseDividendProvider(ABC):
    """Abstract base for all dividend data providers.

    A provider performs exactly one outbound lookup per call and never
    retries; retry policy belongs to the caller.
    """

    name: str = "base"

    @abstractmethod
    def fetch_profile(self, symbol: str) -> DividendProfile:
        """Fetch dividend characteristics for a canonical identity.

        Args:
            symbol: Canonical identity (uppercase, suffix-free ticker).

        Returns:
            A DividendProfile. A successful lookup without dividend fields
            yields ``DividendProfile.no_dividend(...)``, not an error.

        Raises:
            DividendDataError: transport failure, non-success status,
                rate limiting, or malformed payload.
        """
        ...

    def fetch_profiles(self, symbols: list[str]) -> list[DividendProfile]:
        """Fetch several profiles (default: serial calls)."""
        return [self.fetch_profile(s) for s in symbols]
