"""Dividend reference store — canonical identity -> DividendProfile."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from divrecon.models.profile import DividendProfile


@dataclass(frozen=True)
class StoreStats:
    """Counts computed by a full scan of the store."""

    total: int
    dividend_paying: int
    non_dividend_paying: int
    fund_count: int


class DividendStore(ABC):
    """Abstract store interface.

    ``put`` is the only mutator. Entries are added or overwritten by a
    fresher fetch, never evicted.
    """

    @abstractmethod
    def get(self, identity: str) -> DividendProfile | None:
        """Return the stored profile, or None if never looked up."""
        ...

    @abstractmethod
    def put(self, identity: str, profile: DividendProfile) -> None:
        """Store a profile, overwriting any previous one."""
        ...

    @abstractmethod
    def has(self, identity: str) -> bool:
        ...

    @abstractmethod
    def items(self) -> list[tuple[str, DividendProfile]]:
        """Point-in-time copy of all entries."""
        ...

    def identities(self) -> list[str]:
        return [identity for identity, _ in self.items()]

    def stats(self) -> StoreStats:
        profiles = [p for _, p in self.items()]
        paying = sum(1 for p in profiles if p.pays_dividend)
        return StoreStats(
            total=len(profiles),
            dividend_paying=paying,
            non_dividend_paying=len(profiles) - paying,
            fund_count=sum(1 for p in profiles if p.is_fund),
        )

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, str) and self.has(identity)

    def __len__(self) -> int:
        return len(self.items())


class MemoryDividendStore(DividendStore):
    """In-memory store shared by concurrent reconciliation runs.

    A single lock guards the mapping; same-key writes are last-write-wins.
    """

    def __init__(self, profiles: dict[str, DividendProfile] | None = None) -> None:
        self._profiles: dict[str, DividendProfile] = {}
        self._lock = threading.RLock()
        for identity, profile in (profiles or {}).items():
            self.put(identity, profile)

    def get(self, identity: str) -> DividendProfile | None:
        with self._lock:
            return self._profiles.get(identity)

    def put(self, identity: str, profile: DividendProfile) -> None:
        if not identity:
            raise ValueError("Cannot store a profile under an empty identity")
        with self._lock:
            self._profiles[identity] = profile

    def has(self, identity: str) -> bool:
        with self._lock:
            return identity in self._profiles

    def items(self) -> list[tuple[str, DividendProfile]]:
        with self._lock:
            return list(self._profiles.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)
