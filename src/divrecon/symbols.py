"""Broker ticker normalization and store resolution.

Raw broker symbols go through three ordered stages:

1. strip rules: remove known venue/equity-type suffixes, longest first
2. alias table: map irregular spellings to a single canonical identity
3. candidates:  fallback spellings tried against the store in order

Usage::

    from divrecon.symbols import normalize, resolve_against_store
    normalize("MSFT_US_EQ")          # "MSFT"
    resolve_against_store("VOD.L", store)
"""

from __future__ import annotations

from typing import Iterable

from divrecon.logging import get_logger
from divrecon.store import DividendStore

logger = get_logger(__name__)

DEFAULT_SUFFIXES: tuple[str, ...] = (
    "_US_EQ",
    "_NASDAQ",
    "_NYSE",
    "_LON",
    "_EQ",
    ".TO",
    ".L",
)

# Irregular spellings, keyed by the suffix-stripped uppercase form.
DEFAULT_ALIASES: dict[str, str] = {
    "RDS.A": "SHEL",
    "RDSA": "SHEL",
    "RDS.B": "SHEL",
    "FB": "META",
    "BRK-B": "BRK.B",
    "BRK/B": "BRK.B",
    "BRK_B": "BRK.B",
}

SEPARATORS: tuple[str, ...] = ("_", ".")


class SymbolNormalizer:
    """Maps raw broker tickers to canonical identities.

    Canonical form: uppercase ticker, broker suffix removed, aliases
    resolved (e.g. "RDS.A_US_EQ" -> "SHEL").
    """

    def __init__(
        self,
        suffixes: Iterable[str] = DEFAULT_SUFFIXES,
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._suffixes: list[str] = []
        self._aliases: dict[str, str] = {}
        for suffix in suffixes:
            self.register_suffix(suffix)
        self.register_aliases(DEFAULT_ALIASES if aliases is None else aliases)

    @property
    def suffixes(self) -> tuple[str, ...]:
        return tuple(self._suffixes)

    def register_suffix(self, suffix: str) -> None:
        suffix = suffix.upper()
        if suffix and suffix not in self._suffixes:
            self._suffixes.append(suffix)
            # longest match first
            self._suffixes.sort(key=len, reverse=True)

    def register_aliases(self, aliases: dict[str, str]) -> None:
        for raw, canonical in aliases.items():
            self._aliases[raw.upper()] = canonical.upper()

    # ---- stage 1: strip rules ----

    def strip_suffix(self, symbol: str) -> str:
        """Remove the longest matching suffix once; no-op when none matches.

        A suffix is only removed when something is left of the symbol.
        """
        for suffix in self._suffixes:
            if symbol.endswith(suffix) and len(symbol) > len(suffix):
                return symbol[: -len(suffix)]
        return symbol

    def strip_suffixes(self, symbol: str) -> str:
        """Strip suffixes until none match (e.g. "X_EQ_EQ" -> "X")."""
        current = symbol
        while True:
            stripped = self.strip_suffix(current).strip()
            if stripped == current:
                return current
            current = stripped

    # ---- stage 2: alias table ----

    def apply_alias(self, symbol: str) -> str:
        return self._aliases.get(symbol, symbol)

    # ---- public API ----

    def normalize(self, raw_symbol: str) -> str:
        """Return the canonical identity for a raw broker symbol.

        Empty input normalizes to "" (always a store miss). Anything else is
        passed through permissively, even if only punctuation remains.
        """
        if not raw_symbol:
            return ""
        symbol = raw_symbol.strip().upper()
        symbol = self.strip_suffixes(symbol)
        symbol = self.apply_alias(symbol)
        # an alias target may itself carry a suffix
        return self.strip_suffixes(symbol)

    # ---- stage 3: candidate fallback ----

    def candidates(self, raw_symbol: str) -> list[str]:
        """Ordered spellings to try against the store.

        Normalized form, raw uppercased, each single-suffix-stripped variant,
        then the part before the first "_" and before the first ".".
        """
        if not raw_symbol:
            return []
        upper = raw_symbol.strip().upper()
        ordered = [self.normalize(raw_symbol), upper]
        for suffix in self._suffixes:
            if upper.endswith(suffix) and len(upper) > len(suffix):
                ordered.append(upper[: -len(suffix)])
        for sep in SEPARATORS:
            ordered.append(upper.split(sep, 1)[0])

        seen: set[str] = set()
        result: list[str] = []
        for candidate in ordered:
            if candidate and candidate not in seen:
                seen.add(candidate)
                result.append(candidate)
        return result

    def resolve_against_store(self, raw_symbol: str, store: DividendStore) -> str | None:
        """Return the first candidate present in the store, or None on a miss."""
        tried = self.candidates(raw_symbol)
        for candidate in tried:
            if store.has(candidate):
                if candidate != tried[0]:
                    logger.debug("Matched %s via fallback spelling %s", raw_symbol, candidate)
                return candidate
        logger.debug("No store entry for %r (tried: %s)", raw_symbol, ", ".join(tried))
        return None


default_normalizer = SymbolNormalizer()


def normalize(raw_symbol: str) -> str:
    return default_normalizer.normalize(raw_symbol)


def candidates(raw_symbol: str) -> list[str]:
    return default_normalizer.candidates(raw_symbol)


def resolve_against_store(raw_symbol: str, store: DividendStore) -> str | None:
    return default_normalizer.resolve_against_store(raw_symbol, store)
