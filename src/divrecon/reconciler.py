"""BatchReconciler — resolve holdings, enrich misses, merge into the store."""

from __future__ import annotations

from dataclasses import dataclass, field

from divrecon.dispatch import BatchDispatcher, FetchDispatcher
from divrecon.fetcher import EnrichmentFetcher
from divrecon.logging import get_logger
from divrecon.models.holding import Holding
from divrecon.models.profile import DividendProfile
from divrecon.store import DividendStore
from divrecon.symbols import SymbolNormalizer, default_normalizer

logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    """Counts from one reconciliation run.

    Attributes:
        processed: Holdings examined.
        newly_added: Identities written to the store by this run.
        errors: Identities whose enrichment failed.
        resolved: Raw symbol -> identity for holdings already in the store.
        fetched: Identities enriched successfully by this run.
        failed: Identities whose enrichment failed (still absent).
    """

    processed: int = 0
    newly_added: int = 0
    errors: int = 0
    resolved: dict[str, str] = field(default_factory=dict)
    fetched: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class BatchReconciler:
    """Cache-aside enrichment of a holdings list against a DividendStore.

    Usage::

        reconciler = BatchReconciler(store, EnrichmentFetcher([provider]))
        result = reconciler.reconcile(holdings)
    """

    def __init__(
        self,
        store: DividendStore,
        fetcher: EnrichmentFetcher,
        normalizer: SymbolNormalizer | None = None,
        dispatcher: FetchDispatcher | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.normalizer = normalizer or default_normalizer
        self.dispatcher = dispatcher or BatchDispatcher()

    def unresolved_identities(
        self, holdings: list[Holding], result: ReconcileResult | None = None,
    ) -> list[str]:
        """Identities needing enrichment, de-duplicated in first-seen order."""
        pending: dict[str, None] = {}
        for holding in holdings:
            match = self.normalizer.resolve_against_store(holding.symbol, self.store)
            if match is not None:
                if result is not None:
                    result.resolved[holding.symbol] = match
                continue
            identity = self.normalizer.normalize(holding.symbol)
            if not identity:
                logger.debug("Skipping holding with empty symbol %r", holding.symbol)
                continue
            pending.setdefault(identity, None)
        return list(pending)

    def reconcile(self, holdings: list[Holding]) -> ReconcileResult:
        """Enrich every holding whose identity is missing from the store.

        Per-identity failures are counted, never raised; failed identities
        stay absent so the next run retries them.
        """
        result = ReconcileResult(processed=len(holdings))
        identities = self.unresolved_identities(holdings, result)
        if not identities:
            logger.debug("All %d holdings resolved from store", len(holdings))
            return result

        logger.debug(
            "%d holdings resolved, %d identities to enrich",
            len(result.resolved), len(identities),
        )
        outcomes = self.dispatcher.dispatch(identities, self._fetch_and_store)
        for outcome in outcomes:
            if outcome.ok:
                result.fetched.append(outcome.identity)
            else:
                result.failed.append(outcome.identity)
                logger.warning(
                    "Dividend lookup failed for %s: %s", outcome.identity, outcome.error,
                )

        result.newly_added = len(result.fetched)
        result.errors = len(result.failed)
        logger.info(
            "Reconciled %d holdings: %d new identities, %d errors",
            result.processed, result.newly_added, result.errors,
        )
        return result

    def _fetch_and_store(self, identity: str) -> DividendProfile:
        # store write happens inside the task: a fetch that outlives its
        # batch timeout still lands
        profile = self.fetcher.fetch(identity)
        self.store.put(identity, profile)
        return profile
