"""DividendEngine — store + reconciler + deriver wired from a config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from divrecon.config import DividendEngineConfig, DividendProviderType
from divrecon.deriver import MetricsDeriver
from divrecon.dispatch import BatchDispatcher, FetchDispatcher, PooledDispatcher
from divrecon.fetcher import EnrichmentFetcher
from divrecon.logging import get_logger
from divrecon.models.holding import Holding
from divrecon.models.metrics import PortfolioDividendMetrics
from divrecon.providers import create_provider
from divrecon.providers.base import BaseDividendProvider
from divrecon.reconciler import BatchReconciler, ReconcileResult
from divrecon.snapshot import load_snapshot, save_snapshot
from divrecon.store import DividendStore, MemoryDividendStore, StoreStats
from divrecon.symbols import SymbolNormalizer, default_normalizer

logger = get_logger(__name__)


def build_dispatcher(config: DividendEngineConfig) -> FetchDispatcher:
    if config.dispatch == "batch":
        return BatchDispatcher(
            batch_size=config.batch_size,
            delay_seconds=config.batch_delay_seconds,
            batch_timeout=config.batch_timeout_seconds,
        )
    if config.dispatch == "pool":
        return PooledDispatcher(
            max_workers=config.max_workers,
            calls_per_minute=config.calls_per_minute,
        )
    raise ValueError(f"Unknown dispatch policy {config.dispatch!r}; expected 'batch' or 'pool'")


def build_providers(config: DividendEngineConfig) -> list[BaseDividendProvider]:
    providers: list[BaseDividendProvider] = []
    for pt in config.providers:
        kwargs: dict[str, Any] = {}
        if pt == DividendProviderType.ALPHAVANTAGE:
            kwargs["api_key"] = config.alphavantage_api_key
            kwargs["timeout"] = config.request_timeout
        elif pt == DividendProviderType.POLYGON:
            kwargs["api_key"] = config.polygon_api_key
            kwargs["timeout"] = config.request_timeout
        elif pt == DividendProviderType.FINNHUB:
            kwargs["api_key"] = config.finnhub_api_key
        providers.append(create_provider(pt, **kwargs))
    return providers


class DividendEngine:
    """Reconcile a holdings list against the dividend store and derive metrics.

    Usage::

        from divrecon import create_engine_from_env
        engine = create_engine_from_env()
        metrics = engine.reconcile_and_derive(holdings)

    Per-identity fetch failures never escape ``reconcile_and_derive``; they
    show up as ``error_count`` and as unmatched holdings.
    """

    def __init__(
        self,
        config: DividendEngineConfig,
        store: DividendStore | None = None,
        providers: list[BaseDividendProvider] | None = None,
        dispatcher: FetchDispatcher | None = None,
        normalizer: SymbolNormalizer | None = None,
    ) -> None:
        self.config = config
        self.store = store if store is not None else MemoryDividendStore()
        self.normalizer = normalizer or default_normalizer

        if providers is None:
            providers = build_providers(config)
        self.fetcher = EnrichmentFetcher(providers, validate=config.validate)

        self.reconciler = BatchReconciler(
            self.store,
            self.fetcher,
            normalizer=self.normalizer,
            dispatcher=dispatcher or build_dispatcher(config),
        )
        self.deriver = MetricsDeriver(
            self.store,
            normalizer=self.normalizer,
            income_growth_rate=config.income_growth_rate,
            dividend_growth_rate=config.dividend_growth_rate,
        )

        if config.snapshot_path and Path(config.snapshot_path).exists():
            load_snapshot(config.snapshot_path, self.store)
        elif config.snapshot_path:
            logger.debug("No snapshot at %s; starting with current store", config.snapshot_path)

    @property
    def providers(self) -> list[BaseDividendProvider]:
        return self.fetcher.providers

    def reconcile(self, holdings: list[Holding]) -> ReconcileResult:
        return self.reconciler.reconcile(holdings)

    def derive(
        self, holdings: list[Holding], reconcile: ReconcileResult | None = None,
    ) -> PortfolioDividendMetrics:
        return self.deriver.derive(holdings, reconcile)

    def reconcile_and_derive(self, holdings: list[Holding]) -> PortfolioDividendMetrics:
        """Enrich unknown identities, then compute metrics for ``holdings``."""
        result = self.reconcile(holdings)
        return self.derive(holdings, result)

    def stats(self) -> StoreStats:
        return self.store.stats()

    def save_snapshot(self, path: Path | str | None = None) -> int:
        """Persist the store to ``path`` (default: the configured snapshot path)."""
        target = path or self.config.snapshot_path
        if not target:
            raise ValueError("No snapshot path given or configured")
        return save_snapshot(self.store, target)
