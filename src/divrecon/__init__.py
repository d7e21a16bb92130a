"""divrecon — Dividend data reconciliation & enrichment for broker holdings.

Normalizes broker tickers, enriches identities missing from a local dividend
store from external providers (Alpha Vantage, Polygon, Finnhub) in bounded
batches, and derives portfolio dividend income metrics.

Quick start::

    from divrecon import Holding, create_engine_from_env
    engine = create_engine_from_env()
    metrics = engine.reconcile_and_derive([Holding("AAPL", 100), Holding("MSFT_US_EQ", 50)])
"""

from __future__ import annotations

import os

from divrecon.config import DividendEngineConfig, DividendProviderType
from divrecon.deriver import MetricsDeriver
from divrecon.dispatch import BatchDispatcher, FetchOutcome, PooledDispatcher
from divrecon.engine import DividendEngine
from divrecon.errors import DividendDataError, DividendDataErrorCode, FetchError
from divrecon.fetcher import EnrichmentFetcher
from divrecon.models.holding import Holding
from divrecon.models.metrics import DividendEstimate, HoldingDividend, PortfolioDividendMetrics
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.reconciler import BatchReconciler, ReconcileResult
from divrecon.snapshot import load_snapshot, save_snapshot
from divrecon.store import DividendStore, MemoryDividendStore, StoreStats
from divrecon.symbols import SymbolNormalizer, normalize

__version__ = "0.1.0"

__all__ = [
    # Engine
    "DividendEngine",
    "create_engine_from_env",
    # Components
    "BatchReconciler",
    "ReconcileResult",
    "EnrichmentFetcher",
    "MetricsDeriver",
    "BatchDispatcher",
    "PooledDispatcher",
    "FetchOutcome",
    "SymbolNormalizer",
    "normalize",
    # Store
    "DividendStore",
    "MemoryDividendStore",
    "StoreStats",
    "save_snapshot",
    "load_snapshot",
    # Config
    "DividendEngineConfig",
    "DividendProviderType",
    # Errors
    "DividendDataError",
    "DividendDataErrorCode",
    "FetchError",
    # Models
    "DividendProfile",
    "PayFrequency",
    "Holding",
    "HoldingDividend",
    "DividendEstimate",
    "PortfolioDividendMetrics",
]


def _optional_float(value: str | None) -> float | None:
    return float(value) if value else None


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


def create_engine_from_env() -> DividendEngine:
    """Zero-config factory — reads provider list, batching and API keys from env vars.

    Environment variables:
        DIVIDEND_PROVIDERS: Comma-separated provider list (default: "alphavantage").
        DIVIDEND_BATCH_SIZE: Identities per batch (default: 10).
        DIVIDEND_BATCH_DELAY: Seconds between batches (default: 0.5).
        DIVIDEND_BATCH_TIMEOUT: Per-batch timeout in seconds (default: none).
        DIVIDEND_DISPATCH: "batch" or "pool" (default: "batch").
        DIVIDEND_MAX_WORKERS: Worker count for "pool" dispatch (default: 5).
        DIVIDEND_CALLS_PER_MINUTE: Outbound rate limit for "pool" dispatch.
        DIVIDEND_SNAPSHOT_PATH: Parquet snapshot used to seed the store.
        ALPHAVANTAGE_API_KEY: Alpha Vantage API key.
        POLYGON_API_KEY: Polygon.io API key.
        FINNHUB_API_KEY: Finnhub API key.
    """
    provider_str = os.getenv("DIVIDEND_PROVIDERS", "alphavantage")
    provider_types = [
        DividendProviderType(name.strip().lower())
        for name in provider_str.split(",")
        if name.strip()
    ]

    config = DividendEngineConfig(
        providers=provider_types,
        batch_size=int(os.getenv("DIVIDEND_BATCH_SIZE", "10")),
        batch_delay_seconds=float(os.getenv("DIVIDEND_BATCH_DELAY", "0.5")),
        batch_timeout_seconds=_optional_float(os.getenv("DIVIDEND_BATCH_TIMEOUT")),
        dispatch=os.getenv("DIVIDEND_DISPATCH", "batch"),
        max_workers=int(os.getenv("DIVIDEND_MAX_WORKERS", "5")),
        calls_per_minute=_optional_int(os.getenv("DIVIDEND_CALLS_PER_MINUTE")),
        snapshot_path=os.getenv("DIVIDEND_SNAPSHOT_PATH") or None,
        alphavantage_api_key=os.getenv("ALPHAVANTAGE_API_KEY"),
        polygon_api_key=os.getenv("POLYGON_API_KEY"),
        finnhub_api_key=os.getenv("FINNHUB_API_KEY"),
    )

    return DividendEngine(config)
