"""Dividend engine configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DividendProviderType(Enum):
    """Supported dividend data provider backends."""

    ALPHAVANTAGE = "alphavantage"
    POLYGON = "polygon"
    FINNHUB = "finnhub"
    MOCK = "mock"


@dataclass
class DividendEngineConfig:
    """Configuration for DividendEngine.

    Attributes:
        providers: Provider backends ordered by priority.
        batch_size: Identities fetched concurrently per batch ("batch" dispatch).
        batch_delay_seconds: Pause between consecutive batches.
        batch_timeout_seconds: Give up waiting on a batch after this long
            (None waits indefinitely).
        dispatch: Dispatch policy, "batch" or "pool".
        max_workers: Worker count for "pool" dispatch.
        calls_per_minute: Optional outbound rate limit for "pool" dispatch.
        validate: Whether to run quality checks on fetched profiles.
        request_timeout: HTTP timeout (seconds) for REST providers.
        alphavantage_api_key: Alpha Vantage API key.
        polygon_api_key: Polygon.io API key.
        finnhub_api_key: Finnhub API key.
        snapshot_path: Parquet snapshot used to seed the store at startup.
        income_growth_rate: Assumed annual income growth for projections.
        dividend_growth_rate: Assumed per-holding dividend growth rate.
    """

    providers: list[DividendProviderType] = field(
        default_factory=lambda: [DividendProviderType.ALPHAVANTAGE]
    )
    batch_size: int = 10
    batch_delay_seconds: float = 0.5
    batch_timeout_seconds: float | None = None
    dispatch: str = "batch"
    max_workers: int = 5
    calls_per_minute: int | None = None
    validate: bool = True
    request_timeout: float = 15.0

    alphavantage_api_key: str | None = None
    polygon_api_key: str | None = None
    finnhub_api_key: str | None = None

    snapshot_path: str | None = None

    income_growth_rate: float = 0.10
    dividend_growth_rate: float = 0.03
