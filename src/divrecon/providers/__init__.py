"""Dividend data provider registry."""

from __future__ import annotations

from divrecon.config import DividendProviderType
from divrecon.providers.base import BaseDividendProvider

# Dotted paths, imported on first use; optional SDKs stay unloaded
PROVIDER_CLASSES: dict[DividendProviderType, str] = {
    DividendProviderType.ALPHAVANTAGE: "divrecon.providers.alphavantage.AlphaVantageProvider",
    DividendProviderType.POLYGON: "divrecon.providers.polygon.PolygonProvider",
    DividendProviderType.FINNHUB: "divrecon.providers.finnhub.FinnhubProvider",
    DividendProviderType.MOCK: "divrecon.providers.mock.MockProvider",
}


def create_provider(
    provider_type: DividendProviderType,
    **kwargs,
) -> BaseDividendProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseDividendProvider", "PROVIDER_CLASSES", "create_provider"]
