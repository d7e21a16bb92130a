"""Dividend data models."""

from divrecon.models.holding import Holding
from divrecon.models.metrics import DividendEstimate, HoldingDividend, PortfolioDividendMetrics
from divrecon.models.profile import DividendProfile, PayFrequency

__all__ = [
    "DividendProfile",
    "PayFrequency",
    "Holding",
    "HoldingDividend",
    "DividendEstimate",
    "PortfolioDividendMetrics",
]
