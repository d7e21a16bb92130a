"""MetricsDeriver — portfolio dividend metrics from a reconciled store.

Income and yield figures are measured from the store and the caller's
holdings. Growth, projection and safety figures are estimates built on
fixed assumptions (no per-stock dividend history is available) and are
returned separately as ``DividendEstimate`` entries.
"""

from __future__ import annotations

from divrecon.logging import get_logger
from divrecon.models.holding import Holding
from divrecon.models.metrics import DividendEstimate, HoldingDividend, PortfolioDividendMetrics
from divrecon.reconciler import ReconcileResult
from divrecon.store import DividendStore
from divrecon.symbols import SymbolNormalizer, default_normalizer

logger = get_logger(__name__)

SAFETY_BASELINE = 85.0
SAFETY_YIELD_THRESHOLD = 6.0
SAFETY_PENALTY_PER_POINT = 5.0


def _ratio_percent(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def risk_level(score: float) -> str:
    if score >= 90:
        return "Low"
    if score >= 70:
        return "Medium"
    return "High"


class MetricsDeriver:
    """Compute per-holding and aggregate dividend metrics."""

    def __init__(
        self,
        store: DividendStore,
        normalizer: SymbolNormalizer | None = None,
        income_growth_rate: float = 0.10,
        dividend_growth_rate: float = 0.03,
        projection_years: int = 5,
    ) -> None:
        self.store = store
        self.normalizer = normalizer or default_normalizer
        self.income_growth_rate = income_growth_rate
        self.dividend_growth_rate = dividend_growth_rate
        self.projection_years = projection_years

    def derive(
        self,
        holdings: list[Holding],
        reconcile: ReconcileResult | None = None,
    ) -> PortfolioDividendMetrics:
        metrics = PortfolioDividendMetrics(processed_count=len(holdings))
        if reconcile is not None:
            metrics.processed_count = reconcile.processed
            metrics.newly_added_count = reconcile.newly_added
            metrics.error_count = reconcile.errors

        matched_cost = 0.0
        total_value = 0.0
        weighted_yield = 0.0

        for holding in holdings:
            shares = max(holding.shares, 0.0)
            total_value += holding.position_value
            identity = self.normalizer.resolve_against_store(holding.symbol, self.store)
            profile = self.store.get(identity) if identity else None

            if profile is None:
                metrics.unmatched_count += 1
                metrics.holdings.append(HoldingDividend(
                    symbol=holding.symbol,
                    identity=None,
                    shares=shares,
                    cost_basis=holding.cost_basis,
                    position_value=holding.position_value,
                ))
                continue

            annual_income = max(profile.annual_amount, 0.0) * shares
            quarterly_income = max(profile.quarterly_amount, 0.0) * shares
            metrics.matched_count += 1
            if profile.pays_dividend:
                metrics.dividend_paying_count += 1
            metrics.total_annual_income += annual_income
            metrics.total_quarterly_income += quarterly_income
            matched_cost += holding.cost_basis
            weighted_yield += max(profile.yield_percent, 0.0) * annual_income

            metrics.holdings.append(HoldingDividend(
                symbol=holding.symbol,
                identity=identity,
                shares=shares,
                profile=profile,
                annual_income=annual_income,
                quarterly_income=quarterly_income,
                cost_basis=holding.cost_basis,
                position_value=holding.position_value,
            ))

        metrics.monthly_average = metrics.total_annual_income / 12
        metrics.yield_on_cost = _ratio_percent(metrics.total_annual_income, matched_cost)
        metrics.portfolio_yield = _ratio_percent(metrics.total_annual_income, total_value)

        if metrics.total_annual_income > 0:
            avg_yield = weighted_yield / metrics.total_annual_income
            metrics.estimates = self.estimates(metrics.total_annual_income, avg_yield)

        logger.info(
            "Derived dividend metrics: annual income %.2f from %d/%d matched holdings",
            metrics.total_annual_income, metrics.matched_count, len(holdings),
        )
        return metrics

    def estimates(self, annual_income: float, avg_yield: float) -> list[DividendEstimate]:
        """Assumption-based figures; never presented as measured data."""
        growth = self.income_growth_rate
        result = [
            DividendEstimate(
                name=f"projected_annual_income_year_{year}",
                value=round(annual_income * (1 + growth) ** year, 2),
                assumption=f"current income compounded at a fixed {growth:.0%} per year",
            )
            for year in range(1, self.projection_years + 1)
        ]
        result.append(DividendEstimate(
            name="dividend_growth_rate",
            value=round(self.dividend_growth_rate * 100, 2),
            assumption="fixed rate; per-stock dividend history is not available",
        ))

        penalty = max(avg_yield - SAFETY_YIELD_THRESHOLD, 0.0) * SAFETY_PENALTY_PER_POINT
        score = min(max(SAFETY_BASELINE - penalty, 0.0), 100.0)
        basis = (
            f"baseline {SAFETY_BASELINE:.0f}, minus {SAFETY_PENALTY_PER_POINT:.0f} per "
            f"income-weighted yield point above {SAFETY_YIELD_THRESHOLD:.0f}%"
        )
        result.append(DividendEstimate(name="safety_score", value=round(score, 1), assumption=basis))
        result.append(DividendEstimate(name="risk_level", value=risk_level(score), assumption=basis))
        return result
