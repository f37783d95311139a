"""Savings allocation and portfolio risk analysis.

SDK layer - pure logic, returns value objects. No CLI or presentation.

- SOFIPO/CETES split: SOFIPO interest is ISR-exempt up to 5 annual UMAs, so
  savings fill SOFIPOs up to that limit first and the rest goes to CETES.
- Portfolio risk: investment types map to a high/low risk class; the high
  risk share is compared with the rule of 120 for the investor's age.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence

from .money import clean_amount, format_mxn
from .planning import get_investment_types, get_sofipos, get_tax_exemption
from .projections import rule_of_120
from .schemas import (
    AllocationStatus,
    AllocationStrategy,
    Investment,
    InvestmentType,
    PortfolioSummary,
    RiskAssessment,
    RiskClass,
    SavingsInstrument,
    TypeAllocation,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365

# Rule-of-120 balance band, in percentage points
BALANCED_TOLERANCE = 10.0

# Every InvestmentType must appear here
RISK_CLASSES: Dict[InvestmentType, RiskClass] = {
    InvestmentType.STOCKS: RiskClass.HIGH,
    InvestmentType.CRYPTO: RiskClass.HIGH,
    InvestmentType.ETF: RiskClass.HIGH,
    InvestmentType.BONDS: RiskClass.LOW,
    InvestmentType.REAL_ESTATE: RiskClass.LOW,
    InvestmentType.MUTUAL_FUNDS: RiskClass.LOW,
    InvestmentType.CETES: RiskClass.LOW,
    InvestmentType.AFORE: RiskClass.LOW,
    InvestmentType.OTHER: RiskClass.LOW,
}


# =============================================================================
# SOFIPO / CETES allocation
# =============================================================================


def tax_exempt_limit(uma_daily: Optional[float] = None, exempt_umas: Optional[float] = None) -> float:
    """SOFIPO interest exemption ceiling: annual UMA x exempt UMAs."""
    config = get_tax_exemption()
    uma_daily = config["uma_daily"] if uma_daily is None else uma_daily
    exempt_umas = config["exempt_umas"] if exempt_umas is None else exempt_umas
    return uma_daily * DAYS_PER_YEAR * exempt_umas


def calculate_allocation_strategy(total_savings: float, limit: Optional[float] = None) -> AllocationStrategy:
    """Split savings between SOFIPOs (up to the exempt limit) and CETES.

    Args:
        total_savings: Balance to allocate; negative balances count as 0
        limit: Tax-exempt ceiling (default: tax_exempt_limit())

    Returns:
        AllocationStrategy with amounts, percentages and a recommendation
    """
    total_savings = max(0.0, clean_amount(total_savings, "total_savings"))
    limit = tax_exempt_limit() if limit is None else limit

    sofipo_amount = min(total_savings, limit)
    cetes_amount = max(0.0, total_savings - limit)

    # Avoid division by zero without reporting an empty balance as 100%
    total = max(total_savings, 1.0)
    sofipo_percentage = sofipo_amount / total * 100
    cetes_percentage = cetes_amount / total * 100

    tax_exempt_remaining = max(0.0, limit - sofipo_amount)

    if total_savings <= 0:
        recommendation = "Start saving for your emergency fund"
    elif total_savings < limit:
        recommendation = (
            f"You can put everything in SOFIPOs "
            f"(interest is tax-exempt up to {format_mxn(limit, 0)})"
        )
    else:
        recommendation = (
            f"First fill SOFIPOs up to {format_mxn(limit, 0)} (exempt), "
            f"then put the rest in CETES"
        )

    return AllocationStrategy(
        sofipo_amount=sofipo_amount,
        cetes_amount=cetes_amount,
        sofipo_percentage=sofipo_percentage,
        cetes_percentage=cetes_percentage,
        tax_exempt_used=sofipo_amount,
        tax_exempt_remaining=tax_exempt_remaining,
        recommendation=recommendation,
    )


def best_sofipo(instruments: Optional[Sequence[SavingsInstrument]] = None) -> SavingsInstrument:
    """SOFIPO with the highest annual rate (first listed wins ties)."""
    instruments = get_sofipos() if instruments is None else instruments
    best = instruments[0]
    for current in instruments[1:]:
        if current.annual_rate > best.annual_rate:
            best = current
    return best


# =============================================================================
# Portfolio risk
# =============================================================================


def risk_class_of(investment_type: InvestmentType) -> RiskClass:
    return RISK_CLASSES[InvestmentType(investment_type)]


def summarize_portfolio(investments: Iterable[Investment]) -> PortfolioSummary:
    """Totals, amount-weighted expected return and risk split.

    Returns:
        PortfolioSummary; all zeros for an empty portfolio
    """
    investments = list(investments)
    total = sum(inv.amount for inv in investments)

    if total > 0:
        weighted_return = sum(inv.amount * inv.expected_return for inv in investments) / total
    else:
        weighted_return = 0.0

    high_risk = sum(inv.amount for inv in investments if risk_class_of(inv.type) is RiskClass.HIGH)
    low_risk = sum(inv.amount for inv in investments if risk_class_of(inv.type) is RiskClass.LOW)

    by_type_totals: Dict[InvestmentType, float] = {}
    for inv in investments:
        by_type_totals[inv.type] = by_type_totals.get(inv.type, 0.0) + inv.amount

    by_type = tuple(
        TypeAllocation(
            type=inv_type,
            label=info.label,
            total=by_type_totals[inv_type],
            percentage=by_type_totals[inv_type] / total * 100 if total > 0 else 0.0,
        )
        for inv_type, info in get_investment_types().items()
        if by_type_totals.get(inv_type, 0) > 0
    )

    return PortfolioSummary(
        total_invested=total,
        weighted_return=weighted_return,
        projected_annual_return=total * weighted_return / 100,
        high_risk_amount=high_risk,
        low_risk_amount=low_risk,
        high_risk_percentage=high_risk / total * 100 if total > 0 else 0.0,
        low_risk_percentage=low_risk / total * 100 if total > 0 else 0.0,
        by_type=by_type,
    )


def assess_risk_allocation(age: float, investments: Iterable[Investment]) -> RiskAssessment:
    """Compare the portfolio's high-risk share with the rule of 120.

    Balanced when within 10 percentage points of the recommendation.
    """
    age = clean_amount(age, "age")
    recommended_risky, recommended_conservative = rule_of_120(age)
    actual_risky = summarize_portfolio(investments).high_risk_percentage

    difference = actual_risky - recommended_risky
    if abs(difference) <= BALANCED_TOLERANCE:
        status = AllocationStatus.BALANCED
    elif difference > 0:
        status = AllocationStatus.TOO_RISKY
    else:
        status = AllocationStatus.TOO_CONSERVATIVE

    logger.debug(
        f"rule of 120: age={age:g} recommended={recommended_risky:.1f}% "
        f"actual={actual_risky:.1f}% -> {status.value}"
    )

    return RiskAssessment(
        recommended_risky=recommended_risky,
        recommended_conservative=recommended_conservative,
        actual_risky=actual_risky,
        difference=difference,
        status=status,
    )
