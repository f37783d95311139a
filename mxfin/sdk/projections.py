"""Savings and retirement projections.

SDK layer - pure time-value-of-money functions. No CLI or presentation.

Contributions compound monthly while an existing balance compounds yearly
at the annual rate; both granularities are kept as-is in every projection.
"""

import logging
import math
import sys

from .money import clean_amount
from .schemas import PlanSettings, RetirementProjection

logger = logging.getLogger(__name__)

# Returned by years_to_target when the target can never be reached
UNREACHABLE = -1.0

# Safe withdrawal rate (4% rule) and the matching 25x fund multiple
SAFE_WITHDRAWAL_RATE = 0.04
RETIREMENT_FUND_YEARS = 25

# Ceiling for projected balances that outgrow the float range
MAX_PROJECTED_BALANCE = sys.float_info.max


def _growth(rate: float, periods: float, name: str) -> float:
    """(1 + rate)^periods, with a total loss floor and inf on overflow."""
    base = max(0.0, 1 + rate)
    try:
        return base ** periods
    except OverflowError:
        logger.warning(f"{name} growth overflows at rate={rate} over {periods:g} periods")
        return math.inf


def future_value(
    monthly_contribution: float,
    monthly_rate: float,
    months: float,
    present_value: float,
    annual_rate: float,
    years: float,
) -> float:
    """Future value of a running contribution plus a lump sum.

    FV = contribution * ((1 + r)^n - 1) / r + present_value * (1 + annual_rate)^years

    Rates at or below -100% are a total loss rather than a sign flip.

    Args:
        monthly_contribution: Amount added each month
        monthly_rate: Monthly rate as decimal (r)
        months: Number of monthly contributions (n)
        present_value: Balance today
        annual_rate: Annual rate as decimal, applied to present_value
        years: Whole-year horizon for the lump sum

    Returns:
        Projected balance, capped at MAX_PROJECTED_BALANCE. present_value
        unchanged when months <= 0.
    """
    monthly_contribution = clean_amount(monthly_contribution, "monthly_contribution")
    monthly_rate = clean_amount(monthly_rate, "monthly_rate")
    present_value = clean_amount(present_value, "present_value")
    annual_rate = clean_amount(annual_rate, "annual_rate")
    months = clean_amount(months, "months")
    years = max(0.0, clean_amount(years, "years"))

    if months <= 0:
        return present_value

    fv_contributions = 0.0
    if monthly_contribution:
        if monthly_rate == 0:
            fv_contributions = monthly_contribution * months
        else:
            growth = _growth(monthly_rate, months, "contribution")
            fv_contributions = monthly_contribution * ((growth - 1) / monthly_rate)

    fv_current = 0.0
    if present_value:
        fv_current = present_value * _growth(annual_rate, years, "balance")

    total = fv_contributions + fv_current
    if not math.isfinite(total):
        logger.warning(f"Projected balance out of range, capping at {MAX_PROJECTED_BALANCE:.3e}")
        return MAX_PROJECTED_BALANCE
    return total


def years_to_target(
    target: float,
    current: float,
    monthly_contribution: float,
    monthly_rate: float,
) -> float:
    """Years of contributions needed to close the gap to target.

    Solves contribution * ((1 + r)^n - 1) / r = target - current for n.

    Returns:
        Years (fractional); 0 if already met; UNREACHABLE when contributions
        are not positive or the solution is not a positive time.
    """
    target = clean_amount(target, "target")
    current = clean_amount(current, "current")
    monthly_contribution = clean_amount(monthly_contribution, "monthly_contribution")
    monthly_rate = clean_amount(monthly_rate, "monthly_rate")

    if current >= target:
        return 0.0
    if monthly_contribution <= 0:
        return UNREACHABLE

    remaining = target - current
    if monthly_rate == 0:
        return remaining / monthly_contribution / 12

    log_arg = 1 + (remaining * monthly_rate) / monthly_contribution
    if log_arg <= 0 or monthly_rate <= -1:
        logger.debug(f"years_to_target: no solution for remaining={remaining:.2f} rate={monthly_rate}")
        return UNREACHABLE

    months = math.log(log_arg) / math.log(1 + monthly_rate)
    return months / 12 if months > 0 else UNREACHABLE


def projected_savings(years: float, plan: PlanSettings) -> float:
    """Long-term savings balance after `years` at the plan's annual return."""
    rate = plan.longterm_annual_return / 100
    return future_value(
        monthly_contribution=plan.longterm_monthly_savings,
        monthly_rate=rate / 12,
        months=years * 12,
        present_value=plan.longterm_current_savings,
        annual_rate=rate,
        years=years,
    )


def monthly_passive_income(savings: float) -> float:
    """Monthly income from withdrawing 4% of savings per year."""
    return savings * SAFE_WITHDRAWAL_RATE / 12


def passive_income_coverage(savings: float, monthly_expenses: float) -> float:
    """Percent of monthly expenses covered by passive income."""
    if monthly_expenses <= 0:
        return 0.0
    return monthly_passive_income(savings) / monthly_expenses * 100


def rule_of_120(age: float) -> tuple[float, float]:
    """Recommended (risky, conservative) allocation percentages for an age."""
    risky = min(100.0, max(0.0, 120.0 - age))
    return risky, 100.0 - risky


def retirement_projection(plan: PlanSettings) -> RetirementProjection:
    """Project the retirement fund at the target age.

    The recommended fund is 25 years of the current contribution rate
    (annualized), and monthly income assumes the 4% rule.
    """
    years = max(0, plan.retirement_target_age - plan.retirement_current_age)
    months = years * 12
    expected_return = plan.retirement_expected_return / 100

    total_fund = future_value(
        monthly_contribution=plan.retirement_monthly_contribution,
        monthly_rate=expected_return / 12,
        months=months,
        present_value=plan.retirement_current_savings,
        annual_rate=expected_return,
        years=years,
    )

    recommended_fund = plan.retirement_monthly_contribution * 12 * RETIREMENT_FUND_YEARS
    if recommended_fund <= 0:
        fund_progress = 0.0
    else:
        fund_progress = min(100.0, total_fund / recommended_fund * 100)

    risky, conservative = rule_of_120(plan.retirement_current_age)

    return RetirementProjection(
        years_to_retirement=years,
        months_to_retirement=months,
        total_fund=total_fund,
        recommended_fund=recommended_fund,
        monthly_income=monthly_passive_income(total_fund),
        fund_progress=fund_progress,
        recommended_risky_percentage=risky,
        recommended_conservative_percentage=conservative,
    )
