"""Financial level and emergency fund milestone classification.

SDK layer - pure logic against the ordered tables in data/planning.yaml.

Financial levels are tiers of savings measured in years of expenses
(annual_expenses x multiplier). The emergency ladder measures months of
coverage, preceded by a flat starter amount.
"""

from typing import Optional, Sequence

from .money import clean_amount
from .planning import get_emergency_base_target, get_emergency_milestones, get_financial_levels
from .projections import UNREACHABLE, monthly_passive_income, passive_income_coverage, years_to_target
from .schemas import (
    EmergencyBase,
    EmergencyMilestone,
    FinancialLevel,
    LongTermSummary,
    MilestoneStage,
    MilestoneStatus,
    PlanSettings,
)


def _clamp_pct(value: float) -> float:
    return min(100.0, max(0.0, value))


# =============================================================================
# Financial levels
# =============================================================================


def current_level_index(
    annual_expenses: float,
    current_savings: float,
    levels: Optional[Sequence[FinancialLevel]] = None,
) -> int:
    """Index of the highest level whose target is covered by savings.

    Scans from the top tier down, so a balance of 10x expenses lands on the
    10x level rather than the first tier it also satisfies.

    Returns:
        Level index, or -1 if savings are below the first level's target
    """
    annual_expenses = clean_amount(annual_expenses, "annual_expenses")
    current_savings = clean_amount(current_savings, "current_savings")
    levels = get_financial_levels() if levels is None else levels

    for i in range(len(levels) - 1, -1, -1):
        if current_savings >= annual_expenses * levels[i].multiplier:
            return i
    return -1


def level_target(level: FinancialLevel, annual_expenses: float) -> float:
    return annual_expenses * level.multiplier


def level_progress(level: FinancialLevel, annual_expenses: float, current_savings: float) -> float:
    """Percent of the level's target covered (capped at 100, 0 for a zero target)."""
    target = level_target(level, annual_expenses)
    if target <= 0:
        return 0.0
    return min(100.0, current_savings / target * 100)


def years_to_level(
    level_index: int,
    plan: PlanSettings,
    levels: Optional[Sequence[FinancialLevel]] = None,
) -> float:
    """Years of long-term savings contributions needed to reach a level.

    Returns:
        Years, 0 if already reached, UNREACHABLE for an unknown level or
        when the plan has no monthly savings
    """
    levels = get_financial_levels() if levels is None else levels
    if level_index < 0 or level_index >= len(levels):
        return UNREACHABLE

    target = level_target(levels[level_index], plan.longterm_monthly_expenses * 12)
    return years_to_target(
        target=target,
        current=plan.longterm_current_savings,
        monthly_contribution=plan.longterm_monthly_savings,
        monthly_rate=plan.longterm_annual_return / 100 / 12,
    )


def longterm_summary(
    plan: PlanSettings,
    levels: Optional[Sequence[FinancialLevel]] = None,
) -> LongTermSummary:
    """Current and next financial level plus 4% rule passive income."""
    levels = get_financial_levels() if levels is None else levels
    annual_expenses = plan.longterm_monthly_expenses * 12
    savings = plan.longterm_current_savings

    idx = current_level_index(annual_expenses, savings, levels)
    current_level = levels[idx] if idx >= 0 else None
    next_level = levels[idx + 1] if idx < len(levels) - 1 else None

    return LongTermSummary(
        annual_expenses=annual_expenses,
        current_level_index=idx,
        current_level=current_level,
        next_level=next_level,
        monthly_passive_income=monthly_passive_income(savings),
        coverage_percentage=passive_income_coverage(savings, plan.longterm_monthly_expenses),
    )


# =============================================================================
# Emergency fund
# =============================================================================


def emergency_monthly_base(plan: PlanSettings, base: EmergencyBase = EmergencyBase.EXPENSES) -> float:
    """Monthly figure coverage is measured against (expenses or income)."""
    if EmergencyBase(base) is EmergencyBase.INCOME:
        return plan.emergency_monthly_income
    return plan.emergency_monthly_expenses


def emergency_months_covered(current_savings: float, monthly_base: float) -> float:
    """Months the fund covers; 0 when the monthly base is not positive."""
    current_savings = clean_amount(current_savings, "current_savings")
    monthly_base = clean_amount(monthly_base, "monthly_base")
    if monthly_base <= 0:
        return 0.0
    return max(0.0, current_savings) / monthly_base


def emergency_target_amount(monthly_base: float, target_months: float) -> float:
    return max(0.0, monthly_base) * target_months


def emergency_progress(current_savings: float, monthly_base: float, target_months: float) -> float:
    """Percent of the target months funded (capped at 100)."""
    target = emergency_target_amount(monthly_base, target_months)
    if target <= 0:
        return 0.0
    return min(100.0, current_savings / target * 100)


def recommended_savings_percentage(
    months_covered: float,
    milestones: Optional[Sequence[EmergencyMilestone]] = None,
) -> float:
    """Share of monthly surplus to direct to the fund at this coverage.

    Uses the first milestone not yet reached; past the last milestone its
    percentage applies.
    """
    milestones = get_emergency_milestones() if milestones is None else milestones
    for milestone in milestones:
        if months_covered < milestone.months:
            return milestone.recommended_percentage
    return milestones[-1].recommended_percentage


def locate_milestone(
    current_savings: float,
    monthly_base: float,
    milestones: Optional[Sequence[EmergencyMilestone]] = None,
    base_target: Optional[float] = None,
) -> MilestoneStatus:
    """Place a balance on the emergency ladder.

    Stages:
    - base: savings below the flat starter amount; progress toward it
    - ladder: coverage in [previous rung, this rung), where the first rung's
      lower bound is the starter amount expressed in months
    - complete: coverage at or above the last rung
    """
    current_savings = max(0.0, clean_amount(current_savings, "current_savings"))
    milestones = get_emergency_milestones() if milestones is None else milestones
    base_target = get_emergency_base_target() if base_target is None else base_target

    covered = emergency_months_covered(current_savings, monthly_base)
    base_months = base_target / monthly_base if monthly_base > 0 else 0.0

    if base_target > 0 and current_savings < base_target:
        return MilestoneStatus(
            stage=MilestoneStage.BASE,
            index=-1,
            milestone=None,
            lower_months=0.0,
            upper_months=base_months,
            months_covered=covered,
            progress=_clamp_pct(current_savings / base_target * 100),
        )

    for k, milestone in enumerate(milestones):
        lower = base_months if k == 0 else milestones[k - 1].months
        upper = milestone.months
        if covered < upper:
            span = upper - lower
            progress = 100.0 if span <= 0 else _clamp_pct((covered - lower) / span * 100)
            return MilestoneStatus(
                stage=MilestoneStage.LADDER,
                index=k,
                milestone=milestone,
                lower_months=lower,
                upper_months=upper,
                months_covered=covered,
                progress=progress,
            )

    last = milestones[-1]
    return MilestoneStatus(
        stage=MilestoneStage.COMPLETE,
        index=len(milestones),
        milestone=last,
        lower_months=last.months,
        upper_months=last.months,
        months_covered=covered,
        progress=100.0,
    )
