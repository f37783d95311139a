"""Tests for financial levels and the emergency fund ladder."""

import pytest

from mxfin.sdk.levels import (
    current_level_index,
    emergency_monthly_base,
    emergency_months_covered,
    emergency_progress,
    emergency_target_amount,
    level_progress,
    level_target,
    locate_milestone,
    longterm_summary,
    recommended_savings_percentage,
    years_to_level,
)
from mxfin.sdk.planning import (
    get_emergency_base_target,
    get_emergency_milestones,
    get_financial_levels,
)
from mxfin.sdk.projections import UNREACHABLE
from mxfin.sdk.schemas import EmergencyBase, MilestoneStage, PlanSettings


# === PLANNING TABLES ===


class TestPlanningTables:
    """Tests for the shipped planning.yaml tables."""

    def test_levels_ascending(self):
        multipliers = [lv.multiplier for lv in get_financial_levels()]
        assert multipliers == [0.5, 2, 10, 25, 40]

    def test_milestones_ascending(self):
        months = [m.months for m in get_emergency_milestones()]
        assert months == [1, 3, 6, 12, 24]

    def test_base_target(self):
        assert get_emergency_base_target() == 10000


# === FINANCIAL LEVELS ===


class TestCurrentLevel:
    """Tests for current_level_index()."""

    def test_below_first_level(self):
        assert current_level_index(180000, 0) == -1
        assert current_level_index(180000, 89999) == -1

    def test_exactly_first_level(self):
        assert current_level_index(180000, 90000) == 0

    def test_ten_times_expenses(self):
        """10x annual expenses is Financial Independence, not an earlier tier."""
        assert current_level_index(180000, 1800000) == 2
        assert get_financial_levels()[2].name == "Financial Independence"

    def test_top_level(self):
        assert current_level_index(180000, 180000 * 100) == 4

    def test_zero_expenses_reaches_top(self):
        assert current_level_index(0, 0) == 4

    def test_custom_levels(self):
        levels = get_financial_levels()[:2]
        assert current_level_index(1000, 100000, levels) == 1


class TestLevelTargets:
    """Tests for level_target() and level_progress()."""

    def test_target(self):
        level = get_financial_levels()[3]
        assert level_target(level, 180000) == 4500000

    def test_progress_capped(self):
        level = get_financial_levels()[0]
        assert level_progress(level, 180000, 45000) == pytest.approx(50)
        assert level_progress(level, 180000, 1000000) == 100

    def test_progress_zero_target(self):
        level = get_financial_levels()[0]
        assert level_progress(level, 0, 1000) == 0


class TestYearsToLevel:
    """Tests for years_to_level()."""

    def test_already_reached(self):
        plan = PlanSettings(longterm_monthly_expenses=15000, longterm_current_savings=1800000)
        assert years_to_level(2, plan) == 0

    def test_no_savings_unreachable(self):
        plan = PlanSettings(longterm_monthly_expenses=15000)
        assert years_to_level(1, plan) == UNREACHABLE

    def test_out_of_range_index(self):
        plan = PlanSettings(longterm_monthly_expenses=15000, longterm_monthly_savings=1000)
        assert years_to_level(-1, plan) == UNREACHABLE
        assert years_to_level(5, plan) == UNREACHABLE

    def test_higher_levels_take_longer(self):
        plan = PlanSettings(
            longterm_monthly_expenses=15000,
            longterm_current_savings=50000,
            longterm_monthly_savings=5000,
        )
        years = [years_to_level(i, plan) for i in range(5)]
        assert all(y > 0 for y in years)
        assert years == sorted(years)

    def test_zero_return(self):
        plan = PlanSettings(
            longterm_monthly_expenses=1000,
            longterm_monthly_savings=500,
            longterm_annual_return=0,
        )
        # 0.5 x 12,000 = 6,000 at 500/month = 12 months
        assert years_to_level(0, plan) == pytest.approx(1.0)


class TestLongTermSummary:
    """Tests for longterm_summary()."""

    def test_mid_levels(self):
        plan = PlanSettings(longterm_monthly_expenses=15000, longterm_current_savings=1800000)
        summary = longterm_summary(plan)
        assert summary.annual_expenses == 180000
        assert summary.current_level_index == 2
        assert summary.current_level.name == "Financial Independence"
        assert summary.next_level.name == "Financial Freedom"
        assert summary.monthly_passive_income == pytest.approx(6000)
        assert summary.coverage_percentage == pytest.approx(40)

    def test_no_level_yet(self):
        plan = PlanSettings(longterm_monthly_expenses=15000)
        summary = longterm_summary(plan)
        assert summary.current_level is None
        assert summary.next_level.name == "Financial Security"

    def test_top_level_has_no_next(self):
        plan = PlanSettings(longterm_monthly_expenses=1000, longterm_current_savings=480000)
        summary = longterm_summary(plan)
        assert summary.current_level_index == 4
        assert summary.next_level is None


# === EMERGENCY FUND ===


class TestEmergencyCoverage:
    """Tests for emergency fund coverage helpers."""

    def test_base_selection(self):
        plan = PlanSettings(emergency_monthly_expenses=12000, emergency_monthly_income=20000)
        assert emergency_monthly_base(plan) == 12000
        assert emergency_monthly_base(plan, EmergencyBase.INCOME) == 20000
        assert emergency_monthly_base(plan, "income") == 20000

    def test_months_covered(self):
        assert emergency_months_covered(30000, 10000) == 3

    def test_months_covered_zero_base(self):
        assert emergency_months_covered(30000, 0) == 0

    def test_target_and_progress(self):
        assert emergency_target_amount(10000, 6) == 60000
        assert emergency_progress(30000, 10000, 6) == pytest.approx(50)
        assert emergency_progress(90000, 10000, 6) == 100

    def test_progress_zero_target(self):
        assert emergency_progress(1000, 10000, 0) == 0


class TestRecommendedPercentage:
    """Tests for recommended_savings_percentage()."""

    def test_by_coverage(self):
        assert recommended_savings_percentage(0) == 100
        assert recommended_savings_percentage(2) == 100
        assert recommended_savings_percentage(4) == 75
        assert recommended_savings_percentage(8) == 50
        assert recommended_savings_percentage(18) == 25

    def test_past_last_milestone(self):
        assert recommended_savings_percentage(36) == 25


class TestLocateMilestone:
    """Tests for locate_milestone()."""

    def test_base_stage(self):
        status = locate_milestone(4000, 20000)
        assert status.stage == MilestoneStage.BASE
        assert status.index == -1
        assert status.milestone is None
        assert status.progress == pytest.approx(40)
        assert status.upper_months == pytest.approx(0.5)

    def test_first_rung_starts_at_base_amount(self):
        """With a 20,000 monthly base, the 10,000 starter equals 0.5 months."""
        status = locate_milestone(15000, 20000)
        assert status.stage == MilestoneStage.LADDER
        assert status.index == 0
        assert status.lower_months == pytest.approx(0.5)
        assert status.upper_months == 1
        assert status.progress == pytest.approx(50)

    def test_between_rungs(self):
        status = locate_milestone(90000, 20000)
        assert status.stage == MilestoneStage.LADDER
        assert status.milestone.label == "6 months"
        assert status.months_covered == pytest.approx(4.5)
        assert status.progress == pytest.approx(50)

    def test_exact_rung_moves_to_next(self):
        status = locate_milestone(60000, 20000)
        assert status.milestone.months == 6
        assert status.progress == 0

    def test_complete(self):
        status = locate_milestone(24 * 20000, 20000)
        assert status.stage == MilestoneStage.COMPLETE
        assert status.index == 5
        assert status.progress == 100

    def test_custom_base_target(self):
        status = locate_milestone(500, 1000, base_target=0)
        assert status.stage == MilestoneStage.LADDER
        assert status.lower_months == 0
        assert status.progress == pytest.approx(50)
