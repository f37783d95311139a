"""Tests for savings and retirement projections."""

import math

import pytest
from pydantic import ValidationError

from mxfin.sdk.projections import (
    MAX_PROJECTED_BALANCE,
    UNREACHABLE,
    future_value,
    monthly_passive_income,
    passive_income_coverage,
    projected_savings,
    retirement_projection,
    rule_of_120,
    years_to_target,
)
from mxfin.sdk.schemas import PlanSettings


class TestFutureValue:
    """Tests for future_value()."""

    def test_contributions_only(self):
        fv = future_value(1000, 0.01, 12, 0, 0.12, 1)
        assert fv == pytest.approx(1000 * (1.01 ** 12 - 1) / 0.01)
        assert fv == pytest.approx(12682.50, abs=0.01)

    def test_lump_sum_compounds_annually(self):
        fv = future_value(0, 0.01, 24, 10000, 0.12, 2)
        assert fv == pytest.approx(10000 * 1.12 ** 2)

    def test_contributions_plus_lump_sum(self):
        fv = future_value(1000, 0.01, 12, 10000, 0.12, 1)
        assert fv == pytest.approx(12682.50 + 11200, abs=0.01)

    def test_zero_rate(self):
        assert future_value(500, 0, 24, 1000, 0, 2) == 500 * 24 + 1000

    def test_zero_months_returns_present_value(self):
        assert future_value(500, 0.01, 0, 1234, 0.12, 0) == 1234

    def test_negative_months_returns_present_value(self):
        assert future_value(500, 0.01, -6, 1234, 0.12, -0.5) == 1234

    def test_nan_contribution_is_zero(self):
        assert future_value(float("nan"), 0.01, 12, 5000, 0.12, 1) == pytest.approx(5600)

    def test_long_horizon_caps_instead_of_overflowing(self):
        fv = future_value(1000, 0.08 / 12, 120000, 10000, 0.08, 10000)
        assert fv == MAX_PROJECTED_BALANCE
        assert math.isfinite(fv)

    def test_lump_sum_overflow_without_contributions(self):
        assert future_value(0, 0.01, 120000, 10000, 0.08, 10000) == MAX_PROJECTED_BALANCE

    def test_rate_below_total_loss_is_zero(self):
        """A lump sum at -150% over half a year is lost, not a complex number."""
        fv = future_value(0, -0.2, 6, 10000, -1.5, 0.5)
        assert fv == 0
        assert isinstance(fv, float)


class TestYearsToTarget:
    """Tests for years_to_target()."""

    def test_already_met(self):
        assert years_to_target(1000, 1000, 100, 0.01) == 0
        assert years_to_target(1000, 5000, 0, 0.01) == 0

    def test_no_contributions_unreachable(self):
        assert years_to_target(1000, 0, 0, 0.01) == UNREACHABLE

    def test_zero_rate(self):
        assert years_to_target(1000, 0, 100, 0) == pytest.approx(10 / 12)

    def test_positive_rate_inverts_future_value(self):
        years = years_to_target(12682.50, 0, 1000, 0.01)
        assert years == pytest.approx(1.0, abs=1e-4)

    @pytest.mark.parametrize("monthly_rate", [0, 0.0025, 0.005, 0.01])
    @pytest.mark.parametrize("target", [50000, 1000000, 25000000])
    def test_round_trips_through_future_value(self, monthly_rate, target):
        years = years_to_target(target, 0, 1000, monthly_rate)
        fv = future_value(1000, monthly_rate, years * 12, 0, 0, 0)
        assert fv == pytest.approx(target, rel=1e-9)

    def test_gap_counts_current_savings(self):
        with_savings = years_to_target(100000, 50000, 1000, 0.005)
        without = years_to_target(100000, 0, 1000, 0.005)
        assert 0 < with_savings < without

    def test_unreachable_is_negative_one(self):
        assert UNREACHABLE == -1


class TestPassiveIncome:
    """Tests for the 4% rule helpers."""

    def test_monthly_passive_income(self):
        assert monthly_passive_income(1200000) == pytest.approx(4000)

    def test_coverage(self):
        assert passive_income_coverage(1200000, 8000) == pytest.approx(50)

    def test_coverage_zero_expenses(self):
        assert passive_income_coverage(1200000, 0) == 0


class TestRuleOf120:
    """Tests for rule_of_120()."""

    def test_age_30(self):
        assert rule_of_120(30) == (90, 10)

    def test_clamped_young(self):
        assert rule_of_120(10) == (100, 0)

    def test_clamped_old(self):
        assert rule_of_120(130) == (0, 100)

    def test_sums_to_100(self):
        for age in range(0, 131, 7):
            risky, conservative = rule_of_120(age)
            assert risky + conservative == 100


class TestProjectedSavings:
    """Tests for projected_savings()."""

    def test_uses_longterm_plan(self):
        plan = PlanSettings(
            longterm_current_savings=10000,
            longterm_monthly_savings=1000,
            longterm_annual_return=12,
        )
        assert projected_savings(1, plan) == pytest.approx(12682.50 + 11200, abs=0.01)

    def test_zero_years(self):
        plan = PlanSettings(longterm_current_savings=5000, longterm_monthly_savings=1000)
        assert projected_savings(0, plan) == 5000


class TestRetirementProjection:
    """Tests for retirement_projection()."""

    def test_defaults(self):
        projection = retirement_projection(PlanSettings())
        assert projection.years_to_retirement == 35
        assert projection.months_to_retirement == 420
        assert projection.total_fund == 0
        assert projection.recommended_fund == 0
        assert projection.fund_progress == 0
        assert projection.recommended_risky_percentage == 90
        assert projection.recommended_conservative_percentage == 10

    def test_fund_and_income(self):
        plan = PlanSettings(
            retirement_current_age=40,
            retirement_target_age=65,
            retirement_monthly_contribution=5000,
            retirement_current_savings=100000,
            retirement_expected_return=6,
        )
        projection = retirement_projection(plan)

        expected = 5000 * ((1.005 ** 300 - 1) / 0.005) + 100000 * 1.06 ** 25
        assert projection.total_fund == pytest.approx(expected)
        assert projection.recommended_fund == 5000 * 12 * 25
        assert projection.monthly_income == pytest.approx(expected * 0.04 / 12)
        assert projection.fund_progress == 100
        assert projection.recommended_risky_percentage == 80

    def test_past_target_age(self):
        plan = PlanSettings(
            retirement_current_age=70,
            retirement_target_age=65,
            retirement_current_savings=250000,
        )
        projection = retirement_projection(plan)
        assert projection.years_to_retirement == 0
        assert projection.total_fund == 250000

    def test_long_horizon_stays_finite(self):
        plan = PlanSettings(
            retirement_current_age=0,
            retirement_target_age=10000,
            retirement_monthly_contribution=1000,
            retirement_expected_return=8,
        )
        projection = retirement_projection(plan)
        assert projection.total_fund == MAX_PROJECTED_BALANCE
        assert projection.fund_progress == 100
        assert math.isfinite(projection.monthly_income)


class TestReturnBounds:
    """Annual returns must stay above a total loss."""

    @pytest.mark.parametrize("field", ["longterm_annual_return", "retirement_expected_return"])
    def test_return_at_or_below_total_loss_rejected(self, field):
        for value in (-100, -150):
            with pytest.raises(ValidationError):
                PlanSettings(**{field: value})

    @pytest.mark.parametrize("field", ["longterm_annual_return", "retirement_expected_return"])
    def test_negative_return_allowed(self, field):
        assert getattr(PlanSettings(**{field: -20}), field) == -20
