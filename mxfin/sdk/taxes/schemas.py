"""Pydantic schemas for tax rules validation.

These schemas validate the data/tax_rules/*.yaml files and provide typed
access to the ISR table, employment subsidy table, IMSS quotas and UMA.
"""

import math
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _check_contiguous(brackets: Sequence, label: str) -> None:
    """Brackets must be sorted ascending and must not overlap."""
    for prev, nxt in zip(brackets, brackets[1:]):
        if nxt.lower_limit <= prev.lower_limit:
            raise ValueError(f"{label} brackets not sorted at lower_limit {nxt.lower_limit}")
        if prev.upper_limit >= nxt.lower_limit:
            raise ValueError(
                f"{label} brackets overlap: {prev.upper_limit} >= {nxt.lower_limit}"
            )


class TaxBracket(BaseModel):
    """One step of the ISR progressive table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_limit: float = Field(..., ge=0, description="Lower bound (inclusive)")
    upper_limit: float = Field(..., description="Upper bound (inclusive), .inf for top bracket")
    fixed_fee: float = Field(..., ge=0, description="Cuota fija for income below this bracket")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate on excess over lower_limit")

    @model_validator(mode="after")
    def check_bounds(self) -> "TaxBracket":
        if self.upper_limit < self.lower_limit:
            raise ValueError(f"upper_limit {self.upper_limit} below lower_limit {self.lower_limit}")
        return self


class SubsidyBracket(BaseModel):
    """One row of the employment subsidy table (flat amount per row)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_limit: float = Field(..., ge=0)
    upper_limit: float
    subsidy: float = Field(..., ge=0, description="Flat monthly credit against ISR")


class UMA(BaseModel):
    """Unidad de Medida y Actualizacion."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    daily: float = Field(..., gt=0)
    days_per_month: float = Field(default=30.4, gt=0)

    @property
    def monthly(self) -> float:
        return self.daily * self.days_per_month


class IMSSRates(BaseModel):
    """Employee IMSS quota rates."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    sickness_maternity_surplus: float = Field(..., ge=0, le=1)
    surplus_threshold_umas: float = Field(default=3, ge=0, description="UMA multiple above which the surplus quota applies")
    disability_life: float = Field(..., ge=0, le=1)
    retirement_unemployment: float = Field(..., ge=0, le=1)

    @property
    def total(self) -> float:
        """Combined rate (surplus quota applies to a smaller base)."""
        return self.sickness_maternity_surplus + self.disability_life + self.retirement_unemployment


class EmploymentSubsidyRules(BaseModel):
    """Subsidio al empleo table and income ceiling."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_income: float = Field(..., ge=0, description="No subsidy above this monthly income")
    brackets: tuple[SubsidyBracket, ...]

    @model_validator(mode="after")
    def check_brackets(self) -> "EmploymentSubsidyRules":
        _check_contiguous(self.brackets, "employment_subsidy")
        return self


class TaxRules(BaseModel):
    """Complete payroll tax rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: int
    uma: UMA
    isr_monthly: tuple[TaxBracket, ...] = Field(..., min_length=1)
    employment_subsidy: EmploymentSubsidyRules
    imss: IMSSRates

    @model_validator(mode="after")
    def check_isr_table(self) -> "TaxRules":
        _check_contiguous(self.isr_monthly, "isr_monthly")
        if not math.isinf(self.isr_monthly[-1].upper_limit):
            raise ValueError("last isr_monthly bracket must have upper_limit .inf")
        return self


class ISRDetails(BaseModel):
    """ISR computed from a single bracket of the monthly table."""
    model_config = ConfigDict(frozen=True)

    bracket: TaxBracket
    excess: float = Field(..., description="Gross over the bracket lower limit")
    marginal_tax: float = Field(..., description="excess x bracket rate")
    fixed_fee: float
    total_isr: float = Field(..., description="fixed_fee + marginal_tax (before subsidy)")


class TaxBreakdown(BaseModel):
    """Gross-to-net monthly salary breakdown."""
    model_config = ConfigDict(frozen=True)

    gross_salary: float
    isr: float = Field(..., description="ISR before employment subsidy")
    imss: float
    employment_subsidy: float
    net_salary: float
    effective_tax_rate: float = Field(..., description="(ISR after subsidy + IMSS) / gross, in percent")

    @property
    def isr_after_subsidy(self) -> float:
        """ISR actually withheld; the subsidy never creates negative tax."""
        return max(0.0, self.isr - self.employment_subsidy)

    @property
    def total_deductions(self) -> float:
        return self.isr_after_subsidy + self.imss
