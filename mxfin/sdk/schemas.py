"""Pydantic schemas for mx-fin data validation.

Inputs (plan settings, investments, expenses) use extra='forbid' to reject
unknown fields, so typos in profile.yaml or portfolio files cause clear
errors rather than silent ignoring. Calculator results are frozen value
objects recomputed on demand and never persisted.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enumerations
# =============================================================================


class InvestmentType(str, Enum):
    STOCKS = "stocks"
    BONDS = "bonds"
    ETF = "etf"
    CRYPTO = "crypto"
    REAL_ESTATE = "real-estate"
    MUTUAL_FUNDS = "mutual-funds"
    CETES = "cetes"
    AFORE = "afore"
    OTHER = "other"


class RiskClass(str, Enum):
    """Binary risk class used by the rule-of-120 split."""
    HIGH = "high"
    LOW = "low"


class RiskLevel(str, Enum):
    """Descriptive risk level shown next to each investment type."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExpenseType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


class IncomeFrequency(str, Enum):
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"
    ANNUAL = "annual"


class CancellationPriority(str, Enum):
    IMMEDIATE = "immediate"
    WAIT_1_MONTH = "wait_1_month"
    WAIT_3_MONTHS = "wait_3_months"
    LAST_RESORT = "last_resort"


class EmergencyBase(str, Enum):
    """Which monthly figure emergency coverage is measured against."""
    EXPENSES = "expenses"
    INCOME = "income"


class AllocationStatus(str, Enum):
    BALANCED = "balanced"
    TOO_RISKY = "too_risky"
    TOO_CONSERVATIVE = "too_conservative"


class MilestoneStage(str, Enum):
    BASE = "base"
    LADDER = "ladder"
    COMPLETE = "complete"


# =============================================================================
# Planning tables
# =============================================================================


class FinancialLevel(BaseModel):
    """A financial independence tier, reached at annual_expenses x multiplier."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    multiplier: float = Field(..., ge=0)
    description: str = ""
    meaning: str = ""
    icon: str = ""


class EmergencyMilestone(BaseModel):
    """Months-of-coverage rung on the emergency fund ladder."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    months: float = Field(..., gt=0)
    label: str
    color: str = ""
    recommended_percentage: float = Field(
        ..., ge=0, le=100,
        description="Share of monthly surplus to direct to the fund at this stage",
    )


class InvestmentTypeInfo(BaseModel):
    """Display metadata for an investment type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    color: str
    risk: RiskLevel
    description: str = ""


class SavingsInstrument(BaseModel):
    """A SOFIPO or CETES product with its reference annual rate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    type: Literal["sofipo", "cetes"]
    annual_rate: float = Field(..., ge=0, description="Annual rate in percent")
    min_amount: float = Field(default=0, ge=0)
    max_amount: Optional[float] = Field(default=None, description="Per-institution cap")
    term: Optional[str] = None
    ipab_insured: bool = False


# =============================================================================
# User inputs
# =============================================================================


class PlanSettings(BaseModel):
    """User planning parameters (profile.yaml 'plan' section).

    Passed explicitly into each calculator; there is no shared settings state.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Emergency fund
    emergency_monthly_income: float = Field(default=0, ge=0)
    emergency_monthly_expenses: float = Field(default=0, ge=0)
    emergency_current_savings: float = Field(default=0, ge=0)
    emergency_target_months: float = Field(default=6, ge=0)

    # Long-term savings
    longterm_monthly_expenses: float = Field(default=0, ge=0)
    longterm_current_savings: float = Field(default=0, ge=0)
    longterm_monthly_savings: float = Field(default=0, ge=0)
    longterm_annual_return: float = Field(default=8, gt=-100, description="Annual return in percent")

    # Retirement
    retirement_current_age: int = Field(default=30, ge=0)
    retirement_target_age: int = Field(default=65, ge=0)
    retirement_monthly_contribution: float = Field(default=0, ge=0)
    retirement_current_savings: float = Field(default=0, ge=0)
    retirement_expected_return: float = Field(default=7, gt=-100, description="Annual return in percent")


class Investment(BaseModel):
    """A holding; risk class is derived from its type, not stored."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    type: InvestmentType
    amount: float = Field(..., ge=0)
    expected_return: float = Field(default=8, description="Annual expected return in percent")


class Expense(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    amount: float = Field(..., ge=0)
    type: ExpenseType = ExpenseType.VARIABLE
    category: str = "other"


class CancellableExpense(BaseModel):
    """A recurring cost that can be dropped in a financial emergency."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    monthly_cost: float = Field(..., ge=0)
    category: str = "other"
    priority: CancellationPriority = CancellationPriority.LAST_RESORT


class IncomeSource(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    amount: float = Field(..., ge=0, description="Net amount per frequency period")
    frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    is_gross: bool = Field(default=False, description="True if amount was derived from a gross salary")
    gross_amount: Optional[float] = None


class SavingsGoal(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(default=0, ge=0)
    monthly_target: Optional[float] = None


# =============================================================================
# Projection and allocation results
# =============================================================================


class AllocationStrategy(BaseModel):
    """Split of savings between tax-exempt SOFIPOs and CETES."""

    model_config = ConfigDict(frozen=True)

    sofipo_amount: float
    cetes_amount: float
    sofipo_percentage: float
    cetes_percentage: float
    tax_exempt_used: float
    tax_exempt_remaining: float
    recommendation: str


class TypeAllocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: InvestmentType
    label: str
    total: float
    percentage: float


class PortfolioSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_invested: float
    weighted_return: float = Field(..., description="Amount-weighted expected return, percent")
    projected_annual_return: float
    high_risk_amount: float
    low_risk_amount: float
    high_risk_percentage: float
    low_risk_percentage: float
    by_type: tuple[TypeAllocation, ...] = ()


class RiskAssessment(BaseModel):
    """Portfolio risk share compared with the rule of 120."""

    model_config = ConfigDict(frozen=True)

    recommended_risky: float
    recommended_conservative: float
    actual_risky: float
    difference: float = Field(..., description="actual - recommended, percentage points")
    status: AllocationStatus


class RetirementProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    years_to_retirement: int
    months_to_retirement: int
    total_fund: float
    recommended_fund: float
    monthly_income: float = Field(..., description="4% rule withdrawal per month")
    fund_progress: float
    recommended_risky_percentage: float
    recommended_conservative_percentage: float


class LongTermSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    annual_expenses: float
    current_level_index: int
    current_level: Optional[FinancialLevel] = None
    next_level: Optional[FinancialLevel] = None
    monthly_passive_income: float
    coverage_percentage: float


class MilestoneStatus(BaseModel):
    """Where a balance sits on the emergency fund ladder."""

    model_config = ConfigDict(frozen=True)

    stage: MilestoneStage
    index: int = Field(..., description="Milestone being worked toward; -1 at base stage")
    milestone: Optional[EmergencyMilestone] = None
    lower_months: float
    upper_months: float
    months_covered: float
    progress: float


class ExpenseTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    fixed: float
    variable: float


class BudgetSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    net_salary: float
    total_expenses: float
    fixed_expenses: float
    variable_expenses: float
    available_for_savings: float
    fixed_ratio: float
    variable_ratio: float
    available_ratio: float


class CancellationSavings(BaseModel):
    model_config = ConfigDict(frozen=True)

    by_priority: dict[CancellationPriority, float]
    total: float
