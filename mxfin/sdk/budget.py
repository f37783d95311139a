"""Budget aggregates: income normalization, expenses, goals.

SDK layer - pure logic over income sources, expenses and savings goals.
"""

from typing import Dict, Iterable

from .money import clean_amount
from .schemas import (
    BudgetSummary,
    CancellableExpense,
    CancellationPriority,
    CancellationSavings,
    Expense,
    ExpenseTotals,
    ExpenseType,
    IncomeFrequency,
    IncomeSource,
    SavingsGoal,
)
from .taxes import calculate_tax_breakdown

# Periods per month by income frequency
MONTHLY_MULTIPLIERS: Dict[IncomeFrequency, float] = {
    IncomeFrequency.MONTHLY: 1,
    IncomeFrequency.BIWEEKLY: 2,
    IncomeFrequency.WEEKLY: 4.33,
    IncomeFrequency.ANNUAL: 1 / 12,
}


def to_monthly(amount: float, frequency: IncomeFrequency) -> float:
    """Convert a per-period amount to a monthly amount."""
    return clean_amount(amount) * MONTHLY_MULTIPLIERS[IncomeFrequency(frequency)]


def total_monthly_income(sources: Iterable[IncomeSource]) -> float:
    return sum(to_monthly(s.amount, s.frequency) for s in sources)


def income_source_from_gross(
    gross: float,
    name: str = "Salary",
    frequency: IncomeFrequency = IncomeFrequency.MONTHLY,
) -> IncomeSource:
    """Build an income source whose amount is the net of a monthly gross salary."""
    breakdown = calculate_tax_breakdown(gross)
    return IncomeSource(
        name=name,
        amount=max(0.0, breakdown.net_salary),
        frequency=frequency,
        is_gross=True,
        gross_amount=breakdown.gross_salary,
    )


def expense_totals(expenses: Iterable[Expense]) -> ExpenseTotals:
    expenses = list(expenses)
    fixed = sum(e.amount for e in expenses if e.type == ExpenseType.FIXED)
    variable = sum(e.amount for e in expenses if e.type == ExpenseType.VARIABLE)
    return ExpenseTotals(total=fixed + variable, fixed=fixed, variable=variable)


def available_for_savings(net_salary: float, total_expenses: float) -> float:
    """Monthly surplus after expenses, never negative."""
    return max(0.0, net_salary - total_expenses)


def budget_summary(net_salary: float, expenses: Iterable[Expense]) -> BudgetSummary:
    """Expense totals and their ratios to net salary (0 when salary is 0)."""
    net_salary = clean_amount(net_salary, "net_salary")
    totals = expense_totals(expenses)
    available = available_for_savings(net_salary, totals.total)

    def ratio(amount: float) -> float:
        return amount / net_salary if net_salary else 0.0

    return BudgetSummary(
        net_salary=net_salary,
        total_expenses=totals.total,
        fixed_expenses=totals.fixed,
        variable_expenses=totals.variable,
        available_for_savings=available,
        fixed_ratio=ratio(totals.fixed),
        variable_ratio=ratio(totals.variable),
        available_ratio=ratio(available),
    )


def cancellation_savings(expenses: Iterable[CancellableExpense]) -> CancellationSavings:
    """Monthly savings unlocked at each cancellation priority."""
    by_priority = {priority: 0.0 for priority in CancellationPriority}
    for expense in expenses:
        by_priority[expense.priority] += expense.monthly_cost
    return CancellationSavings(by_priority=by_priority, total=sum(by_priority.values()))


def goal_progress(goal: SavingsGoal) -> float:
    """Percent of the goal saved (capped at 100)."""
    if goal.target_amount <= 0:
        return 0.0
    return min(100.0, goal.current_amount / goal.target_amount * 100)


def goal_remaining(goal: SavingsGoal) -> float:
    return max(0.0, goal.target_amount - goal.current_amount)


def apply_withdrawal(current_amount: float, amount: float) -> float:
    """Goal balance after removing a deposit, floored at 0."""
    return max(0.0, current_amount - amount)
