"""Monthly payroll tax calculations.

Implements the gross-to-net pipeline for Mexican salaried income:
ISR from the art. 96 monthly table, employee IMSS quotas, and the
employment subsidy credited against ISR. All functions are pure; the
optional `rules` argument defaults to the latest shipped tax year.
"""

import bisect
import logging
from typing import Optional, Sequence, TypeVar

from ..money import clean_amount
from .rules import load_tax_rules
from .schemas import ISRDetails, SubsidyBracket, TaxBracket, TaxBreakdown, TaxRules

logger = logging.getLogger(__name__)

B = TypeVar("B", TaxBracket, SubsidyBracket)


def find_tax_bracket(amount: float, brackets: Sequence[B]) -> B:
    """Find the bracket containing amount.

    Tables are published at cent resolution, so a bracket covers
    [lower_limit, next.lower_limit). Amounts above the top bracket clamp to
    the last row; amounts below the first row use the first.
    """
    lowers = [b.lower_limit for b in brackets]
    idx = bisect.bisect_right(lowers, amount) - 1
    if idx < 0:
        return brackets[0]
    bracket = brackets[idx]
    if amount > bracket.upper_limit and idx == len(brackets) - 1:
        logger.debug(f"{amount:.2f} above top bracket, using last row")
    return bracket


def calculate_isr(gross: float, rules: Optional[TaxRules] = None) -> ISRDetails:
    """Calculate monthly ISR before subsidy.

    Progressive formula: fixed fee of the bracket plus the marginal rate on
    the portion of gross above the bracket's lower limit.

    Args:
        gross: Monthly gross salary
        rules: Tax rules (default: latest year)

    Returns:
        ISRDetails with bracket, excess, marginal_tax, fixed_fee, total_isr
    """
    gross = clean_amount(gross, "gross")
    rules = rules or load_tax_rules()

    if gross <= 0:
        return ISRDetails(
            bracket=rules.isr_monthly[0],
            excess=0.0,
            marginal_tax=0.0,
            fixed_fee=0.0,
            total_isr=0.0,
        )

    bracket = find_tax_bracket(gross, rules.isr_monthly)
    excess = max(0.0, gross - bracket.lower_limit)
    marginal_tax = excess * bracket.rate
    total_isr = bracket.fixed_fee + marginal_tax

    return ISRDetails(
        bracket=bracket,
        excess=excess,
        marginal_tax=marginal_tax,
        fixed_fee=bracket.fixed_fee,
        total_isr=total_isr,
    )


def calculate_imss(gross: float, rules: Optional[TaxRules] = None) -> float:
    """Calculate the employee IMSS quota for a month.

    Three components with different bases:
    - Sickness/maternity surplus: only the part of gross above 3 UMAs
    - Disability and life: full gross
    - Retirement and old-age unemployment: full gross
    """
    gross = clean_amount(gross, "gross")
    rules = rules or load_tax_rules()
    if gross <= 0:
        return 0.0

    rates = rules.imss
    surplus_threshold = rules.uma.monthly * rates.surplus_threshold_umas
    base_for_surplus = max(0.0, gross - surplus_threshold)

    sickness_maternity_surplus = base_for_surplus * rates.sickness_maternity_surplus
    disability_life = gross * rates.disability_life
    retirement_unemployment = gross * rates.retirement_unemployment

    return sickness_maternity_surplus + disability_life + retirement_unemployment


def calculate_employment_subsidy(gross: float, rules: Optional[TaxRules] = None) -> float:
    """Flat monthly employment subsidy for the bracket containing gross.

    Returns 0 above the income ceiling, for non-positive gross, and when no
    bracket matches.
    """
    gross = clean_amount(gross, "gross")
    rules = rules or load_tax_rules()
    subsidy_rules = rules.employment_subsidy

    if gross <= 0:
        return 0.0

    # No subsidy for income above threshold
    if gross > subsidy_rules.max_income:
        logger.debug(f"{gross:.2f} above subsidy ceiling {subsidy_rules.max_income:.2f}")
        return 0.0

    brackets = subsidy_rules.brackets
    if gross < brackets[0].lower_limit:
        return 0.0
    return find_tax_bracket(gross, brackets).subsidy


def calculate_tax_breakdown(gross: float, rules: Optional[TaxRules] = None) -> TaxBreakdown:
    """Calculate the full gross-to-net breakdown for a monthly salary.

    The subsidy offsets ISR only (never IMSS) and cannot push ISR below zero.

    Args:
        gross: Monthly gross salary
        rules: Tax rules (default: latest year)

    Returns:
        TaxBreakdown; an all-zero breakdown for gross <= 0 or non-finite gross
    """
    gross = clean_amount(gross, "gross")
    if gross <= 0:
        return TaxBreakdown(
            gross_salary=0.0,
            isr=0.0,
            imss=0.0,
            employment_subsidy=0.0,
            net_salary=0.0,
            effective_tax_rate=0.0,
        )

    rules = rules or load_tax_rules()
    isr_details = calculate_isr(gross, rules)
    imss = calculate_imss(gross, rules)
    subsidy = calculate_employment_subsidy(gross, rules)

    isr_after_subsidy = max(0.0, isr_details.total_isr - subsidy)
    net_salary = gross - isr_after_subsidy - imss
    effective_tax_rate = (isr_after_subsidy + imss) / gross * 100

    return TaxBreakdown(
        gross_salary=gross,
        isr=isr_details.total_isr,
        imss=imss,
        employment_subsidy=subsidy,
        net_salary=net_salary,
        effective_tax_rate=effective_tax_rate,
    )


def get_isr_brackets(rules: Optional[TaxRules] = None) -> list[TaxBracket]:
    """Copy of the ISR monthly table."""
    rules = rules or load_tax_rules()
    return list(rules.isr_monthly)


def get_subsidy_brackets(rules: Optional[TaxRules] = None) -> list[SubsidyBracket]:
    """Copy of the employment subsidy table."""
    rules = rules or load_tax_rules()
    return list(rules.employment_subsidy.brackets)
