"""taxes - Mexican payroll tax tables and calculations.

Scope:
- ISR monthly table, employment subsidy table, IMSS quotas, UMA
- Gross-to-net monthly salary breakdown

Constraints:
- Pure calculation - no user profile access
- Year-specific rules loaded from data/tax_rules/{year}.yaml

Usage:
    from mxfin.sdk.taxes import calculate_tax_breakdown, load_tax_rules

    breakdown = calculate_tax_breakdown(25000)
    rules = load_tax_rules(2024)
"""

# Tax rules schemas
from .schemas import (
    TaxBracket,
    SubsidyBracket,
    IMSSRates,
    UMA,
    EmploymentSubsidyRules,
    TaxRules,
    ISRDetails,
    TaxBreakdown,
)

# Tax rules loading
from .rules import (
    load_tax_rules,
    get_available_years,
    TaxRulesNotFoundError,
)

# Monthly payroll calculations
from .payroll import (
    find_tax_bracket,
    calculate_isr,
    calculate_imss,
    calculate_employment_subsidy,
    calculate_tax_breakdown,
    get_isr_brackets,
    get_subsidy_brackets,
)

__all__ = [
    # Schemas
    "TaxBracket",
    "SubsidyBracket",
    "IMSSRates",
    "UMA",
    "EmploymentSubsidyRules",
    "TaxRules",
    "ISRDetails",
    "TaxBreakdown",
    # Rules
    "load_tax_rules",
    "get_available_years",
    "TaxRulesNotFoundError",
    # Payroll
    "find_tax_bracket",
    "calculate_isr",
    "calculate_imss",
    "calculate_employment_subsidy",
    "calculate_tax_breakdown",
    "get_isr_brackets",
    "get_subsidy_brackets",
]
