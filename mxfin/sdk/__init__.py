"""mx-fin SDK - Core payroll tax and savings projection functionality."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    load_plan_settings,
    load_profile_investments,
    ProfileNotFoundError,
)

from .money import (
    clean_amount,
    round_cents,
    format_mxn,
    format_pct,
)

from .taxes import (
    TaxRules,
    TaxBreakdown,
    TaxRulesNotFoundError,
    load_tax_rules,
    get_available_years,
    calculate_isr,
    calculate_imss,
    calculate_employment_subsidy,
    calculate_tax_breakdown,
    get_isr_brackets,
    get_subsidy_brackets,
)

from .projections import (
    UNREACHABLE,
    future_value,
    years_to_target,
    projected_savings,
    monthly_passive_income,
    passive_income_coverage,
    rule_of_120,
    retirement_projection,
)

from .levels import (
    current_level_index,
    level_target,
    level_progress,
    years_to_level,
    longterm_summary,
    emergency_monthly_base,
    emergency_months_covered,
    emergency_target_amount,
    emergency_progress,
    recommended_savings_percentage,
    locate_milestone,
)

from .allocation import (
    tax_exempt_limit,
    calculate_allocation_strategy,
    best_sofipo,
    risk_class_of,
    summarize_portfolio,
    assess_risk_allocation,
)

from .planning import (
    get_financial_levels,
    get_emergency_milestones,
    get_emergency_base_target,
    get_investment_types,
    get_savings_instruments,
    get_sofipos,
    get_cetes_info,
)

from . import budget

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "load_plan_settings",
    "load_profile_investments",
    "ProfileNotFoundError",
    # Amounts
    "clean_amount",
    "round_cents",
    "format_mxn",
    "format_pct",
    # Taxes
    "TaxRules",
    "TaxBreakdown",
    "TaxRulesNotFoundError",
    "load_tax_rules",
    "get_available_years",
    "calculate_isr",
    "calculate_imss",
    "calculate_employment_subsidy",
    "calculate_tax_breakdown",
    "get_isr_brackets",
    "get_subsidy_brackets",
    # Projections
    "UNREACHABLE",
    "future_value",
    "years_to_target",
    "projected_savings",
    "monthly_passive_income",
    "passive_income_coverage",
    "rule_of_120",
    "retirement_projection",
    # Levels and milestones
    "current_level_index",
    "level_target",
    "level_progress",
    "years_to_level",
    "longterm_summary",
    "emergency_monthly_base",
    "emergency_months_covered",
    "emergency_target_amount",
    "emergency_progress",
    "recommended_savings_percentage",
    "locate_milestone",
    # Allocation
    "tax_exempt_limit",
    "calculate_allocation_strategy",
    "best_sofipo",
    "risk_class_of",
    "summarize_portfolio",
    "assess_risk_allocation",
    # Planning tables
    "get_financial_levels",
    "get_emergency_milestones",
    "get_emergency_base_target",
    "get_investment_types",
    "get_savings_instruments",
    "get_sofipos",
    "get_cetes_info",
    # Budget module
    "budget",
]
