"""mx-fin MCP Server - FastMCP implementation for payroll and savings tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from mxfin.sdk import (
    calculate_allocation_strategy,
    calculate_isr,
    calculate_tax_breakdown,
    get_financial_levels,
    level_progress,
    level_target,
    load_plan_settings,
    load_tax_rules,
    longterm_summary,
    retirement_projection as sdk_retirement_projection,
    round_cents,
    tax_exempt_limit,
    years_to_level,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("mx-fin")


# --- Tools ---

@mcp.tool()
async def tax_breakdown(
    gross: float = Field(description="Monthly gross salary in MXN"),
    year: int | None = Field(default=None, description="Tax year (default: latest available)"),
) -> dict[str, Any]:
    """Calculate monthly ISR, IMSS, employment subsidy and net salary for a gross salary."""
    try:
        rules = load_tax_rules(year)
        breakdown = calculate_tax_breakdown(gross, rules)
        isr = calculate_isr(gross, rules)

        return {
            "year": rules.year,
            "gross_salary": round_cents(breakdown.gross_salary),
            "isr": round_cents(breakdown.isr),
            "employment_subsidy": round_cents(breakdown.employment_subsidy),
            "isr_after_subsidy": round_cents(breakdown.isr_after_subsidy),
            "imss": round_cents(breakdown.imss),
            "net_salary": round_cents(breakdown.net_salary),
            "effective_tax_rate": round(breakdown.effective_tax_rate, 2),
            "isr_bracket": {
                "lower_limit": isr.bracket.lower_limit,
                "fixed_fee": isr.bracket.fixed_fee,
                "rate": isr.bracket.rate,
            },
        }

    except Exception as e:
        logger.error(f"Error calculating tax breakdown: {e}")
        return {"error": str(e)}


@mcp.tool()
async def allocation_strategy(
    total_savings: float = Field(description="Total savings to allocate in MXN"),
) -> dict[str, Any]:
    """Split savings between tax-exempt SOFIPOs and CETES."""
    try:
        strategy = calculate_allocation_strategy(total_savings)
        result = strategy.model_dump()
        result["tax_exempt_limit"] = round_cents(tax_exempt_limit())
        return result

    except Exception as e:
        logger.error(f"Error calculating allocation: {e}")
        return {"error": str(e)}


@mcp.tool()
async def financial_levels(
    monthly_expenses: float | None = Field(default=None, description="Monthly expenses (default: profile plan)"),
    current_savings: float | None = Field(default=None, description="Current long-term savings (default: profile plan)"),
    monthly_savings: float | None = Field(default=None, description="Monthly contribution (default: profile plan)"),
    annual_return: float | None = Field(default=None, description="Expected annual return in percent (default: profile plan)"),
) -> dict[str, Any]:
    """Report the current financial independence level and years to reach each level. Years of -1 mean unreachable."""
    try:
        plan = load_plan_settings(
            longterm_monthly_expenses=monthly_expenses,
            longterm_current_savings=current_savings,
            longterm_monthly_savings=monthly_savings,
            longterm_annual_return=annual_return,
        )
        summary = longterm_summary(plan)
        levels = get_financial_levels()

        return {
            "annual_expenses": summary.annual_expenses,
            "current_level": summary.current_level.name if summary.current_level else None,
            "next_level": summary.next_level.name if summary.next_level else None,
            "monthly_passive_income": round_cents(summary.monthly_passive_income),
            "levels": [
                {
                    "name": level.name,
                    "multiplier": level.multiplier,
                    "target": round_cents(level_target(level, summary.annual_expenses)),
                    "progress": round(level_progress(level, summary.annual_expenses, plan.longterm_current_savings), 1),
                    "years_to_reach": round(years_to_level(i, plan, levels), 2),
                }
                for i, level in enumerate(levels)
            ],
        }

    except Exception as e:
        logger.error(f"Error calculating financial levels: {e}")
        return {"error": str(e)}


@mcp.tool()
async def retirement_projection(
    current_age: int | None = Field(default=None, description="Current age (default: profile plan)"),
    target_age: int | None = Field(default=None, description="Retirement age (default: profile plan)"),
    monthly_contribution: float | None = Field(default=None, description="Monthly contribution (default: profile plan)"),
    current_savings: float | None = Field(default=None, description="Current retirement savings (default: profile plan)"),
    expected_return: float | None = Field(default=None, description="Expected annual return in percent (default: profile plan)"),
) -> dict[str, Any]:
    """Project the retirement fund, 4% rule income and rule-of-120 allocation."""
    try:
        plan = load_plan_settings(
            retirement_current_age=current_age,
            retirement_target_age=target_age,
            retirement_monthly_contribution=monthly_contribution,
            retirement_current_savings=current_savings,
            retirement_expected_return=expected_return,
        )
        projection = sdk_retirement_projection(plan)
        return projection.model_dump()

    except Exception as e:
        logger.error(f"Error projecting retirement: {e}")
        return {"error": str(e)}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
