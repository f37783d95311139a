"""mx-fin CLI - Command-line interface for payroll taxes and savings planning."""

import json
import math
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich import box

from mxfin import __version__
from mxfin.sdk import (
    UNREACHABLE,
    TaxRulesNotFoundError,
    assess_risk_allocation,
    best_sofipo,
    calculate_allocation_strategy,
    calculate_isr,
    calculate_tax_breakdown,
    emergency_monthly_base,
    emergency_months_covered,
    emergency_progress,
    emergency_target_amount,
    format_mxn,
    format_pct,
    get_cetes_info,
    get_financial_levels,
    get_investment_types,
    level_progress,
    level_target,
    load_plan_settings,
    load_profile_investments,
    load_tax_rules,
    locate_milestone,
    longterm_summary,
    projected_savings,
    recommended_savings_percentage,
    retirement_projection,
    round_cents,
    summarize_portfolio,
    tax_exempt_limit,
    years_to_level,
)
from mxfin.sdk.schemas import EmergencyBase, Investment, MilestoneStage

from .renderers.breakdown_renderer import render_brackets, render_tax_breakdown
from .settings_commands import settings as settings_group


FORMAT_OPTION = click.option(
    "--format", "output_format", type=click.Choice(["table", "json"]), default="table",
    help="Output format (default: table)",
)


@click.group()
@click.version_option(version=__version__, prog_name="mx-fin")
def cli():
    """mx-fin - Mexican payroll tax and savings planning tools.

    Commands for gross-to-net salary breakdowns (ISR, IMSS, employment
    subsidy), financial independence levels, emergency fund milestones,
    retirement projections and SOFIPO/CETES allocation.

    Planning values are loaded from (in order):

    \b
    1. Command-line options
    2. profile.yaml 'plan' section (see 'mx-fin settings show')
    3. Built-in defaults
    """
    pass


cli.add_command(settings_group)


def _load_rules(year):
    try:
        return load_tax_rules(year)
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))


def _load_plan(**overrides):
    try:
        return load_plan_settings(**overrides)
    except ValidationError as e:
        raise click.ClickException(f"Invalid plan settings:\n{e}")


def _require_finite(value: float, param_hint: str) -> None:
    if not math.isfinite(value):
        raise click.BadParameter(f"must be a finite number, got {value!r}", param_hint=param_hint)


def _fmt_years(years: float) -> str:
    if years == UNREACHABLE:
        return "unreachable"
    if years == 0:
        return "reached"
    return f"{years:.1f} years"


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


# =============================================================================
# Payroll
# =============================================================================


@cli.command("salary")
@click.argument("gross", type=float)
@click.option("--year", type=int, default=None, help="Tax year (default: latest available)")
@FORMAT_OPTION
def salary(gross, year, output_format):
    """Break down a monthly GROSS salary into ISR, IMSS and net pay.

    \b
    Examples:
      mx-fin salary 25000
      mx-fin salary 8000 --year 2024 --format json
    """
    _require_finite(gross, "GROSS")
    rules = _load_rules(year)
    breakdown = calculate_tax_breakdown(gross, rules)
    isr = calculate_isr(gross, rules)

    if output_format == "json":
        result = {k: round_cents(v) for k, v in breakdown.model_dump().items()}
        result["isr_after_subsidy"] = round_cents(breakdown.isr_after_subsidy)
        result["total_deductions"] = round_cents(breakdown.total_deductions)
        result["year"] = rules.year
        result["isr_detail"] = {
            "lower_limit": isr.bracket.lower_limit,
            "rate": isr.bracket.rate,
            "excess": round_cents(isr.excess),
            "marginal_tax": round_cents(isr.marginal_tax),
            "fixed_fee": isr.fixed_fee,
        }
        _echo_json(result)
        return

    render_tax_breakdown(Console(), breakdown, isr, rules.year)


@cli.command("brackets")
@click.option("--year", type=int, default=None, help="Tax year (default: latest available)")
@FORMAT_OPTION
def brackets(year, output_format):
    """Show the ISR monthly table and employment subsidy table."""
    rules = _load_rules(year)

    if output_format == "json":
        _echo_json(rules.model_dump(mode="json"))
        return

    render_brackets(Console(), rules)


# =============================================================================
# Levels and emergency fund
# =============================================================================


@cli.command("levels")
@click.option("--monthly-expenses", type=float, help="Monthly expenses to sustain")
@click.option("--savings", type=float, help="Current long-term savings")
@click.option("--monthly-savings", type=float, help="Monthly long-term contribution")
@click.option("--return", "annual_return", type=float, help="Expected annual return, percent")
@FORMAT_OPTION
def levels(monthly_expenses, savings, monthly_savings, annual_return, output_format):
    """Show financial independence levels and time to reach each.

    Levels are multiples of annual expenses (0.5x, 2x, 10x, 25x, 40x).
    """
    plan = _load_plan(
        longterm_monthly_expenses=monthly_expenses,
        longterm_current_savings=savings,
        longterm_monthly_savings=monthly_savings,
        longterm_annual_return=annual_return,
    )
    summary = longterm_summary(plan)
    all_levels = get_financial_levels()

    rows = []
    for i, level in enumerate(all_levels):
        rows.append({
            "name": level.name,
            "multiplier": level.multiplier,
            "target": round_cents(level_target(level, summary.annual_expenses)),
            "progress": round(level_progress(level, summary.annual_expenses, plan.longterm_current_savings), 1),
            "years_to_reach": years_to_level(i, plan, all_levels),
            "reached": i <= summary.current_level_index,
        })

    if output_format == "json":
        _echo_json({
            "annual_expenses": summary.annual_expenses,
            "current_level_index": summary.current_level_index,
            "current_level": summary.current_level.name if summary.current_level else None,
            "next_level": summary.next_level.name if summary.next_level else None,
            "monthly_passive_income": round_cents(summary.monthly_passive_income),
            "coverage_percentage": round(summary.coverage_percentage, 1),
            "levels": rows,
        })
        return

    console = Console()
    table = Table(title="Financial Levels", box=box.ROUNDED)
    table.add_column("Level", style="cyan")
    table.add_column("Multiplier", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Time to Reach", justify="right")

    for row in rows:
        style = "green" if row["reached"] else None
        table.add_row(
            row["name"],
            f"{row['multiplier']:g}x",
            format_mxn(row["target"], 0),
            format_pct(row["progress"]),
            _fmt_years(row["years_to_reach"]),
            style=style,
        )
    console.print(table)

    current = summary.current_level.name if summary.current_level else "none yet"
    console.print(f"Current level: [bold]{current}[/bold]")
    console.print(
        f"Passive income (4% rule): {format_mxn(summary.monthly_passive_income)}/month "
        f"({format_pct(summary.coverage_percentage)} of expenses)"
    )


@cli.command("emergency")
@click.option("--base", type=click.Choice([b.value for b in EmergencyBase]), default=EmergencyBase.EXPENSES.value,
              help="Measure coverage against monthly expenses or income (default: expenses)")
@click.option("--monthly-expenses", type=float, help="Monthly expenses")
@click.option("--monthly-income", type=float, help="Monthly income")
@click.option("--savings", type=float, help="Current emergency savings")
@click.option("--target-months", type=float, help="Target months of coverage")
@FORMAT_OPTION
def emergency(base, monthly_expenses, monthly_income, savings, target_months, output_format):
    """Show emergency fund coverage and the next milestone."""
    plan = _load_plan(
        emergency_monthly_expenses=monthly_expenses,
        emergency_monthly_income=monthly_income,
        emergency_current_savings=savings,
        emergency_target_months=target_months,
    )
    monthly_base = emergency_monthly_base(plan, EmergencyBase(base))
    current = plan.emergency_current_savings
    covered = emergency_months_covered(current, monthly_base)
    status = locate_milestone(current, monthly_base)

    result = {
        "base": base,
        "monthly_base": monthly_base,
        "current_savings": current,
        "months_covered": round(covered, 2),
        "target_months": plan.emergency_target_months,
        "target_amount": round_cents(emergency_target_amount(monthly_base, plan.emergency_target_months)),
        "progress": round(emergency_progress(current, monthly_base, plan.emergency_target_months), 1),
        "stage": status.stage.value,
        "milestone": status.milestone.label if status.milestone else None,
        "milestone_progress": round(status.progress, 1),
        "recommended_savings_percentage": recommended_savings_percentage(covered),
    }

    if output_format == "json":
        _echo_json(result)
        return

    console = Console()
    console.print(f"\n[bold]Emergency Fund ({base})[/bold]")
    console.print(f"Monthly base: {format_mxn(monthly_base)}")
    console.print(f"Current savings: {format_mxn(current)} ({covered:.1f} months)")
    console.print(
        f"Target: {plan.emergency_target_months:g} months = {format_mxn(result['target_amount'])} "
        f"({format_pct(result['progress'])})"
    )

    if status.stage is MilestoneStage.BASE:
        console.print(f"Next milestone: starter fund ({format_pct(status.progress)})")
    elif status.stage is MilestoneStage.LADDER:
        console.print(f"Next milestone: [cyan]{status.milestone.label}[/cyan] ({format_pct(status.progress)})")
    else:
        console.print("[green]All milestones complete[/green]")

    console.print(
        f"Direct {result['recommended_savings_percentage']:g}% of your monthly surplus to this fund"
    )


# =============================================================================
# Projections
# =============================================================================


@cli.command("retirement")
@click.option("--age", type=int, help="Current age")
@click.option("--target-age", type=int, help="Retirement age")
@click.option("--contribution", type=float, help="Monthly contribution")
@click.option("--savings", type=float, help="Current retirement savings")
@click.option("--return", "expected_return", type=float, help="Expected annual return, percent")
@FORMAT_OPTION
def retirement(age, target_age, contribution, savings, expected_return, output_format):
    """Project the retirement fund at the target age."""
    plan = _load_plan(
        retirement_current_age=age,
        retirement_target_age=target_age,
        retirement_monthly_contribution=contribution,
        retirement_current_savings=savings,
        retirement_expected_return=expected_return,
    )
    projection = retirement_projection(plan)

    if output_format == "json":
        _echo_json(projection.model_dump())
        return

    console = Console()
    table = Table(title="Retirement Projection", box=box.ROUNDED, show_header=False)
    table.add_column("", style="bold", min_width=26)
    table.add_column("", justify="right", min_width=14)

    table.add_row("Years to retirement", str(projection.years_to_retirement))
    table.add_row("Projected fund", format_mxn(projection.total_fund))
    table.add_row("Recommended fund", format_mxn(projection.recommended_fund))
    table.add_row("Progress", format_pct(projection.fund_progress))
    table.add_row("Monthly income (4% rule)", f"[yellow]{format_mxn(projection.monthly_income)}[/yellow]")
    table.add_section()
    table.add_row("Risky allocation", format_pct(projection.recommended_risky_percentage, 0))
    table.add_row("Conservative allocation", format_pct(projection.recommended_conservative_percentage, 0))
    console.print(table)


@cli.command("project")
@click.argument("years", type=float)
@click.option("--monthly-savings", type=float, help="Monthly long-term contribution")
@click.option("--savings", type=float, help="Current long-term savings")
@click.option("--return", "annual_return", type=float, help="Expected annual return, percent")
@FORMAT_OPTION
def project(years, monthly_savings, savings, annual_return, output_format):
    """Project long-term savings YEARS into the future."""
    plan = _load_plan(
        longterm_monthly_savings=monthly_savings,
        longterm_current_savings=savings,
        longterm_annual_return=annual_return,
    )
    _require_finite(years, "YEARS")
    balance = projected_savings(years, plan)

    contributed = plan.longterm_current_savings + plan.longterm_monthly_savings * max(0.0, years) * 12

    if output_format == "json":
        _echo_json({
            "years": years,
            "projected_savings": round_cents(balance),
            "total_contributed": round_cents(contributed),
            "growth": round_cents(balance - contributed),
        })
        return

    console = Console()
    console.print(f"\n[bold]Savings in {years:g} years[/bold]: [yellow]{format_mxn(balance)}[/yellow]")
    console.print(f"Contributed: {format_mxn(contributed)}")
    console.print(f"Growth: {format_mxn(balance - contributed)}")


# =============================================================================
# Allocation
# =============================================================================


@cli.command("allocation")
@click.argument("total", type=float)
@FORMAT_OPTION
def allocation(total, output_format):
    """Split TOTAL savings between SOFIPOs and CETES.

    SOFIPO interest is tax-exempt up to 5 annual UMAs; anything above goes
    to CETES.
    """
    _require_finite(total, "TOTAL")
    strategy = calculate_allocation_strategy(total)

    sofipo = best_sofipo()
    cetes = get_cetes_info()

    if output_format == "json":
        result = strategy.model_dump()
        result["tax_exempt_limit"] = round_cents(tax_exempt_limit())
        result["best_sofipo"] = sofipo.model_dump()
        result["cetes"] = cetes.model_dump()
        _echo_json(result)
        return

    console = Console()
    table = Table(title=f"Allocation for {format_mxn(total)}", box=box.ROUNDED)
    table.add_column("Instrument", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Rate", justify="right")

    table.add_row(
        f"SOFIPO (best: {sofipo.name})",
        format_mxn(strategy.sofipo_amount),
        format_pct(strategy.sofipo_percentage),
        format_pct(sofipo.annual_rate, 2),
    )
    table.add_row(
        cetes.name,
        format_mxn(strategy.cetes_amount),
        format_pct(strategy.cetes_percentage),
        format_pct(cetes.annual_rate, 2),
    )
    console.print(table)
    console.print(f"Tax-exempt room left: {format_mxn(strategy.tax_exempt_remaining)}")
    console.print(f"[bold]{strategy.recommendation}[/bold]")


def _read_investments(path: Path) -> list[Investment]:
    """Load investments from a YAML or JSON file (list, or dict with 'investments')."""
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    if isinstance(raw, dict):
        raw = raw.get("investments")
    if not isinstance(raw, list):
        raise click.ClickException(f"Expected a list of investments in {path}")

    try:
        return [Investment.model_validate(item) for item in raw]
    except ValidationError as e:
        raise click.ClickException(f"Invalid investment in {path}:\n{e}")


@cli.command("portfolio")
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--age", type=int, help="Investor age for the rule of 120 (default: plan current age)")
@FORMAT_OPTION
def portfolio(file, age, output_format):
    """Summarize a portfolio and compare its risk with the rule of 120.

    FILE is a YAML or JSON list of investments with name, type, amount and
    expected_return. Without FILE, the profile's 'investments' list is used.
    """
    if file is not None:
        investments = _read_investments(file)
    else:
        try:
            investments = load_profile_investments()
        except ValidationError as e:
            raise click.ClickException(f"Invalid investment in profile:\n{e}")

    if age is None:
        age = _load_plan().retirement_current_age

    summary = summarize_portfolio(investments)
    assessment = assess_risk_allocation(age, investments)

    if output_format == "json":
        _echo_json({
            "summary": summary.model_dump(mode="json"),
            "risk": assessment.model_dump(mode="json"),
        })
        return

    console = Console()
    if not investments:
        console.print("[yellow]No investments found.[/yellow]")
        return

    types = get_investment_types()
    table = Table(title="Portfolio", box=box.ROUNDED)
    table.add_column("Type", style="cyan")
    table.add_column("Risk")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right")

    for row in summary.by_type:
        table.add_row(row.label, types[row.type].risk.value, format_mxn(row.total), format_pct(row.percentage))
    table.add_section()
    table.add_row("TOTAL", "", format_mxn(summary.total_invested), "100.0%", style="bold")
    console.print(table)

    console.print(
        f"Weighted return: {format_pct(summary.weighted_return, 2)} "
        f"({format_mxn(summary.projected_annual_return)}/year)"
    )
    console.print(
        f"High risk: {format_pct(assessment.actual_risky)} | "
        f"rule of 120 at age {age}: {format_pct(assessment.recommended_risky, 0)}"
    )
    status_style = {"balanced": "green", "too_risky": "red", "too_conservative": "yellow"}[assessment.status.value]
    console.print(f"Status: [{status_style}]{assessment.status.value.replace('_', ' ')}[/{status_style}]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
