"""Rich renderers for payroll tax output.

Transforms SDK value objects into formatted Rich tables.
"""

import math

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from mxfin.sdk import format_mxn, format_pct
from mxfin.sdk.taxes import ISRDetails, TaxBreakdown, TaxRules


def render_tax_breakdown(console: Console, breakdown: TaxBreakdown, isr: ISRDetails, year: int) -> None:
    """Render a gross-to-net breakdown with the ISR bracket detail.

    Args:
        console: Rich Console instance
        breakdown: SDK output from calculate_tax_breakdown()
        isr: SDK output from calculate_isr() for the same gross
        year: Tax year the rules came from
    """
    table = Table(
        title=f"Monthly Salary Breakdown ({year})",
        box=box.ROUNDED,
    )
    table.add_column("", style="bold", min_width=24)
    table.add_column("Amount", justify="right", min_width=14)

    table.add_row("Gross Salary", format_mxn(breakdown.gross_salary))
    table.add_row("", "")

    table.add_row("[bold]DEDUCTIONS[/bold]", "")
    table.add_row("  ISR", f"[red]-{format_mxn(breakdown.isr)}[/red]")
    if breakdown.employment_subsidy > 0:
        table.add_row("  Employment Subsidy", f"[green]+{format_mxn(breakdown.employment_subsidy)}[/green]")
        table.add_row("  [dim]ISR after subsidy[/dim]", f"[dim]{format_mxn(breakdown.isr_after_subsidy)}[/dim]")
    table.add_row("  IMSS", f"[red]-{format_mxn(breakdown.imss)}[/red]")
    table.add_row("  [dim]Total Deductions[/dim]", f"[dim]{format_mxn(breakdown.total_deductions)}[/dim]")
    table.add_section()

    table.add_row("Net Salary", f"[yellow]{format_mxn(breakdown.net_salary)}[/yellow]", style="bold")
    table.add_row("Effective Tax Rate", format_pct(breakdown.effective_tax_rate, 2))

    console.print(table)

    if breakdown.gross_salary > 0:
        _render_isr_detail(console, isr)


def _render_isr_detail(console: Console, isr: ISRDetails) -> None:
    """Render the ISR computation panel."""
    detail = Table(show_header=False, box=None, padding=(0, 2))
    detail.add_column("key", style="dim")
    detail.add_column("value", justify="right")

    detail.add_row("Bracket", _fmt_range(isr.bracket.lower_limit, isr.bracket.upper_limit))
    detail.add_row("Excess over lower limit", format_mxn(isr.excess))
    detail.add_row("Marginal rate", format_pct(isr.bracket.rate * 100, 2))
    detail.add_row("Marginal tax", format_mxn(isr.marginal_tax))
    detail.add_row("Fixed fee", format_mxn(isr.fixed_fee))
    detail.add_row("ISR", format_mxn(isr.total_isr))

    console.print(Panel(detail, title="ISR Detail", border_style="dim"))


def render_brackets(console: Console, rules: TaxRules) -> None:
    """Render the ISR and employment subsidy tables for a year."""
    isr_table = Table(title=f"ISR Monthly Table ({rules.year})", box=box.ROUNDED)
    isr_table.add_column("Lower Limit", justify="right")
    isr_table.add_column("Upper Limit", justify="right")
    isr_table.add_column("Fixed Fee", justify="right")
    isr_table.add_column("Rate", justify="right", style="cyan")

    for bracket in rules.isr_monthly:
        isr_table.add_row(
            format_mxn(bracket.lower_limit),
            _fmt_upper(bracket.upper_limit),
            format_mxn(bracket.fixed_fee),
            format_pct(bracket.rate * 100, 2),
        )
    console.print(isr_table)

    subsidy = rules.employment_subsidy
    subsidy_table = Table(
        title=f"Employment Subsidy (up to {format_mxn(subsidy.max_income)})",
        box=box.ROUNDED,
    )
    subsidy_table.add_column("Lower Limit", justify="right")
    subsidy_table.add_column("Upper Limit", justify="right")
    subsidy_table.add_column("Subsidy", justify="right", style="green")

    for bracket in subsidy.brackets:
        subsidy_table.add_row(
            format_mxn(bracket.lower_limit),
            _fmt_upper(bracket.upper_limit),
            format_mxn(bracket.subsidy),
        )
    console.print(subsidy_table)

    console.print(
        f"[dim]UMA: {format_mxn(rules.uma.daily)}/day, "
        f"{format_mxn(rules.uma.monthly)}/month | "
        f"IMSS employee rate: {format_pct(rules.imss.total * 100, 3)}[/dim]"
    )


def _fmt_upper(upper: float) -> str:
    if math.isinf(upper):
        return "and above"
    return format_mxn(upper)


def _fmt_range(lower: float, upper: float) -> str:
    if math.isinf(upper):
        return f"{format_mxn(lower)} and above"
    return f"{format_mxn(lower)} - {format_mxn(upper)}"
