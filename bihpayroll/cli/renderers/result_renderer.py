"""Rich renderer for payroll calculation results.

Transforms SDK models into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bihpayroll.sdk import CalculationResult, NetToGrossResult
from bihpayroll.sdk.payroll import PeriodRunResult


def format_amount(amount: int) -> str:
    """Format subunits as KM: 123456 -> '1234.56 KM'."""
    sign = "-" if amount < 0 else ""
    whole, cents = divmod(abs(amount), 100)
    return f"{sign}{whole}.{cents:02d} KM"


def format_rate(rate_value: int) -> str:
    """Format a percent x100 rate: 1700 -> '17.00%'."""
    whole, frac = divmod(rate_value, 100)
    return f"{whole}.{frac:02d}%"


def render_result(console: Console, result: CalculationResult, title: str = "Payroll") -> None:
    """Render a single calculation as a summary table plus breakdown."""
    summary = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
    summary.add_column("item", style="dim")
    summary.add_column("amount", justify="right")

    summary.add_row("Gross", format_amount(result.calculated_gross))
    summary.add_row("Contributions from salary", format_amount(result.contributions_from))
    summary.add_row("Taxable base", format_amount(result.taxable_base))
    summary.add_row("Income tax", format_amount(result.tax_amount))
    summary.add_row("[bold]Net[/bold]", f"[bold]{format_amount(result.net_amount)}[/bold]")
    if result.contributions_on:
        summary.add_row("Contributions on salary", format_amount(result.contributions_on))
    summary.add_row("Total employer cost", format_amount(result.total_cost))

    console.print(Panel(summary, title=f"{title} ({result.jurisdiction.value})", border_style="cyan"))

    breakdown = Table(title="Breakdown", box=box.SIMPLE)
    breakdown.add_column("Component")
    breakdown.add_column("Amount", justify="right")
    for code, amount in result.contributions_breakdown.items():
        breakdown.add_row(code, format_amount(amount))
    console.print(breakdown)


def render_net_to_gross(console: Console, solved: NetToGrossResult) -> None:
    """Render a net-to-gross solve, flagging approximate results."""
    if not solved.converged:
        console.print(Panel(
            f"[yellow]Did not converge after {solved.iterations} iterations; "
            f"gross is approximate.[/yellow]",
            title="Note",
            border_style="yellow",
        ))
    console.print(
        f"Target net {format_amount(solved.target_net)} -> "
        f"gross [bold]{format_amount(solved.gross_amount)}[/bold]"
    )
    render_result(console, solved.result, title="Verification")


def render_period_run(console: Console, run: PeriodRunResult) -> None:
    """Render a period run as one row per employee plus totals."""
    table = Table(
        title=f"Period {run.period_id} ({run.effective_date:%Y-%m}), tenant {run.tenant_id}",
        box=box.SIMPLE,
    )
    table.add_column("Employee")
    table.add_column("Seniority", justify="right")
    table.add_column("Gross", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Cost", justify="right")

    names = {s.employee_id: s.employee_name for s in run.results}
    for item in run.items:
        r = item.result
        table.add_row(
            names.get(item.employee_id, str(item.employee_id)),
            f"{item.seniority_hundredths // 100}.{item.seniority_hundredths % 100:02d}y",
            format_amount(r.calculated_gross),
            format_amount(r.tax_amount),
            format_amount(r.net_amount),
            format_amount(r.total_cost),
        )

    totals = run.totals()
    table.add_row(
        "[bold]Total[/bold]", "",
        format_amount(totals["calculated_gross"]),
        format_amount(totals["tax_amount"]),
        format_amount(totals["net_amount"]),
        format_amount(totals["total_cost"]),
    )
    console.print(table)
    console.print(f"Processed: {run.processed_count}")
    if run.skipped_employee_ids:
        skipped = ", ".join(str(i) for i in run.skipped_employee_ids)
        console.print(f"[dim]Skipped (no active contract): {skipped}[/dim]")
