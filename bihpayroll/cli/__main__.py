"""bih-payroll CLI - Command-line interface for payroll calculations."""

import json
import logging
import os

import click
from rich.console import Console

from bihpayroll import __version__
from bihpayroll.sdk import (
    CalculationInput,
    PayrollError,
    calculate_payroll,
    get_default_tax_factor,
    load_rule_store,
    solve_net_to_gross,
)

from .period_commands import period as period_group
from .renderers.result_renderer import render_net_to_gross, render_result
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group

JURISDICTION_CHOICE = click.Choice(["FBIH", "RS", "BD"], case_sensitive=False)
PENSION_FUND_CHOICE = click.Choice(["FBIH_FUND", "RS_FUND"], case_sensitive=False)
DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def configure_logging(debug: bool) -> None:
    """Configure root logging from --debug or the LOG_LEVEL environment variable."""
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.version_option(version=__version__, prog_name="bih-payroll")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(debug):
    """bih-payroll - Payroll calculations for FBiH, RS and Brcko District.

    Amounts are entered and stored in pfenig (1 KM = 100). Rates are
    resolved from a time-versioned rules table, in order:

    \b
    1. BIH_PAYROLL_RULES_FILE environment variable
    2. settings.json 'rules_file' key
    3. Bundled tax_rules.yaml
    """
    configure_logging(debug)


cli.add_command(rules_group)
cli.add_command(period_group)
cli.add_command(settings_group)


@cli.command("calc")
@click.argument("jurisdiction", type=JURISDICTION_CHOICE)
@click.argument("gross", type=int)
@click.option("--date", "effective_date", type=DATE_TYPE, required=True,
              help="Effective date for rule resolution (YYYY-MM-DD).")
@click.option("--tax-factor", type=int, default=None,
              help="Personal deduction factor x100 (default: settings or 100).")
@click.option("--seniority", type=int, default=0,
              help="Seniority in hundredths of a year (500 = 5 years).")
@click.option("--work-days", type=int, default=22, help="Work days in the period.")
@click.option("--pension-fund", type=PENSION_FUND_CHOICE, default=None,
              help="Pension fund choice (required for BD).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def calc(jurisdiction, gross, effective_date, tax_factor, seniority, work_days,
         pension_fund, output_format):
    """Calculate payroll from a GROSS amount in pfenig.

    \b
    Examples:
      bih-payroll calc FBIH 200000 --date 2024-01-01
      bih-payroll calc RS 200000 --date 2024-01-01 --seniority 500
      bih-payroll calc BD 200000 --date 2024-01-01 --pension-fund RS_FUND
    """
    if tax_factor is None:
        tax_factor = get_default_tax_factor()

    try:
        calc_input = CalculationInput(
            jurisdiction=jurisdiction,
            gross_amount=gross,
            work_days=work_days,
            seniority_hundredths=seniority,
            tax_factor=tax_factor,
            effective_date=effective_date.date(),
            pension_fund_choice=pension_fund.upper() if pension_fund else None,
        )
        result = calculate_payroll(calc_input, load_rule_store())
    except PayrollError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    render_result(Console(), result)


@cli.command("net-to-gross")
@click.argument("jurisdiction", type=JURISDICTION_CHOICE)
@click.argument("target_net", type=int)
@click.option("--date", "effective_date", type=DATE_TYPE, required=True,
              help="Effective date for rule resolution (YYYY-MM-DD).")
@click.option("--tax-factor", type=int, default=None,
              help="Personal deduction factor x100 (default: settings or 100).")
@click.option("--pension-fund", type=PENSION_FUND_CHOICE, default=None,
              help="Pension fund choice (required for BD).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def net_to_gross(jurisdiction, target_net, effective_date, tax_factor, pension_fund,
                 output_format):
    """Find the gross amount that yields TARGET_NET (pfenig).

    The result may be approximate if the solver does not converge;
    text output flags this, JSON output has "converged": false.
    """
    if tax_factor is None:
        tax_factor = get_default_tax_factor()

    try:
        solved = solve_net_to_gross(
            target_net,
            jurisdiction,
            tax_factor,
            effective_date.date(),
            pension_fund_choice=pension_fund.upper() if pension_fund else None,
            store=load_rule_store(),
        )
    except PayrollError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(solved.model_dump(mode="json"), indent=2))
        return

    render_net_to_gross(Console(), solved)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
