"""Tax rule inspection commands."""

import json

import click
from rich import box
from rich.console import Console
from rich.table import Table

from bihpayroll.sdk import PayrollError, get_rules_path, load_rule_store, require_rule
from bihpayroll.sdk.schemas import RuleType

from .renderers.result_renderer import format_amount, format_rate


def format_rule_value(rule) -> str:
    """Rates for CONTRIBUTION/TAX, amounts for DEDUCTION/LIMIT."""
    if rule.rule_type in (RuleType.DEDUCTION, RuleType.LIMIT):
        return format_amount(rule.rate_value)
    return format_rate(rule.rate_value)


@click.group()
def rules():
    """Inspect the time-versioned tax rules table."""
    pass


@rules.command("list")
@click.option("--jurisdiction", "-j", type=click.Choice(["FBIH", "RS", "BD"], case_sensitive=False),
              help="Only show rules for one jurisdiction.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def rules_list(jurisdiction, output_format):
    """List all rule versions, newest first."""
    try:
        store = load_rule_store()
    except PayrollError as e:
        raise click.ClickException(str(e))

    all_rules = store.list_rules(jurisdiction)

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in all_rules], indent=2))
        return

    table = Table(title=f"Tax rules ({get_rules_path()})", box=box.SIMPLE)
    table.add_column("Jurisdiction")
    table.add_column("Code")
    table.add_column("Type", style="dim")
    table.add_column("Value", justify="right")
    table.add_column("Valid from")
    table.add_column("Valid to")
    for rule in all_rules:
        table.add_row(
            rule.jurisdiction.value,
            rule.rule_code,
            rule.rule_type.value,
            format_rule_value(rule),
            rule.valid_from.isoformat(),
            rule.valid_to.isoformat() if rule.valid_to else "open",
        )
    Console().print(table)
    click.echo(f"{len(all_rules)} rule(s)")


@rules.command("show")
@click.argument("jurisdiction", type=click.Choice(["FBIH", "RS", "BD"], case_sensitive=False))
@click.argument("rule_code")
@click.option("--date", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), required=True,
              help="Date to resolve the rule for (YYYY-MM-DD).")
def rules_show(jurisdiction, rule_code, as_of):
    """Show which version of RULE_CODE applies on a date.

    \b
    Examples:
      bih-payroll rules show FBIH PIO_ON --date 2025-06-01
      bih-payroll rules show FBIH PIO_ON --date 2025-08-01
    """
    try:
        rule = require_rule(load_rule_store(), jurisdiction, rule_code.upper(), as_of.date())
    except PayrollError as e:
        raise click.ClickException(str(e))

    click.echo(f"{rule.jurisdiction.value}/{rule.rule_code} ({rule.rule_type.value})")
    click.echo(f"  Value: {format_rule_value(rule)} (raw {rule.rate_value})")
    valid_to = rule.valid_to.isoformat() if rule.valid_to else "open-ended"
    click.echo(f"  Valid: {rule.valid_from.isoformat()} .. {valid_to}")
    if rule.description:
        click.echo(f"  {rule.description}")
