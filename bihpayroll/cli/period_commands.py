"""Payroll period run commands."""

import json
from pathlib import Path

import click
from rich.console import Console

from bihpayroll.sdk import ConfigNotFoundError, PayrollError, get_data_path, load_rule_store
from bihpayroll.sdk.payroll import load_directory, process_period

from .renderers.result_renderer import render_period_run


def default_records_path(period_id: int, tenant_id: int) -> Path:
    """Records file under the data directory for one period run."""
    return get_data_path() / f"period-{period_id}-tenant-{tenant_id}.json"


@click.group()
def period():
    """Run payroll for a period across all active employees."""
    pass


@period.command("run")
@click.argument("period_id", type=int)
@click.argument("tenant_id", type=int)
@click.option("--directory", "directory_file", type=click.Path(exists=True, dir_okay=False),
              help="Employee directory YAML (default: settings 'directory_file').")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Records JSON file (default: period-<ID>-tenant-<ID>.json in the data directory).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def period_run(period_id, tenant_id, directory_file, output, output_format):
    """Calculate payroll for PERIOD_ID of TENANT_ID.

    Employees without an active contract are skipped. Any calculation
    error (e.g. a missing rule) aborts the whole run and nothing is written.

    \b
    Examples:
      bih-payroll period run 1 1 --directory company.yaml
      bih-payroll period run 1 1 -o items.json
    """
    try:
        directory = load_directory(Path(directory_file) if directory_file else None)
        run = process_period(period_id, tenant_id, directory, load_rule_store())
    except (PayrollError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    output_path = Path(output) if output else default_records_path(period_id, tenant_id)
    records = [item.to_record() for item in run.items]
    output_path.write_text(json.dumps(records, indent=2))

    if output_format == "json":
        click.echo(json.dumps({
            "period_id": run.period_id,
            "tenant_id": run.tenant_id,
            "processed_count": run.processed_count,
            "skipped_employee_ids": run.skipped_employee_ids,
            "records_file": str(output_path),
            "results": [s.model_dump(mode="json") for s in run.results],
        }, indent=2))
        return

    render_period_run(Console(), run)
    click.echo(f"Wrote {len(run.items)} record(s) to {output_path}")
