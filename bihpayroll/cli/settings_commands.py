"""Settings CLI commands for bih-payroll.

Manages settings.json - rules file, directory file, default tax factor.
"""

import click

from bihpayroll.sdk import (
    KNOWN_SETTINGS,
    get_data_path,
    get_rules_path,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    \b
    Available settings:
    - rules_file: tax rules YAML (overrides the bundled table)
    - directory_file: employee directory YAML for period runs
    - default_tax_factor: tax factor when --tax-factor is omitted
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo(f"Effective rules file: {get_rules_path()}")
    click.echo(f"Data directory: {get_data_path()}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE in settings.json."""
    if key == "default_tax_factor":
        if not value.isdigit():
            raise click.BadParameter(f"default_tax_factor must be a whole number, got '{value}'")
        value = int(value)

    path = set_setting(key, value)
    click.echo(f"Set {key} = {value} in {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_unset(key):
    """Remove KEY from settings.json."""
    current = load_settings()
    if key not in current:
        click.echo(f"{key} was not set.")
        return
    del current[key]
    save_settings(current)
    click.echo(f"Cleared {key}.")
