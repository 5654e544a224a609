"""Settings CLI commands for Pay Plan.

Manages settings.json - plan path, default tax year, output format.
"""

import click

from payplan.sdk import (
    load_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_settings_path,
    get_available_years,
    KNOWN_SETTINGS,
)

OUTPUT_FORMATS = ("table", "json", "csv")


def _parse_setting(key: str, value: str):
    """Convert and check a setting value from the command line."""
    if key == "tax_year":
        if not value.isdigit() or len(value) != 4:
            raise click.BadParameter(f"Invalid year '{value}'. Must be 4 digits.")
        year = int(value)
        available = get_available_years()
        if year not in available:
            raise click.BadParameter(
                f"No tax rules for {year} (available: {', '.join(str(y) for y in available)})"
            )
        return year
    if key == "output_format":
        if value not in OUTPUT_FORMATS:
            raise click.BadParameter(f"Must be one of: {', '.join(OUTPUT_FORMATS)}")
    return value


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - plan: path to plan.yaml (set via 'plan use')
    - tax_year: default year for projections
    - output_format: table, json or csv
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

    click.echo("Effective settings:")
    for key in KNOWN_SETTINGS:
        source = "" if key in current else " (default)"
        click.echo(f"  {key}: {get_setting(key)}{source}")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(k for k in KNOWN_SETTINGS if k != "plan")))
@click.argument("value")
def settings_set(key, value):
    """Set a setting value."""
    parsed = _parse_setting(key, value)
    path = set_setting(key, parsed)
    click.echo(f"Set {key}: {parsed}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(sorted(KNOWN_SETTINGS)))
def settings_unset(key):
    """Clear a setting, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key}. Now: {get_setting(key)} (default)")
    else:
        click.echo(f"{key} was not set.")
