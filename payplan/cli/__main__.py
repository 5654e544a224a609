"""Pay Plan CLI - Command-line interface for paycheck projections."""

import json
import logging
from pathlib import Path

import click
import yaml
from rich.console import Console

from payplan import __version__
from payplan.sdk import (
    get_setting,
    get_available_years,
    load_tax_rules,
    PlanNotFoundError,
    TaxRulesNotFoundError,
    TaxRulesInvalidError,
)
from payplan.sdk.projection import (
    ConfigurationError,
    load_plan_config,
    project,
    projection_to_csv_string,
    summarize_by_month,
    write_projection_csv,
)

from .plan_commands import plan as plan_group
from .settings_commands import settings as settings_group, OUTPUT_FORMATS
from .renderers.ledger_renderer import render_projection, render_tax_rules

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="pay-plan")
def cli():
    """Pay Plan - Paycheck-by-paycheck payroll and cash-flow projections.

    Projects the 24 semi-monthly paychecks of a year: withholding,
    FICA caps, pretax elections, fixed expenses, 401(k) and savings.

    Configuration is loaded from (in order):

    \b
    1. PAY_PLAN_CONFIG_PATH environment variable
    2. ~/.config/pay-plan/ (XDG default)

    Run 'pay-plan plan init' to create a starter plan.
    """
    pass


# Add subcommand groups
cli.add_command(plan_group)
cli.add_command(settings_group)


@cli.command("project")
@click.argument("plan_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--year", "-y", type=int, help="Tax year (overrides the plan's tax_year)")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format (default: output_format setting, else table)")
@click.option("--monthly", is_flag=True, help="Roll paychecks up by month")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write json/csv output to a file")
def project_cmd(plan_file, year, output_format, monthly, output):
    """Project a year of paychecks from a plan.

    PLAN_FILE defaults to the active plan.yaml.

    Examples:
        pay-plan project
        pay-plan project plan.yaml --year 2025 --monthly
        pay-plan project --format csv -o 2026.csv
    """
    output_format = output_format or get_setting("output_format")
    if output_format not in OUTPUT_FORMATS:
        raise click.ClickException(f"Unknown output_format setting '{output_format}'")

    try:
        config = load_plan_config(plan_file, tax_year=year)
    except PlanNotFoundError as e:
        raise click.ClickException(str(e))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in plan: {e}")
    except ConfigurationError as e:
        lines = ["Plan validation failed:"]
        lines.extend(f"  - {err}" for err in e.errors)
        raise click.ClickException("\n".join(lines))

    logger.debug(f"Projecting {config.tax_year} for plan {plan_file or 'plan.yaml'}")
    result = project(config)

    if output_format == "json":
        payload = result.model_dump(mode="json")
        if monthly:
            payload["months"] = [m.model_dump() for m in summarize_by_month(result)]
        text = json.dumps(payload, indent=2)
        if output:
            Path(output).write_text(text + "\n")
            click.echo(f"Wrote {output}")
        else:
            click.echo(text)
    elif output_format == "csv":
        if output:
            write_projection_csv(result, Path(output))
            click.echo(f"Wrote {output}")
        else:
            click.echo(projection_to_csv_string(result), nl=False)
    else:
        if output:
            raise click.UsageError("--output requires --format json or csv")
        console = Console(width=160)
        render_projection(console, result, monthly=monthly)


@cli.group()
def rules():
    """Show statutory tax rules by year."""
    pass


@rules.command("list")
def rules_list():
    """List years with tax rules available."""
    for year in get_available_years():
        click.echo(year)


@rules.command("show")
@click.argument("year", type=int)
@click.option("--filing-status", "-s", type=click.Choice(["single", "mfj"]),
              help="Only show brackets for one filing status")
def rules_show(year, filing_status):
    """Show brackets and payroll limits for YEAR."""
    try:
        tax_rules = load_tax_rules(year)
    except (TaxRulesNotFoundError, TaxRulesInvalidError) as e:
        raise click.ClickException(str(e))

    render_tax_rules(Console(width=120), tax_rules, filing_status)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
