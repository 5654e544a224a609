"""Plan CLI commands for Pay Plan.

Manages the pay plan (plan.yaml) - salary, bonus, elections, expenses.
"""

from pathlib import Path

import click
import yaml

from payplan.sdk import (
    get_plan_path,
    load_plan,
    save_plan,
    set_setting,
    PlanNotFoundError,
)
from payplan.sdk.projection import DEFAULT_PLAN, ConfigurationError, build_config


def validate_plan_file(path) -> dict:
    """Load and validate a plan file.

    Returns:
        The plan dictionary

    Raises:
        click.ClickException: If the file is missing, not YAML, or fails validation
    """
    path = Path(path)

    if path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Plan must be a YAML file: {path}")

    try:
        plan = load_plan(path)
    except PlanNotFoundError as e:
        raise click.ClickException(str(e))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    if not isinstance(plan, dict) or not plan:
        raise click.ClickException(f"Plan must be a non-empty YAML dictionary: {path}")

    try:
        build_config(plan)
    except ConfigurationError as e:
        lines = [f"Plan validation failed: {path}"]
        lines.extend(f"  - {err}" for err in e.errors)
        raise click.ClickException("\n".join(lines))

    return plan


@click.group()
def plan():
    """Manage the pay plan (plan.yaml).

    The plan holds salary, bonus, pretax elections, withholding, expenses
    and the 401(k) target that 'pay-plan project' runs on.
    """
    pass


@plan.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing plan")
def plan_init(force):
    """Write a starter plan.yaml to the config directory."""
    path = get_plan_path(require_exists=False)
    if path.exists() and not force:
        raise click.ClickException(f"Plan already exists: {path}\nUse --force to overwrite.")

    save_plan(DEFAULT_PLAN, path)
    click.echo(f"Created plan: {path}")
    click.echo("Edit it, then run: pay-plan project")


@plan.command("show")
def plan_show():
    """Show the active plan file and its contents."""
    path = get_plan_path(require_exists=False)
    click.echo(f"Plan file: {path}")
    if not path.exists():
        click.echo("Not found. Create one with: pay-plan plan init")
        return

    click.echo()
    click.echo(yaml.dump(load_plan(path), default_flow_style=False, sort_keys=False).rstrip())


@plan.command("validate")
@click.argument("plan_file", required=False, type=click.Path(dir_okay=False))
def plan_validate(plan_file):
    """Validate a plan file (default: the active plan)."""
    if plan_file is None:
        try:
            plan_file = get_plan_path(require_exists=True)
        except PlanNotFoundError as e:
            raise click.ClickException(str(e))

    validate_plan_file(plan_file)
    click.echo(click.style(f"Plan is valid: {plan_file}", fg="green"))


@plan.command("use")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def plan_use(path):
    """Use the plan file at PATH for future commands."""
    resolved = Path(path).expanduser().resolve()
    validate_plan_file(resolved)
    settings_path = set_setting("plan", str(resolved))
    click.echo(f"Using plan: {resolved}")
    click.echo(f"Saved to: {settings_path}")
