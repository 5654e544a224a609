"""Configuration management for Pay Plan.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - plan: path to plan.yaml (optional, if not colocated)
   - tax_year: default tax year for projections
   - output_format: default CLI output format (table, json, csv)

2. plan.yaml - The user's pay plan
   - salary, bonus, pretax elections, withholding, expenses
   - the inputs a projection runs on

Config directory resolution:
1. PAY_PLAN_CONFIG_PATH environment variable (if set)
2. ~/.config/pay-plan/ (XDG_CONFIG_HOME fallback)

Plan resolution:
1. settings.json "plan" key (if set via CLI)
2. plan.yaml in same config directory

Tax rule overrides live in <config dir>/tax-rules/{year}.yaml.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml


APP_NAME = "pay-plan"
SETTINGS_FILENAME = "settings.json"
PLAN_FILENAME = "plan.yaml"

# Settings keys the CLI accepts, with their defaults
KNOWN_SETTINGS = {
    "plan": None,
    "tax_year": 2026,
    "output_format": "table",
}


class PlanNotFoundError(Exception):
    """Raised when no plan file is found."""
    pass


def get_config_dir() -> Path:
    """Directory holding settings.json, plan.yaml and tax-rules/ overrides.

    PAY_PLAN_CONFIG_PATH wins when set; otherwise $XDG_CONFIG_HOME/pay-plan,
    with XDG_CONFIG_HOME treated as ~/.config when unset or empty.
    """
    override = os.environ.get("PAY_PLAN_CONFIG_PATH")
    if override:
        return Path(override)
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / APP_NAME


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Settings from settings.json, or {} before anything has been saved."""
    path = get_settings_path()
    if not path.exists():
        return {}
    return json.loads(path.read_text())


def save_settings(settings: dict) -> Path:
    """Replace settings.json with the given mapping."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2) + "\n")
    return path


def get_setting(key: str, default: Any = None) -> Any:
    """Saved value for key, else default, else the KNOWN_SETTINGS default."""
    value = load_settings().get(key)
    if value is not None:
        return value
    return default if default is not None else KNOWN_SETTINGS.get(key)


def set_setting(key: str, value: Any) -> Path:
    return save_settings({**load_settings(), key: value})


def unset_setting(key: str) -> bool:
    """Drop key from settings.json. False when it was not set."""
    settings = load_settings()
    if settings.pop(key, None) is None:
        return False
    save_settings(settings)
    return True


def get_plan_path(require_exists: bool = False) -> Path:
    """Get the path to the plan.yaml file.

    Resolution order:
    1. settings.json "plan" key (if set)
    2. plan.yaml in config directory

    Args:
        require_exists: If True, raises PlanNotFoundError if not found

    Raises:
        PlanNotFoundError: If require_exists=True and no plan found
    """
    settings = load_settings()
    custom_plan = settings.get("plan")
    if custom_plan:
        plan_path = Path(custom_plan)
        if require_exists and not plan_path.exists():
            raise PlanNotFoundError(
                f"Plan not found at configured path: {plan_path}\n\n"
                f"Update with: pay-plan plan use /path/to/plan.yaml"
            )
        return plan_path

    plan_path = get_config_dir() / PLAN_FILENAME
    if require_exists and not plan_path.exists():
        raise PlanNotFoundError(
            f"No plan found. Checked:\n"
            f"  1. settings.json 'plan' key (not set)\n"
            f"  2. {plan_path} (not found)\n\n"
            f"Create a plan with: pay-plan plan init\n"
            f"Or point at an existing one: pay-plan plan use /path/to/plan.yaml"
        )

    return plan_path


def load_plan(path: Optional[Path] = None) -> dict:
    """Load a pay plan from YAML.

    Args:
        path: Plan file to read (defaults to the resolved plan.yaml)

    Raises:
        PlanNotFoundError: If the file does not exist
    """
    if path is None:
        path = get_plan_path(require_exists=True)
    path = Path(path)
    if not path.exists():
        raise PlanNotFoundError(f"Plan file not found: {path}")

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def save_plan(plan: dict, path: Optional[Path] = None) -> Path:
    """Save a pay plan to YAML.

    Args:
        plan: Plan dictionary to save
        path: Optional custom path (uses default if not specified)
    """
    if path is None:
        path = get_plan_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(plan, f, default_flow_style=False, sort_keys=False)

    return path
