"""Plan file to PayPeriodConfig.

A plan file (plan.yaml) carries the PayPeriodConfig fields without the
statutory constants; those are attached here from the tax rules for the
plan's year unless the plan embeds its own tax_rules section.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..config import get_setting, load_plan
from ..taxes.rules import load_tax_rules, TaxRulesNotFoundError, TaxRulesInvalidError
from ..taxes.schemas import TaxRules
from .schemas import ConfigurationError, PayPeriodConfig

logger = logging.getLogger(__name__)


# Written by 'pay-plan plan init'
DEFAULT_PLAN: Dict[str, Any] = {
    "tax_year": 2026,
    "filing_status": "single",
    "annual_base_salary": 120000,
    "annual_bonus": 0,
    "bonus_month": "December",
    "pretax": {
        "health_insurance_annual": 0,
        "dependent_care_fsa_annual": 0,
        "medical_fsa_annual": 0,
        "dental_annual": 0,
        "vision_annual": 0,
    },
    "post_tax": {
        "roth_401k_annual": 0,
        "disability_insurance_annual": 0,
    },
    "extra_federal_withholding": 0,
    "extra_state_withholding": 0,
    "fixed_expenses": {
        "housing": 0,
        "utilities": 0,
        "healthcare": 0,
        "household": 0,
        "discretionary": 0,
        "childcare": 0,
        "other": 0,
    },
    "housing_type": "own",
    "annual_property_costs": {
        "property_tax": 0,
        "home_insurance": 0,
        "flood_insurance": 0,
    },
    "life_insurance": [],
    "target_pretax_retirement_percent": 0.10,
}


def build_config(
    plan: Mapping[str, Any],
    tax_rules: Optional[TaxRules] = None,
    tax_year: Optional[int] = None,
) -> PayPeriodConfig:
    """Validate a plan mapping into a PayPeriodConfig.

    Args:
        plan: Plan fields (as loaded from plan.yaml)
        tax_rules: Rules to use; if None, the plan's own tax_rules section is
            used, else the rules file for the plan's year is loaded
        tax_year: Overrides the plan's tax_year (and the settings default)

    Raises:
        ConfigurationError: If the plan is invalid or no rules exist for its year
    """
    data = dict(plan or {})

    if tax_year is not None:
        data["tax_year"] = tax_year
    elif data.get("tax_year") is None:
        data["tax_year"] = get_setting("tax_year")

    if tax_rules is not None:
        data["tax_rules"] = tax_rules
    elif data.get("tax_rules") is None:
        try:
            year = int(data["tax_year"])
        except (TypeError, ValueError):
            raise ConfigurationError([f"tax_year: not a valid year: {data['tax_year']!r}"])
        try:
            data["tax_rules"] = load_tax_rules(year)
        except (TaxRulesNotFoundError, TaxRulesInvalidError) as e:
            raise ConfigurationError([f"tax_rules: {e}"]) from e

    return PayPeriodConfig.model_validate(data)


def load_plan_config(
    path: Optional[Union[str, Path]] = None,
    tax_year: Optional[int] = None,
) -> PayPeriodConfig:
    """Load a plan file and build its PayPeriodConfig.

    Args:
        path: Plan file (defaults to the configured plan.yaml)
        tax_year: Overrides the plan's tax_year

    Raises:
        PlanNotFoundError: If the plan file does not exist
        ConfigurationError: If the plan is invalid
    """
    plan = load_plan(Path(path) if path is not None else None)
    if not isinstance(plan, dict):
        raise ConfigurationError([f"plan file must contain a mapping, got {type(plan).__name__}"])
    logger.debug(f"Loaded plan from {path or 'configured plan.yaml'}")
    return build_config(plan, tax_year=tax_year)
