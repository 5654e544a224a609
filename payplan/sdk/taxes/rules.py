"""Tax rules loading.

Rules are resolved per year from YAML files:
1. <config dir>/tax-rules/{year}.yaml (user override)
2. payplan/tax-rules/{year}.yaml (bundled with the package)
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..config import get_config_dir
from .schemas import TaxRules


class TaxRulesNotFoundError(FileNotFoundError):
    """Raised when no tax rules file exists for a year."""
    pass


class TaxRulesInvalidError(ValueError):
    """Raised when a tax rules file fails schema validation."""
    pass


def _get_bundled_rules_dir() -> Path:
    """Get the tax-rules directory shipped with the package."""
    return Path(__file__).parent.parent.parent / "tax-rules"  # taxes -> sdk -> payplan


def _get_override_rules_dir() -> Path:
    """Get the user's tax-rules override directory."""
    return get_config_dir() / "tax-rules"


def get_available_years() -> list[int]:
    """Get sorted list of years with tax rules (descending)."""
    years = set()
    for rules_dir in (_get_override_rules_dir(), _get_bundled_rules_dir()):
        if rules_dir.is_dir():
            years.update(int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


def get_tax_rules_path(year: Union[int, str]) -> Path:
    """Resolve the rules file for a year, preferring the user override.

    Raises:
        TaxRulesNotFoundError: If neither location has the year
    """
    filename = f"{int(year)}.yaml"
    for rules_dir in (_get_override_rules_dir(), _get_bundled_rules_dir()):
        candidate = rules_dir / filename
        if candidate.exists():
            return candidate

    available = ", ".join(str(y) for y in get_available_years()) or "none"
    raise TaxRulesNotFoundError(
        f"Tax rules file not found for year {year} (available: {available})"
    )


def parse_tax_rules(data: dict, source: Optional[str] = None) -> TaxRules:
    """Validate a raw rules mapping into TaxRules.

    Raises:
        TaxRulesInvalidError: If the mapping fails validation
    """
    try:
        return TaxRules.model_validate(data)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            errors.append(f"{loc}: {err['msg']}")
        where = f" in {source}" if source else ""
        raise TaxRulesInvalidError(f"Invalid tax rules{where}: {'; '.join(errors)}") from e


def load_tax_rules(year: Union[int, str]) -> TaxRules:
    """Load tax rules for a specific year."""
    path = get_tax_rules_path(year)
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    rules = parse_tax_rules(data, source=str(path))
    if rules.year != int(year):
        raise TaxRulesInvalidError(
            f"Invalid tax rules in {path}: file declares year {rules.year}, expected {year}"
        )
    return rules
