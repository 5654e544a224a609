"""taxes - Tax rules and withholding logic.

Scope:
- Federal tax rules and brackets per tax year
- Per-period withholding calculations (FIT, SS, Medicare)

Constraints:
- Pure calculation - no plan-specific config (that's in projection/)
- Receives data, returns results
- Year-specific rules loaded from tax-rules/{year}.yaml

Modules:
- schemas: pydantic models for the rules files
- rules: rules file resolution and loading
- withholding: bracket walk and per-period FIT/SS/Medicare calculations

Usage:
    from payplan.sdk.taxes import calc_fit_withholding, load_tax_rules

    rules = load_tax_rules(2026)
    fit = calc_fit_withholding(gross=5000, pretax=200, status_rules=rules.for_status("single"))
"""

from .withholding import (
    PERIODS_PER_YEAR,
    remaining_room,
    calculate_federal_income_tax,
    calc_fit_withholding,
    calc_ss_withholding,
    calc_medicare_withholding,
)

from .schemas import (
    FilingStatus,
    TaxBracket,
    FilingStatusRules,
    SocialSecurityRules,
    MedicareRules,
    Retirement401kRules,
    FsaRules,
    TaxRules,
)

from .rules import (
    load_tax_rules,
    parse_tax_rules,
    get_tax_rules_path,
    get_available_years,
    TaxRulesNotFoundError,
    TaxRulesInvalidError,
)

__all__ = [
    # Withholding
    "PERIODS_PER_YEAR",
    "remaining_room",
    "calculate_federal_income_tax",
    "calc_fit_withholding",
    "calc_ss_withholding",
    "calc_medicare_withholding",
    # Schemas
    "FilingStatus",
    "TaxBracket",
    "FilingStatusRules",
    "SocialSecurityRules",
    "MedicareRules",
    "Retirement401kRules",
    "FsaRules",
    "TaxRules",
    # Rules loading
    "load_tax_rules",
    "parse_tax_rules",
    "get_tax_rules_path",
    "get_available_years",
    "TaxRulesNotFoundError",
    "TaxRulesInvalidError",
]
