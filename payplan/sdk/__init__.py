"""Pay Plan SDK - Core functionality for paycheck projections."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_plan_path,
    load_plan,
    save_plan,
    PlanNotFoundError,
    KNOWN_SETTINGS,
)

from .taxes import (
    TaxRules,
    load_tax_rules,
    get_available_years,
    calculate_federal_income_tax,
    TaxRulesNotFoundError,
    TaxRulesInvalidError,
)

from .projection import (
    ConfigurationError,
    PayPeriodConfig,
    PayPeriodResult,
    AnnualSummary,
    ProjectionResult,
    build_config,
    load_plan_config,
    project,
    summarize_by_month,
    write_projection_csv,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "get_plan_path",
    "load_plan",
    "save_plan",
    "PlanNotFoundError",
    "KNOWN_SETTINGS",
    # Tax rules
    "TaxRules",
    "load_tax_rules",
    "get_available_years",
    "calculate_federal_income_tax",
    "TaxRulesNotFoundError",
    "TaxRulesInvalidError",
    # Projection
    "ConfigurationError",
    "PayPeriodConfig",
    "PayPeriodResult",
    "AnnualSummary",
    "ProjectionResult",
    "build_config",
    "load_plan_config",
    "project",
    "summarize_by_month",
    "write_projection_csv",
]
