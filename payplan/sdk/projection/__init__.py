"""projection - Paycheck-by-paycheck payroll and cash-flow projection.

Scope:
- Validated plan input (PayPeriodConfig) and frozen results (schemas.py)
- Pay calendar and premium scheduling (schedule.py)
- The 24-period projection loop and annual summary (projector.py)
- Plan file loading with tax rules attached (plan.py)
- Monthly rollup and CSV output (reporting.py)

Constraints:
- Uses taxes/ for withholding calculations
- project() does no I/O; plan.py is the only part that reads files

Usage:
    from payplan.sdk.projection import build_config, project

    config = build_config({"annual_base_salary": 120000, "target_pretax_retirement_percent": 0.10})
    result = project(config)
    result.summary.effective_tax_rate
"""

from .schemas import (
    MONTHS,
    ConfigurationError,
    PreTaxElections,
    PostTaxDeductions,
    MonthlyExpenses,
    AnnualPropertyCosts,
    LifeInsurancePolicy,
    PayPeriodConfig,
    YtdTotals,
    PayPeriodResult,
    AnnualSummary,
    ProjectionResult,
)

from .schedule import (
    PREMIUM_SCHEDULES,
    PremiumSchedule,
    semimonthly_pay_dates,
    premium_for_period,
    payment_periods,
)

from .projector import project, project_period, summarize_periods

from .plan import DEFAULT_PLAN, build_config, load_plan_config

from .reporting import (
    MonthlySummary,
    summarize_by_month,
    projection_to_csv_string,
    write_projection_csv,
)

__all__ = [
    # Schemas
    "MONTHS",
    "ConfigurationError",
    "PreTaxElections",
    "PostTaxDeductions",
    "MonthlyExpenses",
    "AnnualPropertyCosts",
    "LifeInsurancePolicy",
    "PayPeriodConfig",
    "YtdTotals",
    "PayPeriodResult",
    "AnnualSummary",
    "ProjectionResult",
    # Schedule
    "PREMIUM_SCHEDULES",
    "PremiumSchedule",
    "semimonthly_pay_dates",
    "premium_for_period",
    "payment_periods",
    # Projection
    "project",
    "project_period",
    "summarize_periods",
    # Plan files
    "DEFAULT_PLAN",
    "build_config",
    "load_plan_config",
    # Reporting
    "MonthlySummary",
    "summarize_by_month",
    "projection_to_csv_string",
    "write_projection_csv",
]
