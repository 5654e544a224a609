"""Pay-period projection.

Simulates the 24 semi-monthly paychecks of a year in order. Each period
computes gross pay, capped pretax deductions, withholding and fixed
expenses, then allocates what is left between the 401(k) and residual
savings. Year-to-date totals are threaded through the loop as immutable
YtdTotals snapshots, so nothing is shared between calls.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Union

from ..taxes.withholding import (
    PERIODS_PER_YEAR,
    remaining_room,
    calc_fit_withholding,
    calc_ss_withholding,
    calc_medicare_withholding,
)
from .schedule import semimonthly_pay_dates, month_of_period, premium_for_period
from .schemas import (
    PayPeriodConfig,
    PayPeriodResult,
    AnnualSummary,
    ProjectionResult,
    YtdTotals,
)

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

# Tolerance for deciding a cap has been reached
_CAP_EPSILON = 1e-6


def _ensure_config(config: Union[PayPeriodConfig, Mapping[str, Any]]) -> PayPeriodConfig:
    if isinstance(config, PayPeriodConfig):
        return config
    return PayPeriodConfig.model_validate(config)


def project_period(
    config: PayPeriodConfig,
    period_index: int,
    ytd: YtdTotals,
    pay_date=None,
) -> PayPeriodResult:
    """Compute one pay period given the YTD totals before it.

    Never raises for a valid config: every cap is applied as remaining room
    floored at zero, and a negative residual is reported, not rejected.

    Args:
        config: Validated plan
        period_index: 0-23
        ytd: Totals as of the end of the previous period
        pay_date: Date stamp for the period (defaults to the semi-monthly calendar)

    Returns:
        PayPeriodResult whose ytd field includes this period

    Raises:
        ValueError: If period_index is outside 0-23
    """
    if not 0 <= period_index < PERIODS_PER_YEAR:
        raise ValueError(f"period_index must be 0-{PERIODS_PER_YEAR - 1}, got {period_index}")

    rules = config.tax_rules
    status_rules = rules.for_status(config.filing_status)
    periods = PERIODS_PER_YEAR

    if pay_date is None:
        pay_date = semimonthly_pay_dates(config.tax_year)[period_index]

    # Earnings
    base_gross = config.annual_base_salary / periods
    bonus = config.annual_bonus if period_index == config.bonus_period_index else 0.0
    gross = base_gross + bonus

    # Pretax deductions (FSAs capped by remaining room)
    health = config.pretax.health_insurance_annual / periods
    dep_fsa = min(
        config.pretax.dependent_care_fsa_annual / periods,
        remaining_room(rules.fsa.dependent_care_limit, ytd.dependent_care_fsa),
    )
    med_fsa = min(
        config.pretax.medical_fsa_annual / periods,
        remaining_room(rules.fsa.medical_limit, ytd.medical_fsa),
    )
    dental = config.pretax.dental_annual / periods
    vision = config.pretax.vision_annual / periods
    total_pretax = health + dep_fsa + med_fsa + dental + vision

    # Taxes. FICA is computed on base wages only; the bonus is excluded.
    fit = calc_fit_withholding(
        gross, total_pretax, status_rules,
        extra_withholding=config.extra_federal_withholding,
        periods=periods,
    )
    state = config.extra_state_withholding
    ss = calc_ss_withholding(base_gross, ytd.ss_wages, rules.social_security)
    medicare = calc_medicare_withholding(base_gross, ytd.medicare_wages, rules.medicare)
    total_tax = fit["withheld"] + state + ss["withheld"] + medicare["withheld"]

    # Fixed expenses
    recurring = config.fixed_expenses.total / 2
    life = sum(premium_for_period(policy, period_index) for policy in config.life_insurance)
    charge_property = config.housing_type == "own" and period_index == periods - 1
    property_costs = config.annual_property_costs.total if charge_property else 0.0
    fixed = recurring + life + property_costs

    # Post-tax deductions. Roth 401(k) shares the elective limit and is taken
    # before the pretax 401(k) allocation.
    elective_limit = rules.retirement_401k.employee_elective_limit
    roth = min(
        config.post_tax.roth_401k_annual / periods,
        remaining_room(elective_limit, ytd.elective_deferrals),
    )
    disability = config.post_tax.disability_insurance_annual / periods
    total_post_tax = roth + disability

    # Allocation: 401(k) first, clipped by annual room then by available cash
    remainder = gross - total_pretax - total_tax - fixed - total_post_tax
    desired = gross * config.target_pretax_retirement_percent
    retirement = min(desired, remaining_room(elective_limit, ytd.elective_deferrals + roth))
    retirement = min(retirement, max(0.0, remainder))
    residual = remainder - retirement

    new_ytd = ytd.add(
        ss_wages=ss["taxable"],
        medicare_wages=medicare["taxable"],
        retirement=retirement,
        roth_401k=roth,
        dependent_care_fsa=dep_fsa,
        medical_fsa=med_fsa,
    )

    return PayPeriodResult(
        period_index=period_index,
        pay_date=pay_date,
        month=month_of_period(period_index),
        base_gross=base_gross,
        bonus=bonus,
        gross_pay=gross,
        health_insurance=health,
        dependent_care_fsa=dep_fsa,
        medical_fsa=med_fsa,
        dental_insurance=dental,
        vision_insurance=vision,
        total_pretax=total_pretax,
        fit_taxable=fit["fit_taxable"],
        annualized_taxable=fit["annualized_taxable"],
        federal_withholding_base=fit["base"],
        extra_federal_withholding=fit["extra"],
        federal_withholding=fit["withheld"],
        state_withholding=state,
        social_security_wages=ss["taxable"],
        social_security_tax=ss["withheld"],
        medicare_wages=medicare["taxable"],
        medicare_base_tax=medicare["base_withheld"],
        medicare_additional_tax=medicare["additional_withheld"],
        medicare_tax=medicare["withheld"],
        total_tax_withheld=total_tax,
        roth_401k=roth,
        disability_insurance=disability,
        total_post_tax=total_post_tax,
        recurring_expenses=recurring,
        life_insurance=life,
        property_costs=property_costs,
        fixed_expenses=fixed,
        pre_investment_remainder=remainder,
        retirement_contribution=retirement,
        residual_savings=residual,
        ytd=new_ytd,
    )


def summarize_periods(periods: List[PayPeriodResult]) -> AnnualSummary:
    """Sum the ledger into an AnnualSummary."""

    def total(field: str) -> float:
        return sum(getattr(p, field) for p in periods)

    total_gross = total("gross_pay")
    total_federal = total("federal_withholding")
    total_ss = total("social_security_tax")
    total_medicare = total("medicare_tax")
    total_fica = total_ss + total_medicare
    total_pretax = total("total_pretax")
    total_tax = total("total_tax_withheld")
    total_post_tax = total("total_post_tax")
    total_retirement = total("retirement_contribution")

    return AnnualSummary(
        total_base_gross=total("base_gross"),
        total_bonus=total("bonus"),
        total_gross=total_gross,
        total_health_insurance=total("health_insurance"),
        total_dependent_care_fsa=total("dependent_care_fsa"),
        total_medical_fsa=total("medical_fsa"),
        total_dental_insurance=total("dental_insurance"),
        total_vision_insurance=total("vision_insurance"),
        total_pretax=total_pretax,
        total_federal_withholding=total_federal,
        total_state_withholding=total("state_withholding"),
        total_social_security=total_ss,
        total_medicare_base=total("medicare_base_tax"),
        total_medicare_additional=total("medicare_additional_tax"),
        total_medicare=total_medicare,
        total_fica=total_fica,
        total_tax_withheld=total_tax,
        total_roth_401k=total("roth_401k"),
        total_disability_insurance=total("disability_insurance"),
        total_post_tax=total_post_tax,
        total_recurring_expenses=total("recurring_expenses"),
        total_life_insurance=total("life_insurance"),
        total_property_costs=total("property_costs"),
        total_fixed_expenses=total("fixed_expenses"),
        total_pre_investment_remainder=total("pre_investment_remainder"),
        total_retirement=total_retirement,
        total_residual_savings=total("residual_savings"),
        net_take_home=total_gross - total_pretax - total_tax - total_post_tax - total_retirement,
        effective_tax_rate=(total_federal + total_fica) / total_gross if total_gross > 0 else 0.0,
        shortfall_periods=[p.period_index for p in periods if p.residual_savings < 0],
    )


def _first_period_reaching(periods: List[PayPeriodResult], field: str, cap: float) -> Optional[int]:
    for p in periods:
        if getattr(p.ytd, field) >= cap - _CAP_EPSILON:
            return p.period_index
    return None


def collect_warnings(config: PayPeriodConfig, periods: List[PayPeriodResult]) -> List[str]:
    """Diagnostic notes about elections over limits, caps reached and shortfalls."""
    rules = config.tax_rules
    warnings = []

    elections = [
        ("Dependent care FSA", config.pretax.dependent_care_fsa_annual, rules.fsa.dependent_care_limit),
        ("Medical FSA", config.pretax.medical_fsa_annual, rules.fsa.medical_limit),
    ]
    for label, election, limit in elections:
        if election > limit:
            warnings.append(
                f"{label} election ${election:,.2f} exceeds the {rules.year} limit of ${limit:,.2f}; "
                f"contributions stop once the limit is reached"
            )

    caps: List[Dict[str, Any]] = [
        {"label": "401(k) elective limit", "field": "elective_deferrals",
         "cap": rules.retirement_401k.employee_elective_limit,
         "active": config.target_pretax_retirement_percent > 0 or config.post_tax.roth_401k_annual > 0},
        {"label": "Social Security wage base", "field": "ss_wages",
         "cap": rules.social_security.wage_cap, "active": True},
    ]
    for cap in caps:
        if not cap["active"] or cap["cap"] <= 0:
            continue
        index = _first_period_reaching(periods, cap["field"], cap["cap"])
        if index is not None:
            warnings.append(f"{cap['label']} (${cap['cap']:,.2f}) reached in period {index + 1}")
            logger.debug(f"{cap['label']} reached at period index {index}")

    threshold = rules.medicare.additional_withholding_threshold
    for p in periods:
        if p.medicare_additional_tax > 0:
            warnings.append(
                f"Additional Medicare rate applies from period {p.period_index + 1} "
                f"(wages over ${threshold:,.0f})"
            )
            break

    if config.housing_type == "rent" and config.annual_property_costs.total > 0:
        warnings.append("annual_property_costs are ignored for housing_type 'rent'")

    shortfalls = [p for p in periods if p.residual_savings < 0]
    if shortfalls:
        worst = min(shortfalls, key=lambda p: p.residual_savings)
        warnings.append(
            f"Cash shortfall in {len(shortfalls)} period(s); largest is "
            f"${-worst.residual_savings:,.2f} in period {worst.period_index + 1} ({worst.pay_date.isoformat()})"
        )
        logger.debug(f"Shortfall periods: {[p.period_index for p in shortfalls]}")

    return warnings


def project(config: Union[PayPeriodConfig, Mapping[str, Any]]) -> ProjectionResult:
    """Project a full year of paychecks.

    Args:
        config: A PayPeriodConfig, or a mapping of its fields (validated here,
            including a complete tax_rules section)

    Returns:
        ProjectionResult with 24 periods in pay order and the annual summary

    Raises:
        ConfigurationError: If a mapping fails validation. Nothing is computed.
    """
    config = _ensure_config(config)

    pay_dates = semimonthly_pay_dates(config.tax_year)
    ytd = YtdTotals()
    periods = []
    for i in range(PERIODS_PER_YEAR):
        result = project_period(config, i, ytd, pay_date=pay_dates[i])
        periods.append(result)
        ytd = result.ytd

    summary = summarize_periods(periods)
    warnings = collect_warnings(config, periods)

    logger.debug(
        f"Projected {config.tax_year} ({config.filing_status}): gross {summary.total_gross:.2f}, "
        f"effective rate {summary.effective_tax_rate:.4f}, {len(warnings)} warning(s)"
    )

    return ProjectionResult(
        tax_year=config.tax_year,
        filing_status=config.filing_status,
        periods=periods,
        summary=summary,
        warnings=warnings,
    )
