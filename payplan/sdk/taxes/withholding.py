"""Per-period payroll withholding calculations.

Implements the annualized-bracket method for federal income tax withholding
and the remaining-room pattern for capped FICA wage bases. All functions are
pure: rules and year-to-date figures are passed in, results are returned as
dicts, nothing is rounded.
"""

from typing import Any, Dict, List

from .schemas import FilingStatusRules, MedicareRules, SocialSecurityRules, TaxBracket


# Semi-monthly schedule: two pay periods per month
PERIODS_PER_YEAR = 24


def remaining_room(annual_cap: float, ytd: float) -> float:
    """Amount still allowed under an annual cap, never negative."""
    return max(0.0, annual_cap - ytd)


def calculate_federal_income_tax(taxable_income: float, tax_brackets: List[TaxBracket]) -> float:
    """Calculate federal income tax by walking progressive brackets.

    Brackets must be ordered low to high; the last one is unbounded.
    Income at or below zero owes nothing.
    """
    tax_owed = 0.0
    remaining = taxable_income
    previous_ceiling = 0.0

    for bracket in tax_brackets:
        if remaining <= 0:
            break
        income_in_bracket = min(remaining, bracket.ceiling - previous_ceiling)
        tax_owed += income_in_bracket * bracket.rate
        remaining -= income_in_bracket
        previous_ceiling = bracket.ceiling

    return tax_owed


def calc_fit_withholding(
    gross: float,
    pretax: float,
    status_rules: FilingStatusRules,
    extra_withholding: float = 0,
    periods: int = PERIODS_PER_YEAR,
) -> Dict[str, Any]:
    """Calculate federal income tax withholding for one pay period.

    The period's taxable pay (gross minus pretax deductions minus the
    per-period share of the standard deduction) is annualized, taxed through
    the full bracket table, and divided back down. Nothing carries over
    between periods.

    Args:
        gross: Gross pay for the period (including any bonus)
        pretax: Pretax deductions taken this period
        status_rules: Standard deduction and brackets for the filing status
        extra_withholding: Flat additional withholding per period
        periods: Pay periods per year

    Returns:
        Dict with:
            - fit_taxable: Gross minus pretax deductions
            - annualized_taxable: Annualized taxable income after standard deduction
            - base: Withholding from the bracket table
            - extra: Flat extra withholding
            - withheld: base + extra
    """
    fit_taxable = gross - pretax
    per_period_taxable = fit_taxable - status_rules.standard_deduction / periods
    annualized_taxable = per_period_taxable * periods

    annual_tax = calculate_federal_income_tax(annualized_taxable, status_rules.tax_brackets)
    base = max(0.0, annual_tax / periods)

    return {
        "fit_taxable": fit_taxable,
        "annualized_taxable": annualized_taxable,
        "base": base,
        "extra": extra_withholding,
        "withheld": base + extra_withholding,
    }


def calc_ss_withholding(
    wages: float,
    ytd_ss_wages: float,
    rules: SocialSecurityRules,
) -> Dict[str, Any]:
    """Calculate Social Security withholding for a period.

    Args:
        wages: Wages subject to SS this period
        ytd_ss_wages: Year-to-date SS taxable wages before this period
        rules: Wage cap and rate

    Returns:
        Dict with:
            - taxable: SS taxable wages for this period
            - withheld: SS tax withheld
            - rate: SS tax rate used
            - capped: Whether the wage cap was reached this period
            - wage_cap: The annual wage base
    """
    taxable = min(wages, remaining_room(rules.wage_cap, ytd_ss_wages))

    return {
        "taxable": taxable,
        "withheld": taxable * rules.tax_rate,
        "rate": rules.tax_rate,
        "capped": ytd_ss_wages + wages >= rules.wage_cap,
        "wage_cap": rules.wage_cap,
    }


def calc_medicare_withholding(
    wages: float,
    ytd_medicare_wages: float,
    rules: MedicareRules,
) -> Dict[str, Any]:
    """Calculate Medicare withholding for a period.

    Wages are split at the additional-Medicare threshold: the part still
    under the threshold is taxed at the base rate, the part over it at the
    additional rate. Once YTD wages exceed the threshold, the whole period
    is taxed at the additional rate.

    Args:
        wages: Wages subject to Medicare this period
        ytd_medicare_wages: Year-to-date Medicare wages before this period
        rules: Rates and threshold

    Returns:
        Dict with:
            - taxable: Medicare wages (equals wages)
            - base_wages / additional_wages: Split of wages at the threshold
            - base_withheld: Tax on wages under the threshold
            - additional_withheld: Tax on wages over the threshold
            - withheld: Total Medicare withheld
            - over_threshold: Whether YTD wages now exceed the threshold
            - threshold: The threshold used
    """
    threshold = rules.additional_withholding_threshold

    base_wages = min(wages, remaining_room(threshold, ytd_medicare_wages))
    additional_wages = wages - base_wages

    base_withheld = base_wages * rules.tax_rate
    additional_withheld = additional_wages * rules.additional_rate

    return {
        "taxable": wages,
        "base_wages": base_wages,
        "additional_wages": additional_wages,
        "base_withheld": base_withheld,
        "additional_withheld": additional_withheld,
        "withheld": base_withheld + additional_withheld,
        "over_threshold": ytd_medicare_wages + wages > threshold,
        "threshold": threshold,
    }
