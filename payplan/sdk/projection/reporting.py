"""Projection reporting: monthly rollup and CSV output."""

import csv
import io
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .schedule import month_of_period
from .schemas import MONTHS, ProjectionResult


class MonthlySummary(BaseModel):
    """Both paychecks of a month added together."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    month: int = Field(..., ge=1, le=12)
    name: str
    gross: float
    pretax: float
    federal_withholding: float
    state_withholding: float
    fica: float
    post_tax: float
    fixed_expenses: float
    retirement: float
    residual_savings: float


# Per-period CSV columns, in waterfall order
CSV_COLUMNS = [
    ("period", lambda p: p.period_index + 1),
    ("pay_date", lambda p: p.pay_date.isoformat()),
    ("base_gross", lambda p: p.base_gross),
    ("bonus", lambda p: p.bonus),
    ("gross_pay", lambda p: p.gross_pay),
    ("health_insurance", lambda p: p.health_insurance),
    ("dependent_care_fsa", lambda p: p.dependent_care_fsa),
    ("medical_fsa", lambda p: p.medical_fsa),
    ("dental_vision", lambda p: p.dental_insurance + p.vision_insurance),
    ("federal_withholding", lambda p: p.federal_withholding),
    ("state_withholding", lambda p: p.state_withholding),
    ("social_security", lambda p: p.social_security_tax),
    ("medicare", lambda p: p.medicare_tax),
    ("post_tax_deductions", lambda p: p.total_post_tax),
    ("fixed_expenses", lambda p: p.fixed_expenses),
    ("pre_investment_remainder", lambda p: p.pre_investment_remainder),
    ("retirement_401k", lambda p: p.retirement_contribution),
    ("residual_savings", lambda p: p.residual_savings),
    ("ytd_ss_wages", lambda p: p.ytd.ss_wages),
    ("ytd_401k", lambda p: p.ytd.retirement),
]


def summarize_by_month(result: ProjectionResult) -> List[MonthlySummary]:
    """Roll the 24 periods up into 12 months."""
    months = []
    for month in range(1, 13):
        periods = [p for p in result.periods if month_of_period(p.period_index) == month]
        months.append(MonthlySummary(
            month=month,
            name=MONTHS[month - 1],
            gross=sum(p.gross_pay for p in periods),
            pretax=sum(p.total_pretax for p in periods),
            federal_withholding=sum(p.federal_withholding for p in periods),
            state_withholding=sum(p.state_withholding for p in periods),
            fica=sum(p.fica for p in periods),
            post_tax=sum(p.total_post_tax for p in periods),
            fixed_expenses=sum(p.fixed_expenses for p in periods),
            retirement=sum(p.retirement_contribution for p in periods),
            residual_savings=sum(p.residual_savings for p in periods),
        ))
    return months


def _format_amount(value) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _write_projection_rows(writer, result: ProjectionResult) -> None:
    """Write one row per period plus a totals row."""
    writer.writerow([name for name, _ in CSV_COLUMNS])
    for period in result.periods:
        writer.writerow([_format_amount(getter(period)) for _, getter in CSV_COLUMNS])

    s = result.summary
    totals = {
        "base_gross": s.total_base_gross,
        "bonus": s.total_bonus,
        "gross_pay": s.total_gross,
        "health_insurance": s.total_health_insurance,
        "dependent_care_fsa": s.total_dependent_care_fsa,
        "medical_fsa": s.total_medical_fsa,
        "dental_vision": s.total_dental_insurance + s.total_vision_insurance,
        "federal_withholding": s.total_federal_withholding,
        "state_withholding": s.total_state_withholding,
        "social_security": s.total_social_security,
        "medicare": s.total_medicare,
        "post_tax_deductions": s.total_post_tax,
        "fixed_expenses": s.total_fixed_expenses,
        "pre_investment_remainder": s.total_pre_investment_remainder,
        "retirement_401k": s.total_retirement,
        "residual_savings": s.total_residual_savings,
    }
    row = []
    for name, _ in CSV_COLUMNS:
        if name == "period":
            row.append("TOTAL")
        else:
            row.append(_format_amount(totals[name]) if name in totals else "")
    writer.writerow(row)


def projection_to_csv_string(result: ProjectionResult) -> str:
    """Convert a projection to a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    _write_projection_rows(writer, result)
    return output.getvalue()


def write_projection_csv(result: ProjectionResult, output_path: Path) -> Path:
    """Write a projection to a CSV file.

    Returns:
        Path to the written file
    """
    with open(output_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        _write_projection_rows(writer, result)

    return output_path
