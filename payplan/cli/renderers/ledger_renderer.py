"""Rich renderer for paycheck projections.

Transforms SDK projection results into formatted Rich tables.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from payplan.sdk.projection import ProjectionResult, summarize_by_month
from payplan.sdk.taxes import TaxRules


def render_projection(console: Console, result: ProjectionResult, monthly: bool = False) -> None:
    """Render a projection as Rich tables.

    Args:
        console: Rich Console instance
        result: Output of project()
        monthly: Show the 12-month rollup instead of all 24 paychecks
    """
    # Warnings first
    for warning in result.warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    if monthly:
        _render_month_table(console, result)
    else:
        _render_period_table(console, result)

    _render_summary(console, result)


def _render_period_table(console: Console, result: ProjectionResult) -> None:
    """Render one row per paycheck."""
    table = Table(
        title=f"Paycheck Projection: {result.tax_year} ({result.filing_status})",
        box=box.ROUNDED,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Pay Date")
    table.add_column("Gross", justify="right")
    table.add_column("Pretax", justify="right")
    table.add_column("Fed/State", justify="right")
    table.add_column("FICA", justify="right")
    table.add_column("Post-tax", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Remainder", justify="right")
    table.add_column("401(k)", justify="right", style="blue")
    table.add_column("Savings", justify="right")

    for p in result.periods:
        gross = _fmt(p.gross_pay)
        if p.bonus:
            gross = f"[bold]{gross}[/bold]"
        table.add_row(
            str(p.period_index + 1),
            p.pay_date.isoformat(),
            gross,
            _fmt(p.total_pretax),
            _fmt(p.federal_withholding + p.state_withholding),
            _fmt(p.fica),
            _fmt(p.total_post_tax),
            _fmt(p.fixed_expenses),
            _fmt(p.pre_investment_remainder),
            _fmt(p.retirement_contribution),
            _fmt_signed(p.residual_savings),
        )

    console.print(table)


def _render_month_table(console: Console, result: ProjectionResult) -> None:
    """Render the 12-month rollup."""
    table = Table(
        title=f"Monthly Cash Flow: {result.tax_year} ({result.filing_status})",
        box=box.ROUNDED,
    )
    table.add_column("Month")
    table.add_column("Gross", justify="right")
    table.add_column("Pretax", justify="right")
    table.add_column("Fed/State", justify="right")
    table.add_column("FICA", justify="right")
    table.add_column("Post-tax", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("401(k)", justify="right", style="blue")
    table.add_column("Savings", justify="right")

    for m in summarize_by_month(result):
        table.add_row(
            m.name,
            _fmt(m.gross),
            _fmt(m.pretax),
            _fmt(m.federal_withholding + m.state_withholding),
            _fmt(m.fica),
            _fmt(m.post_tax),
            _fmt(m.fixed_expenses),
            _fmt(m.retirement),
            _fmt_signed(m.residual_savings),
        )

    console.print(table)


def _render_summary(console: Console, result: ProjectionResult) -> None:
    """Render annual totals."""
    s = result.summary
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    table.add_row("Gross income", _fmt(s.total_gross))
    table.add_row("Pretax deductions", _fmt(s.total_pretax))
    table.add_row("Federal withholding", _fmt(s.total_federal_withholding))
    if s.total_state_withholding:
        table.add_row("State withholding", _fmt(s.total_state_withholding))
    table.add_row("Social Security", _fmt(s.total_social_security))
    table.add_row("Medicare", _fmt(s.total_medicare))
    if s.total_post_tax:
        table.add_row("Post-tax deductions", _fmt(s.total_post_tax))
    table.add_row("Fixed expenses", _fmt(s.total_fixed_expenses))
    table.add_row("401(k) contributions", _fmt(s.total_retirement))
    table.add_row("Net take-home", _fmt(s.net_take_home))
    table.add_row("Residual savings", _fmt_signed(s.total_residual_savings))
    table.add_row("Effective tax rate", f"{s.effective_tax_rate:.1%}")

    console.print(Panel(table, title="Annual Summary", border_style="dim"))


def render_tax_rules(console: Console, rules: TaxRules, filing_status: Optional[str] = None) -> None:
    """Render a year's brackets and payroll limits."""
    statuses = [filing_status] if filing_status else ["single", "mfj"]
    for status in statuses:
        try:
            section = rules.for_status(status)
        except KeyError:
            continue
        table = Table(
            title=f"{rules.year} Federal Brackets ({status}) - standard deduction {_fmt(section.standard_deduction)}",
            box=box.ROUNDED,
        )
        table.add_column("Over", justify="right")
        table.add_column("Up To", justify="right")
        table.add_column("Rate", justify="right")
        previous = 0.0
        for bracket in section.tax_brackets:
            up_to = "-" if bracket.up_to is None else _fmt(bracket.up_to)
            table.add_row(_fmt(previous), up_to, f"{bracket.rate:.0%}")
            previous = bracket.ceiling
        console.print(table)

    limits = Table(show_header=False, box=None, padding=(0, 2))
    limits.add_column("key", style="dim")
    limits.add_column("value", justify="right")
    limits.add_row("Social Security wage base", _fmt(rules.social_security.wage_cap))
    limits.add_row("Social Security rate", f"{rules.social_security.tax_rate:.2%}")
    limits.add_row("Medicare rate", f"{rules.medicare.tax_rate:.2%}")
    limits.add_row("Medicare rate over threshold", f"{rules.medicare.additional_rate:.2%}")
    limits.add_row("Additional Medicare threshold", _fmt(rules.medicare.additional_withholding_threshold))
    limits.add_row("401(k) elective limit", _fmt(rules.retirement_401k.employee_elective_limit))
    limits.add_row("Dependent care FSA limit", _fmt(rules.fsa.dependent_care_limit))
    limits.add_row("Medical FSA limit", _fmt(rules.fsa.medical_limit))
    console.print(Panel(limits, title=f"{rules.year} Payroll Limits", border_style="dim"))


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"


def _fmt_signed(amount: float) -> str:
    """Format currency, red when negative."""
    if amount < 0:
        return f"[red]-${-amount:,.2f}[/red]"
    return _fmt(amount)
