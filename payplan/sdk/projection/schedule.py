"""Pay calendar and premium scheduling.

Semi-monthly schedule: 24 periods, two per month, paid on the 15th and the
last day of the month (moved back to Friday when either falls on a weekend).
Period 2k is the first paycheck of month k+1, period 2k+1 the second.
"""

import calendar
from datetime import date, timedelta
from typing import Dict, List, NamedTuple

from ..taxes.withholding import PERIODS_PER_YEAR
from .schemas import LifeInsurancePolicy


class PremiumSchedule(NamedTuple):
    """How a billing frequency maps onto pay periods."""
    stride: int  # periods between payments, first payment on period 0
    payments_per_year: int


PREMIUM_SCHEDULES: Dict[str, PremiumSchedule] = {
    "monthly": PremiumSchedule(stride=2, payments_per_year=12),
    "quarterly": PremiumSchedule(stride=6, payments_per_year=4),
    "semi_annual": PremiumSchedule(stride=12, payments_per_year=2),
    "annual": PremiumSchedule(stride=24, payments_per_year=1),
}


def adjust_for_weekend(pay_date: date) -> date:
    """Move a Saturday or Sunday pay date back to the preceding Friday."""
    weekday = pay_date.weekday()
    if weekday == 5:
        return pay_date - timedelta(days=1)
    if weekday == 6:
        return pay_date - timedelta(days=2)
    return pay_date


def semimonthly_pay_dates(year: int) -> List[date]:
    """Generate the 24 pay dates of a year in period order."""
    pay_dates = []
    for month in range(1, 13):
        last_day = calendar.monthrange(year, month)[1]
        pay_dates.append(adjust_for_weekend(date(year, month, 15)))
        pay_dates.append(adjust_for_weekend(date(year, month, last_day)))
    return pay_dates


def month_of_period(period_index: int) -> int:
    """Calendar month (1-12) a period falls in."""
    return period_index // 2 + 1


def premium_for_period(policy: LifeInsurancePolicy, period_index: int) -> float:
    """Premium due from a period's paycheck under the policy's frequency."""
    schedule = PREMIUM_SCHEDULES[policy.frequency]
    if period_index % schedule.stride != 0:
        return 0.0
    return policy.annual_premium / schedule.payments_per_year


def payment_periods(frequency: str) -> List[int]:
    """All period indexes a premium of the given frequency is paid on."""
    schedule = PREMIUM_SCHEDULES[frequency]
    return list(range(0, PERIODS_PER_YEAR, schedule.stride))
