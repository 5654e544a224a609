"""Tests for the pay calendar and premium strategy table."""

from datetime import date

import pytest

from payplan.sdk.projection import (
    LifeInsurancePolicy,
    PREMIUM_SCHEDULES,
    payment_periods,
    premium_for_period,
    semimonthly_pay_dates,
)
from payplan.sdk.projection.schedule import adjust_for_weekend, month_of_period


class TestPayDates:
    """Semi-monthly dates: the 15th and month end, weekends moved to Friday."""

    def test_twenty_four_dates_in_order(self):
        dates = semimonthly_pay_dates(2026)

        assert len(dates) == 24
        assert dates == sorted(dates)
        assert all(d.year == 2026 for d in dates)
        assert all(d.weekday() < 5 for d in dates)

    def test_two_dates_per_month(self):
        dates = semimonthly_pay_dates(2026)

        for i, d in enumerate(dates):
            assert d.month == month_of_period(i)

    def test_known_2026_dates(self):
        dates = semimonthly_pay_dates(2026)

        assert dates[0] == date(2026, 1, 15)   # Thursday
        assert dates[1] == date(2026, 1, 30)   # Jan 31 is a Saturday
        assert dates[2] == date(2026, 2, 13)   # Feb 15 is a Sunday
        assert dates[3] == date(2026, 2, 27)   # Feb 28 is a Saturday
        assert dates[23] == date(2026, 12, 31)

    def test_leap_year_february(self):
        dates = semimonthly_pay_dates(2028)
        assert dates[3] == date(2028, 2, 29)  # Tuesday

    def test_adjust_for_weekend(self):
        assert adjust_for_weekend(date(2026, 3, 14)) == date(2026, 3, 13)  # Saturday
        assert adjust_for_weekend(date(2026, 3, 15)) == date(2026, 3, 13)  # Sunday
        assert adjust_for_weekend(date(2026, 3, 16)) == date(2026, 3, 16)


class TestPremiumSchedules:
    """Each billing frequency maps to a stride over the 24 periods."""

    @pytest.mark.parametrize("frequency,expected", [
        ("monthly", list(range(0, 24, 2))),
        ("quarterly", [0, 6, 12, 18]),
        ("semi_annual", [0, 12]),
        ("annual", [0]),
    ])
    def test_payment_periods(self, frequency, expected):
        assert payment_periods(frequency) == expected
        assert len(expected) == PREMIUM_SCHEDULES[frequency].payments_per_year

    @pytest.mark.parametrize("frequency", ["monthly", "quarterly", "semi_annual", "annual"])
    def test_premiums_sum_to_annual(self, frequency):
        policy = LifeInsurancePolicy(annual_premium=1200, frequency=frequency)

        total = sum(premium_for_period(policy, i) for i in range(24))

        assert total == pytest.approx(1200)

    def test_quarterly_amounts(self):
        policy = LifeInsurancePolicy(annual_premium=1200, frequency="quarterly")

        assert premium_for_period(policy, 0) == 300
        assert premium_for_period(policy, 1) == 0
        assert premium_for_period(policy, 6) == 300

    @pytest.mark.parametrize("raw", ["semi-annual", "semiannual", "Semi_Annual"])
    def test_frequency_aliases(self, raw):
        assert LifeInsurancePolicy(annual_premium=100, frequency=raw).frequency == "semi_annual"

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValueError):
            LifeInsurancePolicy(annual_premium=100, frequency="weekly")
