"""Tests for per-period withholding calculations.

Tests:
1. Bracket walk matches the published base-tax + marginal-rate formula
   at every bracket boundary and +/- $1 around it
2. Annualized FIT withholding, including the zero-tax zone
3. Social Security remaining-room cap
4. Medicare split at the additional-Medicare threshold
"""

import pytest

from payplan.sdk.taxes import (
    FilingStatusRules,
    MedicareRules,
    SocialSecurityRules,
    TaxBracket,
    calculate_federal_income_tax,
    calc_fit_withholding,
    calc_medicare_withholding,
    calc_ss_withholding,
    remaining_room,
)


# === TEST CONSTANTS ===

# 2026 single brackets (IRS Rev. Proc. 2025-32)
SINGLE_2026 = [
    TaxBracket(up_to=12400, rate=0.10),
    TaxBracket(up_to=50400, rate=0.12),
    TaxBracket(up_to=105700, rate=0.22),
    TaxBracket(up_to=201775, rate=0.24),
    TaxBracket(up_to=256225, rate=0.32),
    TaxBracket(up_to=640600, rate=0.35),
    TaxBracket(up_to=None, rate=0.37),
]

# Published rate schedule: (over, base_tax, marginal_rate)
PUBLISHED_SINGLE_2026 = [
    (0, 0, 0.10),
    (12400, 1240, 0.12),
    (50400, 5800, 0.22),
    (105700, 17966, 0.24),
    (201775, 41024, 0.32),
    (256225, 58448, 0.35),
    (640600, 192979.25, 0.37),
]


def published_tax(income: float) -> float:
    """Tax from the published schedule: base tax plus rate on the excess."""
    if income <= 0:
        return 0.0
    over, base, rate = PUBLISHED_SINGLE_2026[0]
    for row in PUBLISHED_SINGLE_2026:
        if income > row[0]:
            over, base, rate = row
    return base + (income - over) * rate


BOUNDARY_INCOMES = sorted({
    b + delta
    for b in [12400, 50400, 105700, 201775, 256225, 640600]
    for delta in (-1, 0, 1)
})


# === BRACKET WALK ===


class TestBracketWalk:
    """calculate_federal_income_tax against the published schedule."""

    @pytest.mark.parametrize("income", BOUNDARY_INCOMES)
    def test_matches_published_formula_at_boundaries(self, income):
        assert calculate_federal_income_tax(income, SINGLE_2026) == pytest.approx(published_tax(income), abs=0.005)

    def test_zero_and_negative_income_owe_nothing(self):
        assert calculate_federal_income_tax(0, SINGLE_2026) == 0
        assert calculate_federal_income_tax(-5000, SINGLE_2026) == 0

    def test_top_bracket_is_unbounded(self):
        """Income far above the last ceiling is fully taxed at the top rate."""
        income = 5_000_000
        expected = 192979.25 + (income - 640600) * 0.37
        assert calculate_federal_income_tax(income, SINGLE_2026) == pytest.approx(expected)

    def test_example_taxable_income(self):
        """$105,000 taxable: 10% + 12% brackets in full, then 22% on $54,600."""
        assert calculate_federal_income_tax(105000, SINGLE_2026) == pytest.approx(17812.00)


# === FIT WITHHOLDING ===


class TestFitWithholding:
    """Annualized-bracket withholding for a single period."""

    @pytest.fixture
    def single_rules(self):
        return FilingStatusRules(standard_deduction=15000, tax_brackets=SINGLE_2026)

    def test_annualizes_and_divides_back(self, single_rules):
        fit = calc_fit_withholding(gross=5000, pretax=0, status_rules=single_rules)

        assert fit["fit_taxable"] == 5000
        assert fit["annualized_taxable"] == pytest.approx(105000)
        assert fit["base"] == pytest.approx(17812.00 / 24)
        assert fit["withheld"] == pytest.approx(fit["base"])

    def test_pretax_reduces_taxable(self, single_rules):
        fit = calc_fit_withholding(gross=5000, pretax=500, status_rules=single_rules)

        assert fit["fit_taxable"] == 4500
        assert fit["annualized_taxable"] == pytest.approx(93000)

    def test_extra_withholding_added_flat(self, single_rules):
        fit = calc_fit_withholding(gross=5000, pretax=0, status_rules=single_rules, extra_withholding=50)

        assert fit["extra"] == 50
        assert fit["withheld"] == pytest.approx(fit["base"] + 50)

    def test_below_standard_deduction_withholds_nothing(self, single_rules):
        """Pay under the per-period share of the deduction is in the zero zone."""
        fit = calc_fit_withholding(gross=500, pretax=0, status_rules=single_rules, extra_withholding=10)

        assert fit["annualized_taxable"] < 0
        assert fit["base"] == 0
        assert fit["withheld"] == 10


# === SOCIAL SECURITY ===


class TestSocialSecurity:
    """SS tax stops at the wage base."""

    RULES = SocialSecurityRules(wage_cap=176100, tax_rate=0.062)

    def test_under_cap_fully_taxed(self):
        ss = calc_ss_withholding(10000, ytd_ss_wages=0, rules=self.RULES)

        assert ss["taxable"] == 10000
        assert ss["withheld"] == pytest.approx(620.00)
        assert ss["capped"] is False

    def test_crossing_cap_taxes_only_remaining_room(self):
        ss = calc_ss_withholding(10000, ytd_ss_wages=170000, rules=self.RULES)

        assert ss["taxable"] == pytest.approx(6100)
        assert ss["withheld"] == pytest.approx(6100 * 0.062)
        assert ss["capped"] is True

    def test_past_cap_withholds_nothing(self):
        ss = calc_ss_withholding(10000, ytd_ss_wages=176100, rules=self.RULES)

        assert ss["taxable"] == 0
        assert ss["withheld"] == 0


# === MEDICARE ===


class TestMedicare:
    """Medicare split at the additional-Medicare threshold."""

    RULES = MedicareRules(tax_rate=0.0145, additional_rate=0.0235, additional_withholding_threshold=200000)

    def test_under_threshold_base_rate_only(self):
        med = calc_medicare_withholding(10000, ytd_medicare_wages=0, rules=self.RULES)

        assert med["base_withheld"] == pytest.approx(145.00)
        assert med["additional_withheld"] == 0
        assert med["withheld"] == pytest.approx(145.00)

    def test_crossing_threshold_splits_wages(self):
        med = calc_medicare_withholding(10000, ytd_medicare_wages=196000, rules=self.RULES)

        assert med["base_wages"] == pytest.approx(4000)
        assert med["additional_wages"] == pytest.approx(6000)
        assert med["base_withheld"] == pytest.approx(4000 * 0.0145)
        assert med["additional_withheld"] == pytest.approx(6000 * 0.0235)
        assert med["over_threshold"] is True

    def test_already_over_threshold_all_additional(self):
        med = calc_medicare_withholding(10000, ytd_medicare_wages=210000, rules=self.RULES)

        assert med["base_withheld"] == 0
        assert med["additional_withheld"] == pytest.approx(235.00)


def test_remaining_room_never_negative():
    assert remaining_room(5000, 4000) == 1000
    assert remaining_room(5000, 5000) == 0
    assert remaining_room(5000, 6000) == 0
