"""Tests for tax rules loading and bracket-table validation.

Uses an isolated config directory via tmp_path and PAY_PLAN_CONFIG_PATH
so user overrides never touch a real configuration.
"""

import pytest
import yaml
from pathlib import Path

from payplan.sdk.taxes import (
    FilingStatusRules,
    TaxRules,
    TaxRulesInvalidError,
    TaxRulesNotFoundError,
    get_available_years,
    load_tax_rules,
    parse_tax_rules,
)


# === FIXTURES ===


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAY_PLAN_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir}


def write_tax_rules(config_dir: Path, year: int, rules: dict):
    """Write tax rules YAML file to the override directory."""
    tax_rules_dir = config_dir / "tax-rules"
    tax_rules_dir.mkdir(exist_ok=True)
    (tax_rules_dir / f"{year}.yaml").write_text(yaml.dump(rules))


def minimal_rules(year: int = 2030) -> dict:
    return {
        "year": year,
        "mfj": {
            "standard_deduction": 40000,
            "tax_brackets": [
                {"up_to": 30000, "rate": 0.10},
                {"up_to": None, "rate": 0.20},
            ],
        },
        "social_security": {"wage_cap": 200000, "tax_rate": 0.062},
        "401k": {"employee_elective_limit": 27000},
        "fsa": {"dependent_care_limit": 7500, "medical_limit": 3600},
    }


# === BUNDLED RULES ===


class TestBundledRules:
    """The package ships rules for 2025 and 2026."""

    def test_2026_values(self, isolated_env):
        rules = load_tax_rules(2026)

        assert rules.year == 2026
        assert rules.social_security.wage_cap == 184500
        assert rules.retirement_401k.employee_elective_limit == 24500
        assert rules.for_status("single").standard_deduction == 16100
        assert rules.for_status("mfj").standard_deduction == 32200
        assert rules.medicare.additional_rate == pytest.approx(0.0235)
        assert rules.for_status("single").tax_brackets[-1].up_to is None

    def test_2025_values(self, isolated_env):
        rules = load_tax_rules("2025")

        assert rules.social_security.wage_cap == 176100
        assert rules.for_status("single").tax_brackets[0].up_to == 11925

    def test_available_years(self, isolated_env):
        years = get_available_years()
        assert 2025 in years and 2026 in years
        assert years == sorted(years, reverse=True)

    def test_missing_year(self, isolated_env):
        with pytest.raises(TaxRulesNotFoundError, match="1999"):
            load_tax_rules(1999)


# === USER OVERRIDES ===


class TestOverrides:
    """Rules in <config dir>/tax-rules take precedence."""

    def test_override_new_year(self, isolated_env):
        write_tax_rules(isolated_env["config_dir"], 2030, minimal_rules(2030))

        rules = load_tax_rules(2030)

        assert rules.retirement_401k.employee_elective_limit == 27000
        assert rules.single is None
        assert rules.medicare.tax_rate == pytest.approx(0.0145)  # default
        assert 2030 in get_available_years()

    def test_override_replaces_bundled(self, isolated_env):
        write_tax_rules(isolated_env["config_dir"], 2026, minimal_rules(2026))

        assert load_tax_rules(2026).social_security.wage_cap == 200000

    def test_year_mismatch_rejected(self, isolated_env):
        write_tax_rules(isolated_env["config_dir"], 2031, minimal_rules(2030))

        with pytest.raises(TaxRulesInvalidError, match="declares year 2030"):
            load_tax_rules(2031)

    def test_married_key_alias(self, isolated_env):
        data = minimal_rules()
        data["married"] = data.pop("mfj")

        rules = parse_tax_rules(data)

        assert rules.for_status("mfj").standard_deduction == 40000

    def test_missing_status_section(self):
        rules = parse_tax_rules(minimal_rules())

        with pytest.raises(KeyError, match="single"):
            rules.for_status("single")


# === BRACKET TABLE VALIDATION ===


class TestBracketValidation:
    """Malformed bracket tables fail when the rules are parsed."""

    def _brackets(self, brackets):
        return {"standard_deduction": 0, "tax_brackets": brackets}

    def test_valid_table(self):
        rules = FilingStatusRules.model_validate(self._brackets([
            {"up_to": 10000, "rate": 0.10},
            {"up_to": 40000, "rate": 0.10},
            {"up_to": None, "rate": 0.30},
        ]))
        assert len(rules.tax_brackets) == 3

    @pytest.mark.parametrize("brackets,message", [
        ([], "must not be empty"),
        ([{"up_to": 40000, "rate": 0.10}, {"up_to": 10000, "rate": 0.20}, {"up_to": None, "rate": 0.30}],
         "strictly ascending"),
        ([{"up_to": 10000, "rate": 0.20}, {"up_to": None, "rate": 0.10}], "non-decreasing"),
        ([{"up_to": 10000, "rate": 0.10}, {"up_to": 20000, "rate": 0.20}], "must be unbounded"),
        ([{"up_to": None, "rate": 0.10}, {"up_to": None, "rate": 0.20}], "not the last bracket"),
        ([{"up_to": None, "rate": 1.5}], "less than or equal to 1"),
    ])
    def test_invalid_tables(self, brackets, message):
        data = minimal_rules()
        data["mfj"] = self._brackets(brackets)

        with pytest.raises(TaxRulesInvalidError, match=message):
            parse_tax_rules(data)

    def test_invalid_file_names_source(self, isolated_env):
        data = minimal_rules(2032)
        data["social_security"]["wage_cap"] = -1
        write_tax_rules(isolated_env["config_dir"], 2032, data)

        with pytest.raises(TaxRulesInvalidError, match=r"2032\.yaml.*social_security\.wage_cap"):
            load_tax_rules(2032)

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_amounts_rejected(self, value):
        data = minimal_rules()
        data["social_security"]["wage_cap"] = value

        with pytest.raises(TaxRulesInvalidError, match="social_security.wage_cap.*finite number"):
            parse_tax_rules(data)


def test_rules_are_immutable():
    rules = TaxRules.model_validate(minimal_rules())
    with pytest.raises(ValueError):
        rules.year = 2040
