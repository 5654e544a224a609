"""Pydantic schemas for tax rules validation.

These schemas validate the tax-rules/*.yaml files and provide typed access
to tax parameters like SS wage cap, 401k limits, and tax brackets.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


FilingStatus = Literal["single", "mfj"]


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    up_to: Optional[float] = Field(default=None, gt=0, description="Upper bound (None for the top bracket)")
    rate: float = Field(..., ge=0, le=1, description="Marginal tax rate as decimal")

    @property
    def ceiling(self) -> float:
        """Upper bound with the top bracket treated as unbounded."""
        return float("inf") if self.up_to is None else self.up_to


class FilingStatusRules(BaseModel):
    """Tax rules for a filing status (MFJ, single)."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    standard_deduction: float = Field(..., ge=0)
    tax_brackets: List[TaxBracket]

    @field_validator("tax_brackets")
    @classmethod
    def check_bracket_table(cls, brackets: List[TaxBracket]) -> List[TaxBracket]:
        """Brackets must ascend, end unbounded, and never lower the marginal rate."""
        if not brackets:
            raise ValueError("tax_brackets must not be empty")

        errors = []
        for i, bracket in enumerate(brackets[:-1]):
            if bracket.up_to is None:
                errors.append(f"bracket {i} has no upper bound but is not the last bracket")
        if brackets[-1].up_to is not None:
            errors.append("last bracket must be unbounded (up_to: null)")

        bounded = [b.up_to for b in brackets if b.up_to is not None]
        for prev, cur in zip(bounded, bounded[1:]):
            if cur <= prev:
                errors.append(f"bracket ceilings must be strictly ascending ({prev} then {cur})")

        for prev, cur in zip(brackets, brackets[1:]):
            if cur.rate < prev.rate:
                errors.append(f"bracket rates must be non-decreasing ({prev.rate} then {cur.rate})")

        if errors:
            raise ValueError("; ".join(errors))
        return brackets


class SocialSecurityRules(BaseModel):
    """Social Security tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    wage_cap: float = Field(..., gt=0, description="SS wage base (max taxable)")
    tax_rate: float = Field(default=0.062, ge=0, le=1, description="SS tax rate (employee portion)")


class MedicareRules(BaseModel):
    """Medicare tax rules.

    Wages above the withholding threshold are taxed at additional_rate,
    which already includes the base rate (1.45% + 0.9% = 2.35%).
    """
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    tax_rate: float = Field(default=0.0145, ge=0, le=1)
    additional_rate: float = Field(default=0.0235, ge=0, le=1)
    additional_withholding_threshold: float = Field(default=200000, ge=0)


class Retirement401kRules(BaseModel):
    """401(k) contribution limits."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    employee_elective_limit: float = Field(..., ge=0, description="Pre-tax + Roth employee limit")


class FsaRules(BaseModel):
    """Flexible spending account limits."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    dependent_care_limit: float = Field(..., ge=0)
    medical_limit: float = Field(..., ge=0)


class TaxRules(BaseModel):
    """Complete payroll tax rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True, allow_inf_nan=False)

    year: int = Field(..., ge=1900, le=2200)
    mfj: FilingStatusRules
    single: Optional[FilingStatusRules] = None
    social_security: SocialSecurityRules
    medicare: MedicareRules = Field(default_factory=MedicareRules)
    retirement_401k: Retirement401kRules = Field(..., alias="401k")
    fsa: FsaRules

    @model_validator(mode="before")
    @classmethod
    def accept_married_key(cls, data):
        """Allow 'married' as the section name for MFJ rules."""
        if isinstance(data, dict) and "married" in data and "mfj" not in data:
            data = dict(data)
            data["mfj"] = data.pop("married")
        return data

    def for_status(self, filing_status: FilingStatus) -> FilingStatusRules:
        """Return the rules section for a filing status.

        Raises:
            KeyError: If the rules do not define the filing status
        """
        rules = self.single if filing_status == "single" else self.mfj
        if rules is None:
            raise KeyError(f"Tax rules for {self.year} have no '{filing_status}' section")
        return rules
