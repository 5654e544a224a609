"""Projection schemas.

Input (PayPeriodConfig) is validated once at construction; outputs
(PayPeriodResult, AnnualSummary, ProjectionResult) are frozen records.
All schemas use extra='forbid' so typos in plan files cause clear errors
rather than silent ignoring.
"""

from datetime import date
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..taxes.schemas import FilingStatus, TaxRules


MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

PremiumFrequency = Literal["monthly", "quarterly", "semi_annual", "annual"]
HousingType = Literal["rent", "own"]


class ConfigurationError(ValueError):
    """Raised when a projection configuration is invalid.

    Attributes:
        errors: One 'field: message' entry per problem found
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid configuration: {'; '.join(self.errors)}")

    @classmethod
    def from_validation_error(cls, e: ValidationError) -> "ConfigurationError":
        """Format pydantic errors for user-friendly output."""
        errors = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            msg = err["msg"]
            errors.append(f"{loc}: {msg}" if loc else msg)
        return cls(errors)


def parse_month(value) -> Optional[int]:
    """Parse a month given as 1-12, a digit string, or a month name.

    'None', '' and None mean no month. Unknown names are returned unchanged
    so the field's own validation reports them.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text == "" or text.lower() == "none":
            return None
        if text.isdigit():
            return int(text)
        for i, name in enumerate(MONTHS, start=1):
            if text.lower() in (name.lower(), name[:3].lower()):
                return i
    return value


# =============================================================================
# Input
# =============================================================================


class PreTaxElections(BaseModel):
    """Annual pretax benefit elections (Section 125)."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    health_insurance_annual: float = Field(default=0, ge=0, description="Health premium, not capped")
    dependent_care_fsa_annual: float = Field(default=0, ge=0, description="Dependent care FSA election")
    medical_fsa_annual: float = Field(default=0, ge=0, description="Medical/health FSA election")
    dental_annual: float = Field(default=0, ge=0, description="Dental premium, not capped")
    vision_annual: float = Field(default=0, ge=0, description="Vision premium, not capped")


class PostTaxDeductions(BaseModel):
    """Annual payroll deductions taken after tax."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    roth_401k_annual: float = Field(
        default=0, ge=0, description="Roth 401(k) election, shares the elective limit with pretax 401(k)"
    )
    disability_insurance_annual: float = Field(default=0, ge=0)


class MonthlyExpenses(BaseModel):
    """Recurring monthly fixed costs, paid half from each paycheck."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    housing: float = Field(default=0, ge=0, description="Rent or mortgage payment")
    utilities: float = Field(default=0, ge=0)
    healthcare: float = Field(default=0, ge=0, description="Out-of-pocket healthcare")
    household: float = Field(default=0, ge=0)
    discretionary: float = Field(default=0, ge=0)
    childcare: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)

    @property
    def total(self) -> float:
        return (
            self.housing + self.utilities + self.healthcare + self.household
            + self.discretionary + self.childcare + self.other
        )


class AnnualPropertyCosts(BaseModel):
    """Once-a-year property bills, charged to the last paycheck of the year.

    Only charged when the plan's housing_type is 'own'.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    property_tax: float = Field(default=0, ge=0)
    home_insurance: float = Field(default=0, ge=0)
    flood_insurance: float = Field(default=0, ge=0)

    @property
    def total(self) -> float:
        return self.property_tax + self.home_insurance + self.flood_insurance


class LifeInsurancePolicy(BaseModel):
    """A life insurance policy paid from take-home pay."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    annual_premium: float = Field(..., ge=0)
    frequency: PremiumFrequency = Field(default="monthly", description="How often the premium is billed")

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v):
        if isinstance(v, str):
            v = v.strip().lower().replace("-", "_")
            if v == "semiannual":
                v = "semi_annual"
        return v


class PayPeriodConfig(BaseModel):
    """Full-year pay plan for one earner on a semi-monthly schedule.

    Validated once at construction; the projection never re-checks it.
    Invalid input raises ConfigurationError whether the model is built
    with keyword arguments or through model_validate.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    tax_year: int = Field(default=2026, ge=1900, le=2200)
    filing_status: FilingStatus = Field(default="single", description="'single' or 'mfj' ('married' accepted)")
    annual_base_salary: float = Field(..., ge=0)
    annual_bonus: float = Field(default=0, ge=0)
    bonus_month: Optional[int] = Field(default=None, ge=1, le=12, description="Month the bonus is paid (1-12)")
    pretax: PreTaxElections = Field(default_factory=PreTaxElections)
    post_tax: PostTaxDeductions = Field(default_factory=PostTaxDeductions)
    extra_federal_withholding: float = Field(default=0, ge=0, description="Flat extra FIT per period")
    extra_state_withholding: float = Field(default=0, ge=0, description="Flat state withholding per period")
    fixed_expenses: MonthlyExpenses = Field(default_factory=MonthlyExpenses)
    housing_type: HousingType = Field(default="own", description="'rent' skips annual_property_costs")
    annual_property_costs: AnnualPropertyCosts = Field(default_factory=AnnualPropertyCosts)
    life_insurance: Tuple[LifeInsurancePolicy, ...] = Field(default=())
    target_pretax_retirement_percent: float = Field(
        default=0, ge=0, le=1, description="401(k) target as a fraction of gross (0.10 = 10%)"
    )
    tax_rules: TaxRules

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e

    @classmethod
    def model_validate(cls, obj, *args, **kwargs) -> "PayPeriodConfig":
        try:
            return super().model_validate(obj, *args, **kwargs)
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e

    @field_validator("filing_status", "housing_type", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "married":
                v = "mfj"
        return v

    @field_validator("bonus_month", mode="before")
    @classmethod
    def normalize_bonus_month(cls, v):
        return parse_month(v)

    @model_validator(mode="after")
    def check_consistency(self) -> "PayPeriodConfig":
        errors = []
        if self.annual_bonus > 0 and self.bonus_month is None:
            errors.append("bonus_month is required when annual_bonus is set")
        if self.tax_rules.year != self.tax_year:
            errors.append(f"tax_rules are for {self.tax_rules.year}, plan is for {self.tax_year}")
        try:
            self.tax_rules.for_status(self.filing_status)
        except KeyError as e:
            errors.append(str(e.args[0]))
        if errors:
            raise ValueError("; ".join(errors))
        return self

    @property
    def bonus_period_index(self) -> Optional[int]:
        """First pay period of the bonus month (periods pair up per month)."""
        if self.bonus_month is None or self.annual_bonus == 0:
            return None
        return 2 * (self.bonus_month - 1)


# =============================================================================
# Output
# =============================================================================


class YtdTotals(BaseModel):
    """Year-to-date accumulators, as of the end of a period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ss_wages: float = Field(default=0, ge=0, description="Wages taxed for Social Security")
    medicare_wages: float = Field(default=0, ge=0)
    retirement: float = Field(default=0, ge=0, description="Pretax 401(k) contributions")
    roth_401k: float = Field(default=0, ge=0)
    dependent_care_fsa: float = Field(default=0, ge=0)
    medical_fsa: float = Field(default=0, ge=0)

    def add(
        self,
        ss_wages: float = 0,
        medicare_wages: float = 0,
        retirement: float = 0,
        roth_401k: float = 0,
        dependent_care_fsa: float = 0,
        medical_fsa: float = 0,
    ) -> "YtdTotals":
        """Return new totals with this period's amounts added."""
        return YtdTotals(
            ss_wages=self.ss_wages + ss_wages,
            medicare_wages=self.medicare_wages + medicare_wages,
            retirement=self.retirement + retirement,
            roth_401k=self.roth_401k + roth_401k,
            dependent_care_fsa=self.dependent_care_fsa + dependent_care_fsa,
            medical_fsa=self.medical_fsa + medical_fsa,
        )

    @property
    def elective_deferrals(self) -> float:
        """Pretax and Roth 401(k) together, as counted against the elective limit."""
        return self.retirement + self.roth_401k


class PayPeriodResult(BaseModel):
    """Cash-flow waterfall for a single pay period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    period_index: int = Field(..., ge=0, le=23)
    pay_date: date
    month: int = Field(..., ge=1, le=12)

    # Earnings
    base_gross: float
    bonus: float
    gross_pay: float

    # Pretax deductions
    health_insurance: float
    dependent_care_fsa: float
    medical_fsa: float
    dental_insurance: float
    vision_insurance: float
    total_pretax: float

    # Federal income tax
    fit_taxable: float = Field(..., description="Gross minus pretax deductions")
    annualized_taxable: float = Field(..., description="Annualized taxable income used for the bracket walk")
    federal_withholding_base: float
    extra_federal_withholding: float
    federal_withholding: float
    state_withholding: float

    # FICA
    social_security_wages: float
    social_security_tax: float
    medicare_wages: float
    medicare_base_tax: float
    medicare_additional_tax: float
    medicare_tax: float

    total_tax_withheld: float

    # Post-tax deductions
    roth_401k: float
    disability_insurance: float
    total_post_tax: float

    # Expenses
    recurring_expenses: float = Field(..., description="Half of monthly fixed costs")
    life_insurance: float
    property_costs: float
    fixed_expenses: float

    # Allocation
    pre_investment_remainder: float
    retirement_contribution: float
    residual_savings: float = Field(..., description="Negative when the period runs a shortfall")

    ytd: YtdTotals

    @property
    def fica(self) -> float:
        return self.social_security_tax + self.medicare_tax


class AnnualSummary(BaseModel):
    """Totals across all pay periods."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_base_gross: float
    total_bonus: float
    total_gross: float
    total_health_insurance: float
    total_dependent_care_fsa: float
    total_medical_fsa: float
    total_dental_insurance: float
    total_vision_insurance: float
    total_pretax: float
    total_federal_withholding: float
    total_state_withholding: float
    total_social_security: float
    total_medicare_base: float
    total_medicare_additional: float
    total_medicare: float
    total_fica: float
    total_tax_withheld: float
    total_roth_401k: float
    total_disability_insurance: float
    total_post_tax: float
    total_recurring_expenses: float
    total_life_insurance: float
    total_property_costs: float
    total_fixed_expenses: float
    total_pre_investment_remainder: float
    total_retirement: float
    total_residual_savings: float
    net_take_home: float = Field(
        ..., description="Gross minus pretax, taxes, post-tax deductions and 401(k): fixed expenses plus residual savings"
    )
    effective_tax_rate: float = Field(..., description="(federal + FICA) / gross")
    shortfall_periods: List[int] = Field(default_factory=list)


class ProjectionResult(BaseModel):
    """Output of project(): the ordered ledger plus its summary."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: int
    filing_status: FilingStatus
    periods: List[PayPeriodResult] = Field(..., min_length=24, max_length=24)
    summary: AnnualSummary
    warnings: List[str] = Field(default_factory=list, description="Caps reached, elections over limits, shortfalls")
