"""Pydantic schemas for payroll calculation data.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in rule files or calculation requests cause clear errors rather
than silent ignoring.

Monetary amounts are integers in the smallest currency subunit (pfenig).
Rates are integers scaled by 100 (1700 = 17.00%). Integer fields are strict
so a float never enters the arithmetic path.
"""

from datetime import date
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import UnknownJurisdictionError


# =============================================================================
# Enumerations
# =============================================================================


class Jurisdiction(str, Enum):
    """Legal/tax regime governing payroll rules."""

    FBIH = "FBIH"
    RS = "RS"
    BD = "BD"


class RuleType(str, Enum):
    """Informational rule category. Not used for arithmetic dispatch."""

    CONTRIBUTION = "CONTRIBUTION"
    TAX = "TAX"
    LIMIT = "LIMIT"
    DEDUCTION = "DEDUCTION"


class PensionFundChoice(str, Enum):
    """Pension fund selected by a BD employee."""

    FBIH_FUND = "FBIH_FUND"
    RS_FUND = "RS_FUND"


class FbihComponent(str, Enum):
    PIO_FROM = "PIO_FROM"
    HEALTH_FROM = "HEALTH_FROM"
    UNEMPLOYMENT_FROM = "UNEMPLOYMENT_FROM"
    PIO_ON = "PIO_ON"
    HEALTH_ON = "HEALTH_ON"
    UNEMPLOYMENT_ON = "UNEMPLOYMENT_ON"


class RsComponent(str, Enum):
    PIO = "PIO"
    HEALTH = "HEALTH"
    CHILD_PROTECTION = "CHILD_PROTECTION"
    UNEMPLOYMENT = "UNEMPLOYMENT"
    SENIORITY = "SENIORITY"


class BdComponent(str, Enum):
    PIO = "PIO"
    HEALTH = "HEALTH"
    UNEMPLOYMENT = "UNEMPLOYMENT"


# Breakdown keys each jurisdiction must produce, no more and no less
COMPONENTS_BY_JURISDICTION = {
    Jurisdiction.FBIH: frozenset(c.value for c in FbihComponent),
    Jurisdiction.RS: frozenset(c.value for c in RsComponent),
    Jurisdiction.BD: frozenset(c.value for c in BdComponent),
}


def parse_jurisdiction(value) -> Jurisdiction:
    """Convert a raw tag to a Jurisdiction.

    Raises:
        UnknownJurisdictionError: If the tag is not FBIH, RS or BD
    """
    if isinstance(value, Jurisdiction):
        return value
    try:
        return Jurisdiction(str(value).upper())
    except ValueError:
        raise UnknownJurisdictionError(value) from None


# =============================================================================
# Tax rules
# =============================================================================


class TaxRule(BaseModel):
    """One version of a rate or limit, valid over [valid_from, valid_to]."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    jurisdiction: Jurisdiction = Field(..., description="Jurisdiction code")
    rule_code: str = Field(..., min_length=1, description="Mnemonic, e.g. 'PIO_FROM'")
    rule_type: RuleType = Field(..., description="Informational category")
    rate_value: int = Field(
        ..., strict=True,
        description="Rate x100 (1700 = 17%) or amount in subunits for DEDUCTION/LIMIT",
    )
    valid_from: date = Field(..., description="First day the rule applies")
    valid_to: Optional[date] = Field(
        default=None, description="Last day the rule applies (None = open-ended)"
    )
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_interval(self) -> "TaxRule":
        if self.valid_to is not None and self.valid_to < self.valid_from:
            raise ValueError(
                f"{self.jurisdiction.value}/{self.rule_code}: valid_to "
                f"{self.valid_to} precedes valid_from {self.valid_from}"
            )
        return self

    def is_valid_on(self, as_of: date) -> bool:
        """True if as_of falls inside the validity interval (inclusive)."""
        if self.valid_from > as_of:
            return False
        return self.valid_to is None or self.valid_to >= as_of


# =============================================================================
# Calculation input / output
# =============================================================================


class CalculationInput(BaseModel):
    """Single-employee calculation request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    jurisdiction: Jurisdiction
    gross_amount: int = Field(..., strict=True, description="Gross in subunits")
    work_days: int = Field(default=22, strict=True, description="Informational passthrough")
    seniority_hundredths: int = Field(
        default=0, strict=True, ge=0, description="Seniority in hundredths of a year"
    )
    tax_factor: int = Field(
        default=100, strict=True, ge=0, description="Personal deduction multiplier x100"
    )
    effective_date: date = Field(..., description="Date used for rule resolution")
    pension_fund_choice: Optional[PensionFundChoice] = Field(
        default=None, description="Required for BD only"
    )

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def coerce_jurisdiction(cls, v):
        return parse_jurisdiction(v)


class CalculationResult(BaseModel):
    """Calculated amounts for one employee. Internally coherent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    jurisdiction: Jurisdiction
    calculated_gross: int = Field(..., description="Gross after seniority (RS only)")
    contributions_from: int = Field(..., description="Withheld from salary")
    contributions_on: int = Field(..., description="Employer add-on contributions")
    taxable_base: int = Field(..., ge=0)
    tax_amount: int
    net_amount: int
    total_cost: int = Field(..., description="Total employer cost")
    contributions_breakdown: Dict[str, int]
    allowances_breakdown: Dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_breakdown_keys(self) -> "CalculationResult":
        expected = COMPONENTS_BY_JURISDICTION[self.jurisdiction]
        actual = set(self.contributions_breakdown)
        if actual != expected:
            raise ValueError(
                f"{self.jurisdiction.value} breakdown keys {sorted(actual)} "
                f"!= expected {sorted(expected)}"
            )
        return self

    def to_dict(self) -> dict:
        """Plain dict with enum values, suitable for JSON output."""
        return self.model_dump(mode="json")


class NetToGrossResult(BaseModel):
    """Outcome of a net-to-gross solve.

    When converged is False the gross is a best-effort approximation whose
    net may be outside the tolerance.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_net: int
    gross_amount: int
    iterations: int
    converged: bool
    result: CalculationResult = Field(..., description="Forward calculation at gross_amount")
