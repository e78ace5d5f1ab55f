"""Payroll run schemas.

Read side: tenants, employees, contracts and pay periods as supplied by the
surrounding service. Write side: one PayrollItem per processed employee,
handed back to the caller for persistence.
"""

import json
from datetime import date
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..schemas import CalculationResult, Jurisdiction, PensionFundChoice


class ContractType(str, Enum):
    """Employment contract type. Informational only."""

    FIXED_TERM = "FIXED_TERM"
    PERMANENT = "PERMANENT"


class Tenant(BaseModel):
    """An employer organization; its jurisdiction drives the calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    name: str
    jurisdiction: Jurisdiction
    tax_id: Optional[str] = Field(default=None, description="JIB/PIB")


class Employee(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    tenant_id: int
    first_name: str
    last_name: str
    tax_factor: int = Field(default=100, strict=True, ge=0, description="100 = 1.0")
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Contract(BaseModel):
    """Employment contract. Amounts in subunits."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    employee_id: int
    contract_type: ContractType = ContractType.PERMANENT
    gross_amount: int = Field(..., strict=True, ge=0)
    start_date: date
    end_date: Optional[date] = None
    pension_fund_choice: Optional[PensionFundChoice] = None
    tenure_start_date: date = Field(..., description="Start of service counted for seniority")
    previous_tenure_years: int = Field(default=0, strict=True, ge=0)
    is_active: bool = True


class PayrollPeriod(BaseModel):
    """A monthly payroll run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    tenant_id: int
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900)
    status: Literal["DRAFT", "APPROVED", "LOCKED"] = "DRAFT"

    @property
    def effective_date(self) -> date:
        """First calendar day of the period month."""
        return date(self.year, self.month, 1)


class PayrollItem(BaseModel):
    """Full calculation record for one employee in one period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    period_id: int
    employee_id: int
    contract_id: int
    input_gross: int
    work_days: int
    seniority_hundredths: int
    result: CalculationResult

    def to_record(self) -> dict:
        """Flat record for persistence; breakdowns serialized as JSON."""
        r = self.result
        return {
            "period_id": self.period_id,
            "employee_id": self.employee_id,
            "contract_id": self.contract_id,
            "input_gross": self.input_gross,
            "work_days": self.work_days,
            "seniority_hundredths": self.seniority_hundredths,
            "calculated_gross": r.calculated_gross,
            "contributions_from": r.contributions_from,
            "contributions_on": r.contributions_on,
            "taxable_base": r.taxable_base,
            "tax_amount": r.tax_amount,
            "net_amount": r.net_amount,
            "total_cost": r.total_cost,
            "contributions_breakdown": json.dumps(r.contributions_breakdown, sort_keys=True),
            "allowances_breakdown": json.dumps(r.allowances_breakdown, sort_keys=True),
        }


class EmployeeSummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: int
    employee_name: str
    net_amount: int


class PeriodRunResult(BaseModel):
    """Outcome of process_period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    period_id: int
    tenant_id: int
    effective_date: date
    processed_count: int
    skipped_employee_ids: List[int] = Field(
        default_factory=list, description="Active employees without an active contract"
    )
    results: List[EmployeeSummary] = Field(default_factory=list)
    items: List[PayrollItem] = Field(default_factory=list)

    def totals(self) -> Dict[str, int]:
        """Sum of key amounts across all items."""
        fields = ("calculated_gross", "contributions_from", "contributions_on",
                  "tax_amount", "net_amount", "total_cost")
        return {f: sum(getattr(i.result, f) for i in self.items) for f in fields}
