"""payroll - Per-period batch processing.

Scope:
- Employee directory read contract and YAML-backed implementation (directory.py)
- Seniority derivation and period runs (period.py)
- Run records handed back for persistence (schemas.py)

Constraints:
- Uses engine/ for every calculation
- Never persists; the caller stores PayrollItem records

Usage:
    from bihpayroll.sdk.payroll import load_directory, process_period

    run = process_period(period_id=1, tenant_id=1, directory=load_directory())
"""

from .schemas import (
    ContractType,
    Tenant,
    Employee,
    Contract,
    PayrollPeriod,
    PayrollItem,
    EmployeeSummary,
    PeriodRunResult,
)
from .directory import (
    PayrollDirectory,
    InMemoryDirectory,
    parse_directory,
    load_directory,
)
from .period import seniority_hundredths, process_period

__all__ = [
    # Schemas
    "ContractType",
    "Tenant",
    "Employee",
    "Contract",
    "PayrollPeriod",
    "PayrollItem",
    "EmployeeSummary",
    "PeriodRunResult",
    # Directory
    "PayrollDirectory",
    "InMemoryDirectory",
    "parse_directory",
    "load_directory",
    # Processing
    "seniority_hundredths",
    "process_period",
]
