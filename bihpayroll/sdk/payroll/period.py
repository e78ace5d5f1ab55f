"""Monthly payroll run over all active employees of a tenant.

The processor derives per-employee inputs (active contract, accrued
seniority), runs the forward calculation and hands back one PayrollItem
per employee. It does not persist anything; pass a persist callback or
store PeriodRunResult.items yourself.

Partial-failure policy: employees without an active contract are skipped;
any calculation error aborts the whole run.
"""

import logging
from datetime import date
from typing import Callable, Optional

from ..engine import calculate_payroll
from ..errors import OrganizationNotFoundError, PeriodNotFoundError
from ..rules import RuleStore, load_rule_store
from ..schemas import CalculationInput
from .directory import PayrollDirectory
from .schemas import EmployeeSummary, PayrollItem, PeriodRunResult

logger = logging.getLogger(__name__)

# Approximation used for tenure: leap days are ignored
DAYS_PER_YEAR = 365
DEFAULT_WORK_DAYS = 22


def seniority_hundredths(tenure_start: date, previous_years: int, as_of: date) -> int:
    """Seniority in hundredths of a year.

    Counts whole 365-day years between tenure_start and as_of, adds
    previously accrued years. A tenure start after as_of counts as zero.

    Partial years are dropped, not rounded: 4 years 6 months of service
    gives 400, not 450, so RS seniority pay will not match systems that
    prorate partial years.

    Example:
        seniority_hundredths(date(2019, 1, 1), 2, date(2024, 1, 1))  # -> 700
    """
    elapsed_days = max(0, (as_of - tenure_start).days)
    whole_years = elapsed_days // DAYS_PER_YEAR
    return (whole_years + previous_years) * 100


def process_period(
    period_id: int,
    tenant_id: int,
    directory: PayrollDirectory,
    store: Optional[RuleStore] = None,
    persist: Optional[Callable[[PayrollItem], None]] = None,
) -> PeriodRunResult:
    """Calculate payroll for every active employee of a tenant in a period.

    Args:
        period_id: Payroll period to process
        tenant_id: Tenant whose employees are processed
        directory: Source of tenants, periods, employees, contracts
        store: Rule store; defaults to the configured rules file
        persist: Optional callback invoked with each PayrollItem

    Returns:
        PeriodRunResult with count, per-employee summaries and full items

    Raises:
        PeriodNotFoundError: Unknown period, or period of another tenant
        OrganizationNotFoundError: Unknown tenant
        PayrollError: Any calculation failure (aborts the run)
    """
    period = directory.get_period(period_id)
    if period is None:
        raise PeriodNotFoundError(period_id)
    if period.tenant_id != tenant_id:
        logger.warning(
            f"period {period_id} belongs to tenant {period.tenant_id}, not {tenant_id}"
        )
        raise PeriodNotFoundError(period_id)

    tenant = directory.get_tenant(tenant_id)
    if tenant is None:
        raise OrganizationNotFoundError(tenant_id)

    if store is None:
        store = load_rule_store()

    effective_date = period.effective_date
    items = []
    summaries = []
    skipped = []

    for employee in directory.list_active_employees(tenant_id):
        contract = directory.get_active_contract(employee.id)
        if contract is None:
            logger.debug(f"employee {employee.id}: no active contract, skipping")
            skipped.append(employee.id)
            continue

        seniority = seniority_hundredths(
            contract.tenure_start_date, contract.previous_tenure_years, effective_date
        )
        result = calculate_payroll(
            CalculationInput(
                jurisdiction=tenant.jurisdiction,
                gross_amount=contract.gross_amount,
                work_days=DEFAULT_WORK_DAYS,
                seniority_hundredths=seniority,
                tax_factor=employee.tax_factor,
                effective_date=effective_date,
                pension_fund_choice=contract.pension_fund_choice,
            ),
            store,
        )

        item = PayrollItem(
            period_id=period.id,
            employee_id=employee.id,
            contract_id=contract.id,
            input_gross=contract.gross_amount,
            work_days=DEFAULT_WORK_DAYS,
            seniority_hundredths=seniority,
            result=result,
        )
        if persist is not None:
            persist(item)

        items.append(item)
        summaries.append(
            EmployeeSummary(
                employee_id=employee.id,
                employee_name=employee.display_name,
                net_amount=result.net_amount,
            )
        )
        logger.debug(f"employee {employee.id}: seniority={seniority} net={result.net_amount}")

    logger.info(
        f"period {period.id} ({period.year}-{period.month:02d}) tenant {tenant.id}: "
        f"processed {len(items)}, skipped {len(skipped)}"
    )
    return PeriodRunResult(
        period_id=period.id,
        tenant_id=tenant.id,
        effective_date=effective_date,
        processed_count=len(items),
        skipped_employee_ids=skipped,
        results=summaries,
        items=items,
    )
