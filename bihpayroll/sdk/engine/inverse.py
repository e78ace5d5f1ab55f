"""Net-to-gross solver.

Bisection over integer gross amounts around the forward calculation.
Assumes net pay is non-decreasing in gross (true for every calculator
given fixed non-negative rates) and that gross never exceeds twice the
net for any supported rate table.
"""

import logging
from datetime import date
from typing import Optional, Union

from ..rules import RuleStore, load_rule_store
from ..schemas import (
    CalculationInput,
    Jurisdiction,
    NetToGrossResult,
    PensionFundChoice,
    parse_jurisdiction,
)
from .calculators import round_div
from .forward import calculate_payroll

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 50
# Acceptable |net - target| in subunits (0.10 KM)
TOLERANCE = 10
DEFAULT_WORK_DAYS = 22


def _midpoint(low: int, high: int) -> int:
    return round_div(low + high, 2)


def solve_net_to_gross(
    target_net: int,
    jurisdiction: Union[Jurisdiction, str],
    tax_factor: int,
    effective_date: date,
    pension_fund_choice: Optional[PensionFundChoice] = None,
    store: Optional[RuleStore] = None,
) -> NetToGrossResult:
    """Find the gross whose net is within TOLERANCE of target_net.

    Non-convergence is not an error: after MAX_ITERATIONS the midpoint of
    the final bracket is returned with converged=False.

    Raises:
        UnknownJurisdictionError, MissingRuleError, MissingPensionChoiceError:
            Propagated from the forward calculation
    """
    jurisdiction = parse_jurisdiction(jurisdiction)
    if store is None:
        store = load_rule_store()

    def forward(gross: int):
        return calculate_payroll(
            CalculationInput(
                jurisdiction=jurisdiction,
                gross_amount=gross,
                work_days=DEFAULT_WORK_DAYS,
                seniority_hundredths=0,
                tax_factor=tax_factor,
                effective_date=effective_date,
                pension_fund_choice=pension_fund_choice,
            ),
            store,
        )

    low = target_net
    high = target_net * 2
    iterations = 0

    while iterations < MAX_ITERATIONS:
        mid = _midpoint(low, high)
        result = forward(mid)
        iterations += 1

        diff = result.net_amount - target_net
        if abs(diff) <= TOLERANCE:
            logger.debug(f"net {target_net} -> gross {mid} after {iterations} iteration(s)")
            return NetToGrossResult(
                target_net=target_net,
                gross_amount=mid,
                iterations=iterations,
                converged=True,
                result=result,
            )

        if diff > 0:
            high = mid - 1
        else:
            low = mid + 1

    gross = _midpoint(low, high)
    logger.warning(
        f"net-to-gross did not converge for {jurisdiction.value} net={target_net} "
        f"after {MAX_ITERATIONS} iterations; returning approximate gross {gross}"
    )
    return NetToGrossResult(
        target_net=target_net,
        gross_amount=gross,
        iterations=iterations,
        converged=False,
        result=forward(gross),
    )


def solve_gross_for_net(
    target_net: int,
    jurisdiction: Union[Jurisdiction, str],
    tax_factor: int,
    effective_date: date,
    pension_fund_choice: Optional[PensionFundChoice] = None,
    store: Optional[RuleStore] = None,
) -> int:
    """Gross amount that yields target_net (approximate if not converged)."""
    return solve_net_to_gross(
        target_net,
        jurisdiction,
        tax_factor,
        effective_date,
        pension_fund_choice=pension_fund_choice,
        store=store,
    ).gross_amount
