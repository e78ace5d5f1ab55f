"""Forward calculation: gross -> deductions, net, employer cost."""

import logging
from typing import Callable, Dict, Optional

from ..errors import UnknownJurisdictionError
from ..rules import RuleStore, load_rule_store
from ..schemas import CalculationInput, CalculationResult, Jurisdiction
from .calculators import calculate_bd, calculate_fbih, calculate_rs

logger = logging.getLogger(__name__)

Calculator = Callable[[CalculationInput, RuleStore], CalculationResult]

# Closed set - every Jurisdiction member must have an entry
CALCULATORS: Dict[Jurisdiction, Calculator] = {
    Jurisdiction.FBIH: calculate_fbih,
    Jurisdiction.RS: calculate_rs,
    Jurisdiction.BD: calculate_bd,
}


def calculate_payroll(
    calc_input: CalculationInput,
    store: Optional[RuleStore] = None,
) -> CalculationResult:
    """Calculate payroll for one employee.

    Args:
        calc_input: Calculation request
        store: Rule store; defaults to the configured rules file

    Returns:
        CalculationResult

    Raises:
        UnknownJurisdictionError: Tag outside FBIH/RS/BD
        MissingRuleError: A required rule is not valid on the effective date
        MissingPensionChoiceError: BD without a pension fund choice
    """
    calculator = CALCULATORS.get(calc_input.jurisdiction)
    if calculator is None:
        raise UnknownJurisdictionError(calc_input.jurisdiction)

    if store is None:
        store = load_rule_store()

    result = calculator(calc_input, store)
    logger.debug(
        f"{calc_input.jurisdiction.value} gross={calc_input.gross_amount} "
        f"@ {calc_input.effective_date}: net={result.net_amount} cost={result.total_cost}"
    )
    return result
