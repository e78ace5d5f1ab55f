"""engine - Payroll calculation for FBiH, RS and Brcko District.

Scope:
- Jurisdiction calculators (calculators.py)
- Dispatch on jurisdiction tag (forward.py)
- Net-to-gross bisection solver (inverse.py)

Constraints:
- Pure calculation - rules come in through a RuleStore, results go out
- Integer arithmetic only, one rounding per line item
- No persistence; callers store results

Usage:
    from bihpayroll.sdk.engine import calculate_payroll, solve_gross_for_net

    result = calculate_payroll(CalculationInput(
        jurisdiction="FBIH", gross_amount=200000, effective_date=date(2024, 1, 1),
    ), store)
    gross = solve_gross_for_net(150000, "RS", 100, date(2024, 1, 1), store=store)
"""

from .calculators import (
    round_div,
    apply_rate,
    personal_deduction,
    seniority_increase,
    calculate_fbih,
    calculate_rs,
    calculate_bd,
)
from .forward import CALCULATORS, calculate_payroll
from .inverse import (
    MAX_ITERATIONS,
    TOLERANCE,
    solve_net_to_gross,
    solve_gross_for_net,
)

__all__ = [
    # Calculators
    "round_div",
    "apply_rate",
    "personal_deduction",
    "seniority_increase",
    "calculate_fbih",
    "calculate_rs",
    "calculate_bd",
    # Dispatch
    "CALCULATORS",
    "calculate_payroll",
    # Inverse
    "MAX_ITERATIONS",
    "TOLERANCE",
    "solve_net_to_gross",
    "solve_gross_for_net",
]
