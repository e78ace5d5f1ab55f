"""Jurisdiction-specific payroll calculators.

Each calculator is a pure function of (input, rule store) returning a
CalculationResult. All arithmetic is integer: a line item is computed as
one multiplication followed by one rounded division, and line items are
summed after rounding, never rounded again.

Rounding is half-up (x.5 goes toward +infinity), matching the statutory
payroll software these figures are reconciled against.
"""

from datetime import date

from ..errors import MissingPensionChoiceError
from ..rules import RuleStore, require_rule
from ..schemas import (
    BdComponent,
    CalculationInput,
    CalculationResult,
    FbihComponent,
    Jurisdiction,
    PensionFundChoice,
    RsComponent,
)

# Rates are stored as percent x100
RATE_SCALE = 10000
# Tax factor is stored as multiplier x100
TAX_FACTOR_SCALE = 100
# hundredths of a year (100) x rate scale (10000)
SENIORITY_SCALE = 1_000_000

INCOME_TAX = "INCOME_TAX"
PERSONAL_DEDUCTION = "PERSONAL_DEDUCTION"
SENIORITY_RATE = "SENIORITY_RATE"

FBIH_FROM_CODES = (FbihComponent.PIO_FROM, FbihComponent.HEALTH_FROM, FbihComponent.UNEMPLOYMENT_FROM)
FBIH_ON_CODES = (FbihComponent.PIO_ON, FbihComponent.HEALTH_ON, FbihComponent.UNEMPLOYMENT_ON)
RS_CONTRIBUTION_CODES = (
    RsComponent.PIO,
    RsComponent.HEALTH,
    RsComponent.CHILD_PROTECTION,
    RsComponent.UNEMPLOYMENT,
)

# BD pension is paid into the fund of the employee's choosing
PENSION_FUND_RULES = {
    PensionFundChoice.FBIH_FUND: (Jurisdiction.FBIH, FbihComponent.PIO_FROM.value),
    PensionFundChoice.RS_FUND: (Jurisdiction.RS, RsComponent.PIO.value),
}


def round_div(numerator: int, divisor: int) -> int:
    """Divide and round half-up using integers only.

    Example: round_div(5, 2) -> 3, round_div(-5, 2) -> -2
    """
    return (2 * numerator + divisor) // (2 * divisor)


def apply_rate(amount: int, rate_value: int) -> int:
    """Amount x rate (percent x100), rounded once."""
    return round_div(amount * rate_value, RATE_SCALE)


def personal_deduction(deduction_base: int, tax_factor: int) -> int:
    """Personal deduction scaled by the employee's tax factor (100 = 1.0)."""
    return round_div(deduction_base * tax_factor, TAX_FACTOR_SCALE)


def seniority_increase(gross: int, seniority_hundredths: int, seniority_rate: int) -> int:
    """Tenure-based pay increase: gross x years x rate in a single division."""
    return round_div(gross * seniority_hundredths * seniority_rate, SENIORITY_SCALE)


def _income_tax(base: int, contributions: int, deduction: int, tax_rate: int):
    """Return (taxable_base, tax_amount); taxable base is floored at zero."""
    taxable_base = max(0, base - contributions - deduction)
    return taxable_base, apply_rate(taxable_base, tax_rate)


def _codes(components) -> list:
    return [c.value for c in components]


def calculate_fbih(calc_input: CalculationInput, store: RuleStore) -> CalculationResult:
    """FBiH: contributions from and on salary, flat income tax.

    Rate reforms are handled purely by rule validity intervals.
    """
    gross = calc_input.gross_amount
    rules = store.resolve_many(
        Jurisdiction.FBIH,
        _codes(FBIH_FROM_CODES) + _codes(FBIH_ON_CODES) + [INCOME_TAX, PERSONAL_DEDUCTION],
        calc_input.effective_date,
    )

    from_amounts = {c.value: apply_rate(gross, rules[c.value].rate_value) for c in FBIH_FROM_CODES}
    contributions_from = sum(from_amounts.values())

    deduction = personal_deduction(rules[PERSONAL_DEDUCTION].rate_value, calc_input.tax_factor)
    taxable_base, tax_amount = _income_tax(
        gross, contributions_from, deduction, rules[INCOME_TAX].rate_value
    )
    net_amount = gross - contributions_from - tax_amount

    on_amounts = {c.value: apply_rate(gross, rules[c.value].rate_value) for c in FBIH_ON_CODES}
    contributions_on = sum(on_amounts.values())

    return CalculationResult(
        jurisdiction=Jurisdiction.FBIH,
        calculated_gross=gross,
        contributions_from=contributions_from,
        contributions_on=contributions_on,
        taxable_base=taxable_base,
        tax_amount=tax_amount,
        net_amount=net_amount,
        total_cost=gross + contributions_on,
        contributions_breakdown={**from_amounts, **on_amounts},
        allowances_breakdown={},
    )


def calculate_rs(calc_input: CalculationInput, store: RuleStore) -> CalculationResult:
    """RS: integrated gross with seniority folded in before contributions.

    The seniority increment is itself contributed on and taxed. Employer
    cost equals the adjusted gross (no on-salary layer).
    """
    rules = store.resolve_many(
        Jurisdiction.RS,
        _codes(RS_CONTRIBUTION_CODES) + [INCOME_TAX, PERSONAL_DEDUCTION, SENIORITY_RATE],
        calc_input.effective_date,
    )

    increase = seniority_increase(
        calc_input.gross_amount,
        calc_input.seniority_hundredths,
        rules[SENIORITY_RATE].rate_value,
    )
    adjusted_gross = calc_input.gross_amount + increase

    amounts = {
        c.value: apply_rate(adjusted_gross, rules[c.value].rate_value)
        for c in RS_CONTRIBUTION_CODES
    }
    contributions_from = sum(amounts.values())

    deduction = personal_deduction(rules[PERSONAL_DEDUCTION].rate_value, calc_input.tax_factor)
    taxable_base, tax_amount = _income_tax(
        adjusted_gross, contributions_from, deduction, rules[INCOME_TAX].rate_value
    )

    amounts[RsComponent.SENIORITY.value] = increase

    return CalculationResult(
        jurisdiction=Jurisdiction.RS,
        calculated_gross=adjusted_gross,
        contributions_from=contributions_from,
        contributions_on=0,
        taxable_base=taxable_base,
        tax_amount=tax_amount,
        net_amount=adjusted_gross - contributions_from - tax_amount,
        total_cost=adjusted_gross,
        contributions_breakdown=amounts,
        allowances_breakdown={},
    )


def resolve_pension_rate(choice: PensionFundChoice, store: RuleStore, as_of: date) -> int:
    """Pension rate of the chosen fund, resolved at the BD effective date."""
    jurisdiction, rule_code = PENSION_FUND_RULES[choice]
    return require_rule(store, jurisdiction, rule_code, as_of).rate_value


def calculate_bd(calc_input: CalculationInput, store: RuleStore) -> CalculationResult:
    """Brcko District: FBiH-style withholding with a chosen pension fund."""
    if calc_input.pension_fund_choice is None:
        raise MissingPensionChoiceError()

    gross = calc_input.gross_amount
    as_of = calc_input.effective_date
    rules = store.resolve_many(
        Jurisdiction.BD,
        [BdComponent.HEALTH.value, BdComponent.UNEMPLOYMENT.value, INCOME_TAX, PERSONAL_DEDUCTION],
        as_of,
    )
    pension_rate = resolve_pension_rate(calc_input.pension_fund_choice, store, as_of)

    amounts = {
        BdComponent.PIO.value: apply_rate(gross, pension_rate),
        BdComponent.HEALTH.value: apply_rate(gross, rules[BdComponent.HEALTH.value].rate_value),
        BdComponent.UNEMPLOYMENT.value: apply_rate(
            gross, rules[BdComponent.UNEMPLOYMENT.value].rate_value
        ),
    }
    contributions_from = sum(amounts.values())

    deduction = personal_deduction(rules[PERSONAL_DEDUCTION].rate_value, calc_input.tax_factor)
    taxable_base, tax_amount = _income_tax(
        gross, contributions_from, deduction, rules[INCOME_TAX].rate_value
    )

    return CalculationResult(
        jurisdiction=Jurisdiction.BD,
        calculated_gross=gross,
        contributions_from=contributions_from,
        contributions_on=0,
        taxable_base=taxable_base,
        tax_amount=tax_amount,
        net_amount=gross - contributions_from - tax_amount,
        total_cost=gross,
        contributions_breakdown=amounts,
        allowances_breakdown={},
    )
