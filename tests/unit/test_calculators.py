"""Tests for the jurisdiction calculators and forward dispatch.

Uses the bundled tax rules table (FBiH pre/post 2025 reform, RS, BD).
Expected figures are worked by hand from those rates:

FBiH, gross 2000.00 KM, 2024-01-01:
    from = 17% + 12.5% + 1.5% = 620.00, deduction 300.00
    taxable = 1080.00, tax 10% = 108.00, net = 1272.00
    on = 6% + 4% + 0.5% = 210.00, cost = 2210.00
"""

from datetime import date

import pytest
from pydantic import ValidationError

from bihpayroll.sdk.engine import (
    apply_rate,
    calculate_payroll,
    personal_deduction,
    round_div,
    seniority_increase,
)
from bihpayroll.sdk.errors import (
    MissingPensionChoiceError,
    MissingRuleError,
    UnknownJurisdictionError,
)
from bihpayroll.sdk.rules import InMemoryRuleStore, load_rule_store
from bihpayroll.sdk.schemas import CalculationInput, CalculationResult, Jurisdiction, TaxRule


JAN_2024 = date(2024, 1, 1)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point config at an empty directory so only the bundled rules are used."""
    monkeypatch.setenv("BIH_PAYROLL_CONFIG_PATH", str(tmp_path / "config"))
    monkeypatch.delenv("BIH_PAYROLL_RULES_FILE", raising=False)
    return tmp_path


@pytest.fixture
def store(isolated_env):
    return load_rule_store()


def make_input(jurisdiction, gross=200000, **kwargs):
    kwargs.setdefault("effective_date", JAN_2024)
    return CalculationInput(jurisdiction=jurisdiction, gross_amount=gross, **kwargs)


class TestRounding:
    """Tests for integer rounding helpers."""

    def test_round_div_half_up(self):
        assert round_div(5, 2) == 3
        assert round_div(7, 2) == 4
        assert round_div(1, 3) == 0
        assert round_div(2, 3) == 1

    def test_round_div_negative_half_goes_up(self):
        """Half values round toward +infinity, also below zero."""
        assert round_div(-5, 2) == -2
        assert round_div(-7, 2) == -3

    def test_apply_rate(self):
        assert apply_rate(200000, 1700) == 34000
        assert apply_rate(1, 5000) == 1
        assert apply_rate(1, 4999) == 0

    def test_personal_deduction_scales_with_factor(self):
        assert personal_deduction(30000, 100) == 30000
        assert personal_deduction(30000, 150) == 45000
        assert personal_deduction(8333, 150) == 12500  # 12499.5 rounds up

    def test_seniority_increase_single_division(self):
        # 2000.00 KM x 5 years x 0.3%
        assert seniority_increase(200000, 500, 30) == 3000
        assert seniority_increase(200000, 0, 30) == 0


class TestFbih:
    """Tests for the FBiH calculator."""

    def test_example_scenario(self, store):
        result = calculate_payroll(make_input("FBIH", work_days=22), store)

        assert result.calculated_gross == 200000
        assert result.contributions_from == 62000
        assert result.taxable_base == 108000
        assert result.tax_amount == 10800
        assert result.net_amount == 127200
        assert result.contributions_on == 21000
        assert result.total_cost == 221000
        assert result.allowances_breakdown == {}

    def test_breakdown_keyed_by_rule_code(self, store):
        result = calculate_payroll(make_input("FBIH"), store)

        assert result.contributions_breakdown == {
            "PIO_FROM": 34000,
            "HEALTH_FROM": 25000,
            "UNEMPLOYMENT_FROM": 3000,
            "PIO_ON": 12000,
            "HEALTH_ON": 8000,
            "UNEMPLOYMENT_ON": 1000,
        }

    def test_net_and_cost_identities(self, store):
        for gross in (50000, 123457, 200000, 999999):
            r = calculate_payroll(make_input("FBIH", gross=gross), store)
            assert r.net_amount == gross - r.contributions_from - r.tax_amount
            assert r.total_cost == gross + r.contributions_on

    def test_higher_tax_factor_lowers_tax(self, store):
        base = calculate_payroll(make_input("FBIH", gross=100000, tax_factor=100), store)
        higher = calculate_payroll(make_input("FBIH", gross=100000, tax_factor=150), store)

        assert higher.tax_amount < base.tax_amount
        assert higher.net_amount > base.net_amount

    def test_taxable_base_clamped_to_zero(self, store):
        """Low gross: contributions + deduction exceed gross."""
        result = calculate_payroll(make_input("FBIH", gross=30000), store)

        assert result.taxable_base == 0
        assert result.tax_amount == 0
        assert result.net_amount == 30000 - 9300

    def test_reform_lowers_contributions_on(self, store):
        """Rates switch on 2025-07-01 purely through validity intervals."""
        before = calculate_payroll(make_input("FBIH", effective_date=date(2025, 6, 30)), store)
        after = calculate_payroll(make_input("FBIH", effective_date=date(2025, 7, 1)), store)

        assert before.contributions_on == 21000
        assert after.contributions_on == 10000
        assert after.total_cost < before.total_cost
        assert after.net_amount == before.net_amount

    def test_missing_rule_is_fatal(self, store):
        with pytest.raises(MissingRuleError) as exc_info:
            calculate_payroll(make_input("FBIH", effective_date=date(2019, 12, 31)), store)

        assert exc_info.value.jurisdiction == "FBIH"
        assert exc_info.value.as_of == date(2019, 12, 31)


class TestRs:
    """Tests for the RS integrated-gross calculator."""

    def test_without_seniority(self, store):
        result = calculate_payroll(make_input("RS"), store)

        assert result.calculated_gross == 200000
        assert result.contributions_from == 65600
        assert result.contributions_on == 0
        assert result.taxable_base == 126067
        assert result.tax_amount == 10085
        assert result.net_amount == 124315
        assert result.total_cost == 200000
        assert result.contributions_breakdown["SENIORITY"] == 0

    def test_seniority_folded_into_gross(self, store):
        """Five years at 0.3% adds 30.00 KM, which is contributed on and taxed."""
        result = calculate_payroll(make_input("RS", seniority_hundredths=500), store)

        assert result.calculated_gross == 203000
        assert result.contributions_breakdown == {
            "PIO": 37555,
            "HEALTH": 24360,
            "CHILD_PROTECTION": 3451,
            "UNEMPLOYMENT": 1218,
            "SENIORITY": 3000,
        }
        assert result.contributions_from == 66584
        assert result.tax_amount == 10247
        assert result.net_amount == 126169
        assert result.total_cost == 203000

    def test_seniority_increases_gross_and_net(self, store):
        without = calculate_payroll(make_input("RS", seniority_hundredths=0), store)
        with_seniority = calculate_payroll(make_input("RS", seniority_hundredths=500), store)

        assert with_seniority.calculated_gross > without.calculated_gross
        assert with_seniority.net_amount > without.net_amount
        assert (
            with_seniority.contributions_breakdown["SENIORITY"]
            == with_seniority.calculated_gross - 200000
        )

    def test_contributions_on_always_zero(self, store):
        for gross in (10000, 200000, 5000000):
            r = calculate_payroll(make_input("RS", gross=gross, seniority_hundredths=1250), store)
            assert r.contributions_on == 0
            assert r.calculated_gross >= gross


class TestBd:
    """Tests for the Brcko District calculator."""

    def test_fbih_fund(self, store):
        result = calculate_payroll(make_input("BD", pension_fund_choice="FBIH_FUND"), store)

        assert result.calculated_gross == 200000
        assert result.contributions_breakdown == {"PIO": 34000, "HEALTH": 24000, "UNEMPLOYMENT": 3000}
        assert result.contributions_from == 61000
        assert result.tax_amount == 10900
        assert result.net_amount == 128100
        assert result.contributions_on == 0
        assert result.total_cost == 200000

    def test_rs_fund_uses_rs_pension_rate(self, store):
        result = calculate_payroll(make_input("BD", pension_fund_choice="RS_FUND"), store)

        assert result.contributions_breakdown["PIO"] == 37000
        assert result.net_amount == 125400

    @pytest.mark.parametrize("gross", [0, 100000, 200000, 10000000])
    def test_missing_pension_choice(self, store, gross):
        with pytest.raises(MissingPensionChoiceError, match="Pension fund choice is required"):
            calculate_payroll(make_input("BD", gross=gross), store)

    def test_missing_choice_checked_before_rules(self):
        """An empty store still reports the missing choice, not a missing rule."""
        with pytest.raises(MissingPensionChoiceError):
            calculate_payroll(make_input("BD"), InMemoryRuleStore())


class TestDispatch:
    """Tests for jurisdiction dispatch and input validation."""

    def test_unknown_jurisdiction_on_input(self):
        with pytest.raises(UnknownJurisdictionError, match="XX"):
            make_input("XX")

    def test_unknown_jurisdiction_on_calculate(self, store):
        calc_input = CalculationInput.model_construct(
            jurisdiction="XX", gross_amount=200000, effective_date=JAN_2024,
        )
        with pytest.raises(UnknownJurisdictionError):
            calculate_payroll(calc_input, store)

    def test_lowercase_tag_accepted(self, store):
        assert make_input("fbih").jurisdiction == Jurisdiction.FBIH

    def test_float_gross_rejected(self):
        with pytest.raises(ValidationError):
            make_input("FBIH", gross=2000.5)

    def test_identical_input_identical_result(self, store):
        calc_input = make_input("RS", seniority_hundredths=320)
        assert calculate_payroll(calc_input, store) == calculate_payroll(calc_input, store)

    @pytest.mark.parametrize(
        "jurisdiction,extra",
        [("FBIH", {}), ("RS", {"seniority_hundredths": 700}), ("BD", {"pension_fund_choice": "RS_FUND"})],
    )
    def test_net_monotonic_in_gross(self, store, jurisdiction, extra):
        nets = [
            calculate_payroll(make_input(jurisdiction, gross=g, **extra), store).net_amount
            for g in range(0, 600001, 7919)
        ]
        assert nets == sorted(nets)


class TestResultSchema:
    """Tests for CalculationResult validation."""

    def test_breakdown_key_typo_rejected(self):
        with pytest.raises(ValidationError, match="breakdown keys"):
            CalculationResult(
                jurisdiction="BD",
                calculated_gross=100,
                contributions_from=0,
                contributions_on=0,
                taxable_base=0,
                tax_amount=0,
                net_amount=100,
                total_cost=100,
                contributions_breakdown={"PIO": 0, "HEALTH": 0, "UNEMPLOYMNET": 0},
            )

    def test_custom_rule_table(self):
        """Calculators only need the rules they name."""
        rules = [
            TaxRule(jurisdiction="BD", rule_code=code, rule_type=rtype, rate_value=value,
                    valid_from=date(2024, 1, 1))
            for code, rtype, value in [
                ("HEALTH", "CONTRIBUTION", 1000),
                ("UNEMPLOYMENT", "CONTRIBUTION", 0),
                ("INCOME_TAX", "TAX", 1000),
                ("PERSONAL_DEDUCTION", "DEDUCTION", 0),
            ]
        ] + [
            TaxRule(jurisdiction="RS", rule_code="PIO", rule_type="CONTRIBUTION",
                    rate_value=2000, valid_from=date(2024, 1, 1)),
        ]
        result = calculate_payroll(
            make_input("BD", gross=100000, pension_fund_choice="RS_FUND"),
            InMemoryRuleStore(rules),
        )

        assert result.contributions_from == 30000
        assert result.tax_amount == 7000
        assert result.net_amount == 63000
