"""Tests for per-period payroll runs.

Builds an in-memory directory per test:
- tenant 1 (FBIH), tenant 2 (RS), tenant 3 (BD)
- employees with and without active contracts, plus an inactive employee
"""

import json
from datetime import date

import pytest

from bihpayroll.sdk.engine import calculate_payroll
from bihpayroll.sdk.errors import (
    MissingPensionChoiceError,
    OrganizationNotFoundError,
    PeriodNotFoundError,
    RulesFileError,
)
from bihpayroll.sdk.payroll import (
    Contract,
    Employee,
    InMemoryDirectory,
    PayrollPeriod,
    Tenant,
    load_directory,
    parse_directory,
    process_period,
    seniority_hundredths,
)
from bihpayroll.sdk.rules import load_rule_store
from bihpayroll.sdk.schemas import CalculationInput


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setenv("BIH_PAYROLL_CONFIG_PATH", str(tmp_path / "config"))
    monkeypatch.delenv("BIH_PAYROLL_RULES_FILE", raising=False)
    return load_rule_store()


def make_contract(contract_id, employee_id, gross=200000, tenure_start=date(2019, 3, 1),
                  previous_years=0, **kwargs):
    return Contract(
        id=contract_id,
        employee_id=employee_id,
        gross_amount=gross,
        start_date=tenure_start,
        tenure_start_date=tenure_start,
        previous_tenure_years=previous_years,
        **kwargs,
    )


@pytest.fixture
def directory():
    return InMemoryDirectory(
        tenants=[
            Tenant(id=1, name="Sarajevo d.o.o.", jurisdiction="FBIH"),
            Tenant(id=2, name="Banja Luka a.d.", jurisdiction="RS"),
            Tenant(id=3, name="Brcko d.o.o.", jurisdiction="BD"),
        ],
        employees=[
            Employee(id=10, tenant_id=1, first_name="Amra", last_name="Hodzic"),
            Employee(id=11, tenant_id=1, first_name="Emir", last_name="Begic", tax_factor=150),
            Employee(id=12, tenant_id=1, first_name="Lejla", last_name="Kovac"),  # no contract
            Employee(id=13, tenant_id=1, first_name="Old", last_name="Timer", is_active=False),
            Employee(id=20, tenant_id=2, first_name="Marko", last_name="Jovic"),
            Employee(id=30, tenant_id=3, first_name="Nina", last_name="Ilic"),
        ],
        contracts=[
            make_contract(100, 10),
            make_contract(101, 11, gross=150000),
            make_contract(102, 12, gross=150000, is_active=False),
            make_contract(103, 13),
            make_contract(200, 20, tenure_start=date(2019, 3, 1), previous_years=2),
            make_contract(300, 30),  # no pension fund choice
        ],
        periods=[
            PayrollPeriod(id=1, tenant_id=1, month=3, year=2024),
            PayrollPeriod(id=2, tenant_id=2, month=3, year=2024),
            PayrollPeriod(id=3, tenant_id=3, month=3, year=2024),
        ],
    )


class TestSeniority:
    """Tests for seniority derivation (365-day years)."""

    def test_whole_years_plus_previous(self):
        assert seniority_hundredths(date(2019, 1, 1), 2, date(2024, 1, 1)) == 700

    def test_leap_days_ignored(self):
        # 366 days across 2020-02-29 still one year
        assert seniority_hundredths(date(2020, 1, 1), 0, date(2021, 1, 1)) == 100
        # 364 days is not a full year
        assert seniority_hundredths(date(2023, 1, 2), 0, date(2024, 1, 1)) == 0

    def test_future_tenure_start_counts_zero(self):
        assert seniority_hundredths(date(2025, 1, 1), 3, date(2024, 1, 1)) == 300

    def test_partial_year_dropped(self):
        """4 years 6 months counts as 4 whole years."""
        assert seniority_hundredths(date(2019, 7, 1), 0, date(2024, 1, 1)) == 400


class TestProcessPeriod:
    """Tests for process_period."""

    def test_processes_employees_with_active_contract(self, directory, store):
        run = process_period(1, 1, directory, store)

        assert run.processed_count == 2
        assert run.effective_date == date(2024, 3, 1)
        assert [s.employee_id for s in run.results] == [10, 11]
        assert run.skipped_employee_ids == [12]
        assert run.results[0].employee_name == "Amra Hodzic"

    def test_item_matches_forward_calculation(self, directory, store):
        run = process_period(1, 1, directory, store)
        item = run.items[1]

        expected = calculate_payroll(
            CalculationInput(
                jurisdiction="FBIH",
                gross_amount=150000,
                seniority_hundredths=item.seniority_hundredths,
                tax_factor=150,
                effective_date=date(2024, 3, 1),
            ),
            store,
        )
        assert item.result == expected
        assert item.contract_id == 101
        assert item.input_gross == 150000
        assert item.work_days == 22
        assert run.results[1].net_amount == expected.net_amount

    def test_rs_seniority_applied(self, directory, store):
        """2019-03-01 -> 2024-03-01 is 1827 days = 5 years, plus 2 previous."""
        run = process_period(2, 2, directory, store)
        item = run.items[0]

        assert item.seniority_hundredths == 700
        # 2000.00 KM x 7 years x 0.3%
        assert item.result.contributions_breakdown["SENIORITY"] == 4200
        assert item.result.calculated_gross == 204200

    def test_calculation_error_aborts_run(self, directory, store):
        with pytest.raises(MissingPensionChoiceError):
            process_period(3, 3, directory, store)

    def test_persist_callback_receives_each_item(self, directory, store):
        persisted = []
        run = process_period(1, 1, directory, store, persist=persisted.append)

        assert persisted == run.items

    def test_unknown_period(self, directory, store):
        with pytest.raises(PeriodNotFoundError):
            process_period(99, 1, directory, store)

    def test_unknown_tenant(self, directory, store):
        with pytest.raises(OrganizationNotFoundError):
            process_period(1, 99, directory, store)

    def test_period_of_another_tenant(self, directory, store, caplog):
        """Period 1 belongs to tenant 1; running it for tenant 2 is rejected."""
        with caplog.at_level("WARNING"):
            with pytest.raises(PeriodNotFoundError):
                process_period(1, 2, directory, store)

        assert "belongs to tenant 1" in caplog.text

    def test_totals(self, directory, store):
        run = process_period(1, 1, directory, store)
        totals = run.totals()

        assert totals["net_amount"] == sum(s.net_amount for s in run.results)
        assert totals["total_cost"] == sum(i.result.total_cost for i in run.items)

    def test_to_record_serializes_breakdowns(self, directory, store):
        record = process_period(1, 1, directory, store).items[0].to_record()

        assert record["employee_id"] == 10
        assert record["net_amount"] == 127200
        assert json.loads(record["contributions_breakdown"])["PIO_ON"] == 12000
        assert json.loads(record["allowances_breakdown"]) == {}


class TestDirectoryFile:
    """Tests for loading the directory from YAML."""

    def test_load_directory(self, tmp_path, store):
        path = tmp_path / "directory.yaml"
        path.write_text(
            "tenants:\n"
            "  - {id: 1, name: Acme, jurisdiction: BD}\n"
            "employees:\n"
            "  - {id: 5, tenant_id: 1, first_name: Ana, last_name: Maric}\n"
            "contracts:\n"
            "  - {id: 7, employee_id: 5, gross_amount: 200000, start_date: 2023-01-01,\n"
            "     tenure_start_date: 2023-01-01, pension_fund_choice: FBIH_FUND}\n"
            "periods:\n"
            "  - {id: 1, tenant_id: 1, month: 1, year: 2024}\n"
        )
        run = process_period(1, 1, load_directory(path), store)

        assert run.processed_count == 1
        assert run.results[0].net_amount == 128100

    def test_invalid_entry(self):
        with pytest.raises(RulesFileError, match="employees #1"):
            parse_directory({"employees": [{"id": 1}]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(RulesFileError, match="not found"):
            load_directory(tmp_path / "nope.yaml")
