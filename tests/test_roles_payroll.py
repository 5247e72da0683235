"""Tests for account roles, expense classification, payroll and sales."""

from datetime import date
from decimal import Decimal

import pytest

from farmledger.cli.main import cli
from farmledger.domain.entities import AccountRole, ExpenseClass, LineType
from farmledger.domain.errors import NotFoundError, ValidationError
from farmledger.domain.payroll import PAYROLL_CATEGORY, PayItem, PayrollService
from farmledger.domain.sales import SALES_CATEGORY, SaleItem, SalesService


class TestAccountRoleService:
    """Tests for AccountRoleService."""

    def test_bind_and_resolve(self, role_service, farm_accounts):
        role_service.bind_role("CASH", farm_accounts["Cash at Bank"])

        assert role_service.get_roles() == {AccountRole.CASH: farm_accounts["Cash at Bank"]}
        assert role_service.resolve_role(AccountRole.CASH).name == "Cash at Bank"

    def test_rebinding_replaces(self, role_service, account_service, farm_accounts):
        till_id = account_service.create_account("Till", "Asset", "USD")
        role_service.bind_role("cash", farm_accounts["Cash at Bank"])
        role_service.bind_role("cash", till_id)

        assert role_service.resolve_role("cash").id == till_id

    def test_wrong_account_type(self, role_service, farm_accounts):
        with pytest.raises(ValidationError, match="Role 'wages' needs an Expense account, but 'Cash at Bank' is Asset"):
            role_service.bind_role("wages", farm_accounts["Cash at Bank"])

        with pytest.raises(ValidationError, match="needs a Liability account"):
            role_service.bind_role("payables", farm_accounts["Cash at Bank"])

    def test_unknown_role(self, role_service, farm_accounts):
        with pytest.raises(ValidationError, match="Invalid role 'bank'"):
            role_service.bind_role("bank", farm_accounts["Cash at Bank"])

    def test_unbound_role(self, role_service):
        with pytest.raises(NotFoundError, match="No account is bound to role 'wages'"):
            role_service.resolve_role("wages")

    def test_deleted_account_unbinds_role(self, role_service, account_service, farm_accounts):
        role_service.bind_role("wages", farm_accounts["Labor Wages"])
        account_service.delete_account(farm_accounts["Labor Wages"])

        with pytest.raises(NotFoundError):
            role_service.resolve_role("wages")

    def test_unbind(self, bound_roles, role_service):
        role_service.unbind_role("sales")
        assert AccountRole.SALES not in role_service.get_roles()

    def test_expense_classification(self, role_service, farm_accounts):
        defaults = role_service.expense_classification()
        assert defaults[farm_accounts["Seed"]] == ExpenseClass.COGS
        assert defaults[farm_accounts["Fuel"]] == ExpenseClass.SGA

        role_service.classify_expense(farm_accounts["Fuel"], "COGS")
        assert role_service.expense_classification()[farm_accounts["Fuel"]] == ExpenseClass.COGS

        role_service.classify_expense(farm_accounts["Fuel"], None)
        assert role_service.expense_classification()[farm_accounts["Fuel"]] == ExpenseClass.SGA

    def test_classify_requires_expense_account(self, role_service, farm_accounts):
        with pytest.raises(ValidationError, match="not an Expense account"):
            role_service.classify_expense(farm_accounts["Crop Sales"], "cogs")

    def test_classify_rejects_unknown_class(self, role_service, farm_accounts):
        with pytest.raises(ValidationError, match="Invalid expense class"):
            role_service.classify_expense(farm_accounts["Fuel"], "overhead")


class TestPayrollService:
    """Tests for PayrollService."""

    def test_run_payroll(self, temp_db, bound_roles, journal_service):
        service = PayrollService(temp_db)

        entry_id = service.run_payroll(
            date(2024, 3, 1),
            date(2024, 3, 15),
            pay_items=[
                PayItem("Ama", Decimal("40"), Decimal("12.50")),
                PayItem("Kofi", Decimal("32"), Decimal("12.50")),
            ],
        )

        entry = journal_service.get_entry(entry_id)
        assert entry.description == "Payroll for period 2024-03-01 to 2024-03-15"
        assert entry.date == date(2024, 3, 15)
        assert entry.category == PAYROLL_CATEGORY
        assert entry.currency == "USD"
        debit, credit = entry.lines
        assert (debit.account_id, debit.type, debit.amount) == (
            bound_roles["Labor Wages"],
            LineType.DEBIT,
            Decimal("900.00"),
        )
        assert (credit.account_id, credit.type) == (bound_roles["Cash at Bank"], LineType.CREDIT)

    def test_lump_sum_and_posting_date(self, temp_db, bound_roles, journal_service):
        service = PayrollService(temp_db)

        entry_id = service.run_payroll(
            date(2024, 3, 1), date(2024, 3, 31), amount=Decimal("2400"), entry_date=date(2024, 4, 2)
        )

        entry = journal_service.get_entry(entry_id)
        assert entry.date == date(2024, 4, 2)
        assert entry.lines[0].amount == Decimal("2400")

    def test_nothing_to_pay(self, temp_db, bound_roles):
        with pytest.raises(ValidationError, match="No payroll to process"):
            PayrollService(temp_db).run_payroll(date(2024, 3, 1), date(2024, 3, 31))

    def test_inverted_period(self, temp_db, bound_roles):
        with pytest.raises(ValidationError, match="end is before its start"):
            PayrollService(temp_db).run_payroll(date(2024, 3, 31), date(2024, 3, 1), amount=Decimal("1"))

    def test_requires_wages_role(self, temp_db, farm_accounts):
        with pytest.raises(NotFoundError, match="role 'wages'"):
            PayrollService(temp_db).run_payroll(date(2024, 3, 1), date(2024, 3, 31), amount=Decimal("10"))

    def test_gross_pay_is_rounded_to_cents(self, temp_db, bound_roles, journal_service):
        entry_id = PayrollService(temp_db).run_payroll(
            date(2024, 3, 1), date(2024, 3, 31), pay_items=[PayItem("Ama", Decimal("3"), Decimal("3.335"))]
        )

        assert journal_service.get_entry(entry_id).lines[0].amount == Decimal("10.01")


class TestSalesService:
    """Tests for SalesService."""

    def test_record_sale(self, temp_db, bound_roles, journal_service):
        entry_id = SalesService(temp_db).record_sale(
            date(2024, 3, 10),
            " Accra Market ",
            [SaleItem("Maize", Decimal("20"), Decimal("45.50")), SaleItem("Cassava", Decimal("5"), Decimal("12"))],
            invoice_number="INV-0042",
            plot_id="north",
            season_id="2024A",
        )

        entry = journal_service.get_entry(entry_id)
        assert entry.description == "Sale to Accra Market - Invoice INV-0042"
        assert entry.category == SALES_CATEGORY
        assert entry.date == date(2024, 3, 10)
        debit, credit = entry.lines
        assert (debit.account_id, debit.type, debit.amount) == (
            bound_roles["Accounts Receivable"],
            LineType.DEBIT,
            Decimal("970.00"),
        )
        assert (credit.account_id, credit.type) == (bound_roles["Crop Sales"], LineType.CREDIT)
        assert {(line.plot_id, line.season_id) for line in entry.lines} == {("north", "2024A")}

    def test_fractional_prices_are_rounded(self, temp_db, bound_roles, journal_service):
        entry_id = SalesService(temp_db).record_sale(
            date(2024, 3, 10), "Kumasi", [SaleItem("Pepper", Decimal("3"), Decimal("0.335"))]
        )

        entry = journal_service.get_entry(entry_id)
        assert entry.description == "Sale to Kumasi"
        assert entry.lines[0].amount == Decimal("1.01")

    @pytest.mark.parametrize(
        "items,message",
        [
            ([], "Sale total must be positive"),
            ([SaleItem("Maize", Decimal("10"), Decimal("0"))], "Sale total must be positive"),
            ([SaleItem("Maize", Decimal("0"), Decimal("45"))], "Quantity of 'Maize' must be positive"),
            ([SaleItem("Maize", Decimal("1"), Decimal("-5"))], "Unit price of 'Maize' must not be negative"),
        ],
    )
    def test_invalid_sale(self, temp_db, bound_roles, journal_service, items, message):
        with pytest.raises(ValidationError, match=message):
            SalesService(temp_db).record_sale(date(2024, 3, 10), "Kumasi", items)
        assert journal_service.list_entries() == []

    def test_blank_customer(self, temp_db, bound_roles):
        with pytest.raises(ValidationError, match="Customer cannot be empty"):
            SalesService(temp_db).record_sale(date(2024, 3, 10), "  ", [SaleItem("Maize", Decimal("1"), Decimal("1"))])

    def test_requires_receivables_role(self, temp_db, farm_accounts):
        with pytest.raises(NotFoundError, match="role 'receivables'"):
            SalesService(temp_db).record_sale(date(2024, 3, 10), "Kumasi", [SaleItem("Maize", Decimal("1"), Decimal("1"))])



class TestRoleAndPayrollCLI:
    """Tests for the role and payroll commands."""

    def test_bind_and_list(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "role", "bind", "cash", "Cash at Bank"]
        )
        assert result.exit_code == 0
        assert f"Bound role 'cash' to account {farm_accounts['Cash at Bank']}" in result.output

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "role", "list"])
        assert result.exit_code == 0
        assert "Cash at Bank (ID: 1)" in result.output
        assert "(unbound)" in result.output
        assert "Expense classification:" in result.output

    def test_bind_wrong_type(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "role", "bind", "wages", "Crop Sales"]
        )

        assert result.exit_code == 1
        assert "Error: Role 'wages' needs an Expense account" in result.output

    def test_classify(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "role", "classify", "Fuel", "cogs"]
        )

        assert result.exit_code == 0
        assert temp_db.get_expense_classifications() == {farm_accounts["Fuel"]: ExpenseClass.COGS}

    def test_payroll_command(self, temp_db, cli_runner, bound_roles):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "payroll",
                "--start",
                "2024-03-01",
                "--end",
                "2024-03-15",
                "--pay",
                "Ama",
                "40",
                "12.50",
                "--pay",
                "Kofi",
                "32",
                "12.50",
            ],
        )

        assert result.exit_code == 0
        assert "Payroll posted as journal entry 1 (900.00)" in result.output

    def test_payroll_without_roles(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "payroll", "--start", "2024-03-01", "--end", "2024-03-15", "--amount", "100"],
        )

        assert result.exit_code == 1
        assert "Use 'farmledger role bind' first" in result.output

    def test_sale_command(self, temp_db, cli_runner, bound_roles):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "sale",
                "--customer",
                "Accra Market",
                "--date",
                "2024-03-10",
                "--item",
                "Maize",
                "20",
                "45.50",
                "--invoice",
                "INV-0042",
            ],
        )

        assert result.exit_code == 0
        assert "Sale posted as journal entry 1 (910.00)" in result.output

    def test_sale_without_roles(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "sale", "--customer", "Kumasi", "--item", "Maize", "1", "5"],
        )

        assert result.exit_code == 1
        assert "No account is bound to role 'receivables'" in result.output
