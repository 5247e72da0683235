"""Tests for journal entries."""

from datetime import date
from decimal import Decimal

import pytest

from farmledger.cli.main import cli
from farmledger.database.factories import create_sqlite_database
from farmledger.domain.entities import JournalEntryDraft, JournalEntryLine, LineType
from farmledger.domain.errors import NotFoundError, ValidationError
from farmledger.domain.journal import JOURNAL_CATEGORIES
from farmledger.domain.ledger import is_balanced


def _lines(debit_id, credit_id, amount="100", credit_amount=None, plot_id=None):
    return [
        JournalEntryLine(debit_id, LineType.DEBIT, Decimal(amount), plot_id),
        JournalEntryLine(credit_id, LineType.CREDIT, Decimal(credit_amount or amount), plot_id),
    ]


class TestJournalService:
    """Tests for JournalService."""

    def test_create_entry(self, journal_service, farm_accounts):
        entry_id = journal_service.create_entry(
            entry_date=date(2024, 3, 1),
            description="  Harvest sale ",
            currency="usd",
            lines=_lines(farm_accounts["Cash at Bank"], farm_accounts["Crop Sales"], "1200", plot_id="north"),
            category="Farm Sales",
        )

        entry = journal_service.get_entry(entry_id)
        assert entry.description == "Harvest sale"
        assert entry.currency == "USD"
        assert entry.category == "Farm Sales"
        assert entry.lines[0].plot_id == "north"

    def test_unbalanced_entry_is_rejected(self, journal_service, farm_accounts):
        with pytest.raises(ValidationError, match="not balanced"):
            journal_service.create_entry(
                entry_date=date(2024, 3, 1),
                description="Typo",
                currency="USD",
                lines=_lines(farm_accounts["Cash at Bank"], farm_accounts["Crop Sales"], "100", "10"),
            )
        assert journal_service.list_entries() == []

    def test_stored_entry_matches_validated_lines(self, journal_service, farm_accounts):
        with pytest.raises(ValidationError, match="Line 1: amount 5.005"):
            journal_service.create_entry(
                date(2024, 3, 1),
                "Split seed",
                "USD",
                [
                    JournalEntryLine(farm_accounts["Seed"], LineType.DEBIT, Decimal("5.005")),
                    JournalEntryLine(farm_accounts["Fuel"], LineType.DEBIT, Decimal("5.005")),
                    JournalEntryLine(farm_accounts["Cash at Bank"], LineType.CREDIT, Decimal("10.01")),
                ],
            )
        assert journal_service.list_entries() == []

        entry_id = journal_service.create_entry(
            date(2024, 3, 1), "Seed", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"], "10.01")
        )
        stored = journal_service.get_entry(entry_id)
        assert [line.amount for line in stored.lines] == [Decimal("10.01"), Decimal("10.01")]
        assert is_balanced(stored.lines)

    def test_empty_description_is_rejected(self, journal_service, farm_accounts):
        with pytest.raises(ValidationError, match="Description"):
            journal_service.create_entry(
                date(2024, 3, 1), " ", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"])
            )

    def test_currency_mismatch_is_rejected(self, journal_service, account_service, farm_accounts):
        cedi_id = account_service.create_account("Cedi Cash", "Asset", "GHS")
        with pytest.raises(ValidationError, match="uses GHS"):
            journal_service.create_entry(
                date(2024, 3, 1), "Mixed", "USD", _lines(farm_accounts["Seed"], cedi_id)
            )

    def test_unknown_account_is_rejected(self, journal_service, farm_accounts):
        with pytest.raises(NotFoundError):
            journal_service.create_entry(
                date(2024, 3, 1), "Ghost", "USD", _lines(farm_accounts["Seed"], 999)
            )

    def test_create_entries_is_all_or_nothing(self, journal_service, farm_accounts):
        good = JournalEntryDraft(
            date(2024, 1, 1), "Good", "USD", tuple(_lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"]))
        )
        bad = JournalEntryDraft(
            date(2024, 1, 2), "Bad", "USD", tuple(_lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"], "5", "6"))
        )

        with pytest.raises(ValidationError, match="Entry 2"):
            journal_service.create_entries([good, bad])
        assert journal_service.list_entries() == []

        assert len(journal_service.create_entries([good, good])) == 2

    def test_list_entries_by_account(self, journal_service, farm_accounts):
        journal_service.create_entry(
            date(2024, 1, 1), "Seed", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"])
        )
        journal_service.create_entry(
            date(2024, 1, 2), "Fuel", "USD", _lines(farm_accounts["Fuel"], farm_accounts["Cash at Bank"])
        )

        assert [e.description for e in journal_service.list_entries(account_id=farm_accounts["Fuel"])] == ["Fuel"]
        assert len(journal_service.list_entries(account_id=farm_accounts["Cash at Bank"])) == 2
        assert journal_service.list_entries(end_date=date(2023, 12, 31)) == []

    def test_update_entry_keeps_unchanged_fields(self, journal_service, farm_accounts):
        entry_id = journal_service.create_entry(
            date(2024, 1, 1), "Seed", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"]), "Seed-Maize"
        )

        journal_service.update_entry(entry_id, description="Maize seed")

        entry = journal_service.get_entry(entry_id)
        assert entry.description == "Maize seed"
        assert entry.date == date(2024, 1, 1)
        assert entry.category == "Seed-Maize"

    def test_update_entry_revalidates(self, journal_service, farm_accounts):
        entry_id = journal_service.create_entry(
            date(2024, 1, 1), "Seed", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"])
        )
        with pytest.raises(ValidationError):
            journal_service.update_entry(
                entry_id, lines=_lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"], "1", "2")
            )

    def test_delete_entry(self, journal_service, farm_accounts):
        entry_id = journal_service.create_entry(
            date(2024, 1, 1), "Seed", "USD", _lines(farm_accounts["Seed"], farm_accounts["Cash at Bank"])
        )

        journal_service.delete_entry(entry_id)

        assert journal_service.get_entry(entry_id) is None
        with pytest.raises(NotFoundError, match=f"Journal entry {entry_id} not found"):
            journal_service.delete_entry(entry_id)

    def test_categories_are_sorted(self):
        assert JOURNAL_CATEGORIES == sorted(JOURNAL_CATEGORIES)
        assert "Seed-Maize" in JOURNAL_CATEGORIES


class TestJournalCLI:
    """Tests for the journal commands."""

    def test_add_entry(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "journal",
                "add",
                "--date",
                "2024-03-01",
                "--description",
                "Maize seed",
                "--category",
                "Seed-Maize",
                "--debit",
                "Seed=450",
                "--credit",
                "cash at bank=$450.00",
                "--plot",
                "north",
            ],
        )

        assert result.exit_code == 0
        assert "Recorded journal entry 1 (450.00 USD)" in result.output
        entry = temp_db.get_journal_entry(1)
        assert entry.category == "Seed-Maize"
        assert {line.plot_id for line in entry.lines} == {"north"}

    def test_add_split_entry(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "journal",
                "add",
                "--description",
                "Inputs",
                "--debit",
                "Seed=300",
                "--debit",
                "Fuel=200",
                "--credit",
                "Cash at Bank=500",
            ],
        )

        assert result.exit_code == 0
        assert len(temp_db.get_journal_entry(1).lines) == 3

    def test_add_unbalanced_entry_fails(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "journal",
                "add",
                "--description",
                "Typo",
                "--debit",
                "Seed=300",
                "--credit",
                "Cash at Bank=30",
            ],
        )

        assert result.exit_code == 1
        assert "Error: Entry is not balanced" in result.output

    def test_add_unknown_account_fails(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "journal",
                "add",
                "--description",
                "Typo",
                "--debit",
                "Sede=300",
                "--credit",
                "Cash at Bank=300",
            ],
        )

        assert result.exit_code == 1
        assert "Account 'Sede' with currency USD not found" in result.output

    def test_add_malformed_line_fails(self, temp_db, cli_runner, farm_accounts):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "journal", "add", "--description", "X", "--debit", "Seed"],
        )

        assert result.exit_code == 1
        assert "Expected ACCOUNT=AMOUNT" in result.output

    def test_list_and_show(self, temp_db, cli_runner, journal_service, farm_accounts):
        journal_service.create_entry(
            date(2024, 2, 1),
            "Diesel for tractor",
            "USD",
            _lines(farm_accounts["Fuel"], farm_accounts["Cash at Bank"], "75.25"),
            "Transportation",
        )

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "journal", "list", "--start-date", "2024-01-01"]
        )
        assert result.exit_code == 0
        assert "Found 1 journal entry:" in result.output
        assert "Diesel for tractor" in result.output

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "journal", "show", "1"])
        assert result.exit_code == 0
        assert "Category: Transportation" in result.output
        assert "75.25" in result.output
        assert "Status: Balanced" in result.output

    def test_list_empty(self, temp_db, cli_runner):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "journal", "list"])

        assert result.exit_code == 0
        assert "No journal entries found." in result.output

    def test_show_missing(self, temp_db, cli_runner):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "journal", "show", "42"])

        assert result.exit_code == 1
        assert "Journal entry 42 not found" in result.output

    def test_edit_and_delete(self, temp_db, cli_runner, journal_service, farm_accounts):
        journal_service.create_entry(
            date(2024, 2, 1), "Diesel", "USD", _lines(farm_accounts["Fuel"], farm_accounts["Cash at Bank"])
        )

        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "journal", "edit", "1", "--category", "Transportation"],
        )
        assert result.exit_code == 0
        assert "Updated journal entry 1" in result.output

        fresh = create_sqlite_database(database_path=temp_db.database_path)
        try:
            assert fresh.get_journal_entry(1).category == "Transportation"
        finally:
            fresh.disconnect()

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "journal", "delete", "1", "--yes"]
        )
        assert result.exit_code == 0
        assert "Deleted journal entry 1" in result.output

    def test_categories(self, temp_db, cli_runner):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "journal", "categories"])

        assert result.exit_code == 0
        assert "Seed-Maize" in result.output
        assert "Weedicide" in result.output
