"""Shared pytest fixtures for farmledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from farmledger.database.factories import create_sqlite_database
from farmledger.domain.account import AccountService
from farmledger.domain.entities import (
    Account,
    AccountType,
    JournalEntry,
    JournalEntryLine,
    LineType,
)
from farmledger.domain.journal import JournalService
from farmledger.domain.roles import AccountRoleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def role_service(temp_db):
    """Create an AccountRoleService with a temporary database."""
    return AccountRoleService(temp_db)


# Opening balances: assets 60,000 = equity 60,000
FARM_CHART = [
    ("Cash at Bank", AccountType.ASSET, Decimal("10000")),
    ("Accounts Receivable", AccountType.ASSET, Decimal("0")),
    ("Farm Equipment", AccountType.ASSET, Decimal("50000")),
    ("Accounts Payable", AccountType.LIABILITY, Decimal("0")),
    ("Owner's Equity", AccountType.EQUITY, Decimal("60000")),
    ("Crop Sales", AccountType.INCOME, Decimal("0")),
    ("Seed", AccountType.EXPENSE, Decimal("0")),
    ("Labor Wages", AccountType.EXPENSE, Decimal("0")),
    ("Fuel", AccountType.EXPENSE, Decimal("0")),
]


@pytest.fixture
def farm_accounts(account_service):
    """Create a small USD farm chart of accounts; returns name -> ID."""
    return {
        name: account_service.create_account(
            name=name, account_type=account_type, currency="USD", initial_balance=balance
        )
        for name, account_type, balance in FARM_CHART
    }


@pytest.fixture
def bound_roles(role_service, farm_accounts):
    """Bind the standard roles to the farm chart."""
    role_service.bind_role("cash", farm_accounts["Cash at Bank"])
    role_service.bind_role("receivables", farm_accounts["Accounts Receivable"])
    role_service.bind_role("equipment", farm_accounts["Farm Equipment"])
    role_service.bind_role("payables", farm_accounts["Accounts Payable"])
    role_service.bind_role("capital", farm_accounts["Owner's Equity"])
    role_service.bind_role("sales", farm_accounts["Crop Sales"])
    role_service.bind_role("wages", farm_accounts["Labor Wages"])
    return farm_accounts


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


# In-memory builders for the pure calculator tests


def _build_account(account_id, name, account_type, initial_balance="0", currency="USD"):
    return Account(
        id=account_id,
        name=name,
        type=account_type,
        initial_balance=Decimal(initial_balance),
        currency=currency,
    )


def _build_entry(entry_id, entry_date, *lines, category=None, currency="USD", description="entry"):
    """Build a JournalEntry from (account_id, "debit"|"credit", amount[, plot[, season]]) tuples."""
    built = []
    for line in lines:
        account_id, side, amount, *tags = line
        plot_id = tags[0] if len(tags) > 0 else None
        season_id = tags[1] if len(tags) > 1 else None
        built.append(
            JournalEntryLine(account_id, LineType(side), Decimal(str(amount)), plot_id, season_id)
        )
    return JournalEntry(
        id=entry_id,
        date=entry_date,
        description=description,
        currency=currency,
        lines=tuple(built),
        category=category,
    )


@pytest.fixture
def ledger_accounts():
    """Pure-data chart of accounts used by calculator tests."""
    return [
        _build_account(1, "Cash", AccountType.ASSET, "1000"),
        _build_account(2, "Loan", AccountType.LIABILITY, "0"),
        _build_account(3, "Owner Capital", AccountType.EQUITY, "1000"),
        _build_account(4, "Sales", AccountType.INCOME, "0"),
        _build_account(5, "Seed", AccountType.EXPENSE, "0"),
        _build_account(6, "Fuel", AccountType.EXPENSE, "0"),
    ]


@pytest.fixture
def ledger_entries():
    """Entries spread over 2024 with plot and season tags."""
    return [
        _build_entry(1, date(2024, 1, 10), (5, "debit", 200, "north", "wet"), (1, "credit", 200, "north", "wet"), category="Seed-Maize"),
        _build_entry(2, date(2024, 3, 5), (1, "debit", 500, "north", "wet"), (4, "credit", 500, "north", "wet"), category="Farm Sales"),
        _build_entry(3, date(2024, 6, 20), (6, "debit", 50, "south", "dry"), (1, "credit", 50, "south", "dry"), category="Transportation"),
        _build_entry(4, date(2024, 7, 1), (1, "debit", 300), (2, "credit", 300), category="Other"),
        _build_entry(5, date(2024, 9, 15), (1, "debit", 250, "south", "dry"), (4, "credit", 250, "south", "dry"), category="Farm Sales"),
    ]


@pytest.fixture
def make_account():
    """Factory for in-memory Account entities."""
    return _build_account


@pytest.fixture
def make_entry():
    """Factory for in-memory JournalEntry entities."""
    return _build_entry
