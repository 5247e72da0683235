"""Mapper functions to convert SQLAlchemy models into domain entities.

The calculators and report builders only see the frozen domain types, so
this is the single place that knows how ledger rows are laid out on disk.
"""

from decimal import Decimal

from farmledger.domain import entities as domain
from farmledger.database.models import (
    Account as ORMAccount,
    AccountRoleBinding as ORMAccountRoleBinding,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.account_type),
        initial_balance=Decimal(orm_account.initial_balance or 0),
        currency=orm_account.currency,
        created_at=orm_account.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        account_id=orm_line.account_id,
        type=domain.LineType(orm_line.line_type),
        amount=Decimal(orm_line.amount),
        plot_id=orm_line.plot_id,
        season_id=orm_line.season_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with its lines) to a domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        description=orm_entry.description,
        currency=orm_entry.currency,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
        category=orm_entry.category,
        created_at=orm_entry.created_at,
    )


def role_binding_to_domain(orm_binding: ORMAccountRoleBinding) -> domain.AccountRoleBinding:
    """Convert SQLAlchemy AccountRoleBinding model to domain entity."""
    return domain.AccountRoleBinding(
        role=domain.AccountRole(orm_binding.role),
        account_id=orm_binding.account_id,
    )
