"""Period performance: income and expense movement inside a date range."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from farmledger.domain.balances import iter_filtered_lines
from farmledger.domain.entities import (
    Account,
    AccountAmount,
    AccountType,
    JournalEntry,
    ReportFilter,
)
from farmledger.domain.ledger import BALANCE_TOLERANCE, signed_amount

PERFORMANCE_TYPES = (AccountType.INCOME, AccountType.EXPENSE)


@dataclass(frozen=True)
class PeriodPerformance:
    """Income statement figures for one period."""

    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    income_accounts: tuple[AccountAmount, ...]
    expense_accounts: tuple[AccountAmount, ...]


def compute_period_movements(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
) -> dict[int, Decimal]:
    """Net movement of every Income and Expense account within the period.

    Initial balances are ignored. Asset, Liability and Equity accounts are
    left out of the result.
    """
    report_filter = report_filter or ReportFilter()
    accounts_by_id = {
        account.id: account
        for account in accounts
        if account.type in PERFORMANCE_TYPES
    }
    movements = {account_id: Decimal("0") for account_id in accounts_by_id}

    for _entry, line in iter_filtered_lines(entries, report_filter):
        account = accounts_by_id.get(line.account_id)
        if account is None:
            continue
        movements[account.id] += signed_amount(account.type, line.type, line.amount)

    return movements


def compute_period_performance(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
) -> PeriodPerformance:
    """Compute income, expenses and net income for the filtered period.

    Args:
        accounts: Chart of accounts
        entries: Journal entries
        report_filter: Optional date range / plot / season filter

    Returns:
        PeriodPerformance with totals and the non-negligible accounts of
        each type, in chart order
    """
    movements = compute_period_movements(accounts, entries, report_filter)

    total_income = Decimal("0")
    total_expenses = Decimal("0")
    income_accounts: list[AccountAmount] = []
    expense_accounts: list[AccountAmount] = []

    for account in accounts:
        if account.id not in movements:
            continue
        balance = movements[account.id]
        if account.type == AccountType.INCOME:
            total_income += balance
            target = income_accounts
        else:
            total_expenses += balance
            target = expense_accounts
        # Noise suppression only affects the listing, never the totals
        if abs(balance) >= BALANCE_TOLERANCE:
            target.append(AccountAmount(account.id, account.name, balance))

    return PeriodPerformance(
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=total_income - total_expenses,
        income_accounts=tuple(income_accounts),
        expense_accounts=tuple(expense_accounts),
    )
