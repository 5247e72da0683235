"""Report builders.

Every builder is a pure function of accounts, journal entries and a
ReportFilter. Point-in-time reports (Balance Sheet, Trial Balance) use the
balance calculator; period reports use the period calculator or the same
filtered line iteration grouped by another key.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from farmledger.domain.balances import compute_balances, iter_filtered_lines
from farmledger.domain.entities import (
    Account,
    AccountAmount,
    AccountType,
    GroupBy,
    JournalEntry,
    ReportFilter,
)
from farmledger.domain.ledger import BALANCE_TOLERANCE, is_debit_normal, signed_amount
from farmledger.domain.performance import PeriodPerformance, compute_period_performance
from farmledger.domain.rows import DataRow, Header, Row, Subtotal, Total, rows_to_table

RETAINED_EARNINGS_LABEL = "Retained Earnings (Period)"
UNCATEGORIZED = "Uncategorized"
UNASSIGNED = "Unassigned"

ZERO = Decimal("0")


def _sum(values) -> Decimal:
    return sum(values, ZERO)


# Balance Sheet


@dataclass(frozen=True)
class BalanceSheet:
    """Point-in-time financial position."""

    report_filter: ReportFilter
    assets: tuple[AccountAmount, ...]
    liabilities: tuple[AccountAmount, ...]
    equity: tuple[AccountAmount, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity

    @property
    def difference(self) -> Decimal:
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) < BALANCE_TOLERANCE

    def rows(self) -> list[Row]:
        rows: list[Row] = []
        for title, section, total in (
            ("Assets", self.assets, self.total_assets),
            ("Liabilities", self.liabilities, self.total_liabilities),
            ("Equity", self.equity, self.total_equity),
        ):
            rows.append(Header(title))
            rows.extend(DataRow(item.name, (item.balance,), indent=1) for item in section)
            rows.append(Subtotal(f"Total {title}", (total,)))
        rows.append(Total("Total Liabilities & Equity", (self.total_liabilities_and_equity,)))
        return rows

    def to_table(self) -> list[list[Any]]:
        return rows_to_table(("Account", "Amount"), self.rows())


def build_balance_sheet(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
) -> BalanceSheet:
    """Build a balance sheet as of the filter's end date.

    Income and Expense accounts are not listed; their cumulative effect up to
    the end date is shown as a synthetic retained earnings line in Equity so
    that Assets = Liabilities + Equity holds for any filter. The line is
    shown whenever it is non-zero or a date filter is active.
    """
    report_filter = report_filter or ReportFilter()
    balances = compute_balances(accounts, entries, report_filter)
    # Earnings from inception to the end date, including any opening balances
    # carried on income and expense accounts.
    performance = compute_period_performance(
        accounts, entries, report_filter.point_in_time()
    )
    opening_earnings = _sum(
        Decimal(a.initial_balance) for a in accounts if a.type == AccountType.INCOME
    ) - _sum(Decimal(a.initial_balance) for a in accounts if a.type == AccountType.EXPENSE)
    retained_earnings = performance.net_income + opening_earnings

    sections: dict[AccountType, list[AccountAmount]] = {
        AccountType.ASSET: [],
        AccountType.LIABILITY: [],
        AccountType.EQUITY: [],
    }
    totals = {account_type: ZERO for account_type in sections}

    for account in accounts:
        if account.type not in sections:
            continue
        balance = balances.get(account.id, ZERO)
        totals[account.type] += balance
        if abs(balance) < BALANCE_TOLERANCE and account.type != AccountType.EQUITY:
            continue
        sections[account.type].append(AccountAmount(account.id, account.name, balance))

    if abs(retained_earnings) >= BALANCE_TOLERANCE or report_filter.has_date_filter:
        sections[AccountType.EQUITY].append(
            AccountAmount(None, RETAINED_EARNINGS_LABEL, retained_earnings)
        )
    totals[AccountType.EQUITY] += retained_earnings

    return BalanceSheet(
        report_filter=report_filter,
        assets=tuple(sections[AccountType.ASSET]),
        liabilities=tuple(sections[AccountType.LIABILITY]),
        equity=tuple(sections[AccountType.EQUITY]),
        total_assets=totals[AccountType.ASSET],
        total_liabilities=totals[AccountType.LIABILITY],
        total_equity=totals[AccountType.EQUITY],
    )


# Trial Balance


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: int
    account_name: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Closing balance of every account in debit/credit columns."""

    report_filter: ReportFilter
    lines: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debits - self.total_credits) < BALANCE_TOLERANCE

    def rows(self) -> list[Row]:
        rows: list[Row] = [
            DataRow(row.account_name, (row.debit, row.credit)) for row in self.lines
        ]
        rows.append(Total("Total", (self.total_debits, self.total_credits)))
        return rows

    def to_table(self) -> list[list[Any]]:
        return rows_to_table(("Account", "Debit", "Credit"), self.rows())


def trial_balance_columns(account_type: AccountType, balance: Decimal) -> tuple[Decimal, Decimal]:
    """Place a natural balance in the debit or credit column.

    A negative natural balance flips to the opposite column.
    """
    if is_debit_normal(account_type):
        return (balance, ZERO) if balance >= 0 else (ZERO, -balance)
    return (ZERO, balance) if balance >= 0 else (-balance, ZERO)


def build_trial_balance(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
) -> TrialBalance:
    """Build a trial balance as of the filter's end date."""
    report_filter = report_filter or ReportFilter()
    balances = compute_balances(accounts, entries, report_filter)

    rows: list[TrialBalanceRow] = []
    total_debits = ZERO
    total_credits = ZERO
    for account in accounts:
        debit, credit = trial_balance_columns(account.type, balances.get(account.id, ZERO))
        total_debits += debit
        total_credits += credit
        if debit == 0 and credit == 0:
            continue
        rows.append(TrialBalanceRow(account.id, account.name, debit, credit))

    rows.sort(key=lambda row: row.account_name.casefold())
    return TrialBalance(
        report_filter=report_filter,
        lines=tuple(rows),
        total_debits=total_debits,
        total_credits=total_credits,
    )


# Income Statement


@dataclass(frozen=True)
class IncomeStatement:
    """Profit and loss for a period."""

    report_filter: ReportFilter
    performance: PeriodPerformance

    @property
    def total_income(self) -> Decimal:
        return self.performance.total_income

    @property
    def total_expenses(self) -> Decimal:
        return self.performance.total_expenses

    @property
    def net_income(self) -> Decimal:
        return self.performance.net_income

    def rows(self) -> list[Row]:
        rows: list[Row] = [Header("Revenue")]
        rows.extend(
            DataRow(item.name, (item.balance,), indent=1)
            for item in self.performance.income_accounts
        )
        rows.append(Subtotal("Total Revenue", (self.total_income,)))
        rows.append(Header("Expenses"))
        rows.extend(
            DataRow(item.name, (item.balance,), indent=1)
            for item in self.performance.expense_accounts
        )
        rows.append(Subtotal("Total Expenses", (self.total_expenses,)))
        rows.append(Total("Net Income", (self.net_income,)))
        return rows

    def to_table(self) -> list[list[Any]]:
        return rows_to_table(("Account", "Amount"), self.rows())


def build_income_statement(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
) -> IncomeStatement:
    """Build an income statement for the filtered period."""
    report_filter = report_filter or ReportFilter()
    return IncomeStatement(
        report_filter=report_filter,
        performance=compute_period_performance(accounts, entries, report_filter),
    )


# Profitability


@dataclass(frozen=True)
class ProfitabilityGroup:
    key: Optional[str]
    label: str
    revenue: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class ProfitabilityReport:
    """Revenue, expenses and net profit, broken down by a grouping key."""

    report_filter: ReportFilter
    group_by: GroupBy
    groups: tuple[ProfitabilityGroup, ...]
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    def rows(self) -> list[Row]:
        rows: list[Row] = [
            DataRow(group.label, (group.revenue, group.expenses, group.net))
            for group in self.groups
        ]
        rows.append(Total("Total", (self.total_revenue, self.total_expenses, self.net_profit)))
        return rows

    def to_table(self) -> list[list[Any]]:
        return rows_to_table(
            (self.group_by.value.capitalize(), "Revenue", "Expenses", "Net"), self.rows()
        )


def _group_key(
    group_by: GroupBy, entry: JournalEntry, line, account: Account
) -> Optional[str]:
    if group_by == GroupBy.PLOT:
        return line.plot_id
    if group_by == GroupBy.SEASON:
        return line.season_id
    if group_by == GroupBy.CATEGORY:
        return entry.category or None
    return str(account.id)


def build_profitability(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
    group_by: GroupBy = GroupBy.PLOT,
    labels: Optional[Mapping[str, str]] = None,
) -> ProfitabilityReport:
    """Build a profitability report for the filtered period.

    Args:
        accounts: Chart of accounts
        entries: Journal entries
        report_filter: Date range / plot / season filter
        group_by: Breakdown key
        labels: Optional display names for plot or season IDs

    Returns:
        ProfitabilityReport; groups are sorted by net profit, highest first
    """
    report_filter = report_filter or ReportFilter()
    labels = labels or {}
    accounts_by_id = {account.id: account for account in accounts}

    revenue: dict[Optional[str], Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[Optional[str], Decimal] = defaultdict(lambda: ZERO)

    for entry, line in iter_filtered_lines(entries, report_filter):
        account = accounts_by_id.get(line.account_id)
        if account is None:
            continue
        if account.type == AccountType.INCOME:
            target = revenue
        elif account.type == AccountType.EXPENSE:
            target = expenses
        else:
            continue
        key = _group_key(group_by, entry, line, account)
        target[key] += signed_amount(account.type, line.type, line.amount)

    def label_for(key: Optional[str]) -> str:
        if group_by == GroupBy.ACCOUNT and key is not None:
            return accounts_by_id[int(key)].name
        if key is None:
            return UNCATEGORIZED if group_by == GroupBy.CATEGORY else UNASSIGNED
        return labels.get(key, key)

    groups = [
        ProfitabilityGroup(
            key=key,
            label=label_for(key),
            revenue=revenue.get(key, ZERO),
            expenses=expenses.get(key, ZERO),
        )
        for key in set(revenue) | set(expenses)
    ]
    groups.sort(key=lambda group: (-group.net, group.label))

    return ProfitabilityReport(
        report_filter=report_filter,
        group_by=group_by,
        groups=tuple(groups),
        total_revenue=_sum(revenue.values()),
        total_expenses=_sum(expenses.values()),
    )


# Expense by Category


@dataclass(frozen=True)
class CategoryExpense:
    name: str
    amount: Decimal
    share: Decimal


@dataclass(frozen=True)
class ExpenseByCategoryReport:
    """Expense movement grouped by journal entry category."""

    report_filter: ReportFilter
    categories: tuple[CategoryExpense, ...]
    total_expenses: Decimal

    def rows(self) -> list[Row]:
        rows: list[Row] = [
            DataRow(item.name, (item.amount, item.share)) for item in self.categories
        ]
        total_share = Decimal("100.00") if self.total_expenses > 0 else Decimal("0.00")
        rows.append(Total("Total Expenses", (self.total_expenses, total_share)))
        return rows

    def to_table(self) -> list[list[Any]]:
        return rows_to_table(("Category", "Amount", "% of Total"), self.rows())


def build_expense_by_category(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
    currency: Optional[str] = None,
) -> ExpenseByCategoryReport:
    """Group expense movement by entry category.

    Only categories with a positive total are kept, largest first. When
    ``currency`` is given, entries in other currencies are ignored.
    """
    report_filter = report_filter or ReportFilter()
    accounts_by_id = {account.id: account for account in accounts}
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for entry, line in iter_filtered_lines(entries, report_filter):
        if currency is not None and entry.currency.upper() != currency.upper():
            continue
        account = accounts_by_id.get(line.account_id)
        if account is None or account.type != AccountType.EXPENSE:
            continue
        totals[entry.category or UNCATEGORIZED] += signed_amount(
            account.type, line.type, line.amount
        )

    positive = sorted(
        ((name, amount) for name, amount in totals.items() if amount > 0),
        key=lambda item: (-item[1], item[0]),
    )
    total = _sum(amount for _name, amount in positive)

    def share(amount: Decimal) -> Decimal:
        if total <= 0:
            return Decimal("0.00")
        return (amount / total * 100).quantize(Decimal("0.01"))

    return ExpenseByCategoryReport(
        report_filter=report_filter,
        categories=tuple(
            CategoryExpense(name, amount, share(amount)) for name, amount in positive
        ),
        total_expenses=total,
    )
