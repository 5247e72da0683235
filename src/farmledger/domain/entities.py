"""Domain model entities for farmledger.

These are pure data classes representing ledger concepts, independent of
database schema. The calculators and report builders only ever see these
types, so they work the same whether the records came from the SQL store,
a CSV file or a test fixture.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ALL = "all"


class AccountType(str, Enum):
    """Chart of accounts classification."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSE = "Expense"


class LineType(str, Enum):
    """Side of a journal entry line."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountRole(str, Enum):
    """Well-known accounts that automations and projections look up."""

    CASH = "cash"
    WAGES = "wages"
    SALES = "sales"
    RECEIVABLES = "receivables"
    PAYABLES = "payables"
    INVENTORY = "inventory"
    EQUIPMENT = "equipment"
    LAND = "land"
    CAPITAL = "capital"


class ExpenseClass(str, Enum):
    """Projection bucket for an expense account."""

    COGS = "cogs"
    SGA = "sga"


class GroupBy(str, Enum):
    """Grouping key for the profitability breakdown."""

    PLOT = "plot"
    SEASON = "season"
    CATEGORY = "category"
    ACCOUNT = "account"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    name: str
    type: AccountType
    initial_balance: Decimal
    currency: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalEntryLine:
    """One debit or credit posting within a journal entry."""

    account_id: int
    type: LineType
    amount: Decimal
    plot_id: Optional[str] = None
    season_id: Optional[str] = None


@dataclass(frozen=True)
class JournalEntry:
    """Balanced set of journal lines recorded on one date."""

    id: int
    date: date
    description: str
    currency: str
    lines: tuple[JournalEntryLine, ...]
    category: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalEntryDraft:
    """Journal entry that has not been stored yet."""

    date: date
    description: str
    currency: str
    lines: tuple[JournalEntryLine, ...]
    category: Optional[str] = None


@dataclass(frozen=True)
class ReportFilter:
    """Filter shared verbatim by every report.

    ``plot_id`` and ``season_id`` use ``"all"`` (or None) to disable the
    dimension filter. Dates are inclusive.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    plot_id: Optional[str] = ALL
    season_id: Optional[str] = ALL

    @classmethod
    def for_year(
        cls, year: int, plot_id: Optional[str] = ALL, season_id: Optional[str] = ALL
    ) -> "ReportFilter":
        """Filter covering one calendar year."""
        return cls(
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
            plot_id=plot_id,
            season_id=season_id,
        )

    @property
    def has_date_filter(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    @property
    def plot_filter_active(self) -> bool:
        return self.plot_id is not None and self.plot_id != ALL

    @property
    def season_filter_active(self) -> bool:
        return self.season_id is not None and self.season_id != ALL

    def includes_date(self, entry_date: date) -> bool:
        """Return True if the date falls inside the (open-ended) range."""
        if self.start_date is not None and entry_date < self.start_date:
            return False
        if self.end_date is not None and entry_date > self.end_date:
            return False
        return True

    def matches_line(self, line: JournalEntryLine) -> bool:
        """Return True if the line passes the plot and season filters."""
        if self.plot_filter_active and line.plot_id != self.plot_id:
            return False
        if self.season_filter_active and line.season_id != self.season_id:
            return False
        return True

    def point_in_time(self) -> "ReportFilter":
        """Same filter with the start date dropped."""
        return ReportFilter(
            start_date=None,
            end_date=self.end_date,
            plot_id=self.plot_id,
            season_id=self.season_id,
        )


@dataclass(frozen=True)
class AccountAmount:
    """Named account figure used in report sections."""

    account_id: Optional[int]
    name: str
    balance: Decimal


@dataclass(frozen=True)
class LedgerDiagnostic:
    """Data-quality finding recorded while folding entries."""

    kind: str
    entry_id: Optional[int]
    message: str
    account_id: Optional[int] = None


@dataclass(frozen=True)
class AccountRoleBinding:
    """Binding of a well-known role to a concrete account."""

    role: AccountRole
    account_id: int
