"""Derive the projection base year from actual ledger data."""

import logging
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from dateutil.relativedelta import relativedelta

from farmledger.domain.balances import compute_balances
from farmledger.domain.entities import (
    Account,
    AccountRole,
    AccountType,
    ExpenseClass,
    JournalEntry,
    ReportFilter,
)
from farmledger.domain.performance import compute_period_movements
from farmledger.domain.projection import BaseYearData

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

COGS_KEYWORDS = ("cost", "seed", "fertilizer")

# Placeholder figures used when the ledger has no data for a line
FALLBACK_REVENUE = Decimal("100000")
FALLBACK_COGS = Decimal("60000")
FALLBACK_SGA = Decimal("15000")
FALLBACK_PPE = Decimal("125000")
FALLBACK_INVENTORY = Decimal("5000")


def default_expense_classification(
    accounts: Sequence[Account],
) -> dict[int, ExpenseClass]:
    """Classify expense accounts by name.

    Names containing any of COGS_KEYWORDS count as cost of sales, every
    other expense account as SG&A.
    """
    classification = {}
    for account in accounts:
        if account.type != AccountType.EXPENSE:
            continue
        name = account.name.lower()
        if any(keyword in name for keyword in COGS_KEYWORDS):
            classification[account.id] = ExpenseClass.COGS
        else:
            classification[account.id] = ExpenseClass.SGA
    return classification


def _or_fallback(value: Decimal, fallback: Decimal, label: str) -> Decimal:
    if value == 0:
        logger.info("No %s in the ledger, using placeholder %s", label, fallback)
        return fallback
    return value


def derive_base_year(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    roles: Mapping[AccountRole, int],
    classification: Optional[Mapping[int, ExpenseClass]] = None,
    as_of: Optional[date] = None,
    inventory_value: Optional[Decimal] = None,
) -> BaseYearData:
    """Build the base year the projection starts from.

    Args:
        accounts: Chart of accounts
        entries: Journal entries
        roles: Role bindings (role -> account ID); unbound roles count as 0
        classification: account ID -> ExpenseClass; unlisted expense
            accounts fall back to default_expense_classification
        as_of: Last day of the base year (defaults to today)
        inventory_value: Stock valuation overriding the inventory account

    Returns:
        BaseYearData for the trailing 12 months ending at ``as_of``
    """
    as_of = as_of or date.today()
    effective_classes = default_expense_classification(accounts)
    effective_classes.update(classification or {})

    trailing = ReportFilter(start_date=as_of - relativedelta(years=1), end_date=as_of)
    movements = compute_period_movements(accounts, entries, trailing)

    revenue = cogs = sga = ZERO
    for account in accounts:
        movement = movements.get(account.id)
        if movement is None:
            continue
        if account.type == AccountType.INCOME:
            revenue += movement
        elif effective_classes.get(account.id) == ExpenseClass.COGS:
            cogs += movement
        else:
            sga += movement

    balances = compute_balances(accounts, entries, ReportFilter(end_date=as_of))

    def role_balance(role: AccountRole) -> Decimal:
        account_id = roles.get(role)
        if account_id is None:
            return ZERO
        return balances.get(account_id, ZERO)

    ppe = role_balance(AccountRole.EQUIPMENT) + role_balance(AccountRole.LAND)
    if inventory_value is None:
        inventory = role_balance(AccountRole.INVENTORY)
    else:
        inventory = Decimal(inventory_value)

    ppe = _or_fallback(ppe, FALLBACK_PPE, "fixed assets")
    inventory = _or_fallback(inventory, FALLBACK_INVENTORY, "inventory")
    receivables = role_balance(AccountRole.RECEIVABLES)
    cash = role_balance(AccountRole.CASH)
    payables = role_balance(AccountRole.PAYABLES)
    capital = role_balance(AccountRole.CAPITAL)

    # The opening surplus absorbs whatever the role balances leave over so
    # year one opens from a balanced position.
    income_surplus = ppe + inventory + receivables + cash - capital - payables

    return BaseYearData(
        year=as_of.year,
        revenue=_or_fallback(revenue, FALLBACK_REVENUE, "revenue"),
        cogs=_or_fallback(cogs, FALLBACK_COGS, "cost of sales"),
        sga=_or_fallback(sga, FALLBACK_SGA, "SG&A"),
        ppe=ppe,
        accumulated_depreciation=ZERO,
        inventory=inventory,
        receivables=receivables,
        cash=cash,
        payables=payables,
        debt=ZERO,
        capital=capital,
        income_surplus=income_surplus,
    )
