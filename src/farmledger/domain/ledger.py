"""Double-entry rules shared by every calculator and validator.

Asset and Expense accounts carry their balance on the debit side; Liability,
Equity and Income accounts carry it on the credit side. ``signed_amount`` is
the single place this convention is applied.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from farmledger.domain.entities import Account, AccountType, JournalEntryLine, LineType
from farmledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    currency_mismatch,
    unbalanced_entry,
)

BALANCE_TOLERANCE = Decimal("0.01")

# Smallest amount the store keeps; line amounts must be whole multiples of it
CENT = Decimal("0.01")


def to_cents(amount) -> Decimal:
    """Round an amount to the cent, halves away from zero."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def is_debit_normal(account_type: AccountType) -> bool:
    """Return True if debits increase accounts of this type."""
    return account_type in DEBIT_NORMAL_TYPES


def signed_amount(account_type: AccountType, line_type: LineType, amount: Decimal) -> Decimal:
    """Return the change a line makes to its account's natural balance."""
    amount = Decimal(amount)
    if is_debit_normal(account_type):
        return amount if line_type == LineType.DEBIT else -amount
    return amount if line_type == LineType.CREDIT else -amount


def entry_totals(lines: Sequence[JournalEntryLine]) -> tuple[Decimal, Decimal]:
    """Return (total debits, total credits) for a set of lines."""
    debits = sum(
        (Decimal(line.amount) for line in lines if line.type == LineType.DEBIT),
        Decimal("0"),
    )
    credits = sum(
        (Decimal(line.amount) for line in lines if line.type == LineType.CREDIT),
        Decimal("0"),
    )
    return debits, credits


def is_balanced(lines: Sequence[JournalEntryLine]) -> bool:
    """Return True if debits equal credits within tolerance and are non-zero."""
    debits, credits = entry_totals(lines)
    return abs(debits - credits) < BALANCE_TOLERANCE and debits > 0


def validate_lines(lines: Sequence[JournalEntryLine]) -> None:
    """Validate the shape and balance of a set of journal lines.

    Raises:
        ValidationError: If there are fewer than two lines, a negative
            amount, an amount with more than two decimal places, or the
            debits and credits do not balance
    """
    if len(lines) < 2:
        raise ValidationError("A journal entry needs at least two lines")

    for index, line in enumerate(lines, start=1):
        if Decimal(line.amount) < 0:
            raise ValidationError(f"Line {index}: amount must not be negative")
        if Decimal(line.amount) != Decimal(line.amount).quantize(CENT):
            raise ValidationError(
                f"Line {index}: amount {line.amount} has more than two decimal places"
            )

    debits, credits = entry_totals(lines)
    if debits <= 0:
        raise ValidationError("A journal entry must move a positive amount")
    if abs(debits - credits) >= BALANCE_TOLERANCE:
        raise ValidationError(unbalanced_entry(debits, credits))


def validate_entry(
    currency: str,
    lines: Sequence[JournalEntryLine],
    accounts_by_id: Mapping[int, Account],
) -> None:
    """Validate a journal entry against the chart of accounts.

    Args:
        currency: Entry currency code
        lines: Entry lines
        accounts_by_id: Known accounts keyed by ID

    Raises:
        ValidationError: If the lines are malformed or unbalanced, or a line's
            account uses another currency
        NotFoundError: If a line references an unknown account
    """
    validate_lines(lines)

    for line in lines:
        account = accounts_by_id.get(line.account_id)
        if account is None:
            raise NotFoundError(account_not_found(line.account_id))
        if account.currency.upper() != currency.upper():
            raise ValidationError(
                currency_mismatch(account.name, account.currency, currency)
            )
