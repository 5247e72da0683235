"""Payroll posting service."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from farmledger.database.base import Database
from farmledger.domain.entities import AccountRole, JournalEntryLine, LineType
from farmledger.domain.errors import ValidationError
from farmledger.domain.journal import JournalService
from farmledger.domain.ledger import to_cents
from farmledger.domain.roles import AccountRoleService

logger = logging.getLogger(__name__)

PAYROLL_CATEGORY = "Salaries"


@dataclass(frozen=True)
class PayItem:
    """Hours worked by one worker in the pay period."""

    worker: str
    hours: Decimal
    pay_rate: Decimal

    @property
    def gross_pay(self) -> Decimal:
        return to_cents(Decimal(self.hours) * Decimal(self.pay_rate))


def payroll_total(pay_items: Sequence[PayItem], amount: Optional[Decimal] = None) -> Decimal:
    """Sum of gross pay plus any lump sum, in cents."""
    total = sum((item.gross_pay for item in pay_items), Decimal("0"))
    if amount is not None:
        total += to_cents(amount)
    return total


class PayrollService:
    """Posts payroll as a journal entry from the wages account to cash."""

    def __init__(self, db: Database):
        self.db = db
        self.journal_service = JournalService(db)
        self.role_service = AccountRoleService(db)

    def run_payroll(
        self,
        period_start: date,
        period_end: date,
        pay_items: Sequence[PayItem] = (),
        amount: Optional[Decimal] = None,
        entry_date: Optional[date] = None,
    ) -> int:
        """Post payroll for a pay period.

        The total is the sum of the pay items' gross pay, plus ``amount``
        when given; each figure is rounded to the cent.

        Args:
            period_start: First day of the pay period
            period_end: Last day of the pay period
            pay_items: Hours and rates per worker
            amount: Additional lump sum to pay
            entry_date: Posting date (defaults to the period end)

        Returns:
            Journal entry ID

        Raises:
            ValidationError: If the period is inverted or the total is not positive
            NotFoundError: If the wages or cash role is not bound
        """
        if period_end < period_start:
            raise ValidationError("Pay period end is before its start")

        total = payroll_total(pay_items, amount)
        if total <= 0:
            raise ValidationError("No payroll to process for the selected period")

        wages_account = self.role_service.resolve_role(AccountRole.WAGES)
        cash_account = self.role_service.resolve_role(AccountRole.CASH)

        entry_id = self.journal_service.create_entry(
            entry_date=entry_date or period_end,
            description=f"Payroll for period {period_start.isoformat()} to {period_end.isoformat()}",
            currency=cash_account.currency,
            category=PAYROLL_CATEGORY,
            lines=[
                JournalEntryLine(wages_account.id, LineType.DEBIT, total),
                JournalEntryLine(cash_account.id, LineType.CREDIT, total),
            ],
        )
        logger.info("Posted payroll of %s %s as entry %s", total, cash_account.currency, entry_id)
        return entry_id
