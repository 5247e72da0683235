"""Sales posting service."""

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

SALES_CATEGORY = "Farm Sales"


@dataclass(frozen=True)
class SaleItem:
    """Quantity of one product sold at a unit price."""

    product: str
    quantity: Decimal
    unit_price: Decimal

    @property
    def amount(self) -> Decimal:
        return to_cents(Decimal(self.quantity) * Decimal(self.unit_price))


def sale_total(items: Sequence[SaleItem]) -> Decimal:
    return sum((item.amount for item in items), Decimal("0"))


class SalesService:
    """Posts credit sales from the sales account to receivables."""

    def __init__(self, db: Database):
        self.db = db
        self.journal_service = JournalService(db)
        self.role_service = AccountRoleService(db)

    def record_sale(
        self,
        sale_date: date,
        customer: str,
        items: Sequence[SaleItem],
        invoice_number: Optional[str] = None,
        plot_id: Optional[str] = None,
        season_id: Optional[str] = None,
    ) -> int:
        """Post a sale on credit: debit receivables, credit sales.

        Args:
            sale_date: Date of the sale
            customer: Customer name
            items: Products sold
            invoice_number: Invoice reference for the description
            plot_id: Plot the produce came from
            season_id: Season the produce came from

        Returns:
            Journal entry ID

        Raises:
            ValidationError: If the customer is blank, an item has a
                non-positive quantity or negative price, or the total is
                not positive
            NotFoundError: If the receivables or sales role is not bound
        """
        customer = customer.strip()
        if not customer:
            raise ValidationError("Customer cannot be empty")
        for item in items:
            if Decimal(item.quantity) <= 0:
                raise ValidationError(f"Quantity of '{item.product}' must be positive")
            if Decimal(item.unit_price) < 0:
                raise ValidationError(f"Unit price of '{item.product}' must not be negative")

        total = sale_total(items)
        if total <= 0:
            raise ValidationError("Sale total must be positive")

        receivables_account = self.role_service.resolve_role(AccountRole.RECEIVABLES)
        sales_account = self.role_service.resolve_role(AccountRole.SALES)

        description = f"Sale to {customer}"
        if invoice_number:
            description += f" - Invoice {invoice_number}"

        entry_id = self.journal_service.create_entry(
            entry_date=sale_date,
            description=description,
            currency=sales_account.currency,
            category=SALES_CATEGORY,
            lines=[
                JournalEntryLine(receivables_account.id, LineType.DEBIT, total, plot_id, season_id),
                JournalEntryLine(sales_account.id, LineType.CREDIT, total, plot_id, season_id),
            ],
        )
        logger.info("Posted sale of %s %s to %s as entry %s", total, sales_account.currency, customer, entry_id)
        return entry_id
