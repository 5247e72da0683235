"""Account domain service."""

import logging
import re
from decimal import Decimal
from typing import Optional

from farmledger.database.base import Database
from farmledger.domain.entities import Account as AccountEntity, AccountType
from farmledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)

logger = logging.getLogger(__name__)

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def normalize_currency(currency: str) -> str:
    """Upper-case a currency code and check it looks like ISO 4217.

    Raises:
        ValidationError: If the code is not three letters
    """
    code = (currency or "").strip().upper()
    if not CURRENCY_PATTERN.match(code):
        raise ValidationError(f"Invalid currency code '{currency}'. Use a three-letter code such as USD.")
    return code


def parse_account_type(value: str | AccountType) -> AccountType:
    """Resolve an account type from its name, ignoring case.

    Raises:
        ValidationError: If the value is not a known account type
    """
    if isinstance(value, AccountType):
        return value
    for account_type in AccountType:
        if account_type.value.lower() == str(value).strip().lower():
            return account_type
    valid = ", ".join(t.value for t in AccountType)
    raise ValidationError(f"Invalid account type '{value}'. Must be one of: {valid}")


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        for acc in self.db.list_accounts():
            if acc.id != exclude_id and acc.name.lower() == name.lower():
                raise ConflictError(duplicate_account_name(name))

    def create_account(
        self,
        name: str,
        account_type: str | AccountType,
        currency: str,
        initial_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Account name (unique, case-insensitive)
            account_type: Asset, Liability, Equity, Income or Expense
            currency: Three-letter currency code
            initial_balance: Opening balance in the account's natural direction

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the type/currency is invalid
            ConflictError: If account name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        account_type = parse_account_type(account_type)
        currency = normalize_currency(currency)
        self._check_name_available(name)

        account_id = self.db.create_account(
            name=name,
            account_type=account_type,
            currency=currency,
            initial_balance=Decimal(initial_balance),
        )
        logger.info("Created %s account %s (%s)", account_type.value, account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, currency: Optional[str] = None) -> list[AccountEntity]:
        """List accounts, optionally only those in one currency."""
        if currency is not None:
            currency = normalize_currency(currency)
        return self.db.list_accounts(currency=currency)

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str | AccountType] = None,
        currency: Optional[str] = None,
        initial_balance: Optional[Decimal] = None,
    ) -> None:
        """Update an account.

        Changing the type of an account that already has postings is allowed
        but flips the sign of every historical line, so a warning is logged.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is taken by another account
            ValidationError: If the new type or currency is invalid
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name cannot be empty")
            self._check_name_available(name, exclude_id=account_id)
        if account_type is not None:
            account_type = parse_account_type(account_type)
            if account_type != account.type:
                line_count = self.db.get_account_line_count(account_id)
                if line_count:
                    logger.warning(
                        "Account %s changes type from %s to %s with %d posted lines",
                        account_id,
                        account.type.value,
                        account_type.value,
                        line_count,
                    )
        if currency is not None:
            currency = normalize_currency(currency)

        self.db.update_account(
            account_id,
            name=name,
            account_type=account_type,
            currency=currency,
            initial_balance=Decimal(initial_balance) if initial_balance is not None else None,
        )

    def delete_account(self, account_id: int) -> int:
        """Delete an account.

        Journal lines posted to the account are kept; the calculators skip
        them from then on.

        Args:
            account_id: Account ID to delete

        Returns:
            Number of journal lines left without an account

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        orphaned = self.db.get_account_line_count(account_id)
        self.db.delete_account(account_id)
        if orphaned:
            logger.warning(
                "Deleted account %s (%s); %d journal line%s now reference a missing account",
                account_id,
                account.name,
                orphaned,
                "s" if orphaned != 1 else "",
            )
        return orphaned
