"""Utility for resolving account names to IDs."""

from typing import Optional

from farmledger.domain.account import AccountService
from farmledger.domain.errors import NotFoundError, ValidationError


def resolve_account(
    account_service: AccountService, account: str | int, currency: Optional[str] = None
) -> int:
    """Resolve account name or ID to account ID.

    Names match case-insensitively. When ``currency`` is given, only accounts
    in that currency are considered.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)
        currency: Optional currency the account must use

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
        ValidationError: If the ID refers to an account in another currency
    """
    account_id: Optional[int] = None
    if isinstance(account, int):
        account_id = account
    else:
        try:
            account_id = int(account)
        except (ValueError, TypeError):
            pass

    if account_id is not None:
        account_obj = account_service.get_account(account_id)
        if account_obj is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        if currency is not None and account_obj.currency.upper() != currency.upper():
            raise ValidationError(
                f"Account '{account_obj.name}' uses {account_obj.currency}, not {currency.upper()}"
            )
        return account_id

    name = str(account).strip().lower()
    for acc in account_service.list_accounts(currency=currency):
        if acc.name.lower() == name:
            return acc.id

    if currency is not None:
        raise NotFoundError(f"Account '{account}' with currency {currency.upper()} not found")
    raise NotFoundError(f"Account '{account}' not found")
