"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def unbalanced_entry(total_debits: Decimal, total_credits: Decimal) -> str:
    """Return message when debits and credits disagree."""
    return (
        f"Entry is not balanced: debits {total_debits:,.2f} "
        f"!= credits {total_credits:,.2f}"
    )


def currency_mismatch(account_name: str, account_currency: str, entry_currency: str) -> str:
    """Return message when a line's account uses another currency."""
    return (
        f"Account '{account_name}' uses {account_currency}, "
        f"but the entry is in {entry_currency}"
    )


def role_not_bound(role: str) -> str:
    """Return message for an account role without a binding."""
    return f"No account is bound to role '{role}'. Use 'farmledger role bind' first."
