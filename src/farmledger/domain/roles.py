"""Account role and expense classification service."""

import logging
from typing import Optional

from farmledger.database.base import Database
from farmledger.domain.base_year import default_expense_classification
from farmledger.domain.entities import Account, AccountRole, AccountType, ExpenseClass
from farmledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    role_not_bound,
)

logger = logging.getLogger(__name__)

# Account type each role must be bound to
ROLE_ACCOUNT_TYPES = {
    AccountRole.CASH: AccountType.ASSET,
    AccountRole.RECEIVABLES: AccountType.ASSET,
    AccountRole.INVENTORY: AccountType.ASSET,
    AccountRole.EQUIPMENT: AccountType.ASSET,
    AccountRole.LAND: AccountType.ASSET,
    AccountRole.PAYABLES: AccountType.LIABILITY,
    AccountRole.CAPITAL: AccountType.EQUITY,
    AccountRole.SALES: AccountType.INCOME,
    AccountRole.WAGES: AccountType.EXPENSE,
}


def parse_role(value: str | AccountRole) -> AccountRole:
    """Resolve a role from its name, ignoring case.

    Raises:
        ValidationError: If the role is unknown
    """
    try:
        return AccountRole(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(role.value for role in AccountRole)
        raise ValidationError(f"Invalid role '{value}'. Must be one of: {valid}")


class AccountRoleService:
    """Service for binding well-known roles to accounts."""

    def __init__(self, db: Database):
        """Initialize role service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def bind_role(self, role: str | AccountRole, account_id: int) -> None:
        """Bind a role to an account, replacing any earlier binding.

        Raises:
            ValidationError: If the role is unknown or the account has the wrong type
            NotFoundError: If account not found
        """
        role = parse_role(role)
        account = self._require_account(account_id)
        expected = ROLE_ACCOUNT_TYPES[role]
        if account.type != expected:
            article = "an" if expected.value[0] in "AEIOU" else "a"
            raise ValidationError(
                f"Role '{role.value}' needs {article} {expected.value} account, "
                f"but '{account.name}' is {account.type.value}"
            )
        self.db.set_account_role(role, account_id)
        logger.info("Bound role %s to account %s", role.value, account_id)

    def unbind_role(self, role: str | AccountRole) -> None:
        """Remove a role binding."""
        self.db.clear_account_role(parse_role(role))

    def get_roles(self) -> dict[AccountRole, int]:
        """Return current bindings as role -> account ID."""
        return {binding.role: binding.account_id for binding in self.db.list_account_roles()}

    def resolve_role(self, role: str | AccountRole) -> Account:
        """Return the account bound to a role.

        Raises:
            NotFoundError: If the role is unbound or its account was deleted
        """
        role = parse_role(role)
        account_id = self.get_roles().get(role)
        if account_id is None:
            raise NotFoundError(role_not_bound(role.value))
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(role_not_bound(role.value))
        return account

    def classify_expense(self, account_id: int, expense_class: Optional[str | ExpenseClass]) -> None:
        """Set (or clear, with None) the projection bucket of an expense account.

        Raises:
            NotFoundError: If account not found
            ValidationError: If the account is not an expense account or the
                class is unknown
        """
        account = self._require_account(account_id)
        if account.type != AccountType.EXPENSE:
            raise ValidationError(f"Account '{account.name}' is not an Expense account")
        if expense_class is None:
            self.db.clear_expense_classification(account_id)
            return
        try:
            expense_class = ExpenseClass(str(expense_class).strip().lower())
        except ValueError:
            valid = ", ".join(c.value for c in ExpenseClass)
            raise ValidationError(f"Invalid expense class '{expense_class}'. Must be one of: {valid}")
        self.db.set_expense_classification(account_id, expense_class)

    def expense_classification(self) -> dict[int, ExpenseClass]:
        """Effective classification: name-based defaults overridden by stored values."""
        classification = default_expense_classification(self.db.list_accounts())
        classification.update(self.db.get_expense_classifications())
        return classification
