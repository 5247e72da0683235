"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from farmledger.domain.entities import (
    Account,
    AccountRole,
    AccountRoleBinding,
    AccountType,
    ExpenseClass,
    JournalEntry,
    JournalEntryDraft,
)


class Database(ABC):
    """Abstract database interface for farmledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        currency: str,
        initial_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, currency: Optional[str] = None) -> list[Account]:
        """List accounts in creation order, optionally filtered by currency."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        currency: Optional[str] = None,
        initial_balance: Optional[Decimal] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account along with its role bindings and classification."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Get count of journal lines posted to an account."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(self, draft: JournalEntryDraft) -> int:
        """Store a journal entry with its lines. Returns entry ID."""
        pass

    @abstractmethod
    def create_journal_entries(self, drafts: Sequence[JournalEntryDraft]) -> list[int]:
        """Store several entries in one transaction. Returns entry IDs."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries ordered by date, then ID."""
        pass

    @abstractmethod
    def update_journal_entry(self, entry_id: int, draft: JournalEntryDraft) -> None:
        """Replace an entry's header fields and lines."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> None:
        """Delete a journal entry and its lines."""
        pass

    # Account role operations
    @abstractmethod
    def set_account_role(self, role: AccountRole, account_id: int) -> None:
        """Bind a role to an account, replacing any previous binding."""
        pass

    @abstractmethod
    def clear_account_role(self, role: AccountRole) -> None:
        """Remove a role binding if present."""
        pass

    @abstractmethod
    def list_account_roles(self) -> list[AccountRoleBinding]:
        """List all role bindings."""
        pass

    # Expense classification operations
    @abstractmethod
    def set_expense_classification(self, account_id: int, expense_class: ExpenseClass) -> None:
        """Store the projection bucket for an expense account."""
        pass

    @abstractmethod
    def clear_expense_classification(self, account_id: int) -> None:
        """Remove a stored classification if present."""
        pass

    @abstractmethod
    def get_expense_classifications(self) -> dict[int, ExpenseClass]:
        """Get stored classifications keyed by account ID."""
        pass
