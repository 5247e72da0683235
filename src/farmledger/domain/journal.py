"""Journal entry domain service."""

import logging
from datetime import date
from typing import Optional, Sequence

from farmledger.database.base import Database
from farmledger.domain.account import normalize_currency
from farmledger.domain.entities import (
    JournalEntry as JournalEntryEntity,
    JournalEntryDraft,
    JournalEntryLine,
)
from farmledger.domain.errors import NotFoundError, ValidationError, entry_not_found
from farmledger.domain.ledger import entry_totals, validate_entry

logger = logging.getLogger(__name__)

# Suggested categories; entries may use any free text
JOURNAL_CATEGORIES = sorted(
    [
        "Admin Expenses",
        "Bank Charges",
        "Bonuses & Benefits",
        "Building Maintenance",
        "Communication Tools",
        "Computers & Printers",
        "Electricity",
        "Farm Equipment",
        "Farm Sales",
        "Farm Tools",
        "Farm-In-Put",
        "Fees and Charges",
        "Fertilizer",
        "Furniture",
        "Harvest Expenses",
        "Insurance",
        "Internet",
        "IT Systems & Software",
        "Legal Fees",
        "Maintenance & Cleaning",
        "Office Space",
        "Recruitment",
        "Rent",
        "Salaries",
        "Seed-Cassava Stick",
        "Seed-Maize",
        "Security Systems",
        "Stationery",
        "Taxes",
        "Training",
        "Transportation",
        "Travel/Farm Visit",
        "Utilities",
        "Water",
        "Weedicide",
        "Other",
    ]
)


class JournalService:
    """Service for recording and editing journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_draft(
        self,
        entry_date: date,
        description: str,
        currency: str,
        lines: Sequence[JournalEntryLine],
        category: Optional[str] = None,
    ) -> JournalEntryDraft:
        """Validate an entry against the current chart of accounts.

        Returns:
            JournalEntryDraft ready to be stored

        Raises:
            ValidationError: If the entry is malformed, unbalanced or mixes currencies
            NotFoundError: If a line references an unknown account
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description cannot be empty")
        currency = normalize_currency(currency)
        accounts_by_id = {account.id: account for account in self.db.list_accounts()}
        validate_entry(currency, lines, accounts_by_id)

        return JournalEntryDraft(
            date=entry_date,
            description=description,
            currency=currency,
            lines=tuple(lines),
            category=(category or "").strip() or None,
        )

    def create_entry(
        self,
        entry_date: date,
        description: str,
        currency: str,
        lines: Sequence[JournalEntryLine],
        category: Optional[str] = None,
    ) -> int:
        """Create a balanced journal entry.

        Args:
            entry_date: Entry date
            description: Entry description
            currency: Currency code shared by every line's account
            lines: Debit and credit lines (at least two)
            category: Optional free-text category

        Returns:
            Journal entry ID

        Raises:
            ValidationError: If the entry is malformed, unbalanced or mixes currencies
            NotFoundError: If a line references an unknown account
        """
        draft = self.build_draft(entry_date, description, currency, lines, category)
        entry_id = self.db.create_journal_entry(draft)
        debits, _credits = entry_totals(draft.lines)
        logger.info("Recorded journal entry %s for %s %s", entry_id, debits, draft.currency)
        return entry_id

    def create_entries(self, drafts: Sequence[JournalEntryDraft]) -> list[int]:
        """Create several entries, storing none unless all are valid.

        Raises:
            ValidationError: If any entry is invalid; the message names the
                1-based position of the offending entry
        """
        validated = []
        for index, draft in enumerate(drafts, start=1):
            try:
                validated.append(
                    self.build_draft(
                        draft.date, draft.description, draft.currency, draft.lines, draft.category
                    )
                )
            except ValidationError as e:
                raise ValidationError(f"Entry {index}: {e}") from e
        entry_ids = self.db.create_journal_entries(validated)
        logger.info("Recorded %d journal entries", len(entry_ids))
        return entry_ids

    def get_entry(self, entry_id: int) -> Optional[JournalEntryEntity]:
        """Get journal entry by ID.

        Args:
            entry_id: Journal entry ID

        Returns:
            JournalEntry entity or None if not found
        """
        return self.db.get_journal_entry(entry_id)

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntryEntity]:
        """List journal entries with filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            currency: Optional currency filter
            account_id: Optional filter to entries touching one account

        Returns:
            List of journal entry entities ordered by date
        """
        if currency is not None:
            currency = normalize_currency(currency)
        return self.db.list_journal_entries(
            start_date=start_date,
            end_date=end_date,
            currency=currency,
            account_id=account_id,
        )

    def update_entry(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        currency: Optional[str] = None,
        lines: Optional[Sequence[JournalEntryLine]] = None,
        category: Optional[str] = None,
    ) -> None:
        """Update a journal entry; fields left as None keep their value.

        The whole entry is re-validated after the change.

        Raises:
            NotFoundError: If entry doesn't exist
            ValidationError: If the updated entry is invalid
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))

        draft = self.build_draft(
            entry_date if entry_date is not None else entry.date,
            description if description is not None else entry.description,
            currency if currency is not None else entry.currency,
            lines if lines is not None else entry.lines,
            category if category is not None else entry.category,
        )
        self.db.update_journal_entry(entry_id, draft)

    def delete_entry(self, entry_id: int) -> None:
        """Delete a journal entry.

        Args:
            entry_id: Journal entry ID to delete

        Raises:
            NotFoundError: If entry doesn't exist
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))

        self.db.delete_journal_entry(entry_id)
