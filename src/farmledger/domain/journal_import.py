"""CSV import of journal entries."""

import csv
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from farmledger.database.base import Database
from farmledger.domain.entities import Account, JournalEntryDraft, JournalEntryLine, LineType
from farmledger.domain.errors import ValidationError
from farmledger.domain.journal import JournalService
from farmledger.domain.ledger import BALANCE_TOLERANCE
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "Date",
    "Description",
    "Category",
    "Currency",
    "Debit Account",
    "Debit Amount",
    "Credit Account",
    "Credit Amount",
)
# Optional columns tagging both lines of the entry
PLOT_COLUMN = "Plot"
SEASON_COLUMN = "Season"


class JournalImportService:
    """Service for importing journal entries from CSV files.

    Each row becomes one entry with a single debit and a single credit line.
    The import is all-or-nothing: the first bad row aborts it and nothing is
    stored.
    """

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.journal_service = JournalService(db)

    def import_csv(self, csv_file_path: str) -> dict[str, Any]:
        """Import journal entries from a CSV file.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Dict with import results:
            - imported: number of entries created
            - entry_ids: IDs of the created entries

        Raises:
            ValidationError: If a column is missing or any row is invalid
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            csv_columns = reader.fieldnames
            if csv_columns is None:
                raise ValidationError("CSV file has no columns")

            missing_columns = [col for col in REQUIRED_COLUMNS if col not in csv_columns]
            if missing_columns:
                raise ValidationError(
                    f"CSV file missing required columns: {', '.join(missing_columns)}"
                )

            accounts = self.db.list_accounts()
            drafts = []
            for row_num, row in enumerate(reader, start=2):  # header is row 1
                if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                    continue
                try:
                    draft = self._row_to_draft(row, accounts)
                    drafts.append(
                        self.journal_service.build_draft(
                            draft.date, draft.description, draft.currency, draft.lines, draft.category
                        )
                    )
                except ValueError as e:
                    raise ValidationError(f"Row {row_num}: {e}") from e

        if not drafts:
            return {"imported": 0, "entry_ids": []}

        entry_ids = self.db.create_journal_entries(drafts)
        logger.info("Imported %d journal entries from %s", len(entry_ids), csv_path.name)
        return {"imported": len(entry_ids), "entry_ids": entry_ids}

    @staticmethod
    def _cell(row: dict, column: str) -> str:
        return (row.get(column) or "").strip()

    def _row_to_draft(self, row: dict, accounts: list[Account]) -> JournalEntryDraft:
        debit_amount = self._parse_row_amount(row, "Debit Amount")
        credit_amount = self._parse_row_amount(row, "Credit Amount")
        if abs(debit_amount - credit_amount) >= BALANCE_TOLERANCE:
            raise ValidationError("Debit and Credit amounts do not match")

        currency = self._cell(row, "Currency")
        if not currency:
            raise ValidationError("Currency is missing")

        date_str = self._cell(row, "Date")
        if not date_str:
            raise ValidationError("Date is missing")
        entry_date = parse_date(date_str)

        debit_account = self._find_account(accounts, self._cell(row, "Debit Account"), currency, "Debit")
        credit_account = self._find_account(accounts, self._cell(row, "Credit Account"), currency, "Credit")

        plot_id = self._cell(row, PLOT_COLUMN) or None
        season_id = self._cell(row, SEASON_COLUMN) or None

        return JournalEntryDraft(
            date=entry_date,
            description=self._cell(row, "Description"),
            currency=currency.upper(),
            category=self._cell(row, "Category") or None,
            lines=(
                JournalEntryLine(debit_account.id, LineType.DEBIT, debit_amount, plot_id, season_id),
                JournalEntryLine(credit_account.id, LineType.CREDIT, credit_amount, plot_id, season_id),
            ),
        )

    def _parse_row_amount(self, row: dict, column: str) -> Decimal:
        value = self._cell(row, column)
        if not value:
            raise ValidationError(f"{column} is missing")
        return parse_amount(value)

    @staticmethod
    def _find_account(accounts: list[Account], name: str, currency: str, side: str) -> Account:
        for account in accounts:
            if account.name.lower() == name.lower() and account.currency.lower() == currency.lower():
                return account
        raise ValidationError(f'{side} account "{name}" with currency "{currency}" not found')
