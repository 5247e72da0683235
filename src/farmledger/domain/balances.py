"""Point-in-time account balances.

Closing balances are folded from each account's initial balance plus every
qualifying journal line dated on or before the filter's end date. Nothing is
cached: callers recompute from the current records on every read.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from farmledger.domain.entities import (
    Account,
    JournalEntry,
    LedgerDiagnostic,
    ReportFilter,
)
from farmledger.domain.ledger import is_balanced, signed_amount

logger = logging.getLogger(__name__)


def iter_filtered_lines(
    entries: Sequence[JournalEntry],
    report_filter: ReportFilter,
    point_in_time: bool = False,
):
    """Yield (entry, line) pairs that pass the date, plot and season filters.

    Args:
        entries: Journal entries to scan
        report_filter: Filter to apply
        point_in_time: If True, ignore the filter's start date
    """
    date_filter = report_filter.point_in_time() if point_in_time else report_filter
    for entry in entries:
        if not date_filter.includes_date(entry.date):
            continue
        for line in entry.lines:
            if report_filter.matches_line(line):
                yield entry, line


def compute_balances(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    report_filter: Optional[ReportFilter] = None,
    diagnostics: Optional[list[LedgerDiagnostic]] = None,
) -> dict[int, Decimal]:
    """Compute the closing balance of every account.

    Only the filter's end date applies; the start date is ignored because a
    closing balance always includes everything before it. Lines that point
    at unknown accounts are skipped. Unbalanced entries are folded as-is.

    Args:
        accounts: Chart of accounts
        entries: Journal entries
        report_filter: Optional end date / plot / season filter
        diagnostics: Optional list that receives a LedgerDiagnostic for every
            orphan line and unbalanced entry encountered

    Returns:
        Dict mapping every account ID to its closing balance
    """
    report_filter = report_filter or ReportFilter()
    accounts_by_id = {account.id: account for account in accounts}
    balances = {account.id: Decimal(account.initial_balance) for account in accounts}

    checked_entries: set[int] = set()
    for entry, line in iter_filtered_lines(entries, report_filter, point_in_time=True):
        if diagnostics is not None and entry.id not in checked_entries:
            checked_entries.add(entry.id)
            if not is_balanced(entry.lines):
                logger.warning("Journal entry %s is not balanced", entry.id)
                diagnostics.append(
                    LedgerDiagnostic(
                        kind="unbalanced_entry",
                        entry_id=entry.id,
                        message=f"Journal entry {entry.id} is not balanced",
                    )
                )

        account = accounts_by_id.get(line.account_id)
        if account is None:
            if diagnostics is not None:
                diagnostics.append(
                    LedgerDiagnostic(
                        kind="orphan_line",
                        entry_id=entry.id,
                        account_id=line.account_id,
                        message=(
                            f"Journal entry {entry.id} references unknown "
                            f"account {line.account_id}"
                        ),
                    )
                )
            continue

        balances[account.id] += signed_amount(account.type, line.type, line.amount)

    return balances
