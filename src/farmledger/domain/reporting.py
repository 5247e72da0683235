"""Report and projection services.

These load the ledger for one reporting currency and hand it to the pure
builders in ``reports`` and ``projection``. Nothing is cached; every call
recomputes from the stored accounts and entries.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from farmledger.database.base import Database
from farmledger.domain.account import normalize_currency
from farmledger.domain.balances import compute_balances
from farmledger.domain.base_year import derive_base_year
from farmledger.domain.entities import (
    Account,
    GroupBy,
    JournalEntry,
    LedgerDiagnostic,
    ReportFilter,
)
from farmledger.domain.projection import (
    DEFAULT_PROJECTION_YEARS,
    BaseYearData,
    ProjectedYearData,
    Scenario,
    ScenarioAssumptions,
    default_assumptions,
    project,
)
from farmledger.domain.reports import (
    BalanceSheet,
    ExpenseByCategoryReport,
    IncomeStatement,
    ProfitabilityReport,
    TrialBalance,
    build_balance_sheet,
    build_expense_by_category,
    build_income_statement,
    build_profitability,
    build_trial_balance,
)
from farmledger.domain.roles import AccountRoleService

logger = logging.getLogger(__name__)


class ReportService:
    """Service for building financial reports in one currency."""

    def __init__(self, db: Database, currency: str = "USD"):
        """Initialize report service.

        Args:
            db: Database instance
            currency: Reporting currency; accounts and entries in other
                currencies are left out
        """
        self.db = db
        self.currency = normalize_currency(currency)

    def load_ledger(self) -> tuple[list[Account], list[JournalEntry]]:
        """Return the accounts and entries in the reporting currency."""
        accounts = self.db.list_accounts(currency=self.currency)
        entries = self.db.list_journal_entries(currency=self.currency)
        logger.debug(
            "Loaded %d accounts and %d entries in %s", len(accounts), len(entries), self.currency
        )
        return accounts, entries

    def diagnostics(self) -> list[LedgerDiagnostic]:
        """Scan the ledger for orphan lines and unbalanced entries."""
        accounts, entries = self.load_ledger()
        found: list[LedgerDiagnostic] = []
        compute_balances(accounts, entries, diagnostics=found)
        return found

    def balance_sheet(self, report_filter: Optional[ReportFilter] = None) -> BalanceSheet:
        accounts, entries = self.load_ledger()
        report = build_balance_sheet(accounts, entries, report_filter)
        if not report.is_balanced:
            logger.warning("Balance sheet is out of balance by %s", report.difference)
        return report

    def trial_balance(self, report_filter: Optional[ReportFilter] = None) -> TrialBalance:
        accounts, entries = self.load_ledger()
        return build_trial_balance(accounts, entries, report_filter)

    def income_statement(self, report_filter: Optional[ReportFilter] = None) -> IncomeStatement:
        accounts, entries = self.load_ledger()
        return build_income_statement(accounts, entries, report_filter)

    def profitability(
        self,
        report_filter: Optional[ReportFilter] = None,
        group_by: GroupBy = GroupBy.PLOT,
    ) -> ProfitabilityReport:
        accounts, entries = self.load_ledger()
        return build_profitability(accounts, entries, report_filter, group_by=group_by)

    def expenses_by_category(
        self, report_filter: Optional[ReportFilter] = None
    ) -> ExpenseByCategoryReport:
        accounts, entries = self.load_ledger()
        return build_expense_by_category(accounts, entries, report_filter)


class ProjectionService:
    """Service for projecting the ledger forward under a scenario."""

    def __init__(self, db: Database, currency: str = "USD"):
        """Initialize projection service.

        Args:
            db: Database instance
            currency: Currency of the ledger the base year is derived from
        """
        self.db = db
        self.report_service = ReportService(db, currency)
        self.role_service = AccountRoleService(db)

    def base_year(
        self, as_of: Optional[date] = None, inventory_value: Optional[Decimal] = None
    ) -> BaseYearData:
        """Derive the base year from the trailing twelve months ending at ``as_of``."""
        accounts, entries = self.report_service.load_ledger()
        return derive_base_year(
            accounts,
            entries,
            roles=self.role_service.get_roles(),
            classification=self.role_service.expense_classification(),
            as_of=as_of,
            inventory_value=inventory_value,
        )

    def assumptions_for(self, scenario: Scenario | str, **overrides) -> ScenarioAssumptions:
        """Return a scenario's stock assumptions with any non-None overrides applied."""
        return default_assumptions()[Scenario(scenario)].with_overrides(**overrides)

    def project(
        self,
        scenario: Scenario | str = Scenario.BASE,
        years: int = DEFAULT_PROJECTION_YEARS,
        as_of: Optional[date] = None,
        inventory_value: Optional[Decimal] = None,
        **overrides,
    ) -> list[ProjectedYearData]:
        """Project the ledger forward.

        Args:
            scenario: Named scenario whose assumptions are used
            years: Number of years to project
            as_of: End of the base year (defaults to today)
            inventory_value: Stock valuation overriding the inventory account
            **overrides: Individual ScenarioAssumptions fields to replace

        Returns:
            One ProjectedYearData per projected year
        """
        assumptions = self.assumptions_for(scenario, **overrides)
        base = self.base_year(as_of=as_of, inventory_value=inventory_value)
        projections = project(base, assumptions, years)
        for year in projections:
            if not year.balance_sheet.is_balanced:
                logger.warning("Projected balance sheet for %s does not balance", year.year)
        return projections
