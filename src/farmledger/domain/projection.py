"""Multi-year pro-forma projection engine.

Each projected year is a pure function of the previous year's revenue and
closing balance sheet plus the scenario assumptions. The base year supplies
the opening state for year one; after that every year's balance sheet is the
next year's opening state.

Percentages in ScenarioAssumptions are whole numbers (10 means 10%). Day
counts are converted with a 365-day year.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from farmledger.domain.ledger import BALANCE_TOLERANCE

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DAYS_IN_YEAR = Decimal("365")
DEFAULT_PROJECTION_YEARS = 5


class Scenario(str, Enum):
    BASE = "base"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"


@dataclass(frozen=True)
class ScenarioAssumptions:
    """Ratios, growth rates and day counts driving one scenario."""

    revenue_growth: Decimal
    cogs_ratio: Decimal
    sga_ratio: Decimal
    depreciation_rate: Decimal
    interest_expense: Decimal
    tax_rate: Decimal
    receivables_days: Decimal
    inventory_days: Decimal
    payables_days: Decimal
    capex_ratio: Decimal
    new_debt: Decimal
    debt_repayment: Decimal
    capital_injection: Decimal
    dividend_payout_ratio: Decimal

    def with_overrides(self, **overrides) -> "ScenarioAssumptions":
        """Return a copy with the given fields replaced (None values ignored)."""
        changes = {
            name: Decimal(value) for name, value in overrides.items() if value is not None
        }
        return replace(self, **changes)


BASE_ASSUMPTIONS = ScenarioAssumptions(
    revenue_growth=Decimal("10"),
    cogs_ratio=Decimal("60"),
    sga_ratio=Decimal("15"),
    depreciation_rate=Decimal("10"),
    interest_expense=ZERO,
    tax_rate=Decimal("25"),
    receivables_days=Decimal("30"),
    inventory_days=Decimal("45"),
    payables_days=Decimal("25"),
    capex_ratio=Decimal("5"),
    new_debt=ZERO,
    debt_repayment=ZERO,
    capital_injection=ZERO,
    dividend_payout_ratio=ZERO,
)


def default_assumptions() -> dict[Scenario, ScenarioAssumptions]:
    """Return the stock assumptions for every scenario."""
    return {
        Scenario.BASE: BASE_ASSUMPTIONS,
        Scenario.OPTIMISTIC: BASE_ASSUMPTIONS.with_overrides(
            revenue_growth=15, cogs_ratio=55, sga_ratio=14
        ),
        Scenario.PESSIMISTIC: BASE_ASSUMPTIONS.with_overrides(
            revenue_growth=5, cogs_ratio=65, sga_ratio=16
        ),
    }


@dataclass(frozen=True)
class ProjectedIncomeStatement:
    revenue: Decimal
    cogs: Decimal
    gross_profit: Decimal
    sga: Decimal
    depreciation: Decimal
    pbit: Decimal
    interest: Decimal
    pbt: Decimal
    tax: Decimal
    pat: Decimal
    ebitda: Decimal


@dataclass(frozen=True)
class ProjectedCashFlow:
    """Cash flow statement; outflows are stored as negative amounts."""

    pbt: Decimal
    depreciation: Decimal
    op_profit_before_wc: Decimal
    delta_inventory: Decimal
    delta_receivables: Decimal
    delta_payables: Decimal
    cash_from_ops: Decimal
    tax_paid: Decimal
    net_cfo: Decimal
    capex: Decimal
    net_cfi: Decimal
    capital_injected: Decimal
    new_debt: Decimal
    debt_repaid: Decimal
    dividends_paid: Decimal
    net_cff: Decimal
    net_change_in_cash: Decimal
    opening_cash: Decimal
    closing_cash: Decimal


@dataclass(frozen=True)
class ProjectedBalanceSheet:
    """Closing position for a projected year (or the opening base year)."""

    ppe: Decimal
    accumulated_depreciation: Decimal
    inventory: Decimal
    receivables: Decimal
    cash: Decimal
    capital: Decimal
    income_surplus: Decimal
    debt: Decimal
    payables: Decimal

    @property
    def nbv(self) -> Decimal:
        return self.ppe - self.accumulated_depreciation

    @property
    def total_current_assets(self) -> Decimal:
        return self.inventory + self.receivables + self.cash

    @property
    def total_assets(self) -> Decimal:
        return self.nbv + self.total_current_assets

    @property
    def shareholders_fund(self) -> Decimal:
        return self.capital + self.income_surplus

    @property
    def total_current_liabilities(self) -> Decimal:
        return self.payables

    @property
    def total_equity_and_liabilities(self) -> Decimal:
        return self.shareholders_fund + self.debt + self.total_current_liabilities

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_assets - self.total_equity_and_liabilities) < BALANCE_TOLERANCE


@dataclass(frozen=True)
class ProjectedYearData:
    year: int
    income_statement: ProjectedIncomeStatement
    balance_sheet: ProjectedBalanceSheet
    cash_flow: ProjectedCashFlow


@dataclass(frozen=True)
class BaseYearData:
    """Actual figures the projection starts from."""

    year: int
    revenue: Decimal
    cogs: Decimal
    sga: Decimal
    ppe: Decimal
    accumulated_depreciation: Decimal
    inventory: Decimal
    receivables: Decimal
    cash: Decimal
    payables: Decimal
    debt: Decimal
    capital: Decimal
    income_surplus: Decimal

    def opening_balance_sheet(self) -> ProjectedBalanceSheet:
        """Balance sheet that year one of the projection opens from."""
        return ProjectedBalanceSheet(
            ppe=self.ppe,
            accumulated_depreciation=self.accumulated_depreciation,
            inventory=self.inventory,
            receivables=self.receivables,
            cash=self.cash,
            capital=self.capital,
            income_surplus=self.income_surplus,
            debt=self.debt,
            payables=self.payables,
        )


def _pct(value: Decimal) -> Decimal:
    return Decimal(value) / HUNDRED


def project_year(
    prior_revenue: Decimal,
    prior: ProjectedBalanceSheet,
    assumptions: ScenarioAssumptions,
    year: int,
) -> ProjectedYearData:
    """Project one year from the previous year's revenue and balance sheet.

    Depreciation is charged on the prior net book value. Tax is only charged
    on a profit and dividends are only paid out of a profit; losses are not
    carried forward.
    """
    # Income statement
    revenue = Decimal(prior_revenue) * (1 + _pct(assumptions.revenue_growth))
    cogs = revenue * _pct(assumptions.cogs_ratio)
    gross_profit = revenue - cogs
    sga = revenue * _pct(assumptions.sga_ratio)
    depreciation = prior.nbv * _pct(assumptions.depreciation_rate)
    pbit = gross_profit - sga - depreciation
    interest = Decimal(assumptions.interest_expense)
    pbt = pbit - interest
    tax = pbt * _pct(assumptions.tax_rate) if pbt > 0 else ZERO
    pat = pbt - tax
    ebitda = pbit + depreciation

    # Working capital
    receivables = revenue * Decimal(assumptions.receivables_days) / DAYS_IN_YEAR
    inventory = cogs * Decimal(assumptions.inventory_days) / DAYS_IN_YEAR
    payables = cogs * Decimal(assumptions.payables_days) / DAYS_IN_YEAR
    delta_receivables = -(receivables - prior.receivables)
    delta_inventory = -(inventory - prior.inventory)
    delta_payables = payables - prior.payables

    # Cash flow
    capital_injection = Decimal(assumptions.capital_injection)
    new_debt = Decimal(assumptions.new_debt)
    debt_repayment = Decimal(assumptions.debt_repayment)
    capex = revenue * _pct(assumptions.capex_ratio)
    dividends = pat * _pct(assumptions.dividend_payout_ratio) if pat > 0 else ZERO

    op_profit_before_wc = pbt + depreciation
    cash_from_ops = op_profit_before_wc + delta_inventory + delta_receivables + delta_payables
    net_cfo = cash_from_ops - tax
    net_cfi = -capex
    net_cff = capital_injection + new_debt - debt_repayment - dividends
    net_change_in_cash = net_cfo + net_cfi + net_cff
    closing_cash = prior.cash + net_change_in_cash

    return ProjectedYearData(
        year=year,
        income_statement=ProjectedIncomeStatement(
            revenue=revenue,
            cogs=cogs,
            gross_profit=gross_profit,
            sga=sga,
            depreciation=depreciation,
            pbit=pbit,
            interest=interest,
            pbt=pbt,
            tax=tax,
            pat=pat,
            ebitda=ebitda,
        ),
        cash_flow=ProjectedCashFlow(
            pbt=pbt,
            depreciation=depreciation,
            op_profit_before_wc=op_profit_before_wc,
            delta_inventory=delta_inventory,
            delta_receivables=delta_receivables,
            delta_payables=delta_payables,
            cash_from_ops=cash_from_ops,
            tax_paid=-tax,
            net_cfo=net_cfo,
            capex=-capex,
            net_cfi=net_cfi,
            capital_injected=capital_injection,
            new_debt=new_debt,
            debt_repaid=-debt_repayment,
            dividends_paid=-dividends,
            net_cff=net_cff,
            net_change_in_cash=net_change_in_cash,
            opening_cash=prior.cash,
            closing_cash=closing_cash,
        ),
        balance_sheet=ProjectedBalanceSheet(
            ppe=prior.ppe + capex,
            accumulated_depreciation=prior.accumulated_depreciation + depreciation,
            inventory=inventory,
            receivables=receivables,
            cash=closing_cash,
            capital=prior.capital + capital_injection,
            income_surplus=prior.income_surplus + pat - dividends,
            debt=prior.debt + new_debt - debt_repayment,
            payables=payables,
        ),
    )


def project(
    base_year: BaseYearData,
    assumptions: ScenarioAssumptions,
    years: int = DEFAULT_PROJECTION_YEARS,
) -> list[ProjectedYearData]:
    """Project ``years`` years forward from the base year.

    Returns:
        One ProjectedYearData per year, in increasing year order; empty when
        ``years`` is not positive
    """
    projections: list[ProjectedYearData] = []
    prior_revenue = base_year.revenue
    prior = base_year.opening_balance_sheet()

    for offset in range(1, max(years, 0) + 1):
        current = project_year(prior_revenue, prior, assumptions, base_year.year + offset)
        projections.append(current)
        prior_revenue = current.income_statement.revenue
        prior = current.balance_sheet

    return projections
