"""Row layouts for the projected Income Statement, Balance Sheet and Cash Flow.

Each layout is a list of (kind, label, getter) steps; a getter pulls one
figure out of a ProjectedYearData so the same layout renders any number of
projected years side by side.
"""

from enum import Enum
from operator import attrgetter
from typing import Any, Sequence

from farmledger.domain.projection import ProjectedYearData
from farmledger.domain.rows import DataRow, Header, Row, Subtotal, Total, rows_to_table


class Statement(str, Enum):
    INCOME = "income"
    BALANCE = "balance"
    CASHFLOW = "cashflow"


HEADER, ITEM, SUB_ITEM, SUBTOTAL, TOTAL = "header", "item", "sub_item", "subtotal", "total"


def _inc(field: str):
    return attrgetter(f"income_statement.{field}")


def _bal(field: str):
    return attrgetter(f"balance_sheet.{field}")


def _cf(field: str):
    return attrgetter(f"cash_flow.{field}")


INCOME_STATEMENT_LAYOUT = [
    (ITEM, "Revenue", _inc("revenue")),
    (ITEM, "Cost of Sales", _inc("cogs")),
    (TOTAL, "Gross Profit", _inc("gross_profit")),
    (SUB_ITEM, "SG&A", _inc("sga")),
    (SUB_ITEM, "Depreciation", _inc("depreciation")),
    (SUBTOTAL, "PBIT", _inc("pbit")),
    (ITEM, "Interest", _inc("interest")),
    (SUBTOTAL, "PBT", _inc("pbt")),
    (ITEM, "Tax", _inc("tax")),
    (TOTAL, "PAT (Net Income)", _inc("pat")),
    (SUBTOTAL, "EBITDA", _inc("ebitda")),
]

BALANCE_SHEET_LAYOUT = [
    (HEADER, "Non-Current Assets", None),
    (SUB_ITEM, "PPE", _bal("ppe")),
    (SUB_ITEM, "Accum. Dep.", _bal("accumulated_depreciation")),
    (SUBTOTAL, "NBV", _bal("nbv")),
    (HEADER, "Current Assets", None),
    (SUB_ITEM, "Inventory", _bal("inventory")),
    (SUB_ITEM, "Account Receivables", _bal("receivables")),
    (SUB_ITEM, "Cash and Bank Balances", _bal("cash")),
    (SUBTOTAL, "Total Current Assets", _bal("total_current_assets")),
    (TOTAL, "Total Assets", _bal("total_assets")),
    (HEADER, "Equity and Liabilities", None),
    (SUB_ITEM, "Owner's Capital", _bal("capital")),
    (SUB_ITEM, "Income Surplus", _bal("income_surplus")),
    (SUBTOTAL, "Shareholders' Fund", _bal("shareholders_fund")),
    (HEADER, "Non-Current Liabilities", None),
    (SUB_ITEM, "Debt Financing", _bal("debt")),
    (HEADER, "Current Liabilities", None),
    (SUB_ITEM, "Account Payables", _bal("payables")),
    (SUBTOTAL, "Total Current Liabilities", _bal("total_current_liabilities")),
    (TOTAL, "Total Equity and Liabilities", _bal("total_equity_and_liabilities")),
]

CASH_FLOW_LAYOUT = [
    (HEADER, "Cash flow from Operating Activities", None),
    (ITEM, "Profit before Taxation", _cf("pbt")),
    (ITEM, "Adjustment for Depreciation", _cf("depreciation")),
    (SUBTOTAL, "Operating Profit Before WC Changes", _cf("op_profit_before_wc")),
    (ITEM, "Increase / Decrease in Inventories", _cf("delta_inventory")),
    (ITEM, "Increase / Decrease in Accounts Receivables", _cf("delta_receivables")),
    (ITEM, "Increase / Decrease in Accounts Payable", _cf("delta_payables")),
    (SUBTOTAL, "Cash Generated from Operations", _cf("cash_from_ops")),
    (ITEM, "Tax Paid", _cf("tax_paid")),
    (TOTAL, "Net Cash from Operating Activities", _cf("net_cfo")),
    (HEADER, "Cash flow from Investing Activities", None),
    (ITEM, "Property, Plant and Equipment Purchased", _cf("capex")),
    (TOTAL, "Net Cash from Investing Activities", _cf("net_cfi")),
    (HEADER, "Cash flows from Financing Activities", None),
    (ITEM, "Owner's Capital", _cf("capital_injected")),
    (ITEM, "New Debt", _cf("new_debt")),
    (ITEM, "Debt Repayment", _cf("debt_repaid")),
    (ITEM, "Dividends Paid", _cf("dividends_paid")),
    (TOTAL, "Net Cash from Financing Activities", _cf("net_cff")),
    (SUBTOTAL, "Net Change in Cash", _cf("net_change_in_cash")),
    (ITEM, "Cash at Start of Year", _cf("opening_cash")),
    (TOTAL, "Cash at End of Year", _cf("closing_cash")),
]

LAYOUTS = {
    Statement.INCOME: INCOME_STATEMENT_LAYOUT,
    Statement.BALANCE: BALANCE_SHEET_LAYOUT,
    Statement.CASHFLOW: CASH_FLOW_LAYOUT,
}


def statement_rows(
    projections: Sequence[ProjectedYearData], statement: Statement
) -> list[Row]:
    """Lay out one projected statement with a value per projected year."""
    rows: list[Row] = []
    for kind, label, getter in LAYOUTS[Statement(statement)]:
        if kind == HEADER:
            rows.append(Header(label))
            continue
        values = tuple(getter(year) for year in projections)
        if kind == SUBTOTAL:
            rows.append(Subtotal(label, values))
        elif kind == TOTAL:
            rows.append(Total(label, values))
        else:
            rows.append(DataRow(label, values, indent=1 if kind == SUB_ITEM else 0))
    return rows


def statement_table(
    projections: Sequence[ProjectedYearData], statement: Statement
) -> list[list[Any]]:
    """Statement as a table with one column per projected year."""
    columns = ["Line"] + [str(year.year) for year in projections]
    return rows_to_table(columns, statement_rows(projections, statement))
