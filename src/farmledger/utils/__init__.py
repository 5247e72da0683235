"""Utility functions for farmledger."""

from farmledger.utils.date_parser import parse_date, get_date_range, year_range
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.table_export import write_csv_table

__all__ = ["parse_date", "get_date_range", "year_range", "parse_amount", "write_csv_table"]
