"""Tests for CSV export of report tables."""

import csv
from decimal import Decimal

from farmledger.utils.table_export import write_csv_table


def test_write_csv_table(tmp_path):
    path = tmp_path / "report.csv"
    table = [
        ["Category", "Amount", "% of Total"],
        ["Seed-Maize", Decimal("400"), Decimal("34.7826")],
        ["Total Expenses", Decimal("1150.005"), Decimal("100.00")],
    ]

    count = write_csv_table(table, path)

    assert count == 2
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["Category", "Amount", "% of Total"],
        ["Seed-Maize", "400.00", "34.78"],
        ["Total Expenses", "1150.00", "100.00"],
    ]


def test_header_only(tmp_path):
    path = tmp_path / "empty.csv"

    assert write_csv_table([["Account", "Amount"]], path) == 0
    assert path.read_text(encoding="utf-8") == "Account,Amount\r\n"
