"""Write report tables to CSV."""

import csv
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence


def _cell(value: Any) -> Any:
    if isinstance(value, Decimal):
        return f"{value.quantize(Decimal('0.01'))}"
    return value


def write_csv_table(table: Sequence[Sequence[Any]], path: str | Path) -> int:
    """Write a header row plus data rows to a CSV file.

    Decimal values are written with two decimal places.

    Returns:
        Number of data rows written (the header row is not counted)
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        for row in table:
            writer.writerow([_cell(value) for value in row])
    return max(len(table) - 1, 0)
