"""Statement row variants and the table shape used for export.

A statement is an ordered list of rows. Each row kind carries only the
fields it needs: a ``Header`` has no values, a ``DataRow`` is an ordinary
line, and ``Subtotal`` / ``Total`` mark computed lines.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence, Union


@dataclass(frozen=True)
class Header:
    label: str
    indent: int = 0


@dataclass(frozen=True)
class DataRow:
    label: str
    values: tuple[Decimal, ...]
    indent: int = 0


@dataclass(frozen=True)
class Subtotal:
    label: str
    values: tuple[Decimal, ...]


@dataclass(frozen=True)
class Total:
    label: str
    values: tuple[Decimal, ...]


Row = Union[Header, DataRow, Subtotal, Total]


def rows_to_table(columns: Sequence[str], rows: Sequence[Row]) -> list[list[Any]]:
    """Flatten rows into a header row followed by one list per row.

    Header rows are padded with empty cells so every row has the same width.
    """
    width = len(columns)
    table: list[list[Any]] = [list(columns)]
    for row in rows:
        if isinstance(row, Header):
            table.append([row.label] + [""] * (width - 1))
        else:
            table.append([row.label, *row.values])
    return table
