"""Plain-text rendering of statement rows."""

from decimal import Decimal
from typing import Sequence

import click

from farmledger.domain.rows import DataRow, Header, Row, Subtotal, Total

LABEL_WIDTH = 50
VALUE_WIDTH = 20
INDENT_SIZE = 4


def format_amount(value: Decimal) -> str:
    """Format an amount with thousands separators; negatives in parentheses."""
    if value < 0:
        return f"({-value:,.2f})"
    return f"{value:,.2f}"


def _format_value(value) -> str:
    if isinstance(value, Decimal):
        return format_amount(value)
    return str(value)


def echo_rows(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Row],
    label_width: int = LABEL_WIDTH,
    value_width: int = VALUE_WIDTH,
) -> None:
    """Print a statement: title, column headings, then one line per row."""
    width = label_width + value_width * (len(columns) - 1)

    click.echo(f"\n{title}")
    click.echo("=" * width)
    headings = "".join(f"{name:>{value_width}}" for name in columns[1:])
    click.echo(f"{columns[0]:<{label_width}}{headings}")
    click.echo("-" * width)

    for row in rows:
        if isinstance(row, Header):
            click.echo(f"\n{' ' * (INDENT_SIZE * row.indent)}{row.label}")
            continue
        indent = row.indent if isinstance(row, DataRow) else 0
        if isinstance(row, Total):
            click.echo("-" * width)
        label = f"{' ' * (INDENT_SIZE * indent)}{row.label}"
        values = "".join(f"{_format_value(value):>{value_width}}" for value in row.values)
        click.echo(f"{label:<{label_width}}{values}")
        if isinstance(row, Subtotal):
            click.echo()


def echo_balance_check(is_balanced: bool, difference: Decimal | None = None) -> None:
    """Print whether a statement balances."""
    if is_balanced:
        click.echo("\nStatus: Balanced")
    elif difference is not None:
        click.echo(f"\nStatus: NOT BALANCED (difference {format_amount(difference)})")
    else:
        click.echo("\nStatus: NOT BALANCED")
