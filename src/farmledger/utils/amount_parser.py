"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

# Currency symbols and the ISO codes the ledger is commonly kept in
_CURRENCY_MARKS = re.compile(r"[$€£¥₵₦]|\b(?:USD|EUR|GBP|GHS|NGN)\b", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Accepts "1234.5", "$1,234.50", "GHS 1,234.50", "-123.45" and the
    accounting form "(123.45)" for negatives.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = _CURRENCY_MARKS.sub("", text).replace(",", "").replace(" ", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    return -amount if negative else amount
