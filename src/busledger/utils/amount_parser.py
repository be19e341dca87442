"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Any


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "35000"
    - "35 000" (space as thousands separator)
    - "35000 Fr" / "Fr 35000"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency markers
    amount_str = re.sub(r"(?i)fcfa|cfa|fr|[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "")
    amount_str = re.sub(r"\s+", "", amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount


def coerce_amount(value: Any) -> Decimal:
    """Turn raw input into a Decimal, falling back to zero.

    Used where raw input becomes a domain value: non-numeric or empty input
    yields ``Decimal(0)`` instead of an error.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if isinstance(value, (int, float)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            return Decimal("0")
        return amount if amount.is_finite() else Decimal("0")
    try:
        return parse_amount(str(value))
    except ValueError:
        return Decimal("0")
