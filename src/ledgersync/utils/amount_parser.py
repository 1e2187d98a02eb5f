"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional


def parse_amount(amount_str: Optional[str], default: Optional[Decimal] = None) -> Decimal:
    """Parse an amount string into a finite Decimal.

    Handles various formats:
    - "123.45"
    - "¥1,200"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string
        default: Value returned for a missing or blank string. If None, a blank
            string is an error.

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if amount_str is None or not amount_str.strip():
        if default is not None:
            return default
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥円]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")

    return -amount if is_negative else amount


def parse_whole_amount(amount_str: Optional[str]) -> Decimal:
    """Parse an amount that must not have a fractional part (e.g. yen)."""
    amount = parse_amount(amount_str)
    if amount != amount.to_integral_value():
        raise ValueError(f"Amount '{amount_str}' must be a whole number")
    return amount
