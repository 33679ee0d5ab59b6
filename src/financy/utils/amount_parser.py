"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a positive currency amount into a Decimal with two places.

    Handles various formats:
    - "123.45"
    - "R$ 123,45"
    - "1.234,56" (Brazilian thousands/decimal separators)
    - "1.200" (dot followed by groups of exactly three digits is read as thousands)
    - "1,234.56"
    - "1234"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str).strip()

    last_comma = amount_str.rfind(",")
    last_dot = amount_str.rfind(".")
    if last_comma > last_dot:
        # Comma is the decimal separator
        amount_str = amount_str.replace(".", "").replace(",", ".")
    elif last_comma == -1 and re.fullmatch(r"\d{1,3}(\.\d{3})+", amount_str):
        # Dots only as thousands separators: "1.200" or "1.234.567"
        amount_str = amount_str.replace(".", "")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be a positive number, got '{amount_str}'")

    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
