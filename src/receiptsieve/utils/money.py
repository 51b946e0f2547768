"""
Shared money parsing utilities.

Receipt amounts are US-style dollar figures:
- Plain: 52.30
- Thousands separators: 1,234.56
- Currency prefix: $52.30, $ 52.30

Every returned amount is quantized to exactly two decimal places.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
import re

CENTS = Decimal('0.01')

# Sanity ceiling: anything above this is an ID or phone number, not a receipt total
MAX_RECEIPT_AMOUNT = Decimal('1000000')

# Shared capture for "$X.XX" figures (optional thousands separators)
AMOUNT_CAPTURE = r'(\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})'


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents so the value always carries two decimal digits."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_money(amount_str: str) -> Optional[Decimal]:
    """
    Parse a captured money string into a positive, two-decimal Decimal.

    Args:
        amount_str: String containing amount (e.g., "$1,234.56", "52.30")

    Returns:
        Decimal amount or None if parsing fails or the value is not positive

    Examples:
        >>> parse_money("$1,234.56")
        Decimal('1234.56')
        >>> parse_money("10")
        Decimal('10.00')
        >>> parse_money("0.00") is None
        True
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = re.sub(r'[$\s,]', '', amount_str)
    if not cleaned:
        return None

    try:
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None

    if not result.is_finite() or result <= 0 or result > MAX_RECEIPT_AMOUNT:
        return None

    return quantize_money(result)


def format_money(amount: Optional[Decimal]) -> str:
    """
    Format Decimal amount the way receipt filenames carry it.

    Examples:
        >>> format_money(Decimal('52.3'))
        '$52.30'
    """
    if amount is None:
        return 'N/A'
    return f"${quantize_money(amount)}"
