"""Currency parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation
import re

CURRENCY_SYMBOL = "R$"


def parse_currency(text: str) -> Decimal:
    """Parse currency text typed or pasted by a user.

    Every non-digit is discarded and the digits are read as cents, so
    "R$ 1.234,56", "1234,56" and "1.234.56" all give 1234.56. Text without
    digits gives 0; this never raises.

    Args:
        text: Currency text

    Returns:
        Decimal amount
    """
    if not text:
        return Decimal("0")
    digits = re.sub(r"\D", "", str(text))
    if not digits:
        return Decimal("0")
    return Decimal(digits) / 100


def to_decimal(value) -> Decimal:
    """Convert a stored JSON number (or numeric text) to Decimal; bad input gives 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def format_currency(value) -> str:
    """Format an amount as "R$ 1.234,56"; None formats as zero."""
    amount = to_decimal(value).quantize(Decimal("0.01"))
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.2f}"
    # Swap US separators for the pt-BR ones
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{CURRENCY_SYMBOL} {grouped}"
