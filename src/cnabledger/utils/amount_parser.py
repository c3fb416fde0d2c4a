"""Amount parsing and formatting utilities."""

from decimal import Decimal

from cnabledger.domain.transaction_types import CENTS_PER_UNIT


def parse_cents(amount_str: str) -> int:
    """Parse a fixed-width unsigned cents field into an integer.

    The raw CNAB amount has no decimal point: "0000012345" is 123.45.

    Args:
        amount_str: Digits only, zero padded

    Returns:
        Amount in cents

    Raises:
        ValueError: If the field is empty or contains anything but digits
    """
    if not amount_str or not amount_str.isascii() or not amount_str.isdigit():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return int(amount_str)


def cents_to_amount(cents: int) -> Decimal:
    """Convert integer cents to a Decimal in currency units."""
    return Decimal(cents) / CENTS_PER_UNIT


def format_amount(amount: Decimal) -> str:
    """Format a currency amount for display, e.g. ``R$ -1,234.50``."""
    return f"R$ {amount:,.2f}"
