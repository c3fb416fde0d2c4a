"""Utility functions for cnabledger."""

from cnabledger.utils.date_parser import (
    parse_date,
    get_date_range,
    parse_compact_date,
    parse_compact_time,
)
from cnabledger.utils.amount_parser import parse_cents, cents_to_amount, format_amount

__all__ = [
    "parse_date",
    "get_date_range",
    "parse_compact_date",
    "parse_compact_time",
    "parse_cents",
    "cents_to_amount",
    "format_amount",
]
