"""CNAB transaction type codes and their balance direction.

This is the only place that decides whether a type code adds to or subtracts
from a store balance. Everything else (parsed records, persisted transactions,
SQL aggregates) derives its sign from ``TransactionType``.
"""

from decimal import Decimal
from enum import IntEnum

from cnabledger.domain.errors import ValidationError


class TransactionType(IntEnum):
    """Closed set of CNAB transaction types (codes 1-9)."""

    DEBIT = 1
    BOLETO = 2
    FINANCING = 3
    CREDIT = 4
    LOAN_RECEIPT = 5
    SALES = 6
    TED_RECEIPT = 7
    DOC_RECEIPT = 8
    RENT = 9

    @property
    def is_inflow(self) -> bool:
        return self in _INFLOW

    @property
    def sign(self) -> int:
        """+1 for inflow types, -1 for outflow types."""
        return 1 if self.is_inflow else -1

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def code(self) -> str:
        """Persisted representation of the type (a single digit)."""
        return str(int(self))

    @classmethod
    def from_code(cls, code: int | str) -> "TransactionType":
        """Resolve a type from its integer or persisted string code.

        Raises:
            ValidationError: If the code is not one of 1-9
        """
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid transaction type code: {code!r}") from None


_INFLOW = frozenset(
    {
        TransactionType.DEBIT,
        TransactionType.CREDIT,
        TransactionType.LOAN_RECEIPT,
        TransactionType.SALES,
        TransactionType.TED_RECEIPT,
        TransactionType.DOC_RECEIPT,
    }
)

_DESCRIPTIONS = {
    TransactionType.DEBIT: "Debit",
    TransactionType.BOLETO: "Boleto",
    TransactionType.FINANCING: "Financing",
    TransactionType.CREDIT: "Credit",
    TransactionType.LOAN_RECEIPT: "Loan Receipt",
    TransactionType.SALES: "Sales",
    TransactionType.TED_RECEIPT: "TED Receipt",
    TransactionType.DOC_RECEIPT: "DOC Receipt",
    TransactionType.RENT: "Rent",
}

CENTS_PER_UNIT = 100


def is_valid_type_code(code: int | str) -> bool:
    """Return True if code maps to a known transaction type."""
    try:
        TransactionType.from_code(code)
    except ValidationError:
        return False
    return True


def signed_cents(type_code: int | str, amount_cents: int) -> int:
    """Return the amount in cents with the sign of its transaction type."""
    return TransactionType.from_code(type_code).sign * amount_cents


def signed_amount(type_code: int | str, amount_cents: int) -> Decimal:
    """Return the signed amount in currency units (cents / 100)."""
    return Decimal(signed_cents(type_code, amount_cents)) / CENTS_PER_UNIT
