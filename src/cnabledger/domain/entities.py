"""Domain model entities for cnabledger.

These are pure data classes representing business concepts, independent of
database schema. Amounts are carried as integer cents; the ``Decimal``
properties convert to currency units for display and arithmetic.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, time
from decimal import Decimal
from typing import Optional

from cnabledger.domain.file_status import FileStatus
from cnabledger.domain.transaction_types import (
    CENTS_PER_UNIT,
    TransactionType,
    signed_amount,
    signed_cents,
)


@dataclass(frozen=True)
class CNABRecord:
    """One parsed CNAB line (transient, never persisted as-is)."""

    line_number: int
    type_code: int
    date: date
    amount_cents: int
    payer_id: str
    card: str
    time: time
    store_owner: str
    store_name: str

    @property
    def store_key(self) -> tuple[str, str]:
        """Composite store identity: (owner name, store name)."""
        return (self.store_owner, self.store_name)

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.from_code(self.type_code)

    @property
    def signed_cents(self) -> int:
        return signed_cents(self.type_code, self.amount_cents)

    @property
    def signed_amount(self) -> Decimal:
        """Amount in currency units, positive for inflow and negative for outflow."""
        return signed_amount(self.type_code, self.amount_cents)


@dataclass(frozen=True)
class Store:
    """Store domain entity, identified by (owner_name, name)."""

    id: str
    owner_name: str
    name: str
    balance_cents: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner_name, self.name)

    @property
    def balance(self) -> Decimal:
        return Decimal(self.balance_cents) / CENTS_PER_UNIT


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction domain entity. Immutable once created."""

    id: int
    file_id: str
    store_id: str
    type_code: str
    amount_cents: int
    date: date
    time: time
    payer_id: str
    card: str
    line_number: int
    created_at: datetime

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.from_code(self.type_code)

    @property
    def amount(self) -> Decimal:
        return Decimal(self.amount_cents) / CENTS_PER_UNIT

    @property
    def signed_amount(self) -> Decimal:
        return signed_amount(self.type_code, self.amount_cents)


@dataclass(frozen=True)
class File:
    """Uploaded CNAB file, the aggregate root of its transactions."""

    id: str
    name: str
    size: int
    storage_key: Optional[str]
    uploaded_by: Optional[str]
    status: FileStatus
    uploaded_at: datetime
    processed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    validation_errors: tuple[str, ...] = field(default_factory=tuple)
    transaction_count: int = 0
    store_count: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
