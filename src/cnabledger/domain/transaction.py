"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal

from cnabledger.database.base import Database
from cnabledger.domain.entities import Transaction as TransactionEntity
from cnabledger.domain.errors import ValidationError


class TransactionService:
    """Service for reading persisted transactions.

    Transactions are only ever written by file processing, so this service
    is read-only.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        store_id: Optional[str] = None,
        file_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            store_id: Filter by store
            file_id: Filter by source file
            start_date: Filter by start date (inclusive)
            end_date: Filter by end date (inclusive)

        Returns:
            Transactions ordered by date and time

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )
        return self.db.list_transactions(
            store_id=store_id,
            file_id=file_id,
            start_date=start_date,
            end_date=end_date,
        )

    def net_amount(self, transactions: list[TransactionEntity]) -> Decimal:
        """Sum of signed amounts of the given transactions."""
        return sum((txn.signed_amount for txn in transactions), Decimal("0"))
