"""Store domain service."""

import logging
from dataclasses import dataclass
from typing import Optional

from cnabledger.database.base import Database
from cnabledger.domain.entities import Store as StoreEntity
from cnabledger.domain.errors import NotFoundError, ValidationError, store_not_found

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceCheck:
    """Stored balance of a store compared with its transaction ledger."""

    store_id: str
    stored_cents: int
    ledger_cents: int

    @property
    def difference_cents(self) -> int:
        return self.ledger_cents - self.stored_cents

    @property
    def is_consistent(self) -> bool:
        return self.difference_cents == 0


class StoreService:
    """Service for querying stores and auditing their balances."""

    def __init__(self, db: Database):
        """Initialize store service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_store(self, store_id: str) -> Optional[StoreEntity]:
        """Get store by ID.

        Returns:
            Store entity or None if not found
        """
        return self.db.get_store(store_id)

    def get_store_by_key(self, owner_name: str, name: str) -> Optional[StoreEntity]:
        """Get store by owner and name."""
        return self.db.get_store_by_key(owner_name.strip(), name.strip())

    def list_stores(self) -> list[StoreEntity]:
        """List all stores ordered by name."""
        return self.db.list_stores()

    def _require_store(self, store_id: str) -> StoreEntity:
        store = self.db.get_store(store_id)
        if store is None:
            raise NotFoundError(store_not_found(store_id))
        return store

    def check_balance(self, store_id: str) -> BalanceCheck:
        """Compare a store's stored balance with the sum of its transactions.

        Raises:
            NotFoundError: If store doesn't exist
        """
        store = self._require_store(store_id)
        return BalanceCheck(
            store_id=store.id,
            stored_cents=store.balance_cents,
            ledger_cents=self.db.get_store_ledger_total(store.id),
        )

    def recompute_balance(self, store_id: str) -> BalanceCheck:
        """Bring a store's balance back in line with its transaction ledger.

        The correction is applied as an increment, so balances that are
        legitimately negative are preserved.

        Returns:
            The check as it was before the correction
        """
        with self.db.unit_of_work():
            check = self.check_balance(store_id)
            if not check.is_consistent:
                self.db.increment_store_balance(store_id, check.difference_cents)
        if not check.is_consistent:
            logger.warning(
                "Store %s balance corrected by %d cents", store_id, check.difference_cents
            )
        return check

    def set_balance(self, store_id: str, balance_cents: int) -> None:
        """Overwrite a store balance.

        Raises:
            NotFoundError: If store doesn't exist
            ValidationError: If the balance is negative
        """
        if balance_cents < 0:
            raise ValidationError("Store balance cannot be set to a negative value")
        self._require_store(store_id)
        self.db.set_store_balance(store_id, balance_cents)

    def delete_store(self, store_id: str) -> None:
        """Delete a store with no transactions.

        Raises:
            NotFoundError: If store doesn't exist
            DependencyError: If transactions still reference the store
        """
        self.db.delete_store(store_id)
