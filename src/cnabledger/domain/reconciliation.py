"""Ledger reconciliation: apply grouped records to store balances."""

import logging
from dataclasses import dataclass
from typing import Sequence

from cnabledger.database.base import Database
from cnabledger.domain.store_grouping import StoreGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationSummary:
    """Counts produced by one reconciliation."""

    transactions_inserted: int
    stores_created: int
    stores_touched: int


class LedgerReconciler:
    """Writes transactions and balance changes for a batch of store groups.

    Must run inside ``Database.unit_of_work()``; it never commits on its own
    and lets any failure propagate so the caller rolls the whole batch back.
    """

    def __init__(self, db: Database):
        self.db = db

    def apply(self, file_id: str, groups: Sequence[StoreGroup]) -> ReconciliationSummary:
        transactions_inserted = 0
        stores_created = 0

        for group in groups:
            if group.is_new:
                self.db.add_store(group.store)
                stores_created += 1

        for group in groups:
            transactions_inserted += self.db.add_transactions(
                file_id, group.store.id, group.records
            )
            delta = group.balance_delta_cents
            self.db.increment_store_balance(group.store.id, delta)
            logger.debug(
                "Store %s: %d transactions, balance delta %d cents",
                group.store.id,
                len(group.records),
                delta,
            )

        return ReconciliationSummary(
            transactions_inserted=transactions_inserted,
            stores_created=stores_created,
            stores_touched=len(groups),
        )
