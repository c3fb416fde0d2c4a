"""Store resolution and grouping of parsed CNAB records."""

import uuid
from dataclasses import dataclass, field
from typing import Iterable

from cnabledger.database.base import Database
from cnabledger.domain.entities import CNABRecord, Store


@dataclass
class StoreGroup:
    """All records of one file that belong to the same store."""

    store: Store
    is_new: bool
    records: list[CNABRecord] = field(default_factory=list)

    @property
    def balance_delta_cents(self) -> int:
        """Net signed amount of the group in cents."""
        return sum(record.signed_cents for record in self.records)


def new_store(owner_name: str, name: str) -> Store:
    """Build a store that has not been persisted yet.

    The ID is assigned here so that the insert can be deferred to the unit of
    work while transactions already reference it.
    """
    return Store(id=str(uuid.uuid4()), owner_name=owner_name, name=name, balance_cents=0)


class StoreResolver:
    """Groups records by store, resolving each store at most once."""

    def __init__(self, db: Database):
        """Initialize store resolver.

        Args:
            db: Database instance
        """
        self.db = db
        self._cache: dict[tuple[str, str], tuple[Store, bool]] = {}

    def resolve(self, owner_name: str, name: str) -> tuple[Store, bool]:
        """Look up a store by composite key, creating an unsaved one if missing.

        Returns:
            Tuple of (store, is_new)
        """
        key = (owner_name, name)
        if key not in self._cache:
            existing = self.db.get_store_by_key(owner_name, name)
            if existing is not None:
                self._cache[key] = (existing, False)
            else:
                self._cache[key] = (new_store(owner_name, name), True)
        return self._cache[key]

    def group(self, records: Iterable[CNABRecord]) -> list[StoreGroup]:
        """Partition records by exact (owner, name) key, in first-seen order."""
        groups: dict[tuple[str, str], StoreGroup] = {}
        for record in records:
            group = groups.get(record.store_key)
            if group is None:
                store, is_new = self.resolve(record.store_owner, record.store_name)
                group = StoreGroup(store=store, is_new=is_new)
                groups[record.store_key] = group
            group.records.append(record)
        return list(groups.values())
