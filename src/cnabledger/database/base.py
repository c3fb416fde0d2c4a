"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from cnabledger.domain.entities import CNABRecord, File, Store, Transaction
from cnabledger.domain.file_status import FileStatus


class Database(ABC):
    """Abstract database interface for cnabledger.

    Every write commits immediately unless it runs inside ``unit_of_work()``,
    in which case it only becomes visible when the unit of work commits.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one atomic transaction.

        Commits when the block exits normally and rolls back every write made
        inside the block when it raises. The exception is re-raised.
        """
        pass

    # File operations
    @abstractmethod
    def create_file(
        self,
        file_id: str,
        name: str,
        size: int,
        storage_key: Optional[str] = None,
        uploaded_by: Optional[str] = None,
    ) -> str:
        """Create a file row in status Uploaded. Returns file ID."""
        pass

    @abstractmethod
    def get_file(self, file_id: str) -> Optional[File]:
        """Get file by ID."""
        pass

    @abstractmethod
    def list_files(self, status: Optional[FileStatus] = None) -> list[File]:
        """List files in upload order, optionally filtered by status."""
        pass

    @abstractmethod
    def set_file_storage_key(self, file_id: str, storage_key: str) -> None:
        """Record where the raw bytes of a file are stored."""
        pass

    @abstractmethod
    def transition_file_status(
        self,
        file_id: str,
        expected: FileStatus,
        new: FileStatus,
        error_message: Optional[str] = None,
        validation_errors: Optional[Sequence[str]] = None,
        transaction_count: Optional[int] = None,
        store_count: Optional[int] = None,
    ) -> bool:
        """Move a file from ``expected`` to ``new`` status (compare-and-swap).

        Returns:
            True if the row was in ``expected`` status and was updated, False
            if another writer changed it first or the file does not exist
        """
        pass

    @abstractmethod
    def get_file_store_totals(self, file_id: str) -> dict[str, int]:
        """Signed cents contributed by a file, keyed by store ID."""
        pass

    @abstractmethod
    def delete_file(self, file_id: str) -> None:
        """Delete a file and, by cascade, its transactions."""
        pass

    # Store operations
    @abstractmethod
    def get_store(self, store_id: str) -> Optional[Store]:
        """Get store by ID."""
        pass

    @abstractmethod
    def get_store_by_key(self, owner_name: str, name: str) -> Optional[Store]:
        """Get store by its composite natural key."""
        pass

    @abstractmethod
    def list_stores(self) -> list[Store]:
        """List all stores."""
        pass

    @abstractmethod
    def add_store(self, store: Store) -> str:
        """Insert a store constructed in the domain layer. Returns store ID."""
        pass

    @abstractmethod
    def increment_store_balance(self, store_id: str, delta_cents: int) -> None:
        """Add ``delta_cents`` to the stored balance as one atomic update."""
        pass

    @abstractmethod
    def set_store_balance(self, store_id: str, balance_cents: int) -> None:
        """Overwrite a store balance."""
        pass

    @abstractmethod
    def get_store_ledger_total(self, store_id: str) -> int:
        """Sum of signed amounts (cents) over every transaction of a store."""
        pass

    @abstractmethod
    def get_store_transaction_count(self, store_id: str) -> int:
        """Get count of transactions referencing a store."""
        pass

    @abstractmethod
    def delete_store(self, store_id: str) -> None:
        """Delete a store that no transaction references."""
        pass

    # Transaction operations
    @abstractmethod
    def add_transactions(self, file_id: str, store_id: str, records: Sequence[CNABRecord]) -> int:
        """Bulk-insert one transaction per record. Returns rows inserted."""
        pass

    @abstractmethod
    def file_has_transactions(self, file_id: str) -> bool:
        """Check whether any transaction already references the file."""
        pass

    @abstractmethod
    def get_file_transaction_count(self, file_id: str) -> int:
        """Get count of transactions recorded for a file."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        store_id: Optional[str] = None,
        file_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters."""
        pass
