"""File query and deletion service."""

import logging
from typing import Optional

from cnabledger.database.base import Database
from cnabledger.domain.entities import File
from cnabledger.domain.errors import NotFoundError, ValidationError, file_not_found
from cnabledger.domain.file_status import FileStatus
from cnabledger.storage.base import FileStorage

logger = logging.getLogger(__name__)


class FileService:
    """Service for querying and deleting uploaded files."""

    def __init__(self, db: Database, storage: Optional[FileStorage] = None):
        """Initialize file service.

        Args:
            db: Database instance
            storage: Storage holding file bytes, cleaned up on delete if given
        """
        self.db = db
        self.storage = storage

    def get_file(self, file_id: str) -> Optional[File]:
        """Get file by ID.

        Returns:
            File entity or None if not found
        """
        return self.db.get_file(file_id)

    def list_files(self, status: Optional[FileStatus | str] = None) -> list[File]:
        """List files in upload order.

        Args:
            status: Only return files in this status (enum or persisted name)
        """
        if isinstance(status, str):
            status = FileStatus.from_persisted(status)
        return self.db.list_files(status=status)

    def delete_file(self, file_id: str) -> None:
        """Delete a file, its transactions and its stored bytes.

        Balances of the stores the file touched are reduced by the file's
        contribution in the same transaction, so they keep matching the
        remaining ledger.

        Raises:
            NotFoundError: If the file does not exist
            ValidationError: If the file is being processed
        """
        file = self.db.get_file(file_id)
        if file is None:
            raise NotFoundError(file_not_found(file_id))
        if file.status == FileStatus.PROCESSING:
            raise ValidationError(f"File {file_id} is being processed and cannot be deleted")

        with self.db.unit_of_work():
            for store_id, total_cents in self.db.get_file_store_totals(file_id).items():
                self.db.increment_store_balance(store_id, -total_cents)
            self.db.delete_file(file_id)

        if self.storage is not None and file.storage_key:
            self.storage.delete(file.storage_key)
        logger.info("Deleted file %s", file_id)
