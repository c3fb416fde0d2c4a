"""File processing orchestrator.

Drives one uploaded file through ``Uploaded -> Processing -> Processed`` (or
``Rejected``). Re-running it on a file that already reached a terminal status
has no side effects, and a file's transactions and balance changes are either
all written or not written at all.
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence

from cnabledger.database.base import Database
from cnabledger.domain.cnab_file import CNABFileParser
from cnabledger.domain.entities import CNABRecord, File
from cnabledger.domain.errors import (
    ProcessingCancelled,
    StatusConflictError,
    StorageError,
    StoreConflictError,
    file_not_found,
    invalid_status_transition,
)
from cnabledger.domain.file_status import FileStatus
from cnabledger.domain.reconciliation import LedgerReconciler, ReconciliationSummary
from cnabledger.domain.store_grouping import StoreResolver
from cnabledger.logging_config import LogContext
from cnabledger.storage.base import FileStorage

logger = logging.getLogger(__name__)

NOT_FOUND_STATUS = "NotFound"
ERROR_STATUS = "Error"

MAX_ERRORS_IN_MESSAGE = 5
VALIDATION_FAILED_PREFIX = "File validation failed: "
PROCESSING_ERROR_PREFIX = "Processing error: "
ALREADY_PROCESSING = "File is already being processed"
UNEXPECTED_ERROR = "Unexpected error while processing file"
CANCELLED = "Processing cancelled"

# A run that loses a new-store insert race is retried once
RECONCILE_ATTEMPTS = 2


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one ``process_file`` call."""

    success: bool
    status: str
    transactions_inserted: int = 0
    stores_upserted: int = 0
    error_message: Optional[str] = None
    validation_errors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Serialize with the field names used by external callers."""
        return {
            "success": self.success,
            "status": self.status,
            "transactionsInserted": self.transactions_inserted,
            "storesUpserted": self.stores_upserted,
            "errorMessage": self.error_message,
            "validationErrors": list(self.validation_errors),
        }


def validation_failure_message(errors: Sequence[str]) -> str:
    """Short rejection message built from the first few validation errors."""
    return VALIDATION_FAILED_PREFIX + "; ".join(errors[:MAX_ERRORS_IN_MESSAGE])


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ProcessingCancelled(CANCELLED)


def _result_for_existing(file: File) -> ProcessingResult:
    """Result for a file some other run has already claimed or finished."""
    if file.status == FileStatus.PROCESSED:
        return ProcessingResult(success=True, status=file.status.value)
    if file.status == FileStatus.REJECTED:
        return ProcessingResult(
            success=False,
            status=file.status.value,
            error_message=file.error_message,
            validation_errors=file.validation_errors,
        )
    return ProcessingResult(
        success=False, status=file.status.value, error_message=ALREADY_PROCESSING
    )


class FileProcessingService:
    """Processes uploaded CNAB files into store transactions and balances."""

    def __init__(
        self,
        db: Database,
        storage: FileStorage,
        parser: Optional[CNABFileParser] = None,
    ):
        """Initialize file processing service.

        Args:
            db: Database instance
            storage: Storage holding the raw file bytes
            parser: File parser (a default parser is used if None)
        """
        self.db = db
        self.storage = storage
        self.parser = parser or CNABFileParser()

    def process_file(
        self,
        file_id: str,
        storage_key: Optional[str] = None,
        correlation_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessingResult:
        """Process one uploaded file.

        Never raises: every failure is logged and reported through the
        returned result, and the file ends up Rejected when processing had
        started.

        Args:
            file_id: ID of the file to process
            storage_key: Where to read the bytes from. Defaults to the storage
                key recorded on the file at upload time.
            correlation_id: Tag for every log line of this run. A new one is
                generated if None.
            cancel_event: Set it to stop processing at the next I/O boundary

        Returns:
            ProcessingResult describing the final state of the file
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        with LogContext.bind(correlation_id=correlation_id, file_id=file_id):
            try:
                return self._process(file_id, storage_key, cancel_event)
            except ProcessingCancelled:
                logger.warning("Processing of file %s cancelled", file_id)
                return self._reject_after_failure(file_id, CANCELLED)
            except Exception:
                logger.exception("Unexpected error while processing file %s", file_id)
                return self._reject_after_failure(file_id, UNEXPECTED_ERROR)

    def _process(
        self,
        file_id: str,
        storage_key: Optional[str],
        cancel_event: Optional[threading.Event],
    ) -> ProcessingResult:
        file = self.db.get_file(file_id)
        if file is None:
            logger.warning("File %s not found", file_id)
            return ProcessingResult(
                success=False, status=NOT_FOUND_STATUS, error_message=file_not_found(file_id)
            )

        if file.status != FileStatus.UPLOADED:
            logger.info("File %s is already %s, nothing to do", file_id, file.status.value)
            return _result_for_existing(file)

        _check_cancelled(cancel_event)
        if not self.db.transition_file_status(file_id, FileStatus.UPLOADED, FileStatus.PROCESSING):
            current = self.db.get_file(file_id)
            if current is None:
                return ProcessingResult(
                    success=False, status=NOT_FOUND_STATUS, error_message=file_not_found(file_id)
                )
            logger.info("File %s was claimed by another run (%s)", file_id, current.status.value)
            return _result_for_existing(current)
        logger.info("File %s: Uploaded -> Processing", file_id)

        key = storage_key or file.storage_key
        if not key:
            raise StorageError(f"File {file_id} has no storage key")

        _check_cancelled(cancel_event)
        with self.storage.download(key) as stream:
            parse_result = self.parser.parse(stream)
        logger.info(
            "File %s: parsed %d lines, %d valid records, %d errors",
            file_id,
            parse_result.line_count,
            len(parse_result.valid_records),
            len(parse_result.errors),
        )

        if not parse_result.is_valid:
            return self._reject_invalid(file_id, parse_result.errors)

        _check_cancelled(cancel_event)
        if self.db.file_has_transactions(file_id):
            logger.warning(
                "File %s already has transactions; marking Processed without changes", file_id
            )
            self._transition_or_raise(
                file_id,
                FileStatus.PROCESSING,
                FileStatus.PROCESSED,
                transaction_count=self.db.get_file_transaction_count(file_id),
                store_count=len(self.db.get_file_store_totals(file_id)),
            )
            return ProcessingResult(success=True, status=FileStatus.PROCESSED.value)

        _check_cancelled(cancel_event)
        try:
            summary = self._reconcile(file_id, parse_result.valid_records)
        except Exception as e:
            logger.exception("Reconciliation of file %s failed, changes rolled back", file_id)
            return self._reject(file_id, f"{PROCESSING_ERROR_PREFIX}{e}")

        logger.info(
            "File %s: Processing -> Processed (%d transactions, %d stores, %d new)",
            file_id,
            summary.transactions_inserted,
            summary.stores_touched,
            summary.stores_created,
        )
        return ProcessingResult(
            success=True,
            status=FileStatus.PROCESSED.value,
            transactions_inserted=summary.transactions_inserted,
            stores_upserted=summary.stores_touched,
        )

    def _reconcile(self, file_id: str, records: Sequence[CNABRecord]) -> ReconciliationSummary:
        """Write the file's ledger changes and mark it Processed in one unit of work.

        A store the file introduces may be created by a concurrent run between
        resolution and insert. The unit of work is then rolled back and run
        again, and the second attempt resolves that store to the existing row.
        """
        for attempt in range(1, RECONCILE_ATTEMPTS + 1):
            try:
                with self.db.unit_of_work():
                    groups = StoreResolver(self.db).group(records)
                    summary = LedgerReconciler(self.db).apply(file_id, groups)
                    self._transition_or_raise(
                        file_id,
                        FileStatus.PROCESSING,
                        FileStatus.PROCESSED,
                        transaction_count=summary.transactions_inserted,
                        store_count=summary.stores_touched,
                    )
                return summary
            except StoreConflictError:
                if attempt == RECONCILE_ATTEMPTS:
                    raise
                logger.warning(
                    "File %s: a new store was created concurrently, retrying", file_id
                )

    def _transition_or_raise(
        self, file_id: str, expected: FileStatus, new: FileStatus, **fields
    ) -> None:
        if not self.db.transition_file_status(file_id, expected, new, **fields):
            raise StatusConflictError(
                invalid_status_transition(file_id, expected.value, new.value)
            )

    def _reject_invalid(self, file_id: str, errors: Sequence[str]) -> ProcessingResult:
        message = validation_failure_message(errors)
        logger.info("File %s failed validation with %d errors", file_id, len(errors))
        return self._reject(file_id, message, errors)

    def _reject(
        self, file_id: str, message: str, errors: Sequence[str] = ()
    ) -> ProcessingResult:
        """Move a Processing file to Rejected and report it."""
        if not self.db.transition_file_status(
            file_id,
            FileStatus.PROCESSING,
            FileStatus.REJECTED,
            error_message=message,
            validation_errors=errors,
        ):
            current = self.db.get_file(file_id)
            logger.warning("File %s left Processing before it could be rejected", file_id)
            status = current.status.value if current is not None else NOT_FOUND_STATUS
            return ProcessingResult(success=False, status=status, error_message=message)

        logger.info("File %s: Processing -> Rejected: %s", file_id, message)
        return ProcessingResult(
            success=False,
            status=FileStatus.REJECTED.value,
            error_message=message,
            validation_errors=tuple(errors),
        )

    def _reject_after_failure(self, file_id: str, message: str) -> ProcessingResult:
        """Best-effort rejection once an unexpected error has been logged."""
        try:
            return self._reject(file_id, message)
        except Exception:
            logger.exception("Could not record failure of file %s", file_id)
            return ProcessingResult(success=False, status=ERROR_STATUS, error_message=message)
