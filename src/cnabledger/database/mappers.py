"""Mapper functions to convert between domain models and SQLAlchemy models.

Status strings are validated here on the way out of the database, so an
unknown persisted value surfaces as an error instead of leaking into the
domain.
"""

from cnabledger.domain import entities as domain
from cnabledger.domain.file_status import FileStatus
from cnabledger.database.models import (
    File as ORMFile,
    Store as ORMStore,
    Transaction as ORMTransaction,
)


def file_to_domain(orm_file: ORMFile) -> domain.File:
    """Convert SQLAlchemy File model to domain File entity."""
    return domain.File(
        id=orm_file.id,
        name=orm_file.name,
        size=orm_file.size,
        storage_key=orm_file.storage_key,
        uploaded_by=orm_file.uploaded_by,
        status=FileStatus.from_persisted(orm_file.status),
        uploaded_at=orm_file.uploaded_at,
        processed_at=orm_file.processed_at,
        error_message=orm_file.error_message,
        validation_errors=tuple(orm_file.validation_errors or ()),
        transaction_count=orm_file.transaction_count or 0,
        store_count=orm_file.store_count or 0,
    )


def store_to_domain(orm_store: ORMStore) -> domain.Store:
    """Convert SQLAlchemy Store model to domain Store entity."""
    return domain.Store(
        id=orm_store.id,
        owner_name=orm_store.owner_name,
        name=orm_store.name,
        balance_cents=orm_store.balance_cents or 0,
        created_at=orm_store.created_at,
        updated_at=orm_store.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        file_id=orm_transaction.file_id,
        store_id=orm_transaction.store_id,
        type_code=orm_transaction.type_code,
        amount_cents=orm_transaction.amount_cents,
        date=orm_transaction.date,
        time=orm_transaction.time,
        payer_id=orm_transaction.payer_id,
        card=orm_transaction.card,
        line_number=orm_transaction.line_number,
        created_at=orm_transaction.created_at,
    )


def record_to_orm(record: domain.CNABRecord, file_id: str, store_id: str) -> ORMTransaction:
    """Build a new Transaction row from a validated CNAB record."""
    return ORMTransaction(
        file_id=file_id,
        store_id=store_id,
        type_code=record.transaction_type.code,
        amount_cents=record.amount_cents,
        date=record.date,
        time=record.time,
        payer_id=record.payer_id,
        card=record.card,
        line_number=record.line_number,
    )
