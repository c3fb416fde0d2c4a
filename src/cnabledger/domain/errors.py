"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StatusConflictError(ConflictError):
    """A file status transition lost a race with another writer."""


class StoreConflictError(ConflictError):
    """A store with the same owner and name already exists."""


class ProcessingCancelled(DomainError):
    """File processing was cancelled at an I/O boundary."""


class ParseError(DomainError):
    """A single CNAB line could not be decoded.

    Carries the 1-based line number so the caller can keep collecting errors
    for the remaining lines.
    """

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(line_error(line_number, reason))


def line_error(line_number: int, message: str) -> str:
    """Return the canonical per-line error message."""
    return f"Line {line_number}: {message}"


def file_not_found(file_id: str) -> str:
    """Return message for missing file."""
    return f"File not found: {file_id}"


def store_not_found(store_id: str) -> str:
    """Return message for missing store."""
    return f"Store {store_id} not found"


def store_already_exists(owner_name: str, name: str) -> str:
    """Return message for a duplicate store key."""
    return f"Store '{name}' owned by '{owner_name}' already exists"


def invalid_status_transition(file_id: str, expected: str, new: str) -> str:
    """Return message when a compare-and-swap status update fails."""
    return f"File {file_id} is no longer in status {expected}; cannot move to {new}"


def store_delete_blocked(store_id: str, transaction_count: int) -> str:
    """Return message when a store still has transactions referencing it."""
    return (
        f"Cannot delete store {store_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Delete the files that own them first."
    )


class StorageError(DomainError):
    """Raw file bytes could not be read from or written to storage."""


def storage_key_for(file_id: str, file_name: str) -> str:
    """Return the storage key under which a file's bytes are kept."""
    return f"cnab/{file_id}/{file_name}"
