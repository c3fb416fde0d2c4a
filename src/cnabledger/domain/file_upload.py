"""Registration of uploaded CNAB files."""

import logging
import uuid
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

from cnabledger.database.base import Database
from cnabledger.domain.entities import File
from cnabledger.domain.errors import ValidationError, storage_key_for
from cnabledger.storage.base import FileStorage

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_FILE_NAME_LENGTH = 255
ALLOWED_EXTENSION = ".txt"

EMPTY_UPLOAD = "File cannot be empty"
FILE_TOO_LARGE = "File size must not exceed 10MB"
INVALID_FILE_NAME = "File name is invalid"
INVALID_EXTENSION = "Only .txt files are allowed"


def validate_upload(name: str, size: int) -> str:
    """Check an incoming file before anything is stored.

    Args:
        name: File name as supplied by the client
        size: Size of the content in bytes

    Returns:
        The trimmed file name

    Raises:
        ValidationError: On the first rule the upload breaks
    """
    if size <= 0:
        raise ValidationError(EMPTY_UPLOAD)
    if size > MAX_FILE_SIZE_BYTES:
        raise ValidationError(FILE_TOO_LARGE)

    name = (name or "").strip()
    if not name or len(name) > MAX_FILE_NAME_LENGTH:
        raise ValidationError(INVALID_FILE_NAME)
    # Only a bare file name is accepted, on either path flavour
    if name in (".", "..") or PurePosixPath(name).name != name or PureWindowsPath(name).name != name:
        raise ValidationError(INVALID_FILE_NAME)
    if any(ord(ch) < 32 for ch in name):
        raise ValidationError(INVALID_FILE_NAME)

    if PurePosixPath(name).suffix.lower() != ALLOWED_EXTENSION:
        raise ValidationError(INVALID_EXTENSION)

    return name


class FileUploadService:
    """Stores incoming file bytes and registers the file as Uploaded."""

    def __init__(self, db: Database, storage: FileStorage):
        """Initialize upload service.

        Args:
            db: Database instance
            storage: Storage for the raw file bytes
        """
        self.db = db
        self.storage = storage

    def upload(self, name: str, content: bytes, uploaded_by: Optional[str] = None) -> File:
        """Validate, store and register a file.

        Args:
            name: Original file name
            content: Raw file bytes
            uploaded_by: Optional name of the uploader

        Returns:
            The registered file, in status Uploaded

        Raises:
            ValidationError: If the upload is rejected before storage
            StorageError: If the bytes could not be stored
        """
        name = validate_upload(name, len(content))
        file_id = str(uuid.uuid4())
        storage_key = storage_key_for(file_id, name)

        self.storage.upload(storage_key, content)
        try:
            self.db.create_file(
                file_id=file_id,
                name=name,
                size=len(content),
                storage_key=storage_key,
                uploaded_by=uploaded_by,
            )
        except Exception:
            self.storage.delete(storage_key)
            raise

        logger.info("Registered file %s (%s, %d bytes)", file_id, name, len(content))
        return self.db.get_file(file_id)
