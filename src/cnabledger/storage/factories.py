"""Storage factory functions."""

import os
from pathlib import Path
from typing import Optional

from cnabledger.storage.local import LocalFileStorage

STORAGE_DIR_ENV = "CNABLEDGER_STORAGE_DIR"


def create_local_storage(storage_dir: Optional[str] = None) -> LocalFileStorage:
    """Create a local-directory storage instance.

    Args:
        storage_dir: Root directory for stored files. If None, checks
            CNABLEDGER_STORAGE_DIR environment variable, then defaults to
            ~/.cnabledger/storage
    """
    if storage_dir is None:
        storage_dir = os.environ.get(STORAGE_DIR_ENV)

    if storage_dir is None:
        storage_dir = str(Path.home() / ".cnabledger" / "storage")

    return LocalFileStorage(storage_dir)
