"""Byte storage for uploaded CNAB files."""

from cnabledger.storage.base import FileStorage
from cnabledger.storage.factories import create_local_storage

__all__ = ["FileStorage", "create_local_storage"]
