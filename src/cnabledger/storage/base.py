"""Abstract file storage interface."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class FileStorage(ABC):
    """Abstract key/value store for raw file bytes.

    Keys are slash-separated strings such as ``cnab/{file_id}/{file_name}``.
    """

    @abstractmethod
    def upload(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous object."""
        pass

    @abstractmethod
    def download(self, key: str) -> BinaryIO:
        """Open the object stored under ``key`` as a binary stream.

        The caller owns the returned stream and must close it.

        Raises:
            StorageError: If no object exists under ``key``
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether an object is stored under ``key``."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object stored under ``key`` if there is one."""
        pass
