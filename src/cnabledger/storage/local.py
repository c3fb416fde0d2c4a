"""Local-directory file storage."""

import logging
from pathlib import Path
from typing import BinaryIO

from cnabledger.domain.errors import StorageError
from cnabledger.storage.base import FileStorage

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """Keeps objects as files below a root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        parts = key.split("/")
        if any(part in ("", ".", "..") or "\\" in part for part in parts):
            raise StorageError(f"Invalid storage key '{key}'")
        return self.root.joinpath(*parts)

    def upload(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Stored %d bytes under %s", len(data), key)

    def download(self, key: str) -> BinaryIO:
        path = self._path_for(key)
        try:
            return path.open("rb")
        except FileNotFoundError:
            raise StorageError(f"No stored object for key '{key}'") from None

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
