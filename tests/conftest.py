"""Shared pytest fixtures for cnabledger tests."""

import logging
import tempfile
import os
from pathlib import Path
import pytest

from cnabledger.database.factories import create_sqlite_database
from cnabledger.domain.cnab_file import CNABFileParser
from cnabledger.domain.file_processing import FileProcessingService
from cnabledger.domain.file_upload import FileUploadService
from cnabledger.logging_config import LOGGER_NAME
from cnabledger.storage.local import LocalFileStorage
from cnab_lines import NOW


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def storage(tmp_path):
    """Create a local storage rooted in a temporary directory."""
    return LocalFileStorage(tmp_path / "storage")


@pytest.fixture
def parser():
    """File parser with a fixed reference time."""
    return CNABFileParser(now=NOW)


@pytest.fixture
def upload_service(temp_db, storage):
    """Create a FileUploadService with a temporary database and storage."""
    return FileUploadService(temp_db, storage)


@pytest.fixture
def processing_service(temp_db, storage, parser):
    """Create a FileProcessingService with a temporary database and storage."""
    return FileProcessingService(temp_db, storage, parser=parser)


@pytest.fixture
def upload(upload_service):
    """Upload CNAB content and return the registered file."""

    def _upload(content: bytes, name: str = "CNAB.txt"):
        return upload_service.upload(name, content)

    return _upload


@pytest.fixture
def sample_content(fixtures_dir):
    """Content of the sample CNAB file."""
    return (fixtures_dir / "CNAB.txt").read_bytes()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, tmp_path):
    """Global CLI options pointing at the temporary database and storage."""
    return [
        "--db-path",
        temp_db.database_path,
        "--storage-dir",
        str(tmp_path / "storage"),
        "--log-level",
        "WARNING",
    ]


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def package_logger():
    """Restore the package logger after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
