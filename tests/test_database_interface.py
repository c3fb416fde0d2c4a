"""Tests for the SQLAlchemy implementation of the Database interface."""

import pytest
import uuid
from datetime import date

from sqlalchemy.exc import IntegrityError

from cnabledger.database.factories import create_sqlite_database
from cnabledger.domain import entities
from cnabledger.domain.cnab_parser import parse_line
from cnabledger.domain.errors import (
    DependencyError,
    NotFoundError,
    StoreConflictError,
    ValidationError,
)
from cnabledger.domain.file_status import FileStatus
from cnabledger.domain.store_grouping import new_store
from cnab_lines import make_line


def _create_file(db, name="CNAB.txt"):
    file_id = str(uuid.uuid4())
    db.create_file(file_id=file_id, name=name, size=80, storage_key=f"cnab/{file_id}/{name}")
    return file_id


def _add_store(db, owner="JOAO MACEDO", name="BAR DO JOAO"):
    store = new_store(owner, name)
    db.add_store(store)
    return store


def _records(*lines):
    return [parse_line(line, n) for n, line in enumerate(lines, start=1)]


class TestFiles:
    """File operations."""

    def test_create_and_get_file(self, temp_db):
        """Test that a created file comes back as a domain entity in Uploaded."""
        file_id = _create_file(temp_db)

        file = temp_db.get_file(file_id)

        assert isinstance(file, entities.File)
        assert file.status is FileStatus.UPLOADED
        assert file.storage_key == f"cnab/{file_id}/CNAB.txt"
        assert file.uploaded_at is not None
        assert file.processed_at is None

    def test_get_missing_file(self, temp_db):
        """Test that a missing file returns None."""
        assert temp_db.get_file("missing") is None

    def test_list_files_by_status(self, temp_db):
        """Test status filter on list_files."""
        first = _create_file(temp_db)
        second = _create_file(temp_db)
        temp_db.transition_file_status(second, FileStatus.UPLOADED, FileStatus.PROCESSING)

        assert [f.id for f in temp_db.list_files()] == [first, second]
        assert [f.id for f in temp_db.list_files(status=FileStatus.UPLOADED)] == [first]

    def test_transition_is_compare_and_swap(self, temp_db):
        """Test that a transition only applies from the expected status."""
        file_id = _create_file(temp_db)

        assert temp_db.transition_file_status(file_id, FileStatus.UPLOADED, FileStatus.PROCESSING)
        assert not temp_db.transition_file_status(
            file_id, FileStatus.UPLOADED, FileStatus.PROCESSING
        )
        assert temp_db.get_file(file_id).status is FileStatus.PROCESSING

    def test_transition_from_another_connection_loses(self, temp_db):
        """Test that two database handles cannot both claim a file."""
        file_id = _create_file(temp_db)
        other = create_sqlite_database(database_path=temp_db.database_path)
        try:
            assert other.get_file(file_id).status is FileStatus.UPLOADED
            assert temp_db.transition_file_status(
                file_id, FileStatus.UPLOADED, FileStatus.PROCESSING
            )
            assert not other.transition_file_status(
                file_id, FileStatus.UPLOADED, FileStatus.PROCESSING
            )
            assert other.get_file(file_id).status is FileStatus.PROCESSING
        finally:
            other.disconnect()

    def test_terminal_transition_records_details(self, temp_db):
        """Test that rejection stores message, errors and processed time."""
        file_id = _create_file(temp_db)
        temp_db.transition_file_status(file_id, FileStatus.UPLOADED, FileStatus.PROCESSING)

        assert temp_db.transition_file_status(
            file_id,
            FileStatus.PROCESSING,
            FileStatus.REJECTED,
            error_message="File validation failed: Line 1: x",
            validation_errors=["Line 1: x", "Line 2: y"],
        )

        file = temp_db.get_file(file_id)
        assert file.status is FileStatus.REJECTED
        assert file.error_message == "File validation failed: Line 1: x"
        assert file.validation_errors == ("Line 1: x", "Line 2: y")
        assert file.processed_at is not None

    def test_invalid_transition_refused(self, temp_db):
        """Test that transitions outside the state machine raise."""
        file_id = _create_file(temp_db)

        with pytest.raises(ValidationError):
            temp_db.transition_file_status(file_id, FileStatus.UPLOADED, FileStatus.PROCESSED)

    def test_transition_missing_file(self, temp_db):
        """Test that a transition of an unknown file reports failure."""
        assert not temp_db.transition_file_status(
            "missing", FileStatus.UPLOADED, FileStatus.PROCESSING
        )

    def test_delete_file_cascades_transactions(self, temp_db):
        """Test that deleting a file removes its transactions."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)
        temp_db.add_transactions(file_id, store.id, _records(make_line()))

        temp_db.delete_file(file_id)

        assert temp_db.get_file(file_id) is None
        assert temp_db.list_transactions(file_id=file_id) == []
        assert temp_db.get_store(store.id) is not None

    def test_delete_missing_file(self, temp_db):
        """Test that deleting an unknown file raises NotFoundError."""
        with pytest.raises(NotFoundError):
            temp_db.delete_file("missing")

    def test_set_storage_key(self, temp_db):
        """Test updating the storage key of a file."""
        file_id = _create_file(temp_db)

        temp_db.set_file_storage_key(file_id, "cnab/other")

        assert temp_db.get_file(file_id).storage_key == "cnab/other"


class TestStores:
    """Store operations."""

    def test_add_and_lookup_by_key(self, temp_db):
        """Test lookup by composite key."""
        store = _add_store(temp_db)

        found = temp_db.get_store_by_key("JOAO MACEDO", "BAR DO JOAO")

        assert isinstance(found, entities.Store)
        assert found.id == store.id
        assert found.balance_cents == 0
        assert temp_db.get_store_by_key("JOAO MACEDO", "OTHER") is None

    def test_duplicate_key_conflicts(self, temp_db):
        """Test that (owner, name) is unique."""
        _add_store(temp_db)

        with pytest.raises(StoreConflictError):
            _add_store(temp_db)

        # The session is usable again after the conflict
        assert len(temp_db.list_stores()) == 1

    def test_increment_balance(self, temp_db):
        """Test that increments accumulate, including below zero."""
        store = _add_store(temp_db)

        temp_db.increment_store_balance(store.id, 500)
        temp_db.increment_store_balance(store.id, -800)

        assert temp_db.get_store(store.id).balance_cents == -300

    def test_increment_missing_store(self, temp_db):
        """Test that incrementing an unknown store raises."""
        with pytest.raises(NotFoundError):
            temp_db.increment_store_balance("missing", 1)

    def test_set_balance_rejects_negative(self, temp_db):
        """Test the non-negative guard on explicit balance writes."""
        store = _add_store(temp_db)

        with pytest.raises(ValidationError):
            temp_db.set_store_balance(store.id, -1)

        temp_db.set_store_balance(store.id, 1234)
        assert temp_db.get_store(store.id).balance_cents == 1234

    def test_ledger_total_uses_signs(self, temp_db):
        """Test the SQL signed sum over a store's transactions."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)
        temp_db.add_transactions(
            file_id,
            store.id,
            _records(
                make_line(type_code="3", amount="0000014200"),
                make_line(type_code="1", amount="0000015200"),
                make_line(type_code="9", amount="0000000100"),
            ),
        )

        assert temp_db.get_store_ledger_total(store.id) == -14200 + 15200 - 100
        assert temp_db.get_file_store_totals(file_id) == {store.id: 900}

    def test_ledger_total_without_transactions(self, temp_db):
        """Test that a store with no transactions sums to zero."""
        store = _add_store(temp_db)

        assert temp_db.get_store_ledger_total(store.id) == 0

    def test_delete_store_blocked_by_transactions(self, temp_db):
        """Test restrict semantics on store deletion."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)
        temp_db.add_transactions(file_id, store.id, _records(make_line()))

        with pytest.raises(DependencyError):
            temp_db.delete_store(store.id)

    def test_delete_store(self, temp_db):
        """Test deleting a store without transactions."""
        store = _add_store(temp_db)

        temp_db.delete_store(store.id)

        assert temp_db.get_store(store.id) is None


class TestTransactions:
    """Transaction operations."""

    def test_add_and_list(self, temp_db):
        """Test bulk insert and retrieval as domain entities."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)

        inserted = temp_db.add_transactions(
            file_id,
            store.id,
            _records(make_line(date="20190302"), make_line(date="20190301")),
        )

        assert inserted == 2
        assert temp_db.file_has_transactions(file_id)
        transactions = temp_db.list_transactions(store_id=store.id)
        assert [t.date for t in transactions] == [date(2019, 3, 1), date(2019, 3, 2)]
        assert all(isinstance(t, entities.Transaction) for t in transactions)
        assert transactions[0].type_code == "3"
        assert temp_db.get_transaction(transactions[0].id) == transactions[0]

    def test_date_filters(self, temp_db):
        """Test inclusive start and end date filters."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)
        temp_db.add_transactions(
            file_id,
            store.id,
            _records(
                make_line(date="20190301"),
                make_line(date="20190315"),
                make_line(date="20190331"),
            ),
        )

        transactions = temp_db.list_transactions(
            start_date=date(2019, 3, 15), end_date=date(2019, 3, 31)
        )

        assert [t.line_number for t in transactions] == [2, 3]

    def test_duplicate_line_rejected(self, temp_db):
        """Test the (file, line number) uniqueness guard."""
        file_id = _create_file(temp_db)
        store = _add_store(temp_db)
        temp_db.add_transactions(file_id, store.id, _records(make_line()))

        with pytest.raises(IntegrityError):
            with temp_db.unit_of_work():
                temp_db.add_transactions(file_id, store.id, _records(make_line()))

        assert len(temp_db.list_transactions(file_id=file_id)) == 1

    def test_file_has_no_transactions(self, temp_db):
        """Test the existence check on a fresh file."""
        assert not temp_db.file_has_transactions(_create_file(temp_db))


class TestUnitOfWork:
    """Atomic grouping of writes."""

    def test_commits_on_success(self, temp_db):
        """Test that writes inside the block are persisted together."""
        with temp_db.unit_of_work():
            store = _add_store(temp_db)
            temp_db.increment_store_balance(store.id, 100)

        assert temp_db.get_store(store.id).balance_cents == 100

    def test_rolls_back_on_error(self, temp_db):
        """Test that an exception undoes every write in the block."""
        file_id = _create_file(temp_db)

        with pytest.raises(RuntimeError):
            with temp_db.unit_of_work():
                store = _add_store(temp_db)
                temp_db.add_transactions(file_id, store.id, _records(make_line()))
                raise RuntimeError("boom")

        assert temp_db.list_stores() == []
        assert not temp_db.file_has_transactions(file_id)
        assert temp_db.get_file(file_id) is not None

    def test_nested_unit_of_work_refused(self, temp_db):
        """Test that units of work cannot be nested."""
        with temp_db.unit_of_work():
            with pytest.raises(RuntimeError):
                with temp_db.unit_of_work():
                    pass
