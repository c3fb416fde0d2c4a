"""Tests for the store service."""

import pytest

from cnabledger.domain.errors import DependencyError, NotFoundError, ValidationError
from cnabledger.domain.store import StoreService
from cnab_lines import make_file, make_line


@pytest.fixture
def store_service(temp_db):
    """Create a StoreService with a temporary database."""
    return StoreService(temp_db)


@pytest.fixture
def processed_store(upload, processing_service, temp_db):
    """A store whose balance comes from one processed file."""
    file = upload(
        make_file(
            make_line(owner="ANA", store="LOJA", type_code="6", amount="0000010000"),
            make_line(owner="ANA", store="LOJA", type_code="3", amount="0000030000"),
        )
    )
    processing_service.process_file(file.id)
    return temp_db.get_store_by_key("ANA", "LOJA")


def test_get_store_by_key_trims(store_service, processed_store):
    assert store_service.get_store_by_key(" ANA ", "LOJA ").id == processed_store.id


def test_negative_balance_from_processing_is_kept(store_service, processed_store):
    """Accumulated negative balances are a valid end state."""
    assert processed_store.balance_cents == -20000
    assert store_service.check_balance(processed_store.id).is_consistent


def test_check_detects_drift(temp_db, store_service, processed_store):
    temp_db.increment_store_balance(processed_store.id, 500)

    check = store_service.check_balance(processed_store.id)

    assert not check.is_consistent
    assert check.stored_cents == -19500
    assert check.ledger_cents == -20000
    assert check.difference_cents == -500


def test_recompute_balance(temp_db, store_service, processed_store):
    temp_db.increment_store_balance(processed_store.id, 500)

    before = store_service.recompute_balance(processed_store.id)

    assert not before.is_consistent
    assert store_service.get_store(processed_store.id).balance_cents == -20000
    assert store_service.check_balance(processed_store.id).is_consistent


def test_check_unknown_store(store_service):
    with pytest.raises(NotFoundError):
        store_service.check_balance("missing")


def test_set_balance(store_service, processed_store):
    store_service.set_balance(processed_store.id, 0)

    assert store_service.get_store(processed_store.id).balance_cents == 0


def test_set_negative_balance_refused(store_service, processed_store):
    with pytest.raises(ValidationError):
        store_service.set_balance(processed_store.id, -1)


def test_set_balance_unknown_store(store_service):
    with pytest.raises(NotFoundError):
        store_service.set_balance("missing", 10)


def test_delete_store_with_transactions_blocked(store_service, processed_store):
    with pytest.raises(DependencyError):
        store_service.delete_store(processed_store.id)


def test_list_stores_ordered_by_name(temp_db, upload, processing_service, store_service):
    file = upload(make_file(make_line(owner="B", store="ZETA"), make_line(owner="A", store="ALFA")))
    processing_service.process_file(file.id)

    assert [s.name for s in store_service.list_stores()] == ["ALFA", "ZETA"]
