"""Tests for transaction type codes and signed amounts."""

import pytest
from decimal import Decimal

from cnabledger.domain.errors import ValidationError
from cnabledger.domain.transaction_types import (
    TransactionType,
    is_valid_type_code,
    signed_amount,
    signed_cents,
)


@pytest.mark.parametrize("code", [1, 4, 5, 6, 7, 8])
def test_inflow_codes(code):
    assert TransactionType.from_code(code).is_inflow
    assert signed_cents(code, 100) == 100


@pytest.mark.parametrize("code", [2, 3, 9])
def test_outflow_codes(code):
    assert not TransactionType.from_code(code).is_inflow
    assert signed_cents(code, 100) == -100


def test_from_persisted_string_code():
    assert TransactionType.from_code("9") is TransactionType.RENT
    assert TransactionType.RENT.code == "9"


@pytest.mark.parametrize("code", [0, 10, "", "a", None])
def test_invalid_codes(code):
    assert not is_valid_type_code(code)
    with pytest.raises(ValidationError):
        TransactionType.from_code(code)


def test_signed_amount_in_currency_units():
    assert signed_amount(3, 14200) == Decimal("-142.00")
    assert signed_amount(1, 15200) == Decimal("152.00")


def test_descriptions():
    assert TransactionType.DEBIT.description == "Debit"
    assert TransactionType.FINANCING.description == "Financing"
    assert TransactionType.DOC_RECEIPT.description == "DOC Receipt"
    assert all(t.description for t in TransactionType)
