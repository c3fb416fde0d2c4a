"""Business-rule validation for parsed CNAB records."""

from datetime import datetime, UTC
from typing import Optional

from cnabledger.domain.entities import CNABRecord
from cnabledger.domain.errors import line_error
from cnabledger.domain.transaction_types import is_valid_type_code

INVALID_TYPE = "invalid transaction type"
NON_POSITIVE_AMOUNT = "amount must be greater than 0"
FUTURE_DATE = "date cannot be in the future"
MISSING_STORE_OWNER = "store owner is required"
MISSING_STORE_NAME = "store name is required"


def validate_record(record: CNABRecord, now: Optional[datetime] = None) -> list[str]:
    """Check a parsed record against every business rule.

    Rules are independent: all violations are reported, not just the first.
    There is no lower bound on the date; old records are accepted.

    Args:
        record: Parsed record
        now: Reference time, defaults to the current UTC time

    Returns:
        List of "Line {n}: {message}" strings, empty when the record is valid
    """
    if now is None:
        now = datetime.now(UTC)
    today = now.astimezone(UTC).date() if now.tzinfo is not None else now.date()

    problems = []
    if not is_valid_type_code(record.type_code):
        problems.append(INVALID_TYPE)
    if record.amount_cents <= 0:
        problems.append(NON_POSITIVE_AMOUNT)
    if record.date > today:
        problems.append(FUTURE_DATE)
    if not record.store_owner:
        problems.append(MISSING_STORE_OWNER)
    if not record.store_name:
        problems.append(MISSING_STORE_NAME)

    return [line_error(record.line_number, problem) for problem in problems]
