"""CNAB fixed-width line parser.

Only decodes fields. Business rules (type range, positive amount, dates in
the past) belong to ``cnab_validator``.
"""

from cnabledger.domain.entities import CNABRecord
from cnabledger.domain.errors import ParseError
from cnabledger.utils.amount_parser import parse_cents
from cnabledger.utils.date_parser import parse_compact_date, parse_compact_time

LINE_LENGTH = 80

# (start, end) slices into an 80-character line. The store name runs to the
# end of the line, so it is 18 characters wide.
TYPE_FIELD = (0, 1)
DATE_FIELD = (1, 9)
AMOUNT_FIELD = (9, 19)
PAYER_ID_FIELD = (19, 30)
CARD_FIELD = (30, 42)
TIME_FIELD = (42, 48)
STORE_OWNER_FIELD = (48, 62)
STORE_NAME_FIELD = (62, 80)


def _field(line: str, bounds: tuple[int, int]) -> str:
    start, end = bounds
    return line[start:end]


def parse_line(line: str, line_number: int) -> CNABRecord:
    """Parse a single 80-character CNAB line.

    Args:
        line: Line content without its terminator
        line_number: 1-based line number, used in error messages

    Returns:
        Parsed record

    Raises:
        ParseError: If the length is wrong or the type, date, amount or time
            field cannot be decoded
    """
    if len(line) != LINE_LENGTH:
        raise ParseError(
            line_number, f"Invalid length {len(line)}, expected {LINE_LENGTH} characters"
        )

    raw_type = _field(line, TYPE_FIELD)
    if not (raw_type.isascii() and raw_type.isdigit()):
        raise ParseError(line_number, f"Invalid transaction type '{raw_type}', must be a digit")

    raw_date = _field(line, DATE_FIELD)
    try:
        record_date = parse_compact_date(raw_date)
    except ValueError:
        raise ParseError(line_number, f"Invalid date format '{raw_date}'") from None

    raw_amount = _field(line, AMOUNT_FIELD)
    try:
        amount_cents = parse_cents(raw_amount)
    except ValueError:
        raise ParseError(line_number, f"Invalid amount format '{raw_amount}'") from None

    raw_time = _field(line, TIME_FIELD)
    try:
        record_time = parse_compact_time(raw_time)
    except ValueError:
        raise ParseError(line_number, f"Invalid time format '{raw_time}'") from None

    return CNABRecord(
        line_number=line_number,
        type_code=int(raw_type),
        date=record_date,
        amount_cents=amount_cents,
        payer_id=_field(line, PAYER_ID_FIELD),
        card=_field(line, CARD_FIELD),
        time=record_time,
        store_owner=_field(line, STORE_OWNER_FIELD).strip(),
        store_name=_field(line, STORE_NAME_FIELD).strip(),
    )
