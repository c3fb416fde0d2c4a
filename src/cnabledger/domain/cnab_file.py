"""Whole-file CNAB parsing and validation."""

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import BinaryIO, Iterator, Optional

from cnabledger.domain.cnab_parser import parse_line
from cnabledger.domain.cnab_validator import validate_record
from cnabledger.domain.entities import CNABRecord
from cnabledger.domain.errors import ParseError

logger = logging.getLogger(__name__)

# Latin-1 maps every byte to exactly one character, so an 80-byte line is
# always an 80-character string.
CNAB_ENCODING = "latin-1"
EMPTY_FILE = "File is empty, at least one transaction line is required"


@dataclass
class FileParseResult:
    """Outcome of parsing and validating every line of a file.

    ``valid_records`` keeps every line that parsed and validated, even when
    other lines failed and the file as a whole is rejected.
    """

    valid_records: list[CNABRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    line_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors


def iter_lines(stream: BinaryIO) -> Iterator[str]:
    """Yield decoded lines from a binary stream, stripping LF or CRLF."""
    for raw in stream:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        yield raw.decode(CNAB_ENCODING)


class CNABFileParser:
    """Drives the line parser and record validator over a whole file."""

    def __init__(self, now: Optional[datetime] = None):
        """Initialize file parser.

        Args:
            now: Fixed reference time for the future-date rule. Defaults to
                the UTC time at which ``parse`` is called.
        """
        self.now = now

    def parse(self, stream: BinaryIO) -> FileParseResult:
        """Parse and validate every line of ``stream``.

        Never stops at the first bad line; errors come back ordered by line
        number.
        """
        now = self.now or datetime.now(UTC)
        result = FileParseResult()
        for line_number, line in enumerate(iter_lines(stream), start=1):
            result.line_count = line_number
            try:
                record = parse_line(line, line_number)
            except ParseError as e:
                result.errors.append(str(e))
                continue

            problems = validate_record(record, now=now)
            if problems:
                result.errors.extend(problems)
            else:
                result.valid_records.append(record)

        if result.line_count == 0:
            result.errors.append(EMPTY_FILE)

        logger.debug(
            "Parsed %d lines: %d valid records, %d errors",
            result.line_count,
            len(result.valid_records),
            len(result.errors),
        )
        return result

    def parse_bytes(self, content: bytes) -> FileParseResult:
        """Convenience wrapper for in-memory content."""
        return self.parse(io.BytesIO(content))
