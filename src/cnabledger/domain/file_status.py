"""File processing status state machine."""

from enum import Enum

from cnabledger.domain.errors import ValidationError


class FileStatus(str, Enum):
    """Lifecycle status of an uploaded CNAB file.

    The enum value is the persisted representation.
    """

    UPLOADED = "Uploaded"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.PROCESSED, FileStatus.REJECTED)

    def can_transition_to(self, new: "FileStatus") -> bool:
        """Return True if moving from this status to ``new`` is allowed."""
        return new in _TRANSITIONS[self]

    @classmethod
    def from_persisted(cls, value: str) -> "FileStatus":
        """Parse the stored status string.

        Raises:
            ValidationError: If the value is not a known status
        """
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown file status '{value}'") from None


_TRANSITIONS = {
    FileStatus.UPLOADED: frozenset({FileStatus.PROCESSING}),
    FileStatus.PROCESSING: frozenset({FileStatus.PROCESSED, FileStatus.REJECTED}),
    FileStatus.PROCESSED: frozenset(),
    FileStatus.REJECTED: frozenset(),
}
