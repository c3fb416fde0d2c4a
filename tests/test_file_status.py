"""Tests for the file status state machine."""

import pytest

from cnabledger.domain.errors import ValidationError
from cnabledger.domain.file_status import FileStatus


def test_persisted_values():
    assert [s.value for s in FileStatus] == ["Uploaded", "Processing", "Processed", "Rejected"]


def test_allowed_transitions():
    assert FileStatus.UPLOADED.can_transition_to(FileStatus.PROCESSING)
    assert FileStatus.PROCESSING.can_transition_to(FileStatus.PROCESSED)
    assert FileStatus.PROCESSING.can_transition_to(FileStatus.REJECTED)


def test_forbidden_transitions():
    assert not FileStatus.UPLOADED.can_transition_to(FileStatus.PROCESSED)
    assert not FileStatus.UPLOADED.can_transition_to(FileStatus.REJECTED)
    assert not FileStatus.PROCESSING.can_transition_to(FileStatus.UPLOADED)


@pytest.mark.parametrize("status", [FileStatus.PROCESSED, FileStatus.REJECTED])
def test_terminal_states_are_immutable(status):
    assert status.is_terminal
    assert not any(status.can_transition_to(other) for other in FileStatus)


def test_from_persisted():
    assert FileStatus.from_persisted("Rejected") is FileStatus.REJECTED
    with pytest.raises(ValidationError, match="Unknown file status 'Done'"):
        FileStatus.from_persisted("Done")
