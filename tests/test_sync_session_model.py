"""Tests for the SyncSession status lifecycle."""

from datetime import datetime

import pytest

from fitsync.enums import SyncStatus
from fitsync.models.sync_session import SyncSession


def _session(**kwargs):
    defaults = dict(
        user_id="u1",
        session_id="sync_1_watch-1",
        device_id="watch-1",
        device_name="Acme Watch",
        start_time=datetime(2024, 1, 5, 8),
        status=SyncStatus.IN_PROGRESS.value,
    )
    defaults.update(kwargs)
    return SyncSession(**defaults)


def test_finish_sets_status_and_end_time():
    session = _session()
    ended = datetime(2024, 1, 5, 8, 1)
    session.finish(SyncStatus.COMPLETED, when=ended)

    assert session.status == "completed"
    assert session.end_time == ended
    assert session.is_finished


@pytest.mark.parametrize("terminal", [SyncStatus.COMPLETED, SyncStatus.FAILED, SyncStatus.CANCELLED])
def test_finished_session_cannot_transition_again(terminal):
    session = _session()
    session.finish(terminal, when=datetime(2024, 1, 5, 9))

    with pytest.raises(ValueError):
        session.finish(SyncStatus.FAILED)
    assert session.status == terminal.value
    assert session.end_time == datetime(2024, 1, 5, 9)


def test_cannot_move_back_to_in_progress():
    session = _session()
    with pytest.raises(ValueError):
        session.finish(SyncStatus.IN_PROGRESS)
    assert session.end_time is None


def test_add_error_appends_entries():
    session = _session(sync_errors=[])
    session.add_error("bad date", "INVALID_DATE", when=datetime(2024, 1, 5, 8))
    session.add_error("another", "INVALID_DATE")

    assert len(session.sync_errors) == 2
    assert session.sync_errors[0] == {
        "timestamp": "2024-01-05T08:00:00",
        "message": "bad date",
        "code": "INVALID_DATE",
    }
