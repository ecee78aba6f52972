# tests/test_sa/test_repositories/test_usage_repository.py

import pytest
from datetime import datetime, timedelta
from pagestreak.sa.repositories.reminder import ReminderRepository
from pagestreak.sa.repositories.usage import AppUsageRepository

@pytest.fixture
def usage_repo(db_session):
    return AppUsageRepository(db_session)

@pytest.fixture
def reminder_repo(db_session):
    return ReminderRepository(db_session)

def test_last_opened_at_without_records(usage_repo):
    assert usage_repo.last_opened_at() is None

def test_track_opened_counts_opens_per_day(usage_repo):
    first = datetime(2024, 3, 14, 8, 0)
    second = datetime(2024, 3, 14, 12, 30)
    usage_repo.track_opened(first)
    record = usage_repo.track_opened(second)
    assert record.session_count_today == 2
    assert record.date == "2024-03-14"
    assert usage_repo.last_opened_at() == second

def test_track_opened_starts_new_row_each_day(usage_repo):
    usage_repo.track_opened(datetime(2024, 3, 13, 22, 0))
    record = usage_repo.track_opened(datetime(2024, 3, 14, 7, 0))
    assert record.session_count_today == 1
    assert usage_repo.latest_for_day("2024-03-13").session_count_today == 1

def test_track_closed_never_moves_open_time(usage_repo):
    """A close after midnight stamps yesterday's row and keeps its open time."""
    opened = datetime(2024, 3, 14, 22, 0)
    closed = datetime(2024, 3, 15, 0, 30)
    usage_repo.track_opened(opened)
    record = usage_repo.track_closed(closed)
    assert record.date == "2024-03-14"
    assert record.last_closed_at == closed
    assert usage_repo.latest_for_day("2024-03-15") is None
    assert usage_repo.last_opened_at() == opened

def test_track_closed_without_any_open_writes_nothing(usage_repo):
    assert usage_repo.track_closed(datetime(2024, 3, 14, 0, 15)) is None
    assert usage_repo.last_opened_at() is None

def test_reminder_lifecycle(reminder_repo):
    """Test pending, due, cancel and delivery of stored reminders."""
    now = datetime(2024, 3, 14, 9, 0)
    reminder_repo.add("a", "Read", "Go read", now + timedelta(hours=1), {'type': 'test'})
    reminder_repo.add("b", "Read", "Go read", now + timedelta(hours=3))

    assert [r.identifier for r in reminder_repo.pending()] == ["a", "b"]
    assert reminder_repo.due(now) == []
    assert reminder_repo.get("a").payload == '{"type": "test"}'

    assert reminder_repo.cancel("b", now) is True
    assert reminder_repo.cancel("b", now) is False
    assert reminder_repo.cancel("missing", now) is False

    later = now + timedelta(hours=2)
    due = reminder_repo.due(later)
    assert [r.identifier for r in due] == ["a"]
    reminder_repo.mark_delivered(due, later)
    assert reminder_repo.pending() == []
    assert reminder_repo.cancel_all(later) == 0
