# tests/test_services/test_stats_service.py

import pytest
from datetime import datetime
from pagestreak.services.stats_service import WeeklyStatsService, time_of_day_bucket

@pytest.fixture
def stats_service(db_session, clock):
    return WeeklyStatsService(db_session, clock)

@pytest.mark.parametrize("hour,bucket", [
    (5, "morning"),
    (11, "morning"),
    (12, "afternoon"),
    (17, "evening"),
    (20, "evening"),
    (21, "night"),
    (2, "night"),
])
def test_time_of_day_bucket(hour, bucket):
    assert time_of_day_bucket(hour) == bucket

def test_empty_week(stats_service):
    stats = stats_service.weekly_stats()
    assert stats.week_start == "2024-03-11"
    assert stats.week_end == "2024-03-17"
    assert stats.total_minutes == 0
    assert stats.average_minutes_per_day == 0
    assert stats.top_book is None
    assert [d.day_name for d in stats.daily_breakdown] == [
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
    ]

def test_weekly_stats(db_session, stats_service, session_repo, sample_book, second_book):
    """Test totals, breakdown, top book and time distribution for one week."""
    logged = [
        session_repo.log_session(sample_book.id, 30, "2024-03-11"),
        session_repo.log_session(second_book.id, 20, "2024-03-11"),
        session_repo.log_session(sample_book.id, 40, "2024-03-13"),
        session_repo.log_session(second_book.id, 15, "2024-03-14"),
    ]
    session_repo.log_session(sample_book.id, 90, "2024-03-10")  # previous week
    for entry, hour in zip(logged, (7, 13, 22, 18)):
        entry.created_at = datetime(2024, 3, 14, hour, 0)
    db_session.commit()

    stats = stats_service.weekly_stats("2024-03-11")
    assert stats.total_minutes == 105
    assert stats.reading_days == 3
    assert stats.sessions_count == 4
    assert stats.average_minutes_per_day == pytest.approx(15.0)
    assert stats.daily_goal == 30
    assert stats.goal_progress == pytest.approx(50.0)
    assert stats.books_read == ["The Hobbit by J.R.R. Tolkien", "Dune by Frank Herbert"]

    monday = stats.daily_breakdown[0]
    assert monday.minutes == 50
    assert monday.sessions == 2
    assert monday.goal_met is True
    assert stats.daily_breakdown[3].goal_met is False

    assert stats.top_book.book_id == sample_book.id
    assert stats.top_book.minutes_read == 70
    assert stats.top_book.sessions_count == 2

    distribution = stats.time_distribution
    assert (distribution.morning, distribution.afternoon, distribution.evening, distribution.night) == (1, 1, 1, 1)

def test_weekly_streak_info(stats_service, session_repo, sample_book):
    for day in ("2024-03-12", "2024-03-13", "2024-03-14"):
        session_repo.log_session(sample_book.id, 30, day)
    info = stats_service.weekly_stats().streak_info
    assert info.current_streak == 3
    assert info.streak_days_this_week == 3

def test_calendar_minutes(stats_service, session_repo, sample_book):
    session_repo.log_session(sample_book.id, 30, "2024-03-01")
    session_repo.log_session(sample_book.id, 10, "2024-03-01")
    session_repo.log_session(sample_book.id, 5, "2024-04-01")
    assert stats_service.calendar_minutes("2024-03-01", "2024-03-31") == {"2024-03-01": 40}
