# pagestreak/services/stats_service.py
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak.models.stats import BookStats, DailyStats, TimeDistribution, WeeklyStats
from pagestreak.sa.models import ReadingSession
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.sa.repositories.session import ReadingSessionRepository
from pagestreak.services.streak_service import StreakCalculator
from pagestreak.utils.dates import Clock, parse_date_string, resolve_clock, start_of_week, week_days

logger = logging.getLogger(__name__)

def time_of_day_bucket(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"

def daily_breakdown(days: List[str], sessions: List[ReadingSession], daily_goal: int) -> List[DailyStats]:
    breakdown = []
    for day in days:
        day_sessions = [s for s in sessions if s.date == day]
        minutes = sum(s.minutes_read for s in day_sessions)
        breakdown.append(DailyStats(
            date=day,
            day_name=parse_date_string(day).strftime("%A"),
            minutes=minutes,
            sessions=len(day_sessions),
            goal_met=minutes >= daily_goal
        ))
    return breakdown

def top_book(sessions: List[ReadingSession]) -> Optional[BookStats]:
    """The book with the most minutes; ties go to the book read first"""
    stats: Dict[int, BookStats] = {}
    for s in sessions:
        entry = stats.get(s.book_id)
        if entry is None:
            entry = stats[s.book_id] = BookStats(
                book_id=s.book_id, book_name=s.book.name, book_author=s.book.author
            )
        entry.minutes_read += s.minutes_read
        entry.sessions_count += 1
    if not stats:
        return None
    return max(stats.values(), key=lambda b: b.minutes_read)

def time_distribution(sessions: List[ReadingSession]) -> TimeDistribution:
    distribution = TimeDistribution()
    for s in sessions:
        bucket = time_of_day_bucket(s.created_at.hour)
        setattr(distribution, bucket, getattr(distribution, bucket) + 1)
    return distribution

class WeeklyStatsService:
    """Statistics for one 7-day week, as shown on the stats screen."""

    def __init__(self, session: Session, clock: Optional[Clock] = None):
        self.session = session
        self.clock = resolve_clock(clock)
        self.sessions = ReadingSessionRepository(session)
        self.preferences = PreferencesRepository(session)
        self.streaks = StreakCalculator(session, self.clock)

    def weekly_stats(self, week_start: Optional[str] = None) -> WeeklyStats:
        week_start = week_start or start_of_week(self.clock.today())
        days = week_days(week_start)
        week_end = days[-1]

        try:
            daily_goal = self.preferences.get_daily_goal()
            sessions = self.sessions.get_between(week_start, week_end)
        except SQLAlchemyError as e:
            logger.warning(f"Error loading weekly stats for {week_start}: {e}")
            self.session.rollback()
            return WeeklyStats(week_start=week_start, week_end=week_end, daily_goal=0)

        total_minutes = sum(s.minutes_read for s in sessions)
        reading_days = len({s.date for s in sessions})
        books_read = list(dict.fromkeys(f"{s.book.name} by {s.book.author}" for s in sessions))
        weekly_goal = daily_goal * 7

        return WeeklyStats(
            week_start=week_start,
            week_end=week_end,
            daily_goal=daily_goal,
            total_minutes=total_minutes,
            # Averaged over the whole week, not just the days with reading
            average_minutes_per_day=total_minutes / 7 if reading_days else 0.0,
            reading_days=reading_days,
            sessions_count=len(sessions),
            books_read=books_read,
            daily_breakdown=daily_breakdown(days, sessions, daily_goal),
            goal_progress=total_minutes / weekly_goal * 100 if weekly_goal > 0 else 0.0,
            streak_info=self.streaks.streak_info(week_start, week_end, daily_goal),
            top_book=top_book(sessions),
            time_distribution=time_distribution(sessions)
        )

    def calendar_minutes(self, start: str, end: str) -> Dict[str, int]:
        """Total minutes per day for a date range; days without reading are omitted"""
        try:
            return self.sessions.daily_totals_between(start, end)
        except SQLAlchemyError as e:
            logger.warning(f"Error loading calendar data for {start}..{end}: {e}")
            self.session.rollback()
            return {}
