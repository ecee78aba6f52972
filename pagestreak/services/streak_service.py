# pagestreak/services/streak_service.py
import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak.models.stats import StreakInfo
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.sa.repositories.session import ReadingSessionRepository
from pagestreak.utils.dates import Clock, parse_date_string, resolve_clock, shift_days

logger = logging.getLogger(__name__)

def count_current_streak(qualifying_dates: Iterable[str], today: str) -> int:
    """Count consecutive qualifying days ending at ``today``.

    ``qualifying_dates`` must be ordered most recent first. The i-th date has
    to equal today minus i days; the first gap ends the walk. If today itself
    does not qualify the streak is 0, even when yesterday did.
    """
    streak = 0
    for offset, day in enumerate(qualifying_dates):
        if day != shift_days(today, -offset):
            break
        streak += 1
    return streak

def count_longest_streak(qualifying_dates: Iterable[str]) -> int:
    """Longest run of consecutive calendar days in ``qualifying_dates`` (any order)"""
    ordinals = sorted({parse_date_string(day).toordinal() for day in qualifying_dates})
    longest = run = 0
    previous = None
    for ordinal in ordinals:
        run = run + 1 if previous is not None and ordinal == previous + 1 else 1
        longest = max(longest, run)
        previous = ordinal
    return longest

class StreakCalculator:
    def __init__(self, session: Session, clock: Optional[Clock] = None):
        self.session = session
        self.clock = resolve_clock(clock)
        self.sessions = ReadingSessionRepository(session)
        self.preferences = PreferencesRepository(session)

    def _resolve_goal(self, daily_goal: Optional[int]) -> int:
        return daily_goal if daily_goal is not None else self.preferences.get_daily_goal()

    def current_streak(self, daily_goal: Optional[int] = None, today: Optional[str] = None) -> int:
        """Days in a row, ending today, on which the daily goal was met"""
        today = today or self.clock.today()
        try:
            goal = self._resolve_goal(daily_goal)
            qualifying = self.sessions.daily_totals(min_minutes=goal)
        except SQLAlchemyError as e:
            logger.warning(f"Error calculating reading streak: {e}")
            self.session.rollback()
            return 0
        return count_current_streak([day for day, _ in qualifying], today)

    def streak_info(
        self,
        start: str,
        end: str,
        daily_goal: Optional[int] = None,
        today: Optional[str] = None
    ) -> StreakInfo:
        """Current streak, longest streak up to ``end`` and qualifying days within [start, end]"""
        today = today or self.clock.today()
        try:
            goal = self._resolve_goal(daily_goal)
            qualifying = [day for day, _ in self.sessions.daily_totals(min_minutes=goal, up_to=end)]
            current = count_current_streak(
                [day for day, _ in self.sessions.daily_totals(min_minutes=goal)], today
            )
        except SQLAlchemyError as e:
            logger.warning(f"Error calculating streak info: {e}")
            self.session.rollback()
            return StreakInfo()

        return StreakInfo(
            current_streak=current,
            longest_streak=count_longest_streak(qualifying),
            streak_days_this_week=sum(1 for day in qualifying if start <= day <= end)
        )
