# pagestreak/models/stats.py
from typing import List, Optional
from pydantic import BaseModel, Field

class StreakInfo(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    streak_days_this_week: int = 0

class DailyStats(BaseModel):
    date: str
    day_name: str
    minutes: int = 0
    sessions: int = 0
    goal_met: bool = False

class BookStats(BaseModel):
    book_id: int
    book_name: str
    book_author: str
    minutes_read: int = 0
    sessions_count: int = 0

class TimeDistribution(BaseModel):
    """Session counts by time of day the session was logged"""
    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    night: int = 0

class WeeklyStats(BaseModel):
    week_start: str
    week_end: str
    daily_goal: int
    total_minutes: int = 0
    average_minutes_per_day: float = 0.0
    reading_days: int = 0
    sessions_count: int = 0
    books_read: List[str] = Field(default_factory=list)
    daily_breakdown: List[DailyStats] = Field(default_factory=list)
    goal_progress: float = 0.0
    streak_info: StreakInfo = Field(default_factory=StreakInfo)
    top_book: Optional[BookStats] = None
    time_distribution: TimeDistribution = Field(default_factory=TimeDistribution)

class RecentSession(BaseModel):
    id: int
    book_id: int
    book_name: str
    book_author: str
    minutes_read: int
    pages_read: Optional[int] = None
    date: str
    notes: Optional[str] = None
