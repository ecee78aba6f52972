# pagestreak/utils/dates.py
"""Local-timezone date helpers.

Reading days are stored as ``YYYY-MM-DD`` strings in the user's local
timezone; everything here works on naive local datetimes.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"

def to_local_date_string(value: Union[date, datetime]) -> str:
    """Format a date or local datetime as YYYY-MM-DD"""
    return value.strftime(DATE_FORMAT)

def parse_date_string(value: str) -> date:
    """Parse a YYYY-MM-DD string, raising ValueError on anything else"""
    return datetime.strptime(value, DATE_FORMAT).date()

def is_valid_date_string(value: str) -> bool:
    try:
        parse_date_string(value)
    except (TypeError, ValueError):
        return False
    return True

def shift_days(value: str, days: int) -> str:
    return to_local_date_string(parse_date_string(value) + timedelta(days=days))

def trailing_days(today: str, count: int = 7) -> list[str]:
    """Return ``count`` day strings ending at ``today``, oldest first"""
    return [shift_days(today, -offset) for offset in range(count - 1, -1, -1)]

def week_days(week_start: str) -> list[str]:
    return [shift_days(week_start, offset) for offset in range(7)]

def start_of_week(day: str) -> str:
    """Monday of the week containing ``day``"""
    parsed = parse_date_string(day)
    return to_local_date_string(parsed - timedelta(days=parsed.weekday()))

class Clock:
    """Source of the current local time"""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> str:
        return to_local_date_string(self.now())

class FixedClock(Clock):
    """Clock frozen at a given local datetime; ``advance`` moves it forward"""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

def resolve_clock(clock: Optional[Clock]) -> Clock:
    return clock if clock is not None else Clock()
