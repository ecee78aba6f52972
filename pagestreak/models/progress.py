# pagestreak/models/progress.py
import math
from enum import Enum
from pydantic import BaseModel, ConfigDict

class ProgressSource(str, Enum):
    """Where a book's progress figure came from"""
    SESSIONS = "sessions"          # sum of pages_read over logged sessions
    CURRENT_PAGE = "current_page"  # the book's stored current page
    NONE = "none"                  # no progress data at all

def calculate_percentage(pages_read: int, total_pages: int) -> int:
    """Completion percentage rounded half-up and clamped to [0, 100].

    A book without a usable page count is 0% rather than a division error.
    """
    if not total_pages or total_pages <= 0:
        return 0
    percentage = math.floor(pages_read / total_pages * 100 + 0.5)
    return max(0, min(percentage, 100))

class BookProgress(BaseModel):
    """Progress of one book, tagged with its source"""
    model_config = ConfigDict(frozen=True)

    pages_read: int = 0
    percentage: int = 0
    is_complete: bool = False
    source: ProgressSource = ProgressSource.NONE

    @classmethod
    def from_pages(cls, pages_read: int, total_pages: int,
                   source: ProgressSource = ProgressSource.SESSIONS) -> "BookProgress":
        percentage = calculate_percentage(pages_read, total_pages)
        return cls(
            pages_read=pages_read,
            percentage=percentage,
            is_complete=percentage >= 100,
            source=source
        )

    @classmethod
    def empty(cls) -> "BookProgress":
        return cls()

def format_minutes(minutes: int) -> str:
    """Human readable duration: '0 minutes', '1 minute', '2 hours', '1h 30m'"""
    if minutes <= 0:
        return "0 minutes"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours} hour{'s' if hours != 1 else ''}"
    return f"{hours}h {rest}m"

class GoalStatus(BaseModel):
    """How far today's reading is from the daily goal"""
    daily_goal: int
    minutes_read: int

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.daily_goal - self.minutes_read)

    @property
    def is_met(self) -> bool:
        return self.minutes_read >= self.daily_goal

    @property
    def formatted_remaining(self) -> str:
        return format_minutes(self.remaining_minutes)
