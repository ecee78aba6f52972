# pagestreak/sa/models/__init__.py
from .base import Base, TimestampMixin, local_now
from .book import Book, ReadingStatus
from .session import ReadingSession
from .preferences import UserPreferences, NotificationPreferences, SINGLETON_ID
from .usage import AppUsageTracking
from .reminder import ScheduledReminder

__all__ = [
    'Base',
    'TimestampMixin',
    'local_now',
    'Book',
    'ReadingStatus',
    'ReadingSession',
    'UserPreferences',
    'NotificationPreferences',
    'SINGLETON_ID',
    'AppUsageTracking',
    'ScheduledReminder'
]
