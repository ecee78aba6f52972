# pagestreak/sa/__init__.py
from .database import Database
from .models import (
    Base, Book, ReadingStatus, ReadingSession,
    UserPreferences, NotificationPreferences,
    AppUsageTracking, ScheduledReminder
)

__all__ = [
    'Database',
    'Base',
    'Book',
    'ReadingStatus',
    'ReadingSession',
    'UserPreferences',
    'NotificationPreferences',
    'AppUsageTracking',
    'ScheduledReminder'
]
