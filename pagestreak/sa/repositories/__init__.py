# pagestreak/sa/repositories/__init__.py
from .book import BookRepository
from .session import ReadingSessionRepository
from .preferences import PreferencesRepository
from .usage import AppUsageRepository
from .reminder import ReminderRepository

__all__ = [
    'BookRepository',
    'ReadingSessionRepository',
    'PreferencesRepository',
    'AppUsageRepository',
    'ReminderRepository'
]
