# pagestreak/sa/repositories/preferences.py
from typing import Optional
from sqlalchemy.orm import Session
from pagestreak import config
from ..models import UserPreferences, NotificationPreferences, SINGLETON_ID, local_now

USER_FIELDS = {
    'username', 'yearly_book_goal', 'preferred_genres', 'weekly_reading_goal',
    'initial_reading_rate_minutes_per_day', 'end_reading_rate_goal_minutes_per_day',
    'end_reading_rate_goal_date', 'current_reading_rate_minutes_per_day',
    'current_reading_rate_last_updated', 'weekly_reading_rate_increase_minutes',
    'weekly_reading_rate_increase_minutes_percentage'
}

NOTIFICATION_FIELDS = {
    'notifications_enabled', 'daily_reminder_enabled', 'daily_reminder_hours_after_last_open',
    'daily_reminder_title', 'daily_reminder_body'
}

class PreferencesRepository:
    """Access to the two singleton preference rows."""

    def __init__(self, session: Session):
        self.session = session

    def ensure_defaults(self) -> None:
        """Insert the default singleton rows if they are missing. Safe to call repeatedly."""
        if self.session.get(UserPreferences, SINGLETON_ID) is None:
            self.session.add(UserPreferences(id=SINGLETON_ID, username='Reader', yearly_book_goal=12))
        if self.session.get(NotificationPreferences, SINGLETON_ID) is None:
            self.session.add(NotificationPreferences(id=SINGLETON_ID))
        self.session.commit()

    def get_user_preferences(self) -> Optional[UserPreferences]:
        return self.session.get(UserPreferences, SINGLETON_ID)

    def has_user(self) -> bool:
        return self.get_user_preferences() is not None

    def get_daily_goal(self, default: Optional[int] = None) -> int:
        """The daily minutes goal, or ``default`` when none is configured"""
        fallback = config.DEFAULT_DAILY_GOAL if default is None else default
        prefs = self.get_user_preferences()
        if prefs and prefs.current_reading_rate_minutes_per_day:
            return prefs.current_reading_rate_minutes_per_day
        return fallback

    def update_user_preferences(self, **fields) -> UserPreferences:
        """Update the user preference row, creating it if needed.

        Raises:
            ValueError: If an unknown field is passed
        """
        unknown = set(fields) - USER_FIELDS
        if unknown:
            raise ValueError(f"Unknown user preference fields: {', '.join(sorted(unknown))}")

        prefs = self.get_user_preferences()
        if prefs is None:
            prefs = UserPreferences(id=SINGLETON_ID)
            self.session.add(prefs)
        for key, value in fields.items():
            setattr(prefs, key, value)
        self.session.commit()
        return prefs

    def set_daily_goal(self, minutes: int) -> UserPreferences:
        if minutes is None or minutes <= 0:
            raise ValueError("Daily goal must be a positive number of minutes")
        return self.update_user_preferences(
            current_reading_rate_minutes_per_day=minutes,
            current_reading_rate_last_updated=local_now()
        )

    def get_notification_preferences(self) -> NotificationPreferences:
        """The reminder settings; defaults are created on first access"""
        prefs = self.session.get(NotificationPreferences, SINGLETON_ID)
        if prefs is None:
            prefs = NotificationPreferences(id=SINGLETON_ID)
            self.session.add(prefs)
            self.session.commit()
        return prefs

    def update_notification_preferences(self, **fields) -> NotificationPreferences:
        unknown = set(fields) - NOTIFICATION_FIELDS
        if unknown:
            raise ValueError(f"Unknown notification preference fields: {', '.join(sorted(unknown))}")
        hours = fields.get('daily_reminder_hours_after_last_open')
        if hours is not None and hours <= 0:
            raise ValueError("Reminder delay must be a positive number of hours")

        prefs = self.get_notification_preferences()
        for key, value in fields.items():
            setattr(prefs, key, value)
        self.session.commit()
        return prefs
