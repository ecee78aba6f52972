# pagestreak/sa/models/preferences.py
from datetime import datetime
from sqlalchemy import Integer, Float, String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from pagestreak import config
from .base import Base, TimestampMixin

SINGLETON_ID = 1

class UserPreferences(Base, TimestampMixin):
    """Singleton row (id 1) holding the reader's goals"""
    __tablename__ = 'user_preferences'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    username: Mapped[str] = mapped_column(String(255), nullable=False, default='Reader')
    yearly_book_goal: Mapped[int | None] = mapped_column(Integer, nullable=True, default=12)
    preferred_genres: Mapped[str | None] = mapped_column(Text, nullable=True)
    weekly_reading_goal: Mapped[int | None] = mapped_column(Integer, nullable=True)
    initial_reading_rate_minutes_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_reading_rate_goal_minutes_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_reading_rate_goal_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # The daily goal used for "goal met" and streak qualification
    current_reading_rate_minutes_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_reading_rate_last_updated: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    weekly_reading_rate_increase_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weekly_reading_rate_increase_minutes_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)

class NotificationPreferences(Base, TimestampMixin):
    """Singleton row (id 1) holding the reminder settings"""
    __tablename__ = 'notification_preferences'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    notifications_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    daily_reminder_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    daily_reminder_hours_after_last_open: Mapped[int] = mapped_column(
        Integer, nullable=False, default=config.DEFAULT_REMINDER_HOURS
    )
    daily_reminder_title: Mapped[str] = mapped_column(String(255), nullable=False, default=config.DEFAULT_REMINDER_TITLE)
    daily_reminder_body: Mapped[str] = mapped_column(Text, nullable=False, default=config.DEFAULT_REMINDER_BODY)
