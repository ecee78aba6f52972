# pagestreak/sa/models/reminder.py
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, local_now

class ScheduledReminder(Base):
    """A reminder handed to the database-backed notifier.

    A row is pending while both ``cancelled_at`` and ``delivered_at`` are
    null.
    """
    __tablename__ = 'scheduled_reminders'

    identifier: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    fire_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    payload: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=local_now)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index('idx_scheduled_reminders_fire_at', 'fire_at'),
    )

    @property
    def is_pending(self) -> bool:
        return self.cancelled_at is None and self.delivered_at is None
