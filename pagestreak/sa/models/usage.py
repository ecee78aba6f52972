# pagestreak/sa/models/usage.py
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base

class AppUsageTracking(Base):
    """Per-day record of when the app was last brought to the foreground and closed"""
    __tablename__ = 'app_usage_tracking'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    last_opened_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    session_count_today: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    date: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        Index('idx_app_usage_tracking_date', 'date'),
    )
