# pagestreak/sa/models/session.py
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, local_now

class ReadingSession(Base):
    """One logged interval of reading.

    ``date`` is the logical reading day (YYYY-MM-DD, local time) and is what
    every aggregate groups by; ``created_at`` only records when the row was
    written.
    """
    __tablename__ = 'reading_sessions'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('enhanced_books.id', ondelete='CASCADE'), nullable=False)
    minutes_read: Mapped[int] = mapped_column(Integer, nullable=False)
    pages_read: Mapped[int | None] = mapped_column(Integer, nullable=True)  # absent on legacy rows
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=local_now)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    book = relationship('Book', back_populates='sessions')

    __table_args__ = (
        Index('idx_reading_sessions_date', 'date'),
        Index('idx_reading_sessions_book_id', 'book_id'),
    )
