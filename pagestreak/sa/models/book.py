# pagestreak/sa/models/book.py
from datetime import datetime
from enum import Enum
from sqlalchemy import String, Integer, Float, Text, DateTime, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, local_now

class ReadingStatus(str, Enum):
    WANT_TO_READ = "want_to_read"
    CURRENTLY_READING = "currently_reading"
    READ = "read"

class Book(Base):
    __tablename__ = 'enhanced_books'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    page: Mapped[int] = mapped_column(Integer, nullable=False)  # total page count
    current_page: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reading_status: Mapped[str] = mapped_column(String(50), nullable=False, default=ReadingStatus.WANT_TO_READ.value)

    # Metadata, usually filled from an Open Library search result
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cover_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    first_publish_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    language: Mapped[str | None] = mapped_column(String(20), nullable=True, default='eng')
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    subjects: Mapped[str | None] = mapped_column(Text, nullable=True)
    open_library_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    author_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    date_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=local_now)
    date_started: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    date_finished: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    sessions = relationship(
        'ReadingSession',
        back_populates='book',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    __table_args__ = (
        Index('idx_enhanced_books_status', 'reading_status'),
        Index('idx_enhanced_books_name', 'name'),
    )

    def __repr__(self) -> str:
        return f"<Book id={self.id} name={self.name!r} status={self.reading_status}>"
