# pagestreak/sa/repositories/session.py
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, desc
from sqlalchemy.orm import Session, joinedload
from pagestreak.exceptions import BookNotFoundError, InvalidSessionError
from pagestreak.utils.dates import is_valid_date_string
from ..models import Book, ReadingSession

class ReadingSessionRepository:
    """Repository for reading sessions and the aggregate queries over them.

    Totals are always computed from the session rows.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, session_id: int) -> Optional[ReadingSession]:
        return self.session.query(ReadingSession).filter(ReadingSession.id == session_id).first()

    def log_session(
        self,
        book_id: int,
        minutes_read: int,
        date: str,
        pages_read: Optional[int] = None,
        notes: Optional[str] = None
    ) -> ReadingSession:
        """Record a reading session.

        Args:
            book_id: The book that was read
            minutes_read: Minutes spent reading, must be positive
            date: Logical reading day as YYYY-MM-DD (may be in the past)
            pages_read: Optional number of pages read in this session
            notes: Optional free-text notes

        Returns:
            The created ReadingSession

        Raises:
            InvalidSessionError: If minutes, pages or the date are invalid
            BookNotFoundError: If the book does not exist
        """
        if minutes_read is None or minutes_read <= 0:
            raise InvalidSessionError("Minutes read must be a positive integer")
        if pages_read is not None and pages_read < 0:
            raise InvalidSessionError("Pages read cannot be negative")
        if not is_valid_date_string(date):
            raise InvalidSessionError(f"Invalid session date '{date}', expected YYYY-MM-DD")
        if self.session.get(Book, book_id) is None:
            raise BookNotFoundError(book_id)

        reading_session = ReadingSession(
            book_id=book_id,
            minutes_read=minutes_read,
            pages_read=pages_read,
            date=date,
            notes=notes.strip() if notes and notes.strip() else None
        )
        self.session.add(reading_session)
        self.session.commit()
        return reading_session

    def get_between(self, start: str, end: str) -> List[ReadingSession]:
        """Sessions whose logical day falls within [start, end], with their books loaded"""
        return (
            self.session.query(ReadingSession)
            .options(joinedload(ReadingSession.book))
            .filter(ReadingSession.date.between(start, end))
            .order_by(ReadingSession.date, ReadingSession.created_at)
            .all()
        )

    def get_recent(self, limit: int = 5) -> List[ReadingSession]:
        """Most recently logged sessions, with their books loaded"""
        return (
            self.session.query(ReadingSession)
            .options(joinedload(ReadingSession.book))
            .order_by(desc(ReadingSession.created_at), desc(ReadingSession.id))
            .limit(limit)
            .all()
        )

    def minutes_for_day(self, date: str) -> int:
        """Total minutes across all sessions logged for a day (0 when none)"""
        total = (
            self.session.query(func.coalesce(func.sum(ReadingSession.minutes_read), 0))
            .filter(ReadingSession.date == date)
            .scalar()
        )
        return int(total or 0)

    def minutes_for_book(self, book_id: int) -> int:
        total = (
            self.session.query(func.coalesce(func.sum(ReadingSession.minutes_read), 0))
            .filter(ReadingSession.book_id == book_id)
            .scalar()
        )
        return int(total or 0)

    def pages_for_book(self, book_id: int) -> int:
        """Total pages read for a book, ignoring sessions without a page count"""
        total = (
            self.session.query(func.coalesce(func.sum(ReadingSession.pages_read), 0))
            .filter(ReadingSession.book_id == book_id, ReadingSession.pages_read.isnot(None))
            .scalar()
        )
        return int(total or 0)

    def daily_totals(
        self,
        min_minutes: Optional[int] = None,
        up_to: Optional[str] = None
    ) -> List[Tuple[str, int]]:
        """Per-day minute totals, most recent day first.

        Args:
            min_minutes: Only return days whose total is at least this many minutes
            up_to: Only return days on or before this YYYY-MM-DD day

        Returns:
            List of (date, total_minutes) tuples ordered by date descending
        """
        total = func.sum(ReadingSession.minutes_read).label('total_minutes')
        query = self.session.query(ReadingSession.date, total)
        if up_to is not None:
            query = query.filter(ReadingSession.date <= up_to)
        query = query.group_by(ReadingSession.date)
        if min_minutes is not None:
            query = query.having(func.sum(ReadingSession.minutes_read) >= min_minutes)
        rows = query.order_by(desc(ReadingSession.date)).all()
        return [(row.date, int(row.total_minutes)) for row in rows]

    def daily_totals_between(self, start: str, end: str) -> Dict[str, int]:
        """Map of day -> total minutes for days in [start, end] that have sessions"""
        rows = (
            self.session.query(ReadingSession.date, func.sum(ReadingSession.minutes_read))
            .filter(ReadingSession.date.between(start, end))
            .group_by(ReadingSession.date)
            .all()
        )
        return {date: int(total) for date, total in rows}
